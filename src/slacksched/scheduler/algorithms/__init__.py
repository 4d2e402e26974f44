"""Algorithm factory and exports."""

from collections.abc import Iterable

from ..config import AlgorithmType, SchedulingConfig
from ..core import Machine, Task
from .auto import PrimaryThenHeuristicsScheduler
from .branch_and_bound import BranchAndBoundScheduler
from .combinatorial import CombinatorialScheduler
from .heuristics import (
    EngagingHeuristicScheduler,
    LatestMachineHeuristicScheduler,
    MainHeuristicScheduler,
    initial_appointment,
)
from .list_scheduling import ListScheduler
from .merge import merge_with_prefix
from .primary import Lane, PrimaryScheduler, PrimaryState
from .repair import adjust_start_times

Algorithm = (
    PrimaryThenHeuristicsScheduler
    | BranchAndBoundScheduler
    | CombinatorialScheduler
    | ListScheduler
    | PrimaryScheduler
    | MainHeuristicScheduler
    | LatestMachineHeuristicScheduler
    | EngagingHeuristicScheduler
)


def create_algorithm(
    algorithm_type: AlgorithmType,
    tasks: Iterable[Task],
    machines: Iterable[Machine],
    *,
    config: SchedulingConfig | None = None,
) -> Algorithm:
    """Create a scheduling algorithm instance.

    Args:
        algorithm_type: Type of algorithm to create
        tasks: Tasks to schedule
        machines: Available machines
        config: Optional scheduling configuration (borders)

    Returns:
        Algorithm instance ready to schedule
    """
    effective_config = config or SchedulingConfig()

    if algorithm_type == AlgorithmType.AUTO:
        return PrimaryThenHeuristicsScheduler(
            tasks,
            machines,
            adjustment_border=effective_config.adjustment_border,
            combination_border=effective_config.combination_border,
        )

    if algorithm_type == AlgorithmType.LIST:
        return ListScheduler(tasks, machines)

    if algorithm_type == AlgorithmType.EXACT:
        return BranchAndBoundScheduler(tasks, machines)

    if algorithm_type == AlgorithmType.PRIMARY:
        return PrimaryScheduler(tasks, machines)

    if algorithm_type == AlgorithmType.COMBINATORIAL:
        return CombinatorialScheduler(
            tasks, machines, combination_border=effective_config.combination_border
        )

    if algorithm_type == AlgorithmType.A21:
        return MainHeuristicScheduler(tasks, machines)

    if algorithm_type == AlgorithmType.A21A:
        return MainHeuristicScheduler(
            tasks, machines, adjustment_border=effective_config.adjustment_border
        )

    if algorithm_type == AlgorithmType.A22:
        return LatestMachineHeuristicScheduler(tasks, machines)

    if algorithm_type == AlgorithmType.A23:
        return EngagingHeuristicScheduler(tasks, machines)

    msg = f"Unknown algorithm type: {algorithm_type}"
    raise ValueError(msg)


__all__ = [
    "Algorithm",
    "BranchAndBoundScheduler",
    "CombinatorialScheduler",
    "EngagingHeuristicScheduler",
    "Lane",
    "LatestMachineHeuristicScheduler",
    "ListScheduler",
    "MainHeuristicScheduler",
    "PrimaryScheduler",
    "PrimaryState",
    "PrimaryThenHeuristicsScheduler",
    "adjust_start_times",
    "create_algorithm",
    "initial_appointment",
    "merge_with_prefix",
]
