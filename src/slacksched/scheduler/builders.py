"""Function entry points over plain task and machine lists."""

from collections.abc import Iterable

from .algorithms import (
    BranchAndBoundScheduler,
    CombinatorialScheduler,
    EngagingHeuristicScheduler,
    LatestMachineHeuristicScheduler,
    ListScheduler,
    MainHeuristicScheduler,
    PrimaryScheduler,
    PrimaryThenHeuristicsScheduler,
)
from .core import Infeasible, Machine, Schedule, Task


def build_schedule(tasks: Iterable[Task], machines: Iterable[Machine]) -> Schedule:
    """List-scheduling heuristic."""
    return ListScheduler(tasks, machines).schedule()


def build_optimal_schedule(tasks: Iterable[Task], machines: Iterable[Machine]) -> Schedule:
    """Exact branch-and-bound search. Worst-case exponential in the number of tasks."""
    return BranchAndBoundScheduler(tasks, machines).schedule()


def build_with_primary_then_heuristics(
    tasks: Iterable[Task],
    machines: Iterable[Machine],
    adjustment_border: float | None = None,
) -> Schedule:
    """Certified construction first, heuristics as fallback.

    ``adjustment_border`` bounds the start spread for A2.1a; None uses the default.
    """
    return PrimaryThenHeuristicsScheduler(
        tasks, machines, adjustment_border=adjustment_border
    ).schedule()


def primary_construct(tasks: Iterable[Task], machines: Iterable[Machine]) -> Schedule | Infeasible:
    return PrimaryScheduler(tasks, machines).schedule()


def combinatorial_construct(
    tasks: Iterable[Task], combination_border: float, machines: Iterable[Machine]
) -> Schedule | Infeasible:
    return CombinatorialScheduler(
        tasks, machines, combination_border=combination_border
    ).schedule()


def heuristic_strategy_1(
    tasks: Iterable[Task],
    machines: Iterable[Machine],
    adjustment_border: float | None = None,
) -> Schedule:
    """A2.1, or A2.1a when ``adjustment_border`` is given."""
    return MainHeuristicScheduler(tasks, machines, adjustment_border=adjustment_border).schedule()


def heuristic_strategy_2(tasks: Iterable[Task], machines: Iterable[Machine]) -> Schedule:
    """A2.2."""
    return LatestMachineHeuristicScheduler(tasks, machines).schedule()


def heuristic_strategy_3(tasks: Iterable[Task], machines: Iterable[Machine]) -> Schedule:
    """A2.3."""
    return EngagingHeuristicScheduler(tasks, machines).schedule()
