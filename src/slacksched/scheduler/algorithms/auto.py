"""Fixed fallback chain from certified construction to heuristics."""

from __future__ import annotations

from collections.abc import Iterable

from slacksched.logger import get_logger

from ..config import DEFAULT_ADJUSTMENT_BORDER, DEFAULT_COMBINATION_BORDER
from ..core import Infeasible, Machine, Schedule, Task
from .combinatorial import CombinatorialScheduler
from .heuristics import (
    EngagingHeuristicScheduler,
    LatestMachineHeuristicScheduler,
    MainHeuristicScheduler,
)
from .merge import merge_with_prefix
from .primary import PrimaryScheduler, PrimaryState

logger = get_logger()

HeuristicScheduler = (
    MainHeuristicScheduler | LatestMachineHeuristicScheduler | EngagingHeuristicScheduler
)


class PrimaryThenHeuristicsScheduler:
    """Try strategies in order until one produces a schedule.

    1. Primary construction and, if it stops early, the completion pass.
    2. Combinatorial refinement.
    3. Each heuristic on the tasks the primary prefix left over, merged with the prefix.
    4. The best of the heuristics on all tasks (first wins ties).

    Results of steps 1 to 3 are flagged optimal; ``strategy`` names the step that won.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        machines: Iterable[Machine],
        *,
        adjustment_border: float | None = None,
        combination_border: float = DEFAULT_COMBINATION_BORDER,
    ):
        self.tasks = list(tasks)
        self.machines = list(machines)
        self.adjustment_border = (
            DEFAULT_ADJUSTMENT_BORDER if adjustment_border is None else adjustment_border
        )
        self.combination_border = combination_border
        self.strategy: str | None = None

    def _heuristics(self, tasks: list[Task]) -> list[HeuristicScheduler]:
        return [
            MainHeuristicScheduler(tasks, self.machines),
            MainHeuristicScheduler(tasks, self.machines, adjustment_border=self.adjustment_border),
            LatestMachineHeuristicScheduler(tasks, self.machines),
            EngagingHeuristicScheduler(tasks, self.machines),
        ]

    def schedule(self) -> Schedule:
        if not self.tasks or not self.machines:
            self.strategy = "trivial"
            return Schedule.for_machines(self.machines, optimal=not self.tasks)

        primary = PrimaryScheduler(self.tasks, self.machines)
        state = primary.build_prefix()
        if isinstance(state, PrimaryState):
            if state.complete:
                return self._accept("primary", state.to_schedule())
            completed = primary.complete(state)
            if isinstance(completed, PrimaryState):
                return self._accept("completion", completed.to_schedule())
        else:
            logger.checks(f"  primary construction: {state.reason}")

        combinatorial = CombinatorialScheduler(
            self.tasks, self.machines, combination_border=self.combination_border
        )
        refined = combinatorial.schedule()
        if isinstance(refined, Schedule):
            return self._accept("combinatorial", refined)
        logger.checks(f"  combinatorial refinement: {refined.reason}")

        if isinstance(state, PrimaryState):
            merged = self._merge_heuristics(state)
            if merged is not None:
                return merged

        return self._best_of_heuristics()

    def _merge_heuristics(self, state: PrimaryState) -> Schedule | None:
        remaining = state.remaining_tasks
        for heuristic in self._heuristics(remaining):
            merged = merge_with_prefix(heuristic.schedule(), state.prefix())
            if isinstance(merged, Infeasible):
                logger.checks(f"  {heuristic.name} with prefix: {merged.reason}")
                continue
            merged.optimal = True
            return self._accept(f"{heuristic.name}+prefix", merged)
        return None

    def _best_of_heuristics(self) -> Schedule:
        best: Schedule | None = None
        best_name = ""
        for heuristic in self._heuristics(self.tasks):
            candidate = heuristic.schedule()
            if candidate.compare(best) > 0:
                best = candidate
                best_name = heuristic.name
        assert best is not None
        best.optimal = False
        return self._accept(best_name, best)

    def _accept(self, strategy: str, schedule: Schedule) -> Schedule:
        self.strategy = strategy
        logger.changes(f"Schedule from {strategy} (optimal: {schedule.optimal})")
        return schedule
