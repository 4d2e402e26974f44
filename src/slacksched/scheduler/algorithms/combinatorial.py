"""Combinatorial refinement of the primary construction.

Lanes keep a fixed start and a queue in deadline order. A task that fits exactly one
lane is committed at once; a task that fits several is *suspected* and placed later,
jointly with the other suspects, by enumerating their candidate lanes. The last state
in which no choice was open is kept as a snapshot, and every enumeration rebuilds from
that snapshot plus the journal of later commitments.
"""

from __future__ import annotations

import itertools
from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass, field

from slacksched.logger import debug_enabled, get_logger

from ..config import DEFAULT_COMBINATION_BORDER
from ..core import (
    Infeasible,
    Machine,
    MachineSchedule,
    Schedule,
    Task,
    deadline_order,
    extreme_order,
)

logger = get_logger()


@dataclass(eq=False)
class _Lane:
    machine: Machine
    start: float
    tasks: list[Task] = field(default_factory=list)

    @property
    def end_time(self) -> float:
        return self.start + sum(task.duration for task in self.tasks)

    def clone(self) -> _Lane:
        return _Lane(self.machine, self.start, list(self.tasks))

    def insertion_point(self, task: Task) -> int:
        return bisect_right(self.tasks, deadline_order(task), key=deadline_order)

    def fit(self, task: Task) -> float | None:
        """Smallest slack left after inserting ``task``, or None if a deadline breaks.

        Only the inserted task and the tasks behind it are affected.
        """
        position = self.insertion_point(task)
        end = self.start + sum(queued.duration for queued in self.tasks[:position])
        end += task.duration
        slack = task.deadline - end
        if slack < 0:
            return None
        for queued in self.tasks[position:]:
            end += queued.duration
            if queued.deadline - end < 0:
                return None
            slack = min(slack, queued.deadline - end)
        return slack

    def insert(self, task: Task) -> None:
        self.tasks.insert(self.insertion_point(task), task)

    def is_feasible(self) -> bool:
        end = self.start
        for task in self.tasks:
            end += task.duration
            if end > task.deadline:
                return False
        return True

    def fits_fractions(self, pieces: list[tuple[Task, float]]) -> bool:
        """Feasibility with extra ``(task, share of duration)`` pieces merged in."""
        items = [(deadline_order(task), task.duration, task.deadline) for task in self.tasks]
        items.extend((deadline_order(task), share, task.deadline) for task, share in pieces)
        items.sort(key=lambda item: item[0])
        end = self.start
        for _, duration, deadline in items:
            end += duration
            if end > deadline:
                return False
        return True


@dataclass
class _Suspect:
    task: Task
    candidates: list[int]


@dataclass(frozen=True)
class _JournalEntry:
    """A commitment made after the last snapshot.

    ``machine`` is set when the entry engaged a new lane at ``lane_index``.
    """

    lane_index: int
    task: Task
    machine: Machine | None = None


class CombinatorialScheduler:
    """Construction with deferred placement of ambiguous tasks.

    Args:
        tasks: Tasks to schedule
        machines: Available machines, engaged in this order
        combination_border: Suspects are enumerated only while their number is at most
            this fraction of the engaged lanes
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        machines: Iterable[Machine],
        *,
        combination_border: float = DEFAULT_COMBINATION_BORDER,
    ):
        self.tasks = sorted(tasks, key=extreme_order)
        self.machines = list(machines)
        self.combination_border = combination_border

        self.lanes: list[_Lane] = []
        self.suspects: list[_Suspect] = []
        self.snapshot: list[_Lane] = []
        self.journal: list[_JournalEntry] = []
        # Cleared when a lane is engaged while suspects are still open
        self.certified = True
        self.enumerations = 0

    def schedule(self) -> Schedule | Infeasible:
        """Place every task.

        Returns:
            Sorted Schedule, flagged optimal unless a lane had to be engaged while
            suspected tasks were still open, or Infeasible
        """
        if not self.tasks:
            return Schedule.for_machines(self.machines, optimal=True)
        if not self.machines:
            return Infeasible("no machines available")

        for task in self.tasks:
            outcome = self._place(task)
            if isinstance(outcome, Infeasible):
                return outcome

        outcome = self._settle()
        if isinstance(outcome, Infeasible):
            return outcome

        result = self._to_schedule()
        logger.changes(
            f"Combinatorial refinement engaged {len(self.lanes)} machines "
            f"({self.enumerations} enumerations)"
        )
        return result

    def _candidates(self, task: Task) -> list[int]:
        """Lanes that can take ``task``, tightest fit first."""
        ranked: list[tuple[float, int]] = []
        for index, lane in enumerate(self.lanes):
            slack = lane.fit(task)
            if slack is not None:
                ranked.append((slack, index))
        ranked.sort()
        return [index for _, index in ranked]

    def _place(self, task: Task) -> Infeasible | None:
        candidates = self._candidates(task)
        if not candidates and self.suspects:
            self._resolve()
            candidates = self._candidates(task)

        if len(candidates) == 1:
            self._commit(candidates[0], task)
            return None

        if len(candidates) > 1:
            logger.checks(f"  task {task.id} suspected on lanes {candidates}")
            self.suspects.append(_Suspect(task, candidates))
            return None

        return self._engage(task)

    def _commit(self, lane_index: int, task: Task) -> None:
        self.lanes[lane_index].insert(task)
        self.journal.append(_JournalEntry(lane_index, task))
        logger.checks(f"  task {task.id} -> machine {self.lanes[lane_index].machine.id}")
        self._refresh_snapshot()

    def _engage(self, task: Task) -> Infeasible | None:
        if len(self.lanes) >= len(self.machines):
            logger.checks(f"  task {task.id} fits no machine and none is idle")
            return Infeasible(f"task {task.id} fits no machine")

        if self.suspects:
            self.certified = False
        machine = self.machines[len(self.lanes)]
        self.lanes.append(_Lane(machine, task.extreme_time, [task]))
        self.journal.append(_JournalEntry(len(self.lanes) - 1, task, machine))
        logger.checks(f"  task {task.id} engages machine {machine.id}")
        self._refresh_snapshot()
        return None

    def _resolve(self) -> bool:
        """Try to place all suspects at once; on failure they stay pending."""
        if not self.suspects:
            return True

        for suspect in self.suspects:
            suspect.candidates = self._candidates(suspect.task)
            if not suspect.candidates:
                logger.checks(f"  suspect {suspect.task.id} no longer fits any machine")
                return False

        # Even shares over the candidates must fit before enumerating
        for index, lane in enumerate(self.lanes):
            pieces = [
                (suspect.task, suspect.task.duration / len(suspect.candidates))
                for suspect in self.suspects
                if index in suspect.candidates
            ]
            if pieces and not lane.fits_fractions(pieces):
                logger.checks(f"  pseudo-placement overloads machine {lane.machine.id}")
                return False

        if len(self.suspects) > self.combination_border * len(self.lanes):
            logger.checks(
                f"  {len(self.suspects)} suspects exceed the combination border "
                f"for {len(self.lanes)} machines"
            )
            return False

        for assignment in itertools.product(*(suspect.candidates for suspect in self.suspects)):
            self.enumerations += 1
            lanes = self._rebuild()
            for suspect, lane_index in zip(self.suspects, assignment):
                lanes[lane_index].insert(suspect.task)
            if all(lane.is_feasible() for lane in lanes):
                self._adopt(lanes, assignment)
                return True

        logger.checks(f"  no assignment of {len(self.suspects)} suspects is feasible")
        return False

    def _rebuild(self) -> list[_Lane]:
        """Lanes of the last snapshot with the journal replayed."""
        lanes = [lane.clone() for lane in self.snapshot]
        for entry in self.journal:
            if entry.machine is not None:
                lanes.append(_Lane(entry.machine, entry.task.extreme_time, [entry.task]))
            else:
                lanes[entry.lane_index].insert(entry.task)
        return lanes

    def _adopt(self, lanes: list[_Lane], assignment: tuple[int, ...]) -> None:
        if debug_enabled():
            placed = ", ".join(
                f"{suspect.task.id}->{lanes[lane_index].machine.id}"
                for suspect, lane_index in zip(self.suspects, assignment)
            )
            logger.debug(f"Suspects resolved after {self.enumerations} enumerations: {placed}")
        for suspect, lane_index in zip(self.suspects, assignment):
            self.journal.append(_JournalEntry(lane_index, suspect.task))
        self.lanes = lanes
        self.suspects = []
        self._refresh_snapshot()

    def _settle(self) -> Infeasible | None:
        """Resolve suspects left at the end, engaging idle machines when needed."""
        while self.suspects:
            if self._resolve():
                return None
            if len(self.lanes) >= len(self.machines):
                return Infeasible(f"{len(self.suspects)} suspected tasks cannot be placed")

            pending = [suspect.task for suspect in self.suspects]
            self.suspects = []
            self.certified = False
            outcome = self._engage(pending[0])
            if outcome is not None:
                return outcome
            for task in pending[1:]:
                outcome = self._place(task)
                if outcome is not None:
                    return outcome
        return None

    def _is_exact(self) -> bool:
        """No choice is open: nothing suspected, no spare tail, no alternative lane.

        Any detected violation makes the state inexact.
        """
        if self.suspects:
            return False
        for lane in self.lanes:
            if lane.tasks and not lane.tasks[-1].deadline > lane.end_time:
                return False
        for index, lane in enumerate(self.lanes):
            for task in lane.tasks:
                for other_index, other in enumerate(self.lanes):
                    if other_index != index and other.fit(task) is not None:
                        return False
        return True

    def _refresh_snapshot(self) -> None:
        if self._is_exact():
            self.snapshot = [lane.clone() for lane in self.lanes]
            self.journal = []

    def _to_schedule(self) -> Schedule:
        by_machine = {lane.machine.id: lane for lane in self.lanes}
        machine_schedules = []
        for machine in self.machines:
            lane = by_machine.get(machine.id)
            if lane is None:
                machine_schedules.append(MachineSchedule(machine))
            else:
                machine_schedules.append(MachineSchedule(machine, lane.start, list(lane.tasks)))
        schedule = Schedule(machine_schedules, optimal=self.certified)
        schedule.sort()
        return schedule
