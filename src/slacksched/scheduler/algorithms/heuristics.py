"""Heuristic repertoire: strategies A2.1, A2.1a, A2.2 and A2.3.

Every strategy takes tasks ordered by extreme time, returns a feasible schedule
sorted by start time and finishes with the repair pass. None of them certifies
optimality.
"""

from __future__ import annotations

from collections.abc import Iterable

from slacksched.logger import get_logger

from ..core import (
    IDLE,
    Machine,
    MachineSchedule,
    Schedule,
    Task,
    compare_start_times,
    extreme_order,
)
from .primary import Lane
from .repair import adjust_start_times

logger = get_logger()


def initial_appointment(remaining: list[Task], machines: list[Machine]) -> Schedule:
    """Give each machine the remaining task with the latest extreme time.

    ``remaining`` must be ordered by extreme time; appointed tasks are removed from it.
    """
    schedule = Schedule.for_machines(machines)
    for machine_schedule in schedule:
        if not remaining:
            break
        task = remaining.pop()
        machine_schedule.tasks.append(task)
        machine_schedule.start_time = task.extreme_time
    return schedule


def _latest_deadline_first(task: Task) -> tuple[float, float, int]:
    return (-task.deadline, task.duration, task.id)


def _start_spread(schedule: Schedule) -> float:
    starts = [start for start in schedule.start_times() if start != IDLE]
    if not starts:
        return 0.0
    return max(starts) - min(starts)


class _HeuristicScheduler:
    """Shared setup for the strategies."""

    name = "heuristic"

    def __init__(self, tasks: Iterable[Task], machines: Iterable[Machine]):
        self.tasks = sorted(tasks, key=extreme_order)
        self.machines = list(machines)

    def schedule(self) -> Schedule:
        if not self.tasks or not self.machines:
            return Schedule.for_machines(self.machines, optimal=not self.tasks)

        schedule = self._build(list(self.tasks))
        schedule.sort()
        logger.changes(f"{self.name}: start times {_format_starts(schedule)}")
        return schedule

    def _build(self, remaining: list[Task]) -> Schedule:
        raise NotImplementedError


class MainHeuristicScheduler(_HeuristicScheduler):
    """A2.1, or A2.1a when ``adjustment_border`` is given.

    Works in rounds. In each round the tasks some machine can still reach are handed
    out shortest first, each to the machine with the latest start that reaches it.
    Machines left without a task take the remaining task with the latest deadline at
    its extreme time. A2.1a also repairs whenever the machine starts drift further
    apart than ``adjustment_border``.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        machines: Iterable[Machine],
        *,
        adjustment_border: float | None = None,
    ):
        super().__init__(tasks, machines)
        self.adjustment_border = adjustment_border
        self.name = "A2.1" if adjustment_border is None else "A2.1a"

    def _build(self, remaining: list[Task]) -> Schedule:
        schedule = initial_appointment(remaining, self.machines)
        remaining.sort(key=_latest_deadline_first)

        while remaining:
            reachable: list[Task] = []
            for task in remaining:
                if not any(ms.start_time <= task.deadline for ms in schedule):
                    break
                reachable.append(task)
            reachable.sort(key=lambda task: (task.duration, -task.deadline, task.id))

            free = list(schedule)
            for task in reachable:
                if not free:
                    break
                best: MachineSchedule | None = None
                for machine_schedule in free:
                    if machine_schedule.start_time > task.deadline:
                        continue
                    if best is None or best.start_time < machine_schedule.start_time:
                        best = machine_schedule
                if best is None:
                    continue
                best.tasks.insert(0, task)
                best.start_time -= task.duration
                free.remove(best)
                remaining.remove(task)

            # Machines nobody reached this round take the latest deadline outright
            for machine_schedule in free:
                if not remaining:
                    break
                task = remaining.pop(0)
                machine_schedule.tasks.insert(0, task)
                machine_schedule.start_time = task.extreme_time

            if self.adjustment_border is not None and _start_spread(schedule) > self.adjustment_border:
                adjust_start_times(schedule)

        adjust_start_times(schedule)
        return schedule


class LatestMachineHeuristicScheduler(_HeuristicScheduler):
    """A2.2: always extend the machine with the latest start.

    It gets the shortest task it can still serve, or, if none, the task with the
    latest extreme time placed at that extreme time.
    """

    name = "A2.2"

    def _build(self, remaining: list[Task]) -> Schedule:
        schedule = initial_appointment(remaining, self.machines)
        remaining.sort(key=_latest_deadline_first)

        while remaining:
            last = max(schedule, key=MachineSchedule.sort_key)

            best: Task | None = None
            for task in remaining:
                if last.start_time > task.deadline:
                    break
                if best is None or task.duration < best.duration:
                    best = task

            if best is None:
                for task in remaining:
                    if best is None or task.extreme_time > best.extreme_time:
                        best = task
                assert best is not None
                start = best.extreme_time
            else:
                start = last.start_time - best.duration

            last.tasks.insert(0, best)
            last.start_time = start
            remaining.remove(best)

        adjust_start_times(schedule)
        return schedule


class EngagingHeuristicScheduler(_HeuristicScheduler):
    """A2.3: forward build that engages machines one at a time.

    A task joins the machine that frees up first when it can finish there in time.
    Otherwise an idle machine is engaged; once all are busy, the task goes to the
    machine whose queue, shifted earlier so the task ends on its deadline, gives the
    best start-time vector.
    """

    name = "A2.3"

    def _build(self, remaining: list[Task]) -> Schedule:
        schedule = Schedule.for_machines(self.machines)
        lanes = [Lane.engage(schedule[0], remaining[0])]
        next_machine = 1

        for current in remaining[1:]:
            earliest = min(lanes, key=Lane.sort_key)

            if earliest.end_time <= current.extreme_time:
                earliest.append(current)
                continue

            if next_machine < len(schedule):
                lanes.append(Lane.engage(schedule[next_machine], current))
                next_machine += 1
                continue

            self._shift_best_lane(lanes, current).append(current)

        adjust_start_times(schedule)
        return schedule

    @staticmethod
    def _shift_best_lane(lanes: list[Lane], task: Task) -> Lane:
        """Shift the lane that hurts the start-time vector least so ``task`` fits."""
        ordered = sorted(lanes, key=Lane.sort_key)
        starts = [lane.schedule.start_time for lane in ordered]

        best_lane = ordered[0]
        best_starts: list[float] | None = None
        best_offset = 0.0
        for index, lane in enumerate(ordered):
            offset = task.extreme_time - lane.end_time
            candidate = list(starts)
            candidate[index] += offset
            if best_starts is None or compare_start_times(best_starts, candidate) < 0:
                best_lane = lane
                best_starts = candidate
                best_offset = offset

        best_lane.schedule.start_time += best_offset
        best_lane.end_time += best_offset
        logger.checks(
            f"  A2.3: machine {best_lane.schedule.machine.id} shifted by {best_offset:g} "
            f"for task {task.id}"
        )
        return best_lane


def _format_starts(schedule: Schedule) -> str:
    return ", ".join("idle" if start == IDLE else f"{start:g}" for start in schedule.start_times())
