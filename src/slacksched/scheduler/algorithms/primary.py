"""Primary constructor (certified build) and the A1.1 completion pass."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from slacksched.logger import get_logger

from ..core import Infeasible, Machine, MachineSchedule, Schedule, Task, extreme_order

logger = get_logger()


@dataclass(eq=False)
class Lane:
    """An engaged machine together with the end of its queue."""

    schedule: MachineSchedule
    end_time: float

    @classmethod
    def engage(cls, machine_schedule: MachineSchedule, task: Task) -> Lane:
        """Start ``machine_schedule`` with ``task`` at the task's extreme time."""
        machine_schedule.start_time = task.extreme_time
        machine_schedule.tasks.append(task)
        return cls(machine_schedule, task.deadline)

    def append(self, task: Task) -> None:
        self.schedule.tasks.append(task)
        self.end_time += task.duration

    def sort_key(self) -> tuple[float, int]:
        return (self.end_time, self.schedule.machine.id)

    def clone(self) -> Lane:
        return Lane(self.schedule.clone(), self.end_time)


@dataclass
class PrimaryState:
    """Outcome of the primary construction.

    ``lanes`` hold the engaged machines, ``next_index`` the first task of ``tasks``
    (ordered by extreme time) that has not been placed yet.
    """

    schedule: Schedule
    lanes: list[Lane]
    tasks: list[Task]
    next_index: int

    @property
    def complete(self) -> bool:
        return self.next_index >= len(self.tasks)

    @property
    def remaining_tasks(self) -> list[Task]:
        return self.tasks[self.next_index :]

    def prefix(self) -> list[Lane]:
        """Frozen copy of the lanes ordered by end time (machine id on ties)."""
        return sorted((lane.clone() for lane in self.lanes), key=Lane.sort_key)

    def to_schedule(self) -> Schedule:
        result = self.schedule.clone()
        result.optimal = True
        result.sort()
        return result


class PrimaryScheduler:
    """Greedy build that aborts as soon as its choice is no longer provably best.

    Tasks are taken by extreme time. A task joins the engaged machine that frees up
    first, or engages the next idle machine when none is free by its extreme time.
    The build aborts when two machines could take the task, or when some queued task
    keeps enough slack to let the current task run ahead of it. When the build runs
    out of idle machines, the completion pass (A1.1) appends the rest.
    """

    def __init__(self, tasks: Iterable[Task], machines: Iterable[Machine]):
        self.tasks = sorted(tasks, key=extreme_order)
        self.machines = list(machines)

    def schedule(self) -> Schedule | Infeasible:
        """Run the primary construction followed by the completion pass.

        Returns:
            Schedule flagged optimal, or Infeasible if either stage aborts
        """
        if not self.tasks:
            return Schedule.for_machines(self.machines, optimal=True)
        if not self.machines:
            return Infeasible("no machines available")

        state = self.build_prefix()
        if isinstance(state, Infeasible):
            return state
        if state.complete:
            logger.changes(f"Primary construction placed all {len(self.tasks)} tasks")
            return state.to_schedule()

        completed = self.complete(state)
        if isinstance(completed, Infeasible):
            return completed
        return completed.to_schedule()

    def build_prefix(self) -> PrimaryState | Infeasible:
        """Place tasks until every machine is engaged or the choice becomes ambiguous."""
        schedule = Schedule.for_machines(self.machines)
        first = self.tasks[0]
        lanes = [Lane.engage(schedule[0], first)]
        logger.checks(f"  task {first.id} engages machine {schedule[0].machine.id}")

        task_index = 1
        machine_index = 1
        while machine_index < len(schedule) and task_index < len(self.tasks):
            current = self.tasks[task_index]

            blocking = self._find_slack(lanes, current)
            if blocking is not None:
                logger.checks(
                    f"  task {blocking.id} keeps slack for task {current.id}; "
                    "primary construction aborted"
                )
                return Infeasible(f"task {blocking.id} could yield to task {current.id}")

            task_index += 1

            lanes.sort(key=Lane.sort_key)
            earliest = lanes[0]
            if earliest.end_time > current.extreme_time:
                lane = Lane.engage(schedule[machine_index], current)
                lanes.append(lane)
                machine_index += 1
                logger.checks(
                    f"  task {current.id} engages machine {lane.schedule.machine.id}"
                )
                continue

            if len(lanes) > 1 and lanes[1].end_time <= current.extreme_time:
                logger.checks(f"  task {current.id} fits two machines; primary construction aborted")
                return Infeasible(f"task {current.id} fits more than one machine")

            earliest.append(current)
            logger.checks(f"  task {current.id} -> machine {earliest.schedule.machine.id}")

        return PrimaryState(
            schedule=schedule, lanes=lanes, tasks=self.tasks, next_index=task_index
        )

    def complete(self, state: PrimaryState) -> PrimaryState | Infeasible:
        """Completion pass (A1.1) on a copy of ``state``.

        Each remaining task is appended to the machine that frees up first; the pass
        fails on the first task that would miss its deadline.
        """
        schedule = state.schedule.clone()
        by_machine = {machine_schedule.machine.id: machine_schedule for machine_schedule in schedule}
        lanes = [
            Lane(by_machine[lane.schedule.machine.id], lane.end_time) for lane in state.lanes
        ]

        for current in state.remaining_tasks:
            earliest = min(lanes, key=Lane.sort_key)
            new_end = earliest.end_time + current.duration
            if new_end > current.deadline:
                logger.checks(
                    f"  completion: task {current.id} would end at {new_end:g} "
                    f"after deadline {current.deadline:g}"
                )
                return Infeasible(f"completion pass cannot place task {current.id}")
            earliest.append(current)

        logger.changes(f"Completion pass placed {len(state.remaining_tasks)} remaining tasks")
        return PrimaryState(schedule=schedule, lanes=lanes, tasks=state.tasks, next_index=len(state.tasks))

    @staticmethod
    def _find_slack(lanes: list[Lane], current: Task) -> Task | None:
        """First queued task whose slack is at least ``current``'s duration."""
        for lane in lanes:
            end = lane.schedule.start_time
            for task in lane.schedule.tasks:
                end += task.duration
                if not task.deadline - end < current.duration:
                    return task
        return None
