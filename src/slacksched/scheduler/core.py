"""Core dataclasses for the scheduling engine."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from slacksched.exceptions import ScheduleMismatchError

# Start time of a machine with nothing queued
IDLE = math.inf


@dataclass(frozen=True)
class Task:
    """A task to be scheduled.

    Times are plain floats in one caller-chosen unit; ``deadline`` is absolute.
    """

    id: int
    name: str
    duration: float
    deadline: float

    @property
    def extreme_time(self) -> float:
        """Latest start at which the task alone still meets its deadline."""
        return self.deadline - self.duration


def deadline_order(task: Task) -> tuple[float, float, int]:
    """Sort key: deadline, then duration, then id."""
    return (task.deadline, task.duration, task.id)


def extreme_order(task: Task) -> tuple[float, float, int]:
    """Sort key: extreme time, then duration, then id."""
    return (task.extreme_time, task.duration, task.id)


@dataclass(frozen=True)
class Machine:
    """One of the identical machines."""

    id: int
    name: str


def _default_task_list() -> list[Task]:
    return []


@dataclass(eq=False)
class MachineSchedule:
    """A machine with its start time and queue (head is executed first)."""

    machine: Machine
    start_time: float = IDLE
    tasks: list[Task] = field(default_factory=_default_task_list)

    @property
    def is_idle(self) -> bool:
        return not self.tasks

    def clone(self) -> MachineSchedule:
        """Copy the queue; Task and Machine objects stay shared."""
        return MachineSchedule(self.machine, self.start_time, list(self.tasks))

    def sort_key(self) -> tuple[float, int]:
        return (self.start_time, self.machine.id)


@dataclass(frozen=True)
class Infeasible:
    """A strategy could not certify or construct a schedule.

    This is a normal outcome meaning "try the next strategy", not an error.
    """

    reason: str


def compare_start_times(first: Sequence[float], second: Sequence[float]) -> int:
    """Compare two start-time vectors by their ascending-sorted forms.

    Returns -1, 0 or 1. The first differing position decides, so the result does not
    depend on which machine holds which start time.
    """
    if len(first) != len(second):
        raise ScheduleMismatchError(
            f"Start-time vectors differ in length: {len(first)} vs {len(second)}"
        )
    for a, b in zip(sorted(first), sorted(second)):
        if a < b:
            return -1
        if a > b:
            return 1
    return 0


def latest_start(tasks: Sequence[Task]) -> float:
    """Latest start time for running ``tasks`` back to back in the given order.

    Walks the queue from the tail: a task whose deadline precedes the start of its
    successor starts at its extreme time, otherwise right before the successor.
    """
    if not tasks:
        return IDLE
    start = tasks[-1].extreme_time
    for task in reversed(tasks[:-1]):
        start = task.extreme_time if task.deadline < start else start - task.duration
    return start


class Schedule:
    """One MachineSchedule per machine plus the optimality flag.

    ``optimal`` is set only when an algorithm can certify that no feasible schedule has
    a strictly better sorted start-time vector.
    """

    def __init__(
        self,
        machine_schedules: Iterable[MachineSchedule] = (),
        *,
        optimal: bool = False,
    ):
        self.machine_schedules: list[MachineSchedule] = list(machine_schedules)
        self.optimal = optimal

    @classmethod
    def for_machines(cls, machines: Iterable[Machine], *, optimal: bool = False) -> Schedule:
        """Create a schedule with every machine idle."""
        return cls((MachineSchedule(machine) for machine in machines), optimal=optimal)

    def __len__(self) -> int:
        return len(self.machine_schedules)

    def __iter__(self) -> Iterator[MachineSchedule]:
        return iter(self.machine_schedules)

    def __getitem__(self, index: int) -> MachineSchedule:
        return self.machine_schedules[index]

    def __repr__(self) -> str:
        return f"Schedule(start_times={self.start_times()!r}, optimal={self.optimal})"

    def clone(self) -> Schedule:
        return Schedule(
            (machine_schedule.clone() for machine_schedule in self.machine_schedules),
            optimal=self.optimal,
        )

    def sort(self) -> None:
        """Order machines by start time, ties broken by machine id."""
        self.machine_schedules.sort(key=MachineSchedule.sort_key)

    def start_times(self) -> list[float]:
        return [machine_schedule.start_time for machine_schedule in self.machine_schedules]

    def tasks(self) -> list[Task]:
        """All queued tasks, machine by machine."""
        return [task for machine_schedule in self.machine_schedules for task in machine_schedule.tasks]

    def compare(self, other: Schedule | None) -> int:
        """Sorted-vector comparison; any schedule ranks above ``None``."""
        if other is None:
            return 1
        if len(other) != len(self):
            raise ScheduleMismatchError("The schedules must have the same number of machines.")
        return compare_start_times(self.start_times(), other.start_times())


@dataclass
class SchedulingResult:
    """Outcome of a service run.

    ``schedule`` is None when the selected algorithm reported infeasibility; the reason
    is then the first warning.
    """

    schedule: Schedule | None
    strategy: str
    warnings: list[str] = field(default_factory=list)

    @property
    def optimal(self) -> bool:
        return self.schedule is not None and self.schedule.optimal
