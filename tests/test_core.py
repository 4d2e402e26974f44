"""Tests for the core data model and the sorted-vector comparator."""

import math
from collections.abc import Callable

import pytest

from slacksched.exceptions import ScheduleMismatchError
from slacksched.scheduler.core import (
    IDLE,
    Machine,
    MachineSchedule,
    Schedule,
    Task,
    compare_start_times,
    deadline_order,
    extreme_order,
    latest_start,
)


class TestTask:
    """Test Task values."""

    def test_extreme_time(self) -> None:
        """Extreme time is the latest solo start."""
        task = Task(id=1, name="a", duration=10, deadline=100)
        assert task.extreme_time == 90

    def test_task_is_immutable(self) -> None:
        task = Task(id=1, name="a", duration=10, deadline=100)
        with pytest.raises(AttributeError):
            task.duration = 5  # type: ignore[misc]

    def test_sort_keys_break_ties_on_duration_then_id(self) -> None:
        """Equal deadlines order by duration, then id."""
        tasks = [
            Task(id=3, name="c", duration=5, deadline=100),
            Task(id=1, name="a", duration=10, deadline=100),
            Task(id=2, name="b", duration=5, deadline=100),
        ]
        assert [task.id for task in sorted(tasks, key=deadline_order)] == [2, 3, 1]
        # Extreme times are 95, 90, 95
        assert [task.id for task in sorted(tasks, key=extreme_order)] == [1, 2, 3]


class TestComparator:
    """Test the sorted-vector comparator."""

    def test_permutation_invariant(self) -> None:
        assert compare_start_times([1, 2], [2, 1]) == 0

    def test_first_difference_decides(self) -> None:
        assert compare_start_times([1, 3], [2, 2]) == -1
        assert compare_start_times([2, 2], [1, 3]) == 1

    def test_idle_machine_ranks_latest(self) -> None:
        """Sorted [5, idle] beats sorted [4, 5]."""
        assert compare_start_times([IDLE, 5], [5, 4]) == 1

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(ScheduleMismatchError):
            compare_start_times([1, 2], [1])

    def test_length_mismatch_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            compare_start_times([], [1])


class TestLatestStart:
    """Test latest_start."""

    def test_back_to_back(self) -> None:
        tasks = [
            Task(id=1, name="a", duration=5, deadline=10),
            Task(id=2, name="b", duration=5, deadline=12),
        ]
        assert latest_start(tasks) == 2

    def test_early_deadline_starts_at_extreme_time(self) -> None:
        """A task due before its successor starts is placed at its own extreme time."""
        tasks = [
            Task(id=1, name="a", duration=5, deadline=3),
            Task(id=2, name="b", duration=5, deadline=20),
        ]
        assert latest_start(tasks) == -2

    def test_empty_queue_is_idle(self) -> None:
        assert latest_start([]) == IDLE
        assert math.isinf(IDLE)


class TestSchedule:
    """Test the Schedule aggregate."""

    def _schedule(self) -> Schedule:
        a = Task(id=1, name="a", duration=10, deadline=100)
        b = Task(id=2, name="b", duration=10, deadline=50)
        return Schedule(
            [
                MachineSchedule(Machine(2, "M2"), 40, [b]),
                MachineSchedule(Machine(1, "M1"), 90, [a]),
                MachineSchedule(Machine(3, "M3")),
            ]
        )

    def test_for_machines_starts_idle(
        self, machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        schedule = Schedule.for_machines(machines_factory(2))
        assert schedule.start_times() == [IDLE, IDLE]
        assert all(machine_schedule.is_idle for machine_schedule in schedule)
        assert not schedule.optimal

    def test_sort_by_start_then_machine_id(self) -> None:
        schedule = self._schedule()
        schedule.machine_schedules.append(MachineSchedule(Machine(0, "M0"), 40, []))
        schedule.sort()
        assert [ms.machine.id for ms in schedule] == [0, 2, 1, 3]

    def test_compare_is_reflexive(self) -> None:
        schedule = self._schedule()
        assert schedule.compare(schedule) == 0

    def test_compare_ignores_machine_order(self) -> None:
        schedule = self._schedule()
        permuted = schedule.clone()
        permuted.machine_schedules.reverse()
        assert schedule.compare(permuted) == 0

    def test_compare_against_none(self) -> None:
        assert self._schedule().compare(None) == 1

    def test_compare_different_machine_counts_raises(self) -> None:
        schedule = self._schedule()
        smaller = Schedule(schedule.machine_schedules[:2])
        with pytest.raises(ScheduleMismatchError):
            schedule.compare(smaller)

    def test_clone_is_independent(self) -> None:
        """Mutating a clone's queues leaves the source untouched."""
        schedule = self._schedule()
        clone = schedule.clone()
        clone[0].tasks.append(Task(id=9, name="x", duration=1, deadline=10))
        clone[1].start_time = 0
        assert [task.id for task in schedule[0].tasks] == [2]
        assert schedule[1].start_time == 90
        # Tasks and machines are shared, not copied
        assert clone[0].machine is schedule[0].machine
        assert clone[1].tasks[0] is schedule[1].tasks[0]

    def test_tasks(self) -> None:
        schedule = self._schedule()
        assert [task.id for task in schedule.tasks()] == [2, 1]
