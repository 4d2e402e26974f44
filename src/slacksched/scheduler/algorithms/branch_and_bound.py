"""Exact branch-and-bound search over task-to-machine assignments."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from slacksched.logger import get_logger

from ..core import (
    IDLE,
    Machine,
    MachineSchedule,
    Schedule,
    Task,
    compare_start_times,
    deadline_order,
)
from .list_scheduling import ListScheduler

logger = get_logger()


@dataclass(frozen=True)
class _Node:
    """Decision "task ``task_index`` runs on machine ``machine_index``".

    ``previous`` links to the decision for the task after it in deadline order, so a
    leaf (``task_index == 0``) carries the whole assignment.
    """

    task_index: int
    machine_index: int
    previous: _Node | None
    start_times: tuple[float, ...]

    @property
    def is_leaf(self) -> bool:
        return self.task_index == 0

    @property
    def engaged(self) -> int:
        """Machines in use; idle machines are always the highest indices."""
        return sum(1 for start in self.start_times if start != IDLE)


class BranchAndBoundScheduler:
    """Exact solver for the latest sorted start-time vector.

    Tasks are decided from the latest deadline down, so each machine runs its tasks in
    deadline order and every decision only moves one start time earlier. A child is
    kept only when its start vector is strictly better than the best complete
    assignment found so far (the record), since no descendant can beat its parent.
    Among idle machines only the first is branched on.

    The search does not look at feasibility: each task simply ends at its deadline or
    where the next task on its machine begins, whichever is earlier. Callers that need
    a horizon check it afterwards.
    """

    def __init__(self, tasks: Iterable[Task], machines: Iterable[Machine]):
        self.tasks = sorted(tasks, key=deadline_order)
        self.machines = list(machines)
        self.nodes_expanded = 0
        self.records = 0

    def schedule(self) -> Schedule:
        if not self.tasks or not self.machines:
            return Schedule.for_machines(self.machines, optimal=not self.tasks)

        guide = self._guide()
        record, stack = self._dive(guide)
        stack = self._purge(stack, record)

        while stack:
            node = stack.pop()
            if compare_start_times(record.start_times, node.start_times) >= 0:
                continue
            if node.is_leaf:
                record = node
                self.records += 1
                stack = self._purge(stack, record)
                continue
            stack.extend(
                child
                for child in self._children(node)
                if compare_start_times(record.start_times, child.start_times) < 0
            )

        logger.debug(
            f"Branch and bound: {self.nodes_expanded} nodes expanded, "
            f"{self.records} records after the initial dive"
        )
        return self._reconstruct(record)

    def _guide(self) -> list[int]:
        """Machine index the list-scheduling heuristic chose for each task.

        Heuristic machines are numbered in order of first use from the latest deadline
        down, matching the way the search engages idle machines.
        """
        heuristic = ListScheduler(self.tasks, self.machines).schedule()
        machine_by_task = {
            task.id: machine_schedule.machine.id
            for machine_schedule in heuristic
            for task in machine_schedule.tasks
        }

        numbering: dict[int, int] = {}
        guide = [0] * len(self.tasks)
        for index in range(len(self.tasks) - 1, -1, -1):
            machine_id = machine_by_task[self.tasks[index].id]
            if machine_id not in numbering:
                numbering[machine_id] = len(numbering)
            guide[index] = numbering[machine_id]
        return guide

    def _dive(self, guide: list[int]) -> tuple[_Node, list[_Node]]:
        """Follow the heuristic down to a leaf, stacking every sibling on the way."""
        last = len(self.tasks) - 1
        idle = tuple(IDLE for _ in self.machines)
        node = _Node(last, 0, None, self._place(idle, 0, self.tasks[last]))

        stack: list[_Node] = []
        while not node.is_leaf:
            following: _Node | None = None
            for child in self._children(node):
                if child.machine_index == guide[child.task_index]:
                    following = child
                else:
                    stack.append(child)
            assert following is not None
            node = following

        record = node
        for sibling in stack:
            if sibling.is_leaf and compare_start_times(record.start_times, sibling.start_times) < 0:
                record = sibling
        logger.checks(f"  initial record: {_format(record.start_times)}")
        return record, [sibling for sibling in stack if sibling is not record]

    def _children(self, node: _Node) -> list[_Node]:
        self.nodes_expanded += 1
        task_index = node.task_index - 1
        task = self.tasks[task_index]
        width = min(node.engaged + 1, len(self.machines))
        return [
            _Node(task_index, machine_index, node, self._place(node.start_times, machine_index, task))
            for machine_index in range(width)
        ]

    @staticmethod
    def _place(start_times: tuple[float, ...], machine_index: int, task: Task) -> tuple[float, ...]:
        prior = start_times[machine_index]
        start = task.extreme_time if task.deadline <= prior else prior - task.duration
        return start_times[:machine_index] + (start,) + start_times[machine_index + 1 :]

    @staticmethod
    def _purge(stack: list[_Node], record: _Node) -> list[_Node]:
        return [
            node for node in stack if compare_start_times(record.start_times, node.start_times) < 0
        ]

    def _reconstruct(self, record: _Node) -> Schedule:
        schedule = Schedule((MachineSchedule(machine) for machine in self.machines), optimal=True)
        node: _Node | None = record
        while node is not None:
            schedule[node.machine_index].tasks.append(self.tasks[node.task_index])
            node = node.previous
        for machine_schedule, start in zip(schedule, record.start_times):
            machine_schedule.start_time = start
        schedule.sort()
        logger.changes(f"Branch and bound: start times {_format(record.start_times)}")
        return schedule


def _format(start_times: tuple[float, ...]) -> str:
    return ", ".join("idle" if start == IDLE else f"{start:g}" for start in sorted(start_times))
