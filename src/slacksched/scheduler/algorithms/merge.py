"""Merge a certified prefix with a heuristic schedule of the remaining tasks."""

from __future__ import annotations

from collections.abc import Sequence

from slacksched.exceptions import ScheduleMismatchError
from slacksched.logger import get_logger

from ..core import Infeasible, MachineSchedule, Schedule, Task, latest_start
from .primary import Lane

logger = get_logger()


def merge_with_prefix(suffix: Schedule, prefix: Sequence[Lane]) -> Schedule | Infeasible:
    """Put each prefix queue ahead of a suffix queue.

    ``suffix`` holds the heuristic schedule for the tasks the prefix did not place.
    Suffix machines sorted by start are paired with prefix lanes sorted by end. A
    suffix queue that would have to start before its prefix ends gives away head
    tasks to other machines until it fits.

    Args:
        suffix: Heuristic schedule over the same machines as the prefix
        prefix: Engaged lanes of the primary construction, one per machine

    Returns:
        The merged schedule (sorted, not flagged optimal) or Infeasible when some head
        task finds no host.
    """
    if len(prefix) != len(suffix):
        raise ScheduleMismatchError(
            f"Prefix has {len(prefix)} lanes but the schedule has {len(suffix)} machines"
        )

    queues = [machine_schedule.clone() for machine_schedule in suffix]
    for queue in queues:
        queue.start_time = latest_start(queue.tasks)
    queues.sort(key=MachineSchedule.sort_key)
    lanes = sorted(prefix, key=Lane.sort_key)
    bounds = [lane.end_time for lane in lanes]

    delays = [
        (bounds[index] - queue.start_time, queue.machine.id, index)
        for index, queue in enumerate(queues)
        if bounds[index] > queue.start_time
    ]
    delays.sort(key=lambda delay: (-delay[0], delay[1]))

    for delay, _, index in delays:
        donor = queues[index]
        logger.checks(
            f"  merge: machine {donor.machine.id} starts {delay:g} before its prefix ends"
        )
        while donor.start_time < bounds[index]:
            moving = donor.tasks[0]
            host_index = _find_host(queues, bounds, index, moving)
            if host_index is None:
                logger.checks(f"  merge: no host for task {moving.id}")
                return Infeasible(f"no machine can host task {moving.id} after the prefix")

            host = queues[host_index]
            host.start_time = _start_before(host, moving)
            host.tasks.insert(0, moving)
            donor.tasks.pop(0)
            donor.start_time = latest_start(donor.tasks)
            logger.checks(
                f"  merge: task {moving.id} moved from machine {donor.machine.id} "
                f"to machine {host.machine.id}"
            )

    merged = Schedule(
        MachineSchedule(
            lane.schedule.machine,
            lane.schedule.start_time,
            list(lane.schedule.tasks) + list(queue.tasks),
        )
        for lane, queue in zip(lanes, queues)
    )
    merged.sort()
    return merged


def _start_before(host: MachineSchedule, task: Task) -> float:
    if task.deadline < host.start_time:
        return task.extreme_time
    return host.start_time - task.duration


def _find_host(
    queues: list[MachineSchedule], bounds: list[float], donor_index: int, task: Task
) -> int | None:
    """Machine that keeps the smallest gap after its prefix when taking ``task``."""
    best: tuple[float, int, int] | None = None
    for index, queue in enumerate(queues):
        if index == donor_index or queue.start_time < bounds[index]:
            continue
        start = _start_before(queue, task)
        if start < bounds[index]:
            continue
        candidate = (start - bounds[index], queue.machine.id, index)
        if best is None or candidate < best:
            best = candidate
    return best[2] if best is not None else None
