"""Start-time repair pass shared by the heuristic strategies."""

from slacksched.logger import get_logger

from ..core import MachineSchedule, Schedule, latest_start

logger = get_logger()


def adjust_start_times(schedule: Schedule) -> None:
    """Push machine start times later until no local move helps.

    Machines are scanned from the earliest start. On each machine a long head task is
    first deferred behind shorter ones as far as its deadline allows, then the head is
    offered to a later machine; the move is taken when that machine's new start is
    strictly later than the donor's start. Every move strictly improves the sorted
    start-time vector, so the loop terminates.
    """
    moves = 0
    changed = True
    while changed:
        changed = False
        schedule.sort()
        machine_schedules = schedule.machine_schedules

        for index in range(len(machine_schedules) - 1):
            current = machine_schedules[index]
            if not current.tasks:
                continue

            current_start = current.start_time
            _defer_long_head(current)

            moving = current.tasks[0]
            target: MachineSchedule | None = None
            for later in reversed(machine_schedules[index + 1 :]):
                if target is not None and later.start_time < moving.deadline:
                    break
                target = later
            if target is None:
                continue

            if moving.deadline < target.start_time:
                new_start = moving.extreme_time
            else:
                new_start = target.start_time - moving.duration
            if not new_start > current_start:
                continue

            current.tasks.pop(0)
            current.start_time = latest_start(current.tasks)
            target.tasks.insert(0, moving)
            target.start_time = new_start
            moves += 1
            logger.checks(
                f"  repair: task {moving.id} moved from machine {current.machine.id} "
                f"to machine {target.machine.id} (start {new_start:g})"
            )
            changed = True
            break

    if moves:
        logger.debug(f"Repair pass made {moves} moves")


def _defer_long_head(machine_schedule: MachineSchedule) -> None:
    """Move a head task that is longer than its successor further back in the queue.

    The head travels past as many successors as its deadline allows. A task is
    deferred at most once per call.
    """
    tasks = machine_schedule.tasks
    deferred: set[int] = set()

    while len(tasks) > 1 and tasks[0].duration > tasks[1].duration:
        head = tasks[0]
        if head.id in deferred:
            break

        end = machine_schedule.start_time + head.duration
        position = 0
        while position + 1 < len(tasks) and end + tasks[position + 1].duration <= head.deadline:
            position += 1
            end += tasks[position].duration

        if position == 0:
            break

        tasks.insert(position + 1, head)
        tasks.pop(0)
        deferred.add(head.id)
