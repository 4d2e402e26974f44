"""List-scheduling heuristic working backwards from the latest deadline."""

from collections.abc import Iterable

from slacksched.logger import get_logger

from ..core import Machine, MachineSchedule, Schedule, Task, deadline_order

logger = get_logger()


class ListScheduler:
    """Greedy construction from the latest deadline down.

    Each task goes in front of the machine with the smallest start time that is
    still at or after the task's deadline. When no machine qualifies, the machine
    with the latest start gets the longest task it can still serve instead.
    The result is always feasible and seeds the branch-and-bound search.
    """

    def __init__(self, tasks: Iterable[Task], machines: Iterable[Machine]):
        self.tasks = list(tasks)
        self.machines = list(machines)

    def schedule(self) -> Schedule:
        """Build the schedule.

        Returns:
            Schedule sorted by start time (machine id on ties)
        """
        if not self.tasks or not self.machines:
            return Schedule.for_machines(self.machines, optimal=not self.tasks)

        remaining = sorted(self.tasks, key=deadline_order)
        schedule = Schedule.for_machines(self.machines)

        while remaining:
            current = remaining[-1]

            target = self._first_machine_after(schedule, current.deadline)
            if target is not None:
                remaining.pop()
                target.tasks.insert(0, current)
                target.start_time = current.extreme_time
                logger.checks(
                    f"  task {current.id} -> machine {target.machine.id} at extreme time "
                    f"{target.start_time:g}"
                )
                continue

            # Every machine starts before the deadline: extend the latest one
            last = max(schedule, key=MachineSchedule.sort_key)
            longest_index = len(remaining) - 1
            for index in range(len(remaining) - 1, -1, -1):
                candidate = remaining[index]
                if (
                    candidate.deadline >= last.start_time
                    and candidate.duration > remaining[longest_index].duration
                ):
                    longest_index = index

            longest = remaining.pop(longest_index)
            last.tasks.insert(0, longest)
            last.start_time -= longest.duration
            logger.checks(
                f"  task {longest.id} -> machine {last.machine.id} shifted to {last.start_time:g}"
            )

        schedule.sort()
        return schedule

    @staticmethod
    def _first_machine_after(schedule: Schedule, deadline: float) -> MachineSchedule | None:
        """Machine with the smallest start that is not before ``deadline``."""
        target: MachineSchedule | None = None
        for machine_schedule in schedule:
            if deadline > machine_schedule.start_time:
                continue
            if target is None or machine_schedule.sort_key() < target.sort_key():
                target = machine_schedule
        return target
