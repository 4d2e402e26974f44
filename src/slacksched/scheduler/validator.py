"""Feasibility checks for finished schedules."""

from __future__ import annotations

from dataclasses import dataclass

from slacksched.logger import get_logger

from .core import Schedule

logger = get_logger()


@dataclass(frozen=True)
class Violation:
    """A reason a schedule is not feasible."""

    machine_id: int
    task_id: int | None  # None when the machine itself starts too early
    message: str


def check_feasibility(schedule: Schedule, not_before: float | None = None) -> list[Violation]:
    """Check every task on every machine against its deadline.

    Args:
        schedule: Schedule to check
        not_before: Optional horizon no machine may start before (e.g. the epoch)

    Returns:
        List of violations, empty when the schedule is feasible
    """
    violations: list[Violation] = []

    for machine_schedule in schedule:
        machine_id = machine_schedule.machine.id
        if not machine_schedule.tasks:
            continue

        if not_before is not None and machine_schedule.start_time < not_before:
            violations.append(
                Violation(
                    machine_id=machine_id,
                    task_id=None,
                    message=(
                        f"Machine {machine_id} starts at {machine_schedule.start_time:g}, "
                        f"before {not_before:g}"
                    ),
                )
            )

        end = machine_schedule.start_time
        for task in machine_schedule.tasks:
            end += task.duration
            if end > task.deadline:
                violations.append(
                    Violation(
                        machine_id=machine_id,
                        task_id=task.id,
                        message=(
                            f"Task {task.id} on machine {machine_id} ends at {end:g}, "
                            f"after its deadline {task.deadline:g}"
                        ),
                    )
                )

    for violation in violations:
        logger.checks(f"  infeasible: {violation.message}")

    return violations


def is_feasible(schedule: Schedule, not_before: float | None = None) -> bool:
    """Whether ``check_feasibility`` finds no violation."""
    return not check_feasibility(schedule, not_before)
