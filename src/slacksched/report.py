"""Plain-text schedule report."""

from __future__ import annotations

from collections.abc import Sequence

from .scheduler.core import IDLE, Schedule


def _time(value: float, epoch: float) -> str:
    if value == IDLE:
        return "idle"
    return f"{value - epoch:g}"


def format_schedule(schedule: Schedule, epoch: float = 0.0) -> list[str]:
    """Report lines for one schedule, all times relative to ``epoch``.

    Each machine gets a header ``(id) "name" (r<id> = start)`` followed by one
    tab-separated line per task: id, name, duration, deadline, start and end.
    """
    lines: list[str] = []
    for machine_schedule in schedule:
        machine = machine_schedule.machine
        lines.append(
            f'({machine.id}) "{machine.name}" '
            f"(r{machine.id} = {_time(machine_schedule.start_time, epoch)})"
        )
        start = machine_schedule.start_time - epoch
        for task in machine_schedule.tasks:
            end = start + task.duration
            lines.append(
                f'\t({task.id}) "{task.name}"\t{task.duration:g}\t{task.deadline - epoch:g}'
                f"\t{start:g}\t{end:g}"
            )
            start = end
    return lines


def render_report(
    task_count: int,
    machine_count: int,
    sections: Sequence[tuple[str, Schedule | None]],
    epoch: float = 0.0,
) -> str:
    """Full report text.

    Args:
        task_count: Number of tasks scheduled
        machine_count: Number of machines
        sections: ``(title, schedule)`` pairs; an empty title omits the heading and a
            None schedule is reported as missing
        epoch: Timestamp all printed times are relative to
    """
    lines = [f"n = {task_count}, m = {machine_count}", ""]
    for index, (title, schedule) in enumerate(sections):
        if index > 0:
            lines.append("")
        if title:
            lines.append(f"{title}:")
        if schedule is None:
            lines.append("No schedule found.")
        else:
            lines.extend(format_schedule(schedule, epoch))
    return "\n".join(lines) + "\n"
