"""Tests for the text report."""

from slacksched.report import format_schedule, render_report
from slacksched.scheduler import Machine, MachineSchedule, Schedule, Task


def _schedule() -> Schedule:
    build = Task(id=1, name="build", duration=5, deadline=1100)
    test = Task(id=2, name="test", duration=5, deadline=1200)
    return Schedule(
        [
            MachineSchedule(Machine(1, "lathe"), 1095, [build, test]),
            MachineSchedule(Machine(2, "mill")),
        ]
    )


def test_format_schedule_relative_to_epoch() -> None:
    lines = format_schedule(_schedule(), epoch=1000)
    assert lines == [
        '(1) "lathe" (r1 = 95)',
        '\t(1) "build"\t5\t100\t95\t100',
        '\t(2) "test"\t5\t200\t100\t105',
        '(2) "mill" (r2 = idle)',
    ]


def test_render_report_sections() -> None:
    text = render_report(
        2,
        2,
        [("By the fast algorithm", _schedule()), ("By the accurate algorithm", None)],
        epoch=1000,
    )
    lines = text.splitlines()
    assert lines[0] == "n = 2, m = 2"
    assert lines[1] == ""
    assert lines[2] == "By the fast algorithm:"
    assert "By the accurate algorithm:" in lines
    assert lines[-1] == "No schedule found."


def test_render_report_without_title() -> None:
    text = render_report(2, 2, [("", _schedule())], epoch=1000)
    assert text.splitlines()[2] == '(1) "lathe" (r1 = 95)'
    assert text.endswith("\n")
