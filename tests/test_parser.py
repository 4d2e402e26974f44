"""Tests for the tasks and machines file parser."""

from pathlib import Path

import pytest

from slacksched.exceptions import ParseError
from slacksched.parser import load_machines, load_tasks, parse_machines, parse_tasks


class TestParseTasks:
    """Test parse_tasks."""

    def test_basic(self) -> None:
        tasks = parse_tasks("2\n1 build 10 120\n2 test 5.5 130\n")
        assert [(task.id, task.name, task.duration, task.deadline) for task in tasks] == [
            (1, "build", 10.0, 120.0),
            (2, "test", 5.5, 130.0),
        ]

    def test_deadlines_are_offsets_from_epoch(self) -> None:
        tasks = parse_tasks("1\n1 build 10 120\n", epoch=1000)
        assert tasks[0].deadline == 1120

    def test_blank_lines_are_ignored(self) -> None:
        tasks = parse_tasks("\n1\n\n7 only 3 40\n\n")
        assert [task.id for task in tasks] == [7]

    def test_zero_count(self) -> None:
        assert parse_tasks("0\n") == []

    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ("", "empty"),
            ("two\n", "invalid count"),
            ("2\n1 build 10 120\n", "Expected 2 task records, found 1"),
            ("1\n1 build 10\n", "expected 4 fields"),
            ("1\nx build 10 120\n", "invalid id"),
            ("1\n0 build 10 120\n", "id must be positive"),
            ("2\n1 a 10 120\n1 b 10 120\n", "duplicate id 1"),
            ("1\n1 build ten 120\n", "invalid duration"),
            ("1\n1 build 0 120\n", "duration must be positive"),
            ("1\n1 build 10 soon\n", "invalid deadline offset"),
        ],
    )
    def test_malformed(self, text: str, message: str) -> None:
        with pytest.raises(ParseError, match=message):
            parse_tasks(text)


class TestParseMachines:
    """Test parse_machines."""

    def test_basic(self) -> None:
        machines = parse_machines("2\n1 lathe\n2 mill\n")
        assert [(machine.id, machine.name) for machine in machines] == [(1, "lathe"), (2, "mill")]

    def test_wrong_field_count(self) -> None:
        with pytest.raises(ParseError, match="Line 2: expected 2 fields"):
            parse_machines("1\n1 lathe extra\n")


class TestLoadFiles:
    """Test loading from disk."""

    def test_load_both(self, tmp_path: Path) -> None:
        tasks_file = tmp_path / "tasks.txt"
        tasks_file.write_text("1\n1 build 10 120\n")
        machines_file = tmp_path / "machines.txt"
        machines_file.write_text("1\n1 lathe\n")

        assert load_tasks(tasks_file, epoch=5)[0].deadline == 125
        assert load_machines(machines_file)[0].name == "lathe"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="File not found"):
            load_tasks(tmp_path / "missing.txt")
