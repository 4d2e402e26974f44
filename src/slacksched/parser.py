"""Parser for the plain-text tasks and machines files.

Tasks file::

    3
    1 build 10 120
    2 test 5 130
    3 deploy 20 200

The first line is the number of records. Each task line is ``id name duration
deadline``, the deadline being an offset from the epoch. A machines file has
``id name`` lines instead.
"""

from __future__ import annotations

from pathlib import Path

from .exceptions import ParseError
from .scheduler.core import Machine, Task


def _records(text: str, fields: int, kind: str) -> list[tuple[int, list[str]]]:
    """Split ``text`` into (line number, fields) records after the count line."""
    lines = [(number, line.split()) for number, line in enumerate(text.splitlines(), start=1)]
    lines = [(number, values) for number, values in lines if values]
    if not lines:
        raise ParseError(f"{kind} file is empty")

    count_line, count_values = lines[0]
    if len(count_values) != 1:
        raise ParseError(f"Line {count_line}: expected the number of {kind} records")
    try:
        count = int(count_values[0])
    except ValueError as e:
        raise ParseError(f"Line {count_line}: invalid count {count_values[0]!r}") from e
    if count < 0:
        raise ParseError(f"Line {count_line}: count must not be negative")

    records = lines[1:]
    if len(records) != count:
        raise ParseError(f"Expected {count} {kind} records, found {len(records)}")

    for number, values in records:
        if len(values) != fields:
            raise ParseError(f"Line {number}: expected {fields} fields, found {len(values)}")
    return records


def _parse_id(value: str, number: int, seen: set[int]) -> int:
    try:
        record_id = int(value)
    except ValueError as e:
        raise ParseError(f"Line {number}: invalid id {value!r}") from e
    if record_id <= 0:
        raise ParseError(f"Line {number}: id must be positive")
    if record_id in seen:
        raise ParseError(f"Line {number}: duplicate id {record_id}")
    seen.add(record_id)
    return record_id


def _parse_number(value: str, number: int, what: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise ParseError(f"Line {number}: invalid {what} {value!r}") from e


def parse_tasks(text: str, epoch: float = 0.0) -> list[Task]:
    """Parse a tasks file; deadlines become ``epoch + offset``."""
    tasks: list[Task] = []
    seen: set[int] = set()
    for number, (raw_id, name, raw_duration, raw_offset) in _records(text, 4, "task"):
        task_id = _parse_id(raw_id, number, seen)
        duration = _parse_number(raw_duration, number, "duration")
        if duration <= 0:
            raise ParseError(f"Line {number}: duration must be positive")
        offset = _parse_number(raw_offset, number, "deadline offset")
        tasks.append(Task(id=task_id, name=name, duration=duration, deadline=epoch + offset))
    return tasks


def parse_machines(text: str) -> list[Machine]:
    machines: list[Machine] = []
    seen: set[int] = set()
    for number, (raw_id, name) in _records(text, 2, "machine"):
        machines.append(Machine(id=_parse_id(raw_id, number, seen), name=name))
    return machines


def _read(file_path: Path | str) -> str:
    file_path = Path(file_path)
    if not file_path.exists():
        raise ParseError(f"File not found: {file_path}")
    return file_path.read_text()


def load_tasks(file_path: Path | str, epoch: float = 0.0) -> list[Task]:
    return parse_tasks(_read(file_path), epoch)


def load_machines(file_path: Path | str) -> list[Machine]:
    return parse_machines(_read(file_path))
