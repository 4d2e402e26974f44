"""Pytest configuration and fixtures for slacksched tests."""

from __future__ import annotations

import random
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from slacksched.logger import reset_logger
from slacksched.scheduler.algorithms import create_algorithm
from slacksched.scheduler.config import AlgorithmType, SchedulingConfig
from slacksched.scheduler.core import Machine, Task

# The four heuristic strategies
HEURISTIC_VARIANTS: list[AlgorithmType] = [
    AlgorithmType.A21,
    AlgorithmType.A21A,
    AlgorithmType.A22,
    AlgorithmType.A23,
]

HEURISTIC_IDS = ["a21", "a21a", "a22", "a23"]


@pytest.fixture(autouse=True)
def _silent_logger() -> Iterator[None]:
    """Leave the logger silent for the next test."""
    yield
    reset_logger()


@pytest.fixture(params=HEURISTIC_VARIANTS, ids=HEURISTIC_IDS)
def heuristic_variant(request: pytest.FixtureRequest) -> AlgorithmType:
    """Current heuristic being tested."""
    return request.param  # type: ignore[return-value]


@pytest.fixture
def make_heuristic(heuristic_variant: AlgorithmType) -> Callable[..., Any]:
    """Factory for creating the current heuristic."""

    def _make(
        tasks: list[Task],
        machines: list[Machine],
        *,
        config: SchedulingConfig | None = None,
    ) -> Any:
        return create_algorithm(heuristic_variant, tasks, machines, config=config)

    return _make


def make_machines(count: int) -> list[Machine]:
    return [Machine(id=index, name=f"M{index}") for index in range(1, count + 1)]


def make_tasks(*specs: tuple[float, float]) -> list[Task]:
    """Tasks from ``(duration, deadline)`` pairs, numbered from 1."""
    return [
        Task(id=index, name=f"t{index}", duration=duration, deadline=deadline)
        for index, (duration, deadline) in enumerate(specs, start=1)
    ]


def random_instance(seed: int, max_tasks: int = 6, max_machines: int = 3) -> tuple[list[Task], list[Machine]]:
    """Small instance with integer durations and deadlines."""
    rng = random.Random(seed)
    task_count = rng.randint(1, max_tasks)
    machine_count = rng.randint(1, max_machines)
    specs = [(float(rng.randint(1, 20)), float(rng.randint(10, 60))) for _ in range(task_count)]
    return make_tasks(*specs), make_machines(machine_count)


@pytest.fixture
def machines_factory() -> Callable[[int], list[Machine]]:
    """Factory for numbered machines M1..Mn."""
    return make_machines


@pytest.fixture
def tasks_factory() -> Callable[..., list[Task]]:
    """Factory for tasks from (duration, deadline) pairs."""
    return make_tasks


@pytest.fixture
def random_instances() -> list[tuple[list[Task], list[Machine]]]:
    """Seeded random instances with n <= 6 and m <= 3."""
    return [random_instance(seed) for seed in range(30)]
