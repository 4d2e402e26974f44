"""Tests for the scheduling service and the fallback chain."""

from collections.abc import Callable

from slacksched.scheduler import (
    AlgorithmConfig,
    AlgorithmType,
    Machine,
    SchedulingConfig,
    SchedulingService,
    Task,
    build_optimal_schedule,
    build_with_primary_then_heuristics,
    is_feasible,
)
from slacksched.scheduler.algorithms import PrimaryThenHeuristicsScheduler


class TestFallbackChain:
    """Each step of the chain wins on a suitable instance."""

    def test_primary_construction(
        self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        scheduler = PrimaryThenHeuristicsScheduler(tasks_factory((10, 100)), machines_factory(1))
        schedule = scheduler.schedule()
        assert scheduler.strategy == "primary"
        assert schedule.start_times() == [90]
        assert schedule.optimal

    def test_completion_pass(
        self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        scheduler = PrimaryThenHeuristicsScheduler(
            tasks_factory((5, 100), (5, 200)), machines_factory(1)
        )
        schedule = scheduler.schedule()
        assert scheduler.strategy == "completion"
        assert schedule.start_times() == [95]

    def test_combinatorial_refinement(
        self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        """The primary construction aborts on slack; the refinement places everything."""
        tasks = tasks_factory((10, 100), (5, 200), (10, 300))
        scheduler = PrimaryThenHeuristicsScheduler(tasks, machines_factory(2))
        schedule = scheduler.schedule()
        assert scheduler.strategy == "combinatorial"
        assert schedule.optimal
        assert [task.id for task in schedule[0].tasks] == [1, 2, 3]
        assert schedule.compare(build_optimal_schedule(tasks, machines_factory(2))) == 0

    def test_heuristic_merged_with_prefix(
        self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        """Certified steps fail; a heuristic on the leftover tasks joins the primary prefix."""
        tasks = tasks_factory((11, 17), (10, 21), (7, 32), (4, 38), (15, 43), (9, 38), (6, 30))
        scheduler = PrimaryThenHeuristicsScheduler(tasks, machines_factory(2))
        schedule = scheduler.schedule()
        assert scheduler.strategy is not None
        assert scheduler.strategy.endswith("+prefix")
        assert schedule.optimal
        assert is_feasible(schedule)
        assert sorted(task.id for task in schedule.tasks()) == [task.id for task in tasks]
        assert build_optimal_schedule(tasks, machines_factory(2)).compare(schedule) == 0

    def test_results_are_feasible(self, random_instances: list[tuple[list[Task], list[Machine]]]) -> None:
        for tasks, machines in random_instances:
            scheduler = PrimaryThenHeuristicsScheduler(tasks, machines)
            schedule = scheduler.schedule()
            assert scheduler.strategy is not None
            assert is_feasible(schedule)
            assert sorted(task.id for task in schedule.tasks()) == [task.id for task in tasks]

    def test_larger_instances_are_feasible(self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]) -> None:
        specs = [(float(3 + (7 * i) % 11), float(40 + (13 * i) % 37)) for i in range(14)]
        tasks = tasks_factory(*specs)
        for border in (None, 0.0, 4.0):
            schedule = build_with_primary_then_heuristics(tasks, machines_factory(4), border)
            assert is_feasible(schedule)
            assert len(schedule.tasks()) == len(tasks)

    def test_zero_machines(self, tasks_factory: Callable[..., list[Task]]) -> None:
        schedule = build_with_primary_then_heuristics(tasks_factory((1, 10)), [])
        assert len(schedule) == 0
        assert not schedule.optimal


class TestSchedulingService:
    """Test SchedulingService."""

    def test_default_config_runs_fallback_chain(
        self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        result = SchedulingService(tasks_factory((10, 100)), machines_factory(1)).schedule()
        assert result.strategy == "primary"
        assert result.optimal
        assert result.warnings == []

    def test_selected_algorithm(
        self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        config = SchedulingConfig(algorithm=AlgorithmConfig(type=AlgorithmType.EXACT))
        result = SchedulingService(tasks_factory((10, 100)), machines_factory(1), config).schedule()
        assert result.strategy == "exact"
        assert result.schedule is not None
        assert result.schedule.start_times() == [90]

    def test_infeasible_result_becomes_a_warning(self, tasks_factory: Callable[..., list[Task]]) -> None:
        config = SchedulingConfig(algorithm=AlgorithmConfig(type=AlgorithmType.PRIMARY))
        result = SchedulingService(tasks_factory((1, 10)), [], config).schedule()
        assert result.schedule is None
        assert not result.optimal
        assert result.warnings == ["Scheduling failed: no machines available"]

    def test_start_before_epoch_is_reported(
        self, tasks_factory: Callable[..., list[Task]], machines_factory: Callable[[int], list[Machine]]
    ) -> None:
        tasks = tasks_factory((100, 1000), (100, 1000), (100, 1000))
        config = SchedulingConfig(
            algorithm=AlgorithmConfig(type=AlgorithmType.EXACT), epoch=850
        )
        result = SchedulingService(tasks, machines_factory(2), config).schedule()
        assert result.schedule is not None
        assert len(result.warnings) == 1
        assert "starts at 800" in result.warnings[0]
