"""High-level scheduling service."""

from collections.abc import Iterable

from slacksched.logger import get_logger

from .algorithms import create_algorithm
from .config import SchedulingConfig
from .core import Infeasible, Machine, SchedulingResult, Task
from .protocols import SchedulingAlgorithm
from .validator import check_feasibility

logger = get_logger()


class SchedulingService:
    """Run the configured algorithm and check its result.

    The schedule is checked against task deadlines and against the configured epoch:
    a machine starting before the epoch is reported as a warning, since no algorithm
    here looks at the horizon.
    """

    def __init__(
        self,
        tasks: Iterable[Task],
        machines: Iterable[Machine],
        config: SchedulingConfig | None = None,
    ):
        """Initialize scheduling service.

        Args:
            tasks: Tasks to schedule
            machines: Available machines
            config: Optional scheduling configuration (algorithm, borders, epoch)
        """
        self.tasks = list(tasks)
        self.machines = list(machines)
        self.config = config or SchedulingConfig()

    def schedule(self) -> SchedulingResult:
        """Schedule all tasks.

        Returns:
            SchedulingResult with the schedule, the winning strategy and warnings
        """
        algorithm_type = self.config.algorithm.type
        algorithm: SchedulingAlgorithm = create_algorithm(
            algorithm_type, self.tasks, self.machines, config=self.config
        )
        outcome = algorithm.schedule()
        strategy = getattr(algorithm, "strategy", None) or algorithm_type.value

        if isinstance(outcome, Infeasible):
            logger.changes(f"{strategy}: no schedule ({outcome.reason})")
            return SchedulingResult(
                schedule=None,
                strategy=strategy,
                warnings=[f"Scheduling failed: {outcome.reason}"],
            )

        warnings = [
            violation.message
            for violation in check_feasibility(outcome, not_before=self.config.epoch)
        ]
        for warning in warnings:
            logger.warning(warning)
        return SchedulingResult(schedule=outcome, strategy=strategy, warnings=warnings)
