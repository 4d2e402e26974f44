"""Protocol definitions for the scheduling engine."""

from typing import Protocol

from .core import Infeasible, Schedule


class SchedulingAlgorithm(Protocol):
    """Protocol for scheduling algorithms.

    Certifying constructors return Infeasible when they cannot certify a result;
    heuristics and the exact solver always return a Schedule.
    """

    def schedule(self) -> Schedule | Infeasible:
        """Run the algorithm.

        Returns:
            Schedule sorted by start time, or Infeasible
        """
        ...
