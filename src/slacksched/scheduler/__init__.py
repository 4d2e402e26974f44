"""Scheduler package - identical parallel machines with deadlines.

Every algorithm maximizes the ascending-sorted vector of machine start times
(machines start as late as possible) subject to all deadlines.

Main entry points:
- SchedulingService: configured algorithm plus feasibility warnings
- build_with_primary_then_heuristics: certified construction with heuristic fallback
- build_optimal_schedule: exact branch-and-bound search
- build_schedule: list-scheduling heuristic

Configuration:
- SchedulingConfig: algorithm selection, borders and epoch
- AlgorithmType: available algorithms
"""

# Algorithms
from .algorithms import (
    BranchAndBoundScheduler,
    CombinatorialScheduler,
    EngagingHeuristicScheduler,
    LatestMachineHeuristicScheduler,
    ListScheduler,
    MainHeuristicScheduler,
    PrimaryScheduler,
    PrimaryThenHeuristicsScheduler,
    create_algorithm,
)

# Function entry points
from .builders import (
    build_optimal_schedule,
    build_schedule,
    build_with_primary_then_heuristics,
    combinatorial_construct,
    heuristic_strategy_1,
    heuristic_strategy_2,
    heuristic_strategy_3,
    primary_construct,
)

# Configuration
from .config import AlgorithmConfig, AlgorithmType, SchedulingConfig

# Core dataclasses
from .core import (
    IDLE,
    Infeasible,
    Machine,
    MachineSchedule,
    Schedule,
    SchedulingResult,
    Task,
    compare_start_times,
)

# Protocols
from .protocols import SchedulingAlgorithm

# High-level service
from .service import SchedulingService

# Feasibility checks
from .validator import Violation, check_feasibility, is_feasible

__all__ = [
    # Core dataclasses
    "IDLE",
    "Task",
    "Machine",
    "MachineSchedule",
    "Schedule",
    "Infeasible",
    "SchedulingResult",
    "compare_start_times",
    # Configuration
    "SchedulingConfig",
    "AlgorithmConfig",
    "AlgorithmType",
    # Protocols
    "SchedulingAlgorithm",
    # Algorithms
    "BranchAndBoundScheduler",
    "CombinatorialScheduler",
    "EngagingHeuristicScheduler",
    "LatestMachineHeuristicScheduler",
    "ListScheduler",
    "MainHeuristicScheduler",
    "PrimaryScheduler",
    "PrimaryThenHeuristicsScheduler",
    "create_algorithm",
    # Function entry points
    "build_schedule",
    "build_optimal_schedule",
    "build_with_primary_then_heuristics",
    "primary_construct",
    "combinatorial_construct",
    "heuristic_strategy_1",
    "heuristic_strategy_2",
    "heuristic_strategy_3",
    # Service
    "SchedulingService",
    # Validation
    "Violation",
    "check_feasibility",
    "is_feasible",
]
