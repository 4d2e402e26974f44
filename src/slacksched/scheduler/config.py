"""Configuration classes for the scheduling engine."""

from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_ADJUSTMENT_BORDER = 8.0
DEFAULT_COMBINATION_BORDER = 0.5


class AlgorithmType(str, Enum):
    """Available scheduling algorithms."""

    AUTO = "auto"  # primary -> completion -> combinatorial -> heuristics with merge
    LIST = "list"  # list-scheduling heuristic
    EXACT = "exact"  # branch-and-bound
    PRIMARY = "primary"  # primary constructor + completion pass
    COMBINATORIAL = "combinatorial"
    A21 = "a21"
    A21A = "a21a"
    A22 = "a22"
    A23 = "a23"


class AlgorithmConfig(BaseModel):
    """Configuration for algorithm selection."""

    type: AlgorithmType = AlgorithmType.AUTO


class SchedulingConfig(BaseModel):
    """Configuration for the scheduling engine."""

    algorithm: AlgorithmConfig = AlgorithmConfig()

    # Max spread between earliest and latest machine start before A2.1a repairs mid-build
    adjustment_border: float = Field(default=DEFAULT_ADJUSTMENT_BORDER, ge=0.0)

    # Suspected tasks may be enumerated while count <= combination_border * engaged machines
    combination_border: float = Field(default=DEFAULT_COMBINATION_BORDER, ge=0.0)

    # Timestamp that deadline offsets in input files are relative to
    epoch: float = 0.0
