"""Configuration file loader.

A config file is YAML with an optional ``scheduler`` section::

    scheduler:
      algorithm:
        type: auto
      adjustment_border: 8
      combination_border: 0.5
      epoch: 0
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .scheduler.config import SchedulingConfig


def load_config(config_path: Path | str) -> SchedulingConfig:
    """Load the scheduling configuration from a YAML file.

    Args:
        config_path: Path to the config file

    Returns:
        SchedulingConfig, with defaults for everything the file leaves out

    Raises:
        ConfigError: If the file is missing, not valid YAML, or fails validation
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open() as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return SchedulingConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    section = data.get("scheduler")
    if section is None:
        return SchedulingConfig()

    try:
        return SchedulingConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid scheduler section in {config_path}: {e}") from e
