"""Command-line state shared between the global callback and commands."""

from __future__ import annotations

from pathlib import Path

from .config import load_config
from .scheduler.config import SchedulingConfig


class _Context:
    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.config: SchedulingConfig | None = None


_context = _Context()


def set_config_path(path: Path | None) -> None:
    """Remember the config path and drop any previously loaded config."""
    _context.config_path = path
    _context.config = None


def get_scheduling_config() -> SchedulingConfig:
    """Return the scheduling config, loading it on first use.

    Without a --config path the defaults are used.
    """
    if _context.config is None:
        path = _context.config_path
        _context.config = load_config(path) if path is not None else SchedulingConfig()
    return _context.config
