"""Custom exceptions for slacksched.

Infeasibility is not an error: strategies return ``Infeasible`` for it.
"""


class SlackschedError(Exception):
    """Base exception for all slacksched errors."""

    pass


class ScheduleMismatchError(SlackschedError, ValueError):
    """Raised when two schedules with different machine counts are compared."""

    pass


class ParseError(SlackschedError):
    """Raised when a tasks or machines file is malformed."""

    pass


class ConfigError(SlackschedError):
    """Raised when a configuration file cannot be loaded."""

    pass
