"""Slacksched: deadline scheduling on identical parallel machines."""

__version__ = "0.1.0"
