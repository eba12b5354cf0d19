"""Scaffolder logging - colored or JSON logging for template runs."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from .logger import LogConfig, RunLogger, ScaffolderLogger

__all__ = [
    # Logger classes
    "ScaffolderLogger",
    "RunLogger",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "ORANGE",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
