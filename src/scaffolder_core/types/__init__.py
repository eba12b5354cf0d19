"""Shared types for the scaffolder.

Import from here rather than submodules:
    from scaffolder_core.types import LogLevel, LogSink, ValidationResult
"""

from .enums import ExecutionStrategyKind, LogFormat, LogLevel
from .streams import LogSink
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "ExecutionStrategyKind",
    # Streams
    "LogSink",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
