"""Shared enumerations for the scaffolder."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class ExecutionStrategyKind(str, Enum):
    """Where the templating engine runs for a single invocation."""

    LOCAL_BINARY = "local_binary"
    CONTAINERIZED = "containerized"
