"""Scaffolder configuration - Config loading and models."""

from .loader import (
    ConfigLoader,
    get_config_loader,
    load_config,
    resolve_env_vars,
)
from .models import (
    ContainerConfig,
    CookiecutterConfig,
    LoggingConfig,
    ScaffolderConfig,
)

__all__ = [
    # Config models
    "ScaffolderConfig",
    "CookiecutterConfig",
    "ContainerConfig",
    "LoggingConfig",
    # Loader
    "ConfigLoader",
    "get_config_loader",
    "load_config",
    "resolve_env_vars",
]
