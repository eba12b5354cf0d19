"""Scaffolder configuration loader."""

import os
import re
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from scaffolder_core.errors import create_error
from scaffolder_core.types import ValidationIssue, ValidationResult

from .models import ScaffolderConfig

CONFIG_PATH_ENV = "SCAFFOLDER_CONFIG_PATH"
LOCAL_CONFIG_FILE = "scaffolder-config.yaml"


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Args:
        value: String with potential env var references

    Returns:
        String with env vars resolved

    Raises:
        ScaffolderError: If required var not set
    """
    pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)  # default value or error message

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        elif operator == "?":
            error_msg = operand or f"Required environment variable {var_name} not set"
            raise create_error("CONFIG_INVALID", detail=error_msg)
        else:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Required environment variable {var_name} not set",
            )

    return re.sub(pattern, replacer, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    else:
        return data


class ConfigLoader:
    """Load and validate scaffolder configuration."""

    def __init__(self, logger: Any = None):
        """Initialize config loader.

        Args:
            logger: Optional ScaffolderLogger instance
        """
        self._config: ScaffolderConfig | None = None
        self._config_path: Path | None = None
        self._logger = logger

    @property
    def config_path(self) -> Path | None:
        return self._config_path

    def load(self, path: str | Path | None = None, use_defaults: bool = True) -> ScaffolderConfig:
        """Load configuration from file.

        Resolution order if path not specified:
        1. SCAFFOLDER_CONFIG_PATH environment variable
        2. ./scaffolder-config.yaml
        3. ~/.scaffolder/config.yaml
        4. If use_defaults=True and no file found, use default configuration

        Args:
            path: Optional path to config file
            use_defaults: If True, use default config when no file found

        Returns:
            Loaded ScaffolderConfig instance

        Raises:
            ScaffolderError: If file not found (when use_defaults=False) or invalid
        """
        if path is None:
            path = self._resolve_config_path()

        config_path = Path(path)

        if not config_path.exists():
            if use_defaults:
                if self._logger:
                    self._logger.info("No config file found, using default configuration")
                return self.load_defaults()
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration file not found: {config_path}",
            )

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Configuration root must be a mapping: {config_path}",
            )

        data = _resolve_env_vars_recursive(data)

        return self.load_from_dict(data, config_path)

    def load_defaults(self) -> ScaffolderConfig:
        """Load default configuration without a file."""
        return self.load_from_dict({})

    def load_from_dict(
        self, data: dict[str, Any], config_path: Path | None = None
    ) -> ScaffolderConfig:
        """Load configuration from dictionary.

        Args:
            data: Configuration dictionary
            config_path: Optional path to config file (for tracking)

        Returns:
            Loaded ScaffolderConfig instance

        Raises:
            ScaffolderError: If configuration is invalid
        """
        validation = self.validate(data)
        if not validation.valid:
            error_messages = [f"- {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )

        try:
            config = self._dict_to_config(data)
        except (TypeError, ValueError) as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
            ) from e

        self._config = config
        self._config_path = config_path

        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading.

        Args:
            data: Configuration dictionary

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        sections = {f.name: f.type for f in fields(ScaffolderConfig)}

        for key, value in data.items():
            if key not in sections:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )
                continue

            if not isinstance(value, dict):
                errors.append(
                    ValidationIssue(
                        path=key,
                        message=f"{key} must be a dictionary",
                        severity="error",
                    )
                )
                continue

            known = {f.name for f in fields(sections[key])}
            for option, option_value in value.items():
                if option not in known:
                    warnings.append(
                        ValidationIssue(
                            path=f"{key}.{option}",
                            message=f"Unknown configuration key: {key}.{option}",
                            severity="warning",
                        )
                    )
                elif not isinstance(option_value, str):
                    # Every leaf option is a string or a string-valued enum
                    errors.append(
                        ValidationIssue(
                            path=f"{key}.{option}",
                            message=f"{key}.{option} must be a string",
                            severity="error",
                        )
                    )

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def get(self) -> ScaffolderConfig:
        """Get current configuration.

        Raises:
            ScaffolderError: If configuration not loaded
        """
        if self._config is None:
            raise create_error("CONFIG_INVALID", detail="Configuration not loaded")
        return self._config

    def _resolve_config_path(self) -> Path:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path)

        local_path = Path(LOCAL_CONFIG_FILE)
        if local_path.exists():
            return local_path

        home_path = Path.home() / ".scaffolder" / "config.yaml"
        if home_path.exists():
            return home_path

        # Not found - use local path as default
        return local_path

    def _dict_to_config(self, data: dict[str, Any]) -> ScaffolderConfig:
        kwargs: dict[str, Any] = {}

        for field in fields(ScaffolderConfig):
            if field.name in data:
                kwargs[field.name] = self._convert_field(field.type, data[field.name])

        return ScaffolderConfig(**kwargs)

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert field value to appropriate type.

        Args:
            field_type: Expected field type
            value: Value to convert

        Returns:
            Converted value
        """
        if value is None:
            return None

        # Handle dataclasses
        if hasattr(field_type, "__dataclass_fields__"):
            if isinstance(value, dict):
                kwargs = {}
                for f in fields(field_type):
                    if f.name in value:
                        kwargs[f.name] = self._convert_field(f.type, value[f.name])
                return field_type(**kwargs)
            return value

        # Handle enums
        if hasattr(field_type, "__mro__") and any(
            base.__name__ == "Enum" for base in field_type.__mro__
        ):
            if isinstance(value, str):
                return field_type(value)
            return value

        return value


# Convenience singleton
_default_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get default config loader singleton."""
    global _default_loader  # noqa: PLW0603
    if _default_loader is None:
        _default_loader = ConfigLoader()
    return _default_loader


def load_config(path: str | Path | None = None) -> ScaffolderConfig:
    """Convenience function to load config.

    Args:
        path: Optional path to config file

    Returns:
        Loaded ScaffolderConfig instance
    """
    return get_config_loader().load(path)
