"""Error factory for creating ScaffolderErrors by code."""

from typing import Any

from .errors import ScaffolderError
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates ScaffolderErrors from registered templates."""

    def __init__(self, registry: ErrorRegistry | None = None):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
        """
        self.registry = registry or ErrorRegistry()

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: ScaffolderError | None = None,
        **kwargs: Any,
    ) -> ScaffolderError:
        """Create ScaffolderError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional underlying ScaffolderError
            **kwargs: Additional context variables

        Returns:
            ScaffolderError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context, cause=cause)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> ScaffolderError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        ScaffolderError instance
    """
    return get_error_factory().create(code, context)
