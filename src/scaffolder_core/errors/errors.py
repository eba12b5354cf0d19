"""Scaffolder error types."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    VALIDATION = "VALIDATION"
    TEMPLATE = "TEMPLATE"
    EXECUTION = "EXECUTION"
    SYSTEM = "SYSTEM"


@dataclass
class ScaffolderError(Exception):
    """Structured error with context. Base exception for all scaffolder errors."""

    # Identity
    code: str  # e.g., "NO_OUTPUT_GENERATED"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    retryable: bool = False
    http_status: int = 500
    action_id: str | None = None  # Which action failed
    run_id: str | None = None  # Which run failed

    cause: "ScaffolderError | None" = None

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail and self.detail != self.message:
            return f"{self.message}: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "retryable": self.retryable,
            "action_id": self.action_id,
            "run_id": self.run_id,
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }

    def with_context(
        self,
        action_id: str | None = None,
        run_id: str | None = None,
    ) -> "ScaffolderError":
        """Return copy with additional context.

        Args:
            action_id: Optional action identifier
            run_id: Optional run identifier

        Returns:
            New ScaffolderError instance with updated context
        """
        return ScaffolderError(
            code=self.code,
            category=self.category,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
            retryable=self.retryable,
            http_status=self.http_status,
            action_id=action_id or self.action_id,
            run_id=run_id or self.run_id,
            cause=self.cause,
            timestamp=self.timestamp,
        )


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Fetch action input {field} must be an Array"
    detail_template: str | None = None
    suggestion_template: str | None = None
    default_retryable: bool = False
    default_http_status: int = 500
