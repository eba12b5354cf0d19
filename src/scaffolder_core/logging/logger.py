"""Scaffolder logger - colored or JSON logging for template runs."""

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from scaffolder_core.logging.colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
)
from scaffolder_core.types import ExecutionStrategyKind, LogFormat, LogLevel


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stdout)

    def __post_init__(self) -> None:
        """Initialize default components if not provided."""
        if not self.components:
            self.components = {
                "action": True,
                "params": True,
                "engine": True,
                "relocate": True,
            }


class ScaffolderLogger:
    """Main logger facade. Creates run-scoped loggers."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger with configuration.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()
        self._level_order = {
            LogLevel.DEBUG: 0,
            LogLevel.INFO: 1,
            LogLevel.WARN: 2,
            LogLevel.ERROR: 3,
        }

    def run(self, run_id: str) -> "RunLogger":
        """Get a logger scoped to one cookiecutter run.

        Args:
            run_id: Run identifier (usually the workspace directory name)

        Returns:
            RunLogger instance
        """
        return RunLogger(self, run_id)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, "action", message, context or None)

    def _should_log(self, level: LogLevel) -> bool:
        return self._level_order.get(level, 0) >= self._level_order.get(self.config.level, 1)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Internal logging method.

        Args:
            level: Log level
            component: Component name (action, params, engine, relocate)
            message: Log message
            context: Additional context data
        """
        if not self._should_log(level):
            return

        if not self.config.components.get(component, True):
            return

        if self.config.format == LogFormat.JSON:
            self._log_json(level, component, message, context)
        else:
            self._log_colored(level, component, message, context)

    def _log_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        if context:
            log_entry.update(context)

        print(json.dumps(log_entry, default=str), file=self.config.output)

    def _log_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level_colors = {
            LogLevel.DEBUG: LIGHT_BLUE,
            LogLevel.INFO: CYAN,
            LogLevel.WARN: YELLOW,
            LogLevel.ERROR: RED,
        }

        color = level_colors.get(level, RESET)
        component_color = {
            "action": MAGENTA,
            "params": CYAN,
            "engine": ORANGE,
            "relocate": GREEN,
        }.get(component, RESET)

        # Format: [COMPONENT] message
        output = f"{component_color}[{component.upper()}]{RESET} {color}{message}{RESET}"

        if context and self.config.show_context:
            context_str = str(context)
            if len(context_str) > self.config.truncate_at:
                context_str = context_str[: self.config.truncate_at] + "..."
            output += f" {LIGHT_BLUE}{context_str}{RESET}"

        print(output, file=self.config.output)


class RunLogger:
    """Logger for the stages of a single cookiecutter run."""

    def __init__(self, parent: ScaffolderLogger, run_id: str):
        """Initialize run logger.

        Args:
            parent: Parent ScaffolderLogger instance
            run_id: Run identifier
        """
        self.parent = parent
        self.run_id = run_id

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        context = {"run_id": self.run_id, "event": event}
        context.update(extra)
        return context

    def started(self, template_dir: str) -> None:
        """Log run start."""
        self.parent._log(
            LogLevel.INFO,
            "action",
            f"Run '{self.run_id}' started",
            self._context("run_started", template_dir=template_dir),
        )

    def parameters_merged(self, keys: list[str]) -> None:
        """Log the merged parameter keys written back into the template."""
        self.parent._log(
            LogLevel.DEBUG,
            "params",
            f"Merged {len(keys)} template parameters",
            self._context("parameters_merged", keys=keys),
        )

    def strategy_selected(self, kind: ExecutionStrategyKind, image_name: str | None) -> None:
        """Log which execution strategy was chosen."""
        if kind == ExecutionStrategyKind.CONTAINERIZED:
            message = f"cookiecutter not found locally, running in container '{image_name}'"
            context = self._context("strategy_selected", strategy=kind.value, image=image_name)
        else:
            message = "Running local cookiecutter"
            context = self._context("strategy_selected", strategy=kind.value)
        self.parent._log(LogLevel.INFO, "engine", message, context)

    def engine_completed(self, duration_ms: int) -> None:
        duration_s = duration_ms / 1000
        self.parent._log(
            LogLevel.INFO,
            "engine",
            f"cookiecutter finished ({duration_s:.2f}s)",
            self._context("engine_completed", duration_ms=duration_ms),
        )

    def relocated(self, generated: str, result_dir: str) -> None:
        self.parent._log(
            LogLevel.INFO,
            "relocate",
            f"Moved '{generated}' to result",
            self._context("relocated", generated=generated, result_dir=result_dir),
        )

    def completed(self, duration_ms: int) -> None:
        """Log run completion.

        Args:
            duration_ms: Execution duration in milliseconds
        """
        duration_s = duration_ms / 1000
        self.parent._log(
            LogLevel.INFO,
            "action",
            f"Run '{self.run_id}' completed ({duration_s:.2f}s) ✓",
            self._context("run_completed", duration_ms=duration_ms),
        )

    def failed(self, error: BaseException, duration_ms: int) -> None:
        """Log run failure.

        Args:
            error: Exception that caused failure
            duration_ms: Execution duration in milliseconds
        """
        duration_s = duration_ms / 1000
        self.parent._log(
            LogLevel.ERROR,
            "action",
            f"Run '{self.run_id}' failed ({duration_s:.2f}s): {error}",
            self._context(
                "run_failed",
                duration_ms=duration_ms,
                error=str(error),
                error_type=type(error).__name__,
            ),
        )
