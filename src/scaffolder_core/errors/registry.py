"""Error registry for creating errors from templates."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, ScaffolderError


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code.

        Args:
            code: Error code to look up

        Returns:
            ErrorTemplate if found, None otherwise
        """
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """List all registered error codes."""
        return list(self._templates.keys())

    def register(self, template: ErrorTemplate) -> None:
        """Register (or replace) a template."""
        self._templates[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: ScaffolderError | None = None,
    ) -> ScaffolderError:
        """Create error instance from template + context.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional cause error

        Returns:
            ScaffolderError instance

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context)
        # An explicit "detail" in the context replaces the template's detail
        detail = context.get("detail") or self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return ScaffolderError(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            retryable=template.default_retryable,
            http_status=template.default_http_status,
            action_id=context.get("action_id"),
            run_id=context.get("run_id"),
            cause=cause,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
    ) -> str | None:
        """Safe string interpolation.

        Args:
            template: Template string with {var} placeholders
            context: Context variables

        Returns:
            Interpolated string or None if template is None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            # Missing context variable - return template as-is
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # VALIDATION Errors
        self._templates["INPUT_INVALID"] = ErrorTemplate(
            code="INPUT_INVALID",
            category=ErrorCategory.VALIDATION,
            message_template="Fetch action input {field} must be {expected}",
            detail_template="The action input does not match the expected schema",
            suggestion_template="Check the action input schema and provide valid data",
            default_retryable=False,
            default_http_status=400,
        )

        self._templates["TARGET_PATH_OUTSIDE_WORKSPACE"] = ErrorTemplate(
            code="TARGET_PATH_OUTSIDE_WORKSPACE",
            category=ErrorCategory.VALIDATION,
            message_template=(
                "Fetch action targetPath may not specify a path outside the working directory"
            ),
            detail_template="'{target_path}' resolves outside of '{workspace_path}'",
            suggestion_template="Use a target path relative to the workspace root",
            default_retryable=False,
            default_http_status=400,
        )

        self._templates["PATH_OUTSIDE_BASE"] = ErrorTemplate(
            code="PATH_OUTSIDE_BASE",
            category=ErrorCategory.VALIDATION,
            message_template=(
                "Relative path is not allowed to refer to a directory outside its parent"
            ),
            detail_template="'{path}' resolves outside of '{base}'",
            suggestion_template="Keep template locations inside the registering directory",
            default_retryable=False,
            default_http_status=400,
        )

        # TEMPLATE Errors
        self._templates["TEMPLATE_DEFAULTS_INVALID"] = ErrorTemplate(
            code="TEMPLATE_DEFAULTS_INVALID",
            category=ErrorCategory.TEMPLATE,
            message_template="Invalid template defaults in '{path}'",
            detail_template="The template parameter file must contain a JSON object",
            suggestion_template="Fix the JSON in the template's parameter file",
            default_retryable=False,
            default_http_status=422,
        )

        self._templates["TEMPLATE_FETCH_FAILED"] = ErrorTemplate(
            code="TEMPLATE_FETCH_FAILED",
            category=ErrorCategory.TEMPLATE,
            message_template="Failed to fetch template from '{url}'",
            detail_template="The template source could not be read",
            suggestion_template="Check that the template URL points to an existing directory",
            default_retryable=False,
            default_http_status=404,
        )

        # EXECUTION Errors
        self._templates["ENGINE_NOT_STARTED"] = ErrorTemplate(
            code="ENGINE_NOT_STARTED",
            category=ErrorCategory.EXECUTION,
            message_template="Could not start '{command}'",
            detail_template="The templating engine process could not be spawned",
            suggestion_template="Check that the executable is installed and on PATH",
            default_retryable=False,
            default_http_status=500,
        )

        self._templates["ENGINE_FAILED"] = ErrorTemplate(
            code="ENGINE_FAILED",
            category=ErrorCategory.EXECUTION,
            message_template="'{command}' failed ({strategy})",
            detail_template="The templating engine exited with a failure status",
            suggestion_template="Check the run log for the engine output",
            default_retryable=False,
            default_http_status=500,
        )

        self._templates["NO_OUTPUT_GENERATED"] = ErrorTemplate(
            code="NO_OUTPUT_GENERATED",
            category=ErrorCategory.EXECUTION,
            message_template="No data generated by cookiecutter",
            detail_template="'{intermediate_dir}' is empty after the engine run",
            suggestion_template="Check that the template renders a top-level directory",
            default_retryable=False,
            default_http_status=500,
        )

        self._templates["MULTIPLE_OUTPUTS_GENERATED"] = ErrorTemplate(
            code="MULTIPLE_OUTPUTS_GENERATED",
            category=ErrorCategory.EXECUTION,
            message_template="Cookiecutter generated {count} top-level entries, expected 1",
            detail_template="Entries: {entries}",
            suggestion_template="Make the template render into a single top-level directory",
            default_retryable=False,
            default_http_status=500,
        )

        self._templates["RESULT_EXISTS"] = ErrorTemplate(
            code="RESULT_EXISTS",
            category=ErrorCategory.EXECUTION,
            message_template="Result directory '{result_dir}' already exists",
            detail_template="Each run needs a fresh workspace",
            suggestion_template="Run in a newly created workspace directory",
            default_retryable=False,
            default_http_status=409,
        )

        self._templates["INTERMEDIATE_NOT_EMPTY"] = ErrorTemplate(
            code="INTERMEDIATE_NOT_EMPTY",
            category=ErrorCategory.EXECUTION,
            message_template="Intermediate directory '{intermediate_dir}' is not empty",
            detail_template="Entries: {entries}",
            suggestion_template="Run in a newly created workspace directory",
            default_retryable=False,
            default_http_status=409,
        )

        # SYSTEM Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.SYSTEM,
            message_template="Invalid configuration",
            detail_template="The scaffolder configuration is invalid",
            suggestion_template="Check the configuration file and fix errors",
            default_retryable=False,
            default_http_status=500,
        )
