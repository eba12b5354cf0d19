"""The ``fetch:cookiecutter`` action.

Downloads a template into a scratch workspace, renders it with cookiecutter
and copies the rendered tree into the task workspace.
"""

import asyncio
import os
import shutil
import sys
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scaffolder_core.config import ScaffolderConfig, load_config
from scaffolder_core.container import ContainerRunner, DockerContainerRunner
from scaffolder_core.cookiecutter import IMAGE_NAME_KEY, CookiecutterRunner
from scaffolder_core.errors import ScaffolderError, create_error
from scaffolder_core.logging import LogConfig, ScaffolderLogger
from scaffolder_core.process import CommandProbe, CommandRunner, command_exists, run_command

from .context import ActionContext
from .fetch import TreeReader, fetch_contents, is_within_directory

ACTION_ID = "fetch:cookiecutter"
COPY_WITHOUT_RENDER_KEY = "_copy_without_render"
EXTENSIONS_KEY = "_extensions"


class FetchCookiecutterInput(BaseModel):
    """Input accepted by ``fetch:cookiecutter``."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(
        title="Fetch URL",
        description="Relative path or absolute URL pointing to the directory tree to fetch",
    )
    target_path: str | None = Field(
        default=None,
        alias="targetPath",
        title="Target Path",
        description="Target path within the working directory to download the contents to.",
    )
    values: dict[str, Any] = Field(
        default_factory=dict,
        title="Template Values",
        description="Values to pass on to cookiecutter for templating",
    )
    copy_without_render: list[str] | None = Field(
        default=None,
        alias="copyWithoutRender",
        title="Copy Without Render",
        description="Avoid rendering directories and files in the template",
    )
    extensions: list[str] | None = Field(
        default=None,
        title="Template Extensions",
        description=(
            "Jinja2 extensions to add filters, tests, globals or extend the parser. "
            "Extensions must be installed in the container or on the host where "
            "Cookiecutter executes."
        ),
    )
    image_name: str | None = Field(
        default=None,
        alias="imageName",
        title="Cookiecutter Docker image",
        description=(
            "Custom Docker image to run cookiecutter, overriding the configured default. "
            "Used only when a local cookiecutter is not found."
        ),
    )


def parse_input(raw: dict[str, Any]) -> FetchCookiecutterInput:
    """Validate raw action input.

    Raises:
        ScaffolderError: INPUT_INVALID for malformed input
    """
    for key in ("copyWithoutRender", "extensions"):
        value = raw.get(key)
        if value is not None and not isinstance(value, list):
            raise create_error("INPUT_INVALID", field=key, expected="an Array")

    try:
        return FetchCookiecutterInput.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "input"
        raise create_error(
            "INPUT_INVALID",
            field=field,
            expected="valid",
            detail=str(e),
        ) from e


def build_values(params: FetchCookiecutterInput) -> dict[str, Any]:
    """Template values plus the reserved keys cookiecutter and the runner read.

    Reserved keys for inputs that were not provided are left out so they do
    not override the template's own defaults.
    """
    values = dict(params.values)
    reserved = {
        COPY_WITHOUT_RENDER_KEY: params.copy_without_render,
        EXTENSIONS_KEY: params.extensions,
        IMAGE_NAME_KEY: params.image_name,
    }
    values.update({key: value for key, value in reserved.items() if value is not None})
    return values


def resolve_output_path(workspace_path: str | Path, target_path: str | None) -> Path:
    """Resolve ``target_path`` against the workspace, refusing escapes.

    Raises:
        ScaffolderError: TARGET_PATH_OUTSIDE_WORKSPACE
    """
    workspace = os.path.abspath(workspace_path)
    output_path = os.path.abspath(os.path.join(workspace, target_path or "./"))
    if not is_within_directory(output_path, workspace):
        raise create_error(
            "TARGET_PATH_OUTSIDE_WORKSPACE",
            target_path=target_path,
            workspace_path=workspace,
        )
    return Path(output_path)


def copy_result(result_dir: Path, output_path: Path) -> None:
    """Copy the rendered tree into ``output_path``, merging with existing content."""
    if result_dir.is_dir():
        shutil.copytree(result_dir, output_path, symlinks=True, dirs_exist_ok=True)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(result_dir, output_path)


class FetchCookiecutterAction:
    """Fetch a template and render it with cookiecutter into the task workspace."""

    id = ACTION_ID
    description = (
        "Downloads a template from the given URL into the workspace, and runs cookiecutter on it."
    )

    def __init__(
        self,
        *,
        container_runner: ContainerRunner,
        reader: TreeReader | None = None,
        config: ScaffolderConfig | None = None,
        command_runner: CommandRunner = run_command,
        command_probe: CommandProbe = command_exists,
        logger: ScaffolderLogger | None = None,
    ):
        """Initialize the action.

        Args:
            container_runner: Used when cookiecutter is not installed locally
            reader: Reader for remote template locations
            config: Scaffolder configuration
            command_runner: Runs the local cookiecutter executable
            command_probe: Reports whether an executable is available
            logger: Logger for action and run progress; the context's logger when omitted
        """
        self._container_runner = container_runner
        self._reader = reader
        self._config = config
        self._command_runner = command_runner
        self._command_probe = command_probe
        self._logger = logger

    @staticmethod
    def schema() -> dict[str, Any]:
        """JSON schema of the action input, keyed by the wire names."""
        return {"input": FetchCookiecutterInput.model_json_schema(by_alias=True)}

    async def handler(self, ctx: ActionContext) -> Path:
        """Run the action.

        Args:
            ctx: Action context with the raw input and task workspace

        Returns:
            The directory the rendered template was copied into

        Raises:
            ScaffolderError: For invalid input, fetch failures and engine failures,
                tagged with the action id
        """
        try:
            return await self._handle(ctx)
        except ScaffolderError as e:
            raise e.with_context(action_id=self.id) from e

    async def _handle(self, ctx: ActionContext) -> Path:
        params = parse_input(ctx.input)
        output_path = resolve_output_path(ctx.workspace_path, params.target_path)
        config = self._config or ScaffolderConfig()
        logger = self._logger or ctx.logger

        logger.info("Fetching and then templating using cookiecutter", url=params.url)
        work_dir = await ctx.create_temporary_directory()
        template_contents_dir = work_dir / "template" / config.cookiecutter.contents_dir

        await fetch_contents(
            fetch_url=params.url,
            output_path=template_contents_dir,
            base_url=ctx.base_url,
            reader=self._reader,
        )

        runner = CookiecutterRunner(
            container_runner=self._container_runner,
            command_runner=self._command_runner,
            command_probe=self._command_probe,
            config=config,
            logger=logger,
        )
        result_dir = await runner.run(
            workspace_path=work_dir,
            values=build_values(params),
            log_stream=ctx.log_stream,
        )

        await asyncio.to_thread(copy_result, result_dir, output_path)
        return output_path


def create_fetch_cookiecutter_action(
    *,
    container_runner: ContainerRunner | None = None,
    reader: TreeReader | None = None,
    config: ScaffolderConfig | None = None,
    log_output: TextIO | None = None,
) -> FetchCookiecutterAction:
    """Build the ``fetch:cookiecutter`` action.

    Configuration is loaded from the usual locations when not given. Without an
    explicit container runner the fallback path uses the docker CLI. The
    action logs with the configured level and format to ``log_output``
    (stdout by default).
    """
    config = config or load_config()
    if container_runner is None:
        container_runner = DockerContainerRunner(docker_command=config.container.docker_command)
    logger = ScaffolderLogger(
        LogConfig(
            level=config.logging.level,
            format=config.logging.format,
            output=log_output or sys.stdout,
        )
    )
    return FetchCookiecutterAction(
        container_runner=container_runner,
        reader=reader,
        config=config,
        logger=logger,
    )
