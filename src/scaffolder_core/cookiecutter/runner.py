"""Cookiecutter run orchestration."""

import time
from pathlib import Path
from typing import Any

from scaffolder_core.config import ScaffolderConfig
from scaffolder_core.container import ContainerRunner
from scaffolder_core.errors import ScaffolderError
from scaffolder_core.logging import ScaffolderLogger
from scaffolder_core.process import CommandProbe, CommandRunner, command_exists, run_command
from scaffolder_core.types import LogSink

from .parameters import merge_parameters, split_reserved_values
from .relocator import relocate
from .strategy import ContainerizedStrategy, EngineInvocation, select_strategy
from .workspace import RunWorkspace


class CookiecutterRunner:
    """Run cookiecutter over ``<workspace>/template`` into ``<workspace>/result``.

    Each call owns the ``template``, ``intermediate`` and ``result`` directories
    under the workspace it is given; concurrent runs must use distinct
    workspaces.
    """

    def __init__(
        self,
        *,
        container_runner: ContainerRunner,
        command_runner: CommandRunner = run_command,
        command_probe: CommandProbe = command_exists,
        config: ScaffolderConfig | None = None,
        logger: ScaffolderLogger | None = None,
    ):
        """Initialize the runner.

        Args:
            container_runner: Used when cookiecutter is not installed locally
            command_runner: Runs the local cookiecutter executable
            command_probe: Reports whether an executable is available
            config: Scaffolder configuration; defaults are built per run when omitted
            logger: Logger for run progress
        """
        self._container_runner = container_runner
        self._command_runner = command_runner
        self._command_probe = command_probe
        self._config = config
        self._logger = logger or ScaffolderLogger()

    async def run(
        self,
        *,
        workspace_path: str | Path,
        values: dict[str, Any],
        log_stream: LogSink,
    ) -> Path:
        """Render the workspace's template with ``values``.

        Args:
            workspace_path: Workspace root containing ``template``
            values: Template values, optionally including ``imageName``
            log_stream: Sink receiving engine output

        Returns:
            The result directory

        Raises:
            ScaffolderError: If the engine fails or its output is invalid
            OSError: If the template defaults cannot be read
        """
        config = self._config or ScaffolderConfig()
        workspace = RunWorkspace(Path(workspace_path))
        run_log = self._logger.run(workspace.run_id)
        start = time.monotonic()

        run_log.started(str(workspace.template_dir))
        try:
            workspace.prepare()

            image_name, template_values = split_reserved_values(values)
            merged = merge_parameters(
                workspace.template_dir,
                template_values,
                parameter_file=config.cookiecutter.parameter_file,
            )
            run_log.parameters_merged(sorted(merged))

            strategy = select_strategy(
                image_name,
                container_runner=self._container_runner,
                config=config,
                probe=self._command_probe,
                command_runner=self._command_runner,
            )
            image = strategy.image_name if isinstance(strategy, ContainerizedStrategy) else None
            run_log.strategy_selected(strategy.kind, image)

            with workspace.result_guard():
                engine_start = time.monotonic()
                await strategy.run(
                    EngineInvocation(
                        template_dir=workspace.template_dir,
                        intermediate_dir=workspace.intermediate_dir,
                        log_stream=log_stream,
                    )
                )
                run_log.engine_completed(int((time.monotonic() - engine_start) * 1000))

                generated = relocate(workspace.intermediate_dir, workspace.result_dir)
                run_log.relocated(generated.name, str(workspace.result_dir))
        except ScaffolderError as e:
            run_log.failed(e, int((time.monotonic() - start) * 1000))
            raise e.with_context(run_id=workspace.run_id) from e
        except BaseException as e:
            run_log.failed(e, int((time.monotonic() - start) * 1000))
            raise

        run_log.completed(int((time.monotonic() - start) * 1000))
        return workspace.result_dir
