"""Engine selection: run cookiecutter locally or inside a container.

The two strategies share one interface, ``run(invocation)``. Which one runs is
decided once per run by :func:`select_strategy`; a failure in the chosen
strategy is reported as-is and never triggers the other one.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from scaffolder_core.config import ScaffolderConfig
from scaffolder_core.container import ContainerRunner
from scaffolder_core.errors import ScaffolderError, create_error
from scaffolder_core.process import (
    CommandProbe,
    CommandRunner,
    command_exists,
    probe_command,
    run_command,
)
from scaffolder_core.types import ExecutionStrategyKind, LogSink


@dataclass(frozen=True)
class EngineInvocation:
    """Directories and log sink for one engine run."""

    template_dir: Path
    intermediate_dir: Path
    log_stream: LogSink


def cookiecutter_args(output_dir: str, input_dir: str) -> list[str]:
    """Non-interactive cookiecutter arguments rendering ``input_dir`` into ``output_dir``."""
    return ["--no-input", "-o", output_dir, input_dir, "--verbose"]


class ExecutionStrategy(ABC):
    """One way of running the templating engine."""

    kind: ExecutionStrategyKind
    command: str

    @abstractmethod
    async def _execute(self, invocation: EngineInvocation) -> None:
        """Run the engine against the invocation's directories."""

    async def run(self, invocation: EngineInvocation) -> None:
        """Run the engine, reporting collaborator failures as ENGINE_FAILED.

        Raises:
            ScaffolderError: If the engine could not be started or failed
        """
        try:
            await self._execute(invocation)
        except ScaffolderError:
            raise
        except Exception as e:
            raise create_error(
                "ENGINE_FAILED",
                command=self.command,
                strategy=self.kind.value,
                detail=str(e) or type(e).__name__,
            ) from e


@dataclass(frozen=True)
class LocalBinaryStrategy(ExecutionStrategy):
    """Run the locally installed cookiecutter executable."""

    command: str
    command_runner: CommandRunner = run_command
    kind: ExecutionStrategyKind = ExecutionStrategyKind.LOCAL_BINARY

    def args(self, invocation: EngineInvocation) -> list[str]:
        return cookiecutter_args(str(invocation.intermediate_dir), str(invocation.template_dir))

    async def _execute(self, invocation: EngineInvocation) -> None:
        await self.command_runner(self.command, self.args(invocation), invocation.log_stream)


@dataclass(frozen=True)
class ContainerizedStrategy(ExecutionStrategy):
    """Run cookiecutter inside a container with the run directories bind-mounted."""

    image_name: str
    command: str
    container_runner: ContainerRunner
    input_mount: str = "/input"
    output_mount: str = "/output"
    home: str = "/tmp"
    kind: ExecutionStrategyKind = ExecutionStrategyKind.CONTAINERIZED

    def args(self) -> list[str]:
        return cookiecutter_args(self.output_mount, self.input_mount)

    def mount_dirs(self, invocation: EngineInvocation) -> dict[str, str]:
        return {
            str(invocation.template_dir): self.input_mount,
            str(invocation.intermediate_dir): self.output_mount,
        }

    def env_vars(self) -> dict[str, str]:
        # Tools in the image write config and caches under $HOME; / is not writable
        return {"HOME": self.home}

    async def _execute(self, invocation: EngineInvocation) -> None:
        await self.container_runner.run_container(
            image_name=self.image_name,
            command=self.command,
            args=self.args(),
            mount_dirs=self.mount_dirs(invocation),
            working_dir=self.input_mount,
            env_vars=self.env_vars(),
            log_stream=invocation.log_stream,
        )


def select_strategy(
    image_name: str | None,
    *,
    container_runner: ContainerRunner,
    config: ScaffolderConfig | None = None,
    probe: CommandProbe = command_exists,
    command_runner: CommandRunner = run_command,
) -> ExecutionStrategy:
    """Pick the execution strategy for one run.

    The local executable wins whenever the probe finds it; otherwise the run
    falls back to the container image (``image_name`` or the configured default).

    Args:
        image_name: Optional container image override
        container_runner: Collaborator that runs containers
        config: Scaffolder configuration, defaults resolved at call time
        probe: Executable availability probe
        command_runner: Collaborator that runs local processes

    Returns:
        The strategy to run
    """
    config = config or ScaffolderConfig()
    command = config.cookiecutter.command

    if probe_command(probe, command):
        return LocalBinaryStrategy(command=command, command_runner=command_runner)

    container = config.container
    return ContainerizedStrategy(
        image_name=image_name or container.default_image,
        command=command,
        container_runner=container_runner,
        input_mount=container.input_mount,
        output_mount=container.output_mount,
        home=container.home,
    )
