"""Container execution collaborator contract."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from scaffolder_core.types import LogSink


@runtime_checkable
class ContainerRunner(Protocol):
    """Runs a command inside a container image and waits for it to exit."""

    async def run_container(
        self,
        *,
        image_name: str,
        command: str,
        args: Sequence[str],
        mount_dirs: dict[str, str],
        working_dir: str,
        env_vars: dict[str, str],
        log_stream: LogSink,
    ) -> None:
        """Run ``command args`` in ``image_name``.

        Args:
            image_name: Image to run
            command: Command executed in the container
            args: Arguments passed to the command
            mount_dirs: Host directory -> container path bind mounts
            working_dir: Working directory inside the container
            env_vars: Environment variables set in the container
            log_stream: Sink receiving container output as it is produced

        Raises:
            Exception: If the container cannot be started or exits non-zero
        """
        ...
