"""Docker CLI backed container runner."""

import logging
import os
from collections.abc import Sequence

from scaffolder_core.process import CommandRunner, run_command
from scaffolder_core.types import LogSink

logger = logging.getLogger(__name__)


class DockerContainerRunner:
    """Run containers through the ``docker`` command line client.

    The container runs as the calling user so files written to bind mounts
    stay owned by that user.
    """

    def __init__(
        self,
        docker_command: str = "docker",
        command_runner: CommandRunner = run_command,
        run_as_current_user: bool = True,
    ):
        """Initialize the runner.

        Args:
            docker_command: Docker client executable
            command_runner: Process runner used to invoke the client
            run_as_current_user: Pass ``--user uid:gid`` where the platform has uids
        """
        self.docker_command = docker_command
        self._command_runner = command_runner
        self._run_as_current_user = run_as_current_user

    def build_args(
        self,
        *,
        image_name: str,
        command: str,
        args: Sequence[str],
        mount_dirs: dict[str, str],
        working_dir: str,
        env_vars: dict[str, str],
    ) -> list[str]:
        """Build the ``docker run`` argument list."""
        docker_args = ["run", "--rm"]

        for host_dir, container_dir in mount_dirs.items():
            docker_args.extend(["--volume", f"{os.path.realpath(host_dir)}:{container_dir}"])

        docker_args.extend(["--workdir", working_dir])

        for name, value in env_vars.items():
            docker_args.extend(["--env", f"{name}={value}"])

        if self._run_as_current_user and hasattr(os, "getuid"):
            docker_args.extend(["--user", f"{os.getuid()}:{os.getgid()}"])

        docker_args.extend(["--entrypoint", command, image_name])
        docker_args.extend(args)
        return docker_args

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
        docker_args = self.build_args(
            image_name=image_name,
            command=command,
            args=args,
            mount_dirs=mount_dirs,
            working_dir=working_dir,
            env_vars=env_vars,
        )
        logger.debug(f"Starting container {image_name} with mounts {mount_dirs}")
        await self._command_runner(self.docker_command, docker_args, log_stream)
