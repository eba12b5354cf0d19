"""Container execution for the cookiecutter fallback path."""

from .docker import DockerContainerRunner
from .runner import ContainerRunner

__all__ = ["ContainerRunner", "DockerContainerRunner"]
