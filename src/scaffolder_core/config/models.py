"""Scaffolder configuration data models."""

from dataclasses import dataclass, field

from scaffolder_core.types import LogFormat, LogLevel


@dataclass
class CookiecutterConfig:
    """Templating engine configuration."""

    command: str = "cookiecutter"
    parameter_file: str = "cookiecutter.json"
    # Fetched templates land in this subdirectory so cookiecutter renders it as "contents"
    contents_dir: str = "{{cookiecutter and 'contents'}}"


@dataclass
class ContainerConfig:
    """Containerized fallback configuration."""

    default_image: str = "spotify/backstage-cookiecutter"
    input_mount: str = "/input"
    output_mount: str = "/output"
    home: str = "/tmp"
    docker_command: str = "docker"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED


@dataclass
class ScaffolderConfig:
    """Root configuration object."""

    cookiecutter: CookiecutterConfig = field(default_factory=CookiecutterConfig)
    container: ContainerConfig = field(default_factory=ContainerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
