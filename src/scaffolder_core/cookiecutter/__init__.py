"""Cookiecutter template execution: parameter merge, engine run, relocation."""

from .parameters import (
    IMAGE_NAME_KEY,
    PARAMETER_FILE,
    load_template_defaults,
    merge_parameters,
    split_reserved_values,
)
from .relocator import find_generated_entry, relocate
from .runner import CookiecutterRunner
from .strategy import (
    ContainerizedStrategy,
    EngineInvocation,
    ExecutionStrategy,
    LocalBinaryStrategy,
    cookiecutter_args,
    select_strategy,
)
from .workspace import RunWorkspace

__all__ = [
    "CookiecutterRunner",
    # Parameters
    "IMAGE_NAME_KEY",
    "PARAMETER_FILE",
    "load_template_defaults",
    "merge_parameters",
    "split_reserved_values",
    # Engine
    "EngineInvocation",
    "ExecutionStrategy",
    "LocalBinaryStrategy",
    "ContainerizedStrategy",
    "cookiecutter_args",
    "select_strategy",
    # Output
    "find_generated_entry",
    "relocate",
    "RunWorkspace",
]
