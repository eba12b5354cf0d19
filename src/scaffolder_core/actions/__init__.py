"""Template actions."""

from .context import ActionContext
from .cookiecutter import (
    ACTION_ID,
    FetchCookiecutterAction,
    FetchCookiecutterInput,
    build_values,
    create_fetch_cookiecutter_action,
    parse_input,
    resolve_output_path,
)
from .fetch import (
    LocalDirectoryFetcher,
    TreeReader,
    fetch_contents,
    is_within_directory,
    resolve_safe_child_path,
)

__all__ = [
    "ActionContext",
    # fetch:cookiecutter
    "ACTION_ID",
    "FetchCookiecutterAction",
    "FetchCookiecutterInput",
    "build_values",
    "create_fetch_cookiecutter_action",
    "parse_input",
    "resolve_output_path",
    # Template retrieval
    "TreeReader",
    "LocalDirectoryFetcher",
    "fetch_contents",
    "is_within_directory",
    "resolve_safe_child_path",
]
