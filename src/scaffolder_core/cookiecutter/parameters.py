"""Template parameter merging.

Cookiecutter reads its variables from ``cookiecutter.json`` at the template
root. The merged parameters are written back to that file so the engine sees a
single source of truth.
"""

import json
import logging
from pathlib import Path
from typing import Any

from scaffolder_core.errors import create_error

logger = logging.getLogger(__name__)

PARAMETER_FILE = "cookiecutter.json"
IMAGE_NAME_KEY = "imageName"


def load_template_defaults(
    template_dir: str | Path, parameter_file: str = PARAMETER_FILE
) -> dict[str, Any]:
    """Read the template's default parameters.

    Args:
        template_dir: Template root directory
        parameter_file: Parameter file name under ``template_dir``

    Returns:
        The defaults, or an empty dict if the template has no parameter file

    Raises:
        OSError: If the file exists but cannot be read
        ScaffolderError: TEMPLATE_DEFAULTS_INVALID if it is not a JSON object
    """
    path = Path(template_dir) / parameter_file
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug(f"No {parameter_file} in {template_dir}, starting from empty defaults")
        return {}

    try:
        defaults = json.loads(content)
    except json.JSONDecodeError as e:
        raise create_error("TEMPLATE_DEFAULTS_INVALID", path=str(path), detail=str(e)) from e

    if not isinstance(defaults, dict):
        raise create_error(
            "TEMPLATE_DEFAULTS_INVALID",
            path=str(path),
            detail=f"Expected a JSON object, got {type(defaults).__name__}",
        )
    return defaults


def split_reserved_values(values: dict[str, Any]) -> tuple[str | None, dict[str, Any]]:
    """Separate the container image override from the template variables.

    Returns:
        ``(image_name, template_values)``; ``image_name`` never appears in
        ``template_values``

    Raises:
        ScaffolderError: INPUT_INVALID if the image override is not a string
    """
    template_values = dict(values)
    image_name = template_values.pop(IMAGE_NAME_KEY, None)
    if image_name is not None and not isinstance(image_name, str):
        raise create_error("INPUT_INVALID", field=IMAGE_NAME_KEY, expected="a string")
    return image_name or None, template_values


def merge_parameters(
    template_dir: str | Path,
    overrides: dict[str, Any],
    parameter_file: str = PARAMETER_FILE,
) -> dict[str, Any]:
    """Merge caller overrides over the template defaults and write them back.

    The merge is shallow: an override replaces the default value for its key
    wholesale.

    Args:
        template_dir: Template root directory
        overrides: Caller-supplied values, without the image override
        parameter_file: Parameter file name under ``template_dir``

    Returns:
        The merged parameters as written to the parameter file
    """
    merged = {**load_template_defaults(template_dir, parameter_file), **overrides}

    path = Path(template_dir) / parameter_file
    path.write_text(json.dumps(merged, indent=2), encoding="utf-8")
    return merged
