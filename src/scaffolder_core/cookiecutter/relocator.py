"""Move the engine's single output tree into the run's result directory."""

import errno
import logging
import os
import shutil
import uuid
from pathlib import Path

from scaffolder_core.errors import create_error

logger = logging.getLogger(__name__)


def find_generated_entry(intermediate_dir: str | Path) -> Path:
    """Return the single top-level entry cookiecutter rendered.

    Raises:
        ScaffolderError: NO_OUTPUT_GENERATED if the directory is empty,
            MULTIPLE_OUTPUTS_GENERATED if it holds more than one entry
    """
    intermediate_dir = Path(intermediate_dir)
    entries = sorted(os.listdir(intermediate_dir))

    if not entries:
        raise create_error("NO_OUTPUT_GENERATED", intermediate_dir=str(intermediate_dir))
    if len(entries) > 1:
        raise create_error(
            "MULTIPLE_OUTPUTS_GENERATED",
            count=len(entries),
            entries=", ".join(entries),
        )
    return intermediate_dir / entries[0]


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _move_across_devices(source: Path, destination: Path) -> None:
    """Copy into a staging sibling, rename it into place, then drop the source."""
    staging = destination.with_name(f".{destination.name}.{uuid.uuid4().hex}.partial")
    try:
        if source.is_dir() and not source.is_symlink():
            shutil.copytree(source, staging, symlinks=True)
        else:
            shutil.copy2(source, staging, follow_symlinks=False)
        os.rename(staging, destination)
    except BaseException:
        if staging.exists() or staging.is_symlink():
            _remove(staging)
        raise

    _remove(source)


def relocate(intermediate_dir: str | Path, result_dir: str | Path) -> Path:
    """Move the single generated entry of ``intermediate_dir`` to ``result_dir``.

    A plain rename is used when both paths share a filesystem. Across devices
    the tree is copied to a staging path first, so ``result_dir`` only ever
    appears complete.

    Args:
        intermediate_dir: Directory the engine rendered into
        result_dir: Destination; must not exist yet

    Returns:
        The original path of the generated entry

    Raises:
        ScaffolderError: If the engine output is missing or ambiguous, or
            ``result_dir`` already exists
    """
    result_dir = Path(result_dir)
    generated = find_generated_entry(intermediate_dir)

    if result_dir.exists() or result_dir.is_symlink():
        raise create_error("RESULT_EXISTS", result_dir=str(result_dir))

    try:
        os.rename(generated, result_dir)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        logger.debug(f"{generated} and {result_dir} are on different devices, copying")
        _move_across_devices(generated, result_dir)

    return generated
