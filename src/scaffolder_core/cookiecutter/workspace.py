"""Per-run workspace layout."""

import logging
import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from scaffolder_core.errors import create_error

logger = logging.getLogger(__name__)

TEMPLATE_DIR = "template"
INTERMEDIATE_DIR = "intermediate"
RESULT_DIR = "result"


@dataclass(frozen=True)
class RunWorkspace:
    """The three sibling directories owned by one cookiecutter run.

    ``template`` holds the input tree, ``intermediate`` receives the engine
    output and ``result`` is created by moving that output. A run leaves either
    a complete ``result`` or none at all.
    """

    root: Path

    @property
    def template_dir(self) -> Path:
        return self.root / TEMPLATE_DIR

    @property
    def intermediate_dir(self) -> Path:
        return self.root / INTERMEDIATE_DIR

    @property
    def result_dir(self) -> Path:
        return self.root / RESULT_DIR

    @property
    def run_id(self) -> str:
        return self.root.name

    def prepare(self) -> None:
        """Create the empty intermediate directory the engine renders into.

        Raises:
            ScaffolderError: INTERMEDIATE_NOT_EMPTY if it already holds entries
        """
        self.intermediate_dir.mkdir(parents=True, exist_ok=True)
        leftovers = sorted(os.listdir(self.intermediate_dir))
        if leftovers:
            raise create_error(
                "INTERMEDIATE_NOT_EMPTY",
                intermediate_dir=str(self.intermediate_dir),
                entries=", ".join(leftovers),
            )

    def discard_result(self) -> None:
        """Remove a partially or fully written result directory."""
        result = self.result_dir
        if result.is_symlink() or result.is_file():
            result.unlink()
        elif result.exists():
            shutil.rmtree(result)

    @contextmanager
    def result_guard(self) -> Iterator["RunWorkspace"]:
        """Remove ``result`` if the guarded block fails for any reason.

        A result that was already present on entry is left alone.
        """
        preexisting = self.result_dir.exists() or self.result_dir.is_symlink()
        try:
            yield self
        except BaseException:
            if not preexisting:
                logger.debug(f"Run in {self.root} failed, discarding result directory")
                self.discard_result()
            raise
