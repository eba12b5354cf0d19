"""Execution context handed to template actions."""

import asyncio
import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from scaffolder_core.logging import ScaffolderLogger
from scaffolder_core.types import LogSink

logger = logging.getLogger(__name__)


@dataclass
class ActionContext:
    """What an action can see and touch while it runs.

    ``workspace_path`` is the task workspace the action writes its output
    into; temporary directories handed out by
    :meth:`create_temporary_directory` are removed by :meth:`cleanup`.
    """

    workspace_path: Path
    input: dict[str, Any]
    log_stream: LogSink
    logger: ScaffolderLogger = field(default_factory=ScaffolderLogger)
    base_url: str | None = None
    temp_root: Path | None = None
    _temporary_dirs: list[Path] = field(default_factory=list, init=False, repr=False)

    async def create_temporary_directory(self) -> Path:
        """Create a fresh, empty directory for this action's scratch work."""
        root = str(self.temp_root) if self.temp_root else None
        path = await asyncio.to_thread(tempfile.mkdtemp, prefix="scaffolder-", dir=root)
        self._temporary_dirs.append(Path(path))
        return Path(path)

    def cleanup(self) -> None:
        """Remove every temporary directory created through this context."""
        while self._temporary_dirs:
            path = self._temporary_dirs.pop()
            logger.debug(f"Removing temporary directory {path}")
            shutil.rmtree(path, ignore_errors=True)
