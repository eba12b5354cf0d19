"""Template source retrieval.

Relative template URLs are resolved against the location the template was
registered from. ``file://`` locations are copied straight from disk; anything
else is handed to a :class:`TreeReader`.
"""

import asyncio
import os
import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import urljoin, urlparse

from scaffolder_core.errors import create_error


@runtime_checkable
class TreeReader(Protocol):
    """Downloads a directory tree (archive, VCS checkout, ...) to a local path."""

    async def read_tree(self, url: str, target_dir: Path) -> None:
        """Write the tree at ``url`` into ``target_dir``."""
        ...


def is_absolute_url(url: str) -> bool:
    parsed = urlparse(url)
    return bool(parsed.scheme) and len(parsed.scheme) > 1 and bool(parsed.netloc or parsed.path)


def resolve_safe_child_path(base: str | Path, child: str) -> Path:
    """Join ``child`` onto ``base``, refusing results outside ``base``."""
    base_path = os.path.abspath(base)
    candidate = os.path.abspath(os.path.join(base_path, child))
    if not is_within_directory(candidate, base_path):
        raise create_error("PATH_OUTSIDE_BASE", path=child, base=base_path)
    return Path(candidate)


def is_within_directory(path: str | Path, directory: str | Path) -> bool:
    """Return True if the normalized ``path`` is ``directory`` or below it."""
    path_str = os.path.abspath(path)
    directory_str = os.path.abspath(directory)
    if path_str == directory_str:
        return True
    return path_str.startswith(directory_str.rstrip(os.sep) + os.sep)


async def fetch_contents(
    *,
    fetch_url: str,
    output_path: Path,
    base_url: str | None = None,
    reader: TreeReader | None = None,
) -> None:
    """Populate ``output_path`` with the template tree at ``fetch_url``.

    Args:
        fetch_url: Relative path or absolute URL of the template tree
        output_path: Directory to fill
        base_url: Location the template was registered from
        reader: Remote tree reader for non-``file://`` locations

    Raises:
        ScaffolderError: TEMPLATE_FETCH_FAILED if the tree cannot be located or read
    """
    if not is_absolute_url(fetch_url) and base_url and base_url.startswith("file://"):
        base_path = base_url[len("file://") :]
        source = resolve_safe_child_path(os.path.dirname(base_path), fetch_url)
        if not source.is_dir():
            raise create_error(
                "TEMPLATE_FETCH_FAILED",
                url=fetch_url,
                detail=f"{source} is not a directory",
            )
        await asyncio.to_thread(shutil.copytree, source, output_path, dirs_exist_ok=True)
        return

    if is_absolute_url(fetch_url):
        read_url = fetch_url
    elif base_url:
        read_url = urljoin(base_url, fetch_url)
    else:
        raise create_error(
            "TEMPLATE_FETCH_FAILED",
            url=fetch_url,
            detail=(
                "Template location could not be determined and the fetch URL is relative"
            ),
        )

    if reader is None:
        raise create_error(
            "TEMPLATE_FETCH_FAILED",
            url=read_url,
            detail="No reader configured for remote template locations",
        )

    output_path.mkdir(parents=True, exist_ok=True)
    await reader.read_tree(read_url, output_path)


class LocalDirectoryFetcher:
    """TreeReader for ``file://`` URLs and plain paths on the local disk."""

    async def read_tree(self, url: str, target_dir: Path) -> None:
        parsed = urlparse(url)
        source = Path(parsed.path if parsed.scheme == "file" else url)
        if not source.is_dir():
            raise create_error(
                "TEMPLATE_FETCH_FAILED",
                url=url,
                detail=f"{source} is not a directory",
            )
        await asyncio.to_thread(shutil.copytree, source, target_dir, dirs_exist_ok=True)
