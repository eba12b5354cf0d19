"""Local process collaborators: executable probe and streaming command runner."""

import asyncio
import codecs
import logging
import shutil
from collections.abc import Awaitable, Callable, Sequence

from scaffolder_core.errors import create_error
from scaffolder_core.types import LogSink

logger = logging.getLogger(__name__)

CommandProbe = Callable[[str], bool]
CommandRunner = Callable[[str, Sequence[str], LogSink], Awaitable[None]]

READ_CHUNK_SIZE = 65536


def command_exists(command: str) -> bool:
    """Return True if ``command`` resolves to an executable on PATH."""
    return shutil.which(command) is not None


def probe_command(probe: CommandProbe, command: str) -> bool:
    """Run an availability probe, treating any probe failure as "not available"."""
    try:
        return bool(probe(command))
    except Exception as e:
        logger.debug(f"Probe for '{command}' failed, treating as unavailable: {e}")
        return False


async def run_command(command: str, args: Sequence[str], log_stream: LogSink) -> None:
    """Run a command, streaming its combined stdout/stderr into ``log_stream``.

    Output is forwarded as it arrives, in chunks of at most ``READ_CHUNK_SIZE``
    bytes, so arbitrarily long lines never stall or fail the read.

    Args:
        command: Executable to run
        args: Arguments passed to the executable
        log_stream: Sink receiving decoded output

    Raises:
        ScaffolderError: ENGINE_NOT_STARTED if the process cannot be spawned,
            ENGINE_FAILED if it exits with a non-zero status
    """
    logger.debug(f"Running {command} {' '.join(args)}")
    try:
        process = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as e:
        raise create_error("ENGINE_NOT_STARTED", command=command, detail=str(e)) from e

    # Multi-byte characters may be split across chunk boundaries
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    try:
        if process.stdout is not None:
            while True:
                chunk = await process.stdout.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                text = decoder.decode(chunk)
                if text:
                    log_stream.write(text)
            tail = decoder.decode(b"", final=True)
            if tail:
                log_stream.write(tail)
        returncode = await process.wait()
    except BaseException:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise

    if returncode != 0:
        raise create_error(
            "ENGINE_FAILED",
            command=command,
            strategy="local process",
            detail=f"Command {command} failed, exit code: {returncode}",
        )
