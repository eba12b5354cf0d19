"""Log sink protocol shared by the engine runners."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Anything engine output can be streamed into.

    ``io.StringIO``, ``sys.stdout`` and open text files all qualify.
    """

    def write(self, data: str) -> int | None:
        """Write a chunk of engine output."""
        ...
