"""Line reader — pull one line at a time from the input stream.

The reader has no maximum line length.  It asks the stream for at most
``initial_capacity`` characters; if that chunk fills without reaching a
newline, the request grows by ``growth_increment`` and reading carries
on.  Chunks are collected in a list and joined once the line is
complete, so nothing read so far is ever dropped.

End-of-input is reported with the ``END_OF_INPUT`` sentinel rather than
an empty string, because an empty string is a perfectly valid (blank)
line.

A strict text stream is switched to ``surrogateescape`` decoding, so a
stray non-UTF-8 byte reaches the shell as part of a word instead of
ending the session.
"""

import contextlib
import io
import sys
from enum import Enum
from typing import TextIO

from py_lsh.config import ReaderConfig


class EndOfInput(Enum):
    """Marker type for the end of the input stream."""

    TOKEN = "end-of-input"

    def __repr__(self) -> str:
        """Show the sentinel by name."""
        return "END_OF_INPUT"


END_OF_INPUT = EndOfInput.TOKEN


class ResourceExhaustedError(RuntimeError):
    """Raise when the reader cannot grow its buffer.

    This is fatal: continuing with a partially read command risks
    running something the user never typed.
    """


class LineReader:
    """Read newline-terminated lines from a text stream."""

    def __init__(self, stream: TextIO | None = None, config: ReaderConfig | None = None) -> None:
        """Create a reader over *stream* (``sys.stdin`` by default)."""
        self._stream = stream if stream is not None else sys.stdin
        if isinstance(self._stream, io.TextIOWrapper) and self._stream.errors == "strict":
            # Undecodable bytes become lone surrogates, which os.fsencode turns back
            # into the original bytes for chdir and exec.
            with contextlib.suppress(io.UnsupportedOperation):
                self._stream.reconfigure(errors="surrogateescape")
        self._config = config or ReaderConfig()

    def read_line(self) -> str | EndOfInput:
        """Return the next line without its terminator, or ``END_OF_INPUT``.

        A final line that is not newline-terminated is still returned;
        the call after it reports end-of-input.

        Raises:
            ResourceExhaustedError: If memory runs out while the line
                is being accumulated.

        """
        capacity = self._config.initial_capacity
        chunks: list[str] = []
        try:
            while True:
                chunk = self._stream.readline(capacity)
                if not chunk:
                    break
                if chunk.endswith("\n"):
                    chunks.append(chunk[:-1])
                    return "".join(chunks)
                chunks.append(chunk)
                if len(chunk) >= capacity:
                    capacity += self._config.growth_increment
            if not chunks:
                return END_OF_INPUT
            return "".join(chunks)
        except MemoryError as exc:
            msg = "allocation error"
            raise ResourceExhaustedError(msg) from exc
