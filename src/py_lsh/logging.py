"""Session audit log.

The shell keeps a structured record of what happened during a session:
who was let in, which builtins ran, which programs failed to start or
were killed.  It is the shell's equivalent of ``/var/log/auth.log``.

- **LogLevel** — severity levels ordered DEBUG < INFO < WARNING < ERROR.
- **LogEntry** — a single structured record (level, message, source, client).
- **Logger** — an append-only log with an optional file it mirrors
  every entry to.

Nothing here writes to stdout or stderr; user-facing messages belong to
the component that hit the problem.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class LogLevel(IntEnum):
    """Severity levels for log entries.

    Using IntEnum means levels compare with ``<`` / ``>`` naturally.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "launcher").
        client: The client address of the session, if known.

    """

    level: LogLevel
    message: str
    source: str
    client: str = ""

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer.

    When *path* is given, each entry is also appended to that file as a
    single line prefixed with the local time, so a log survives the
    session that wrote it.  The first failed write turns mirroring off;
    entries keep accumulating in memory.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Create an empty logger, optionally mirrored to *path*."""
        self._entries: list[LogEntry] = []
        self._path = path

    @property
    def path(self) -> Path | None:
        """Return the file entries are mirrored to, if any."""
        return self._path

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        client: str = "",
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            client: Client address associated with the event.

        """
        entry = LogEntry(level=level, message=message, source=source, client=client)
        self._entries.append(entry)
        if self._path is None:
            return
        try:
            with self._path.open("a", encoding="utf-8", errors="backslashreplace") as fh:
                fh.write(f"{time.ctime()} {entry}\n")
        except OSError:
            # The file is gone or unwritable; keep the session and the in-memory log.
            self._path = None
