"""Session gate — decide whether a client may start a shell at all.

The shell is meant to be used as a login shell over SSH.  Before the
first prompt appears, the gate runs two checks:

1. **Whitelist** — the client's address (first field of ``SSH_CLIENT``)
   must be listed, one address per line, in the whitelist file.  If the
   file cannot be read, every client is refused.
2. **Session limit** — at most ``max_sessions`` copies of the shell may
   run at once.  Copies are counted by scanning ``/proc/<pid>/status``
   for a matching ``Name:`` line, this process included.

Every refusal and every accepted login goes to the audit log.  With no
whitelist configured the gate is disabled and lets everyone in.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from py_lsh.config import GateConfig
from py_lsh.logging import Logger, LogLevel

if TYPE_CHECKING:
    from pathlib import Path
    from typing import TextIO

_SOURCE = "gate"
LOCAL_CLIENT = "localhost"


class Verdict(StrEnum):
    """Result of the session gate."""

    ALLOWED = "allowed"
    DENIED = "denied"


def client_address(environ: Mapping[str, str] | None = None) -> str:
    """Return the connecting client's address.

    Uses the first field of ``SSH_CLIENT`` (``"ip port server_port"``);
    a local session without that variable is reported as ``localhost``.
    """
    env = environ if environ is not None else os.environ
    fields = env.get("SSH_CLIENT", "").split()
    return fields[0] if fields else LOCAL_CLIENT


def load_whitelist(path: Path) -> frozenset[str]:
    """Read allowed addresses from *path*, one per line.

    Raises:
        OSError: If the file cannot be read.

    """
    lines = path.read_text(encoding="utf-8").splitlines()
    return frozenset(line.strip() for line in lines if line.strip())


def count_sessions(proc_root: Path, program_name: str) -> int | None:
    """Count running processes called *program_name*.

    Returns:
        The number of matches, or ``None`` if *proc_root* cannot be listed.

    """
    try:
        entries = list(proc_root.iterdir())
    except OSError:
        return None

    count = 0
    for entry in entries:
        if not entry.name.isdigit():
            continue
        try:
            first_line = (entry / "status").read_text(encoding="utf-8").split("\n", 1)[0]
        except OSError:
            # The process exited while we were looking.
            continue
        fields = first_line.split()
        if len(fields) >= 2 and fields[0] == "Name:" and fields[1] == program_name:  # noqa: PLR2004
            count += 1
    return count


class Gate:
    """Run the whitelist and session-limit checks for one client."""

    def __init__(
        self,
        config: GateConfig | None = None,
        *,
        logger: Logger | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Create a gate.

        Args:
            config: Whitelist location and session limits.
            logger: Audit log receiving accepted and refused logins.
            stderr: Where refusal messages are shown to the client.

        """
        self._config = config or GateConfig()
        self._logger = logger if logger is not None else Logger()
        self._stderr = stderr if stderr is not None else sys.stderr

    @property
    def enabled(self) -> bool:
        """Return True if a whitelist has been configured."""
        return self._config.whitelist_path is not None

    def authorize(self, client: str) -> Verdict:
        """Decide whether *client* may start a session."""
        if self._config.whitelist_path is None:
            return Verdict.ALLOWED

        try:
            allowed = load_whitelist(self._config.whitelist_path)
        except OSError as e:
            return self._deny(client, "error! block all IP", f"WHITELIST UNREADABLE {client}: {e}")

        if client not in allowed:
            return self._deny(client, "NOT ALLOWED IP", f"NOT ALLOWED IP {client}")

        running = count_sessions(self._config.proc_root, self._config.program_name)
        if running is not None and running > self._config.max_sessions:
            return self._deny(client, "already running", f"FULL LOGIN {client}")

        self._logger.log(LogLevel.INFO, f"Login at {client}", source=_SOURCE, client=client)
        return Verdict.ALLOWED

    def _deny(self, client: str, shown: str, logged: str) -> Verdict:
        """Report a refusal to the client and the audit log."""
        print(shown, file=self._stderr)
        self._logger.log(LogLevel.WARNING, logged, source=_SOURCE, client=client)
        return Verdict.DENIED
