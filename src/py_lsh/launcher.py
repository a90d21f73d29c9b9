"""Process launcher — run an external program and wait for it.

The launcher hands the argument list to ``subprocess.Popen`` with no
pipes, so the child inherits the shell's environment, working
directory, and stdin/stdout/stderr.  It then blocks until that one
child has either exited or been killed by a signal.

A stopped (suspended) child is not a terminal state.  ``Popen.wait``
never asks the OS for stop notifications, so it simply keeps waiting;
there is no job control to hand a stopped child over to.

Exit codes are recorded in the audit log but never shown to the user.
"""

from __future__ import annotations

import signal
import subprocess
import sys
from typing import TYPE_CHECKING

from py_lsh.builtins import PROGRAM
from py_lsh.logging import Logger, LogLevel
from py_lsh.outcomes import ChildOutcome, SpawnFailed, Succeeded, TerminatedBySignal

if TYPE_CHECKING:
    from typing import TextIO

_SOURCE = "launcher"


def _outcome_from_returncode(returncode: int) -> ChildOutcome:
    """Translate a ``Popen.returncode`` into an outcome.

    A negative return code ``-N`` means the child died from signal N.
    """
    if returncode >= 0:
        return Succeeded(exit_code=returncode)
    try:
        sig: signal.Signals | int = signal.Signals(-returncode)
    except ValueError:
        sig = -returncode
    return TerminatedBySignal(signal=sig)


class ProcessLauncher:
    """Spawn external commands in the foreground."""

    def __init__(self, *, stderr: TextIO | None = None, logger: Logger | None = None) -> None:
        """Create a launcher.

        Args:
            stderr: Where spawn errors are reported (``sys.stderr`` by default).
            logger: Audit log for spawn failures and child exits.

        """
        self._stderr = stderr if stderr is not None else sys.stderr
        self._logger = logger if logger is not None else Logger()

    def launch(self, args: list[str]) -> ChildOutcome:
        """Run ``args[0]`` with *args* as its argv and wait for it to finish.

        Args:
            args: Non-empty argument list; the program is looked up on ``PATH``.

        Returns:
            ``Succeeded`` whatever the exit code, ``TerminatedBySignal`` if
            a signal killed the child, or ``SpawnFailed`` if it never ran.

        """
        # Anything still buffered must reach the terminal before the child writes.
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            child = subprocess.Popen(args)  # noqa: S603
        except (OSError, ValueError) as e:
            # ValueError: an argument with an embedded NUL can never be exec'd.
            reason = getattr(e, "strerror", None) or str(e)
            print(f"{PROGRAM}: {args[0]}: {reason}", file=self._stderr)
            self._logger.log(LogLevel.ERROR, f"spawn failed: {args[0]}: {reason}", source=_SOURCE)
            return SpawnFailed(reason=reason)

        outcome = _outcome_from_returncode(self._wait(child))
        match outcome:
            case TerminatedBySignal(signal=sig):
                name = sig.name if isinstance(sig, signal.Signals) else f"signal {sig}"
                self._logger.log(
                    LogLevel.WARNING, f"{args[0]} (pid {child.pid}) killed by {name}", source=_SOURCE
                )
            case Succeeded(exit_code=code):
                self._logger.log(
                    LogLevel.DEBUG, f"{args[0]} (pid {child.pid}) exited with {code}", source=_SOURCE
                )
        return outcome

    @staticmethod
    def _wait(child: subprocess.Popen[bytes]) -> int:
        """Block until *child* has exited or been signalled."""
        while True:
            try:
                return child.wait()
            except KeyboardInterrupt:
                # The terminal sent SIGINT to the child too; let it decide.
                continue
