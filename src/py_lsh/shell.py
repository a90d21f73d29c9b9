"""The shell — decide whether a command is a builtin or a program.

The shell receives an already-tokenized argument list and does one of
three things:

1. Nothing, if the list is empty (the user just hit enter).
2. Run a builtin, if ``args[0]`` names one exactly (case-sensitive).
3. Hand the list to the process launcher otherwise.

Design choices:
    - **Command dispatch via a table.**  One lookup decides between
      builtin and external; there are no if/elif chains on names.
    - **External commands never end the session.**  Whatever happens
      to the child, the shell answers ``CONTINUE``; only ``exit`` (or
      end-of-input) stops the loop.
    - **Errors are handled where they happen.**  Builtins and the
      launcher print their own messages, so ``execute()`` never raises
      for bad user input.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from py_lsh.builtins import BuiltinTable, Console, default_builtins
from py_lsh.launcher import ProcessLauncher
from py_lsh.logging import Logger, LogLevel
from py_lsh.outcomes import LoopStatus

if TYPE_CHECKING:
    from typing import TextIO


class Shell:
    """Dispatch argument lists to builtins or external programs."""

    def __init__(
        self,
        *,
        builtins: BuiltinTable | None = None,
        launcher: ProcessLauncher | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a shell.

        Args:
            builtins: The builtin table (``cd``, ``help``, ``exit`` by default).
            launcher: Launcher used for everything that is not a builtin.
            stdout: Stream for builtin output.
            stderr: Stream for builtin and spawn errors.
            logger: Audit log shared with the launcher.

        """
        self._logger = logger if logger is not None else Logger()
        self._console = Console(
            stdout=stdout if stdout is not None else sys.stdout,
            stderr=stderr if stderr is not None else sys.stderr,
        )
        self._builtins = builtins if builtins is not None else default_builtins()
        self._launcher = (
            launcher
            if launcher is not None
            else ProcessLauncher(stderr=self._console.stderr, logger=self._logger)
        )

    @property
    def builtins(self) -> BuiltinTable:
        """Return the builtin table."""
        return self._builtins

    @property
    def logger(self) -> Logger:
        """Return the audit log."""
        return self._logger

    def execute(self, args: list[str]) -> LoopStatus:
        """Run one command.

        Args:
            args: Tokenized command line; ``args[0]`` is the command name.

        Returns:
            ``TERMINATE`` only when a builtin asks for it, otherwise ``CONTINUE``.

        """
        if not args:
            return LoopStatus.CONTINUE

        builtin = self._builtins.lookup(args[0])
        if builtin is not None:
            self._logger.log(LogLevel.DEBUG, f"builtin: {' '.join(args)}", source="shell")
            return builtin.run(args, self._console, self._builtins)

        self._launcher.launch(args)
        return LoopStatus.CONTINUE
