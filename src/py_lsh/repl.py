"""Interactive loop — prompt, read, split, execute, repeat.

The loop ties the pieces together:

    1. **Prompt** — write ``"> "`` and flush it.
    2. **Read** — get one line from the line reader.
    3. **Split** — turn the line into an argument list.
    4. **Execute** — hand the list to the shell.
    5. **Loop** — until end-of-input or a builtin says ``TERMINATE``.

Each iteration owns its line and argument list; nothing from one
command survives into the next except the working directory.

``run()`` is the process entry point: it parses the command line,
passes the session gate, and returns the exit status for ``sys.exit``.
"""

from __future__ import annotations

import argparse
import sys
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from py_lsh.config import GateConfig, ShellConfig
from py_lsh.gate import Gate, Verdict, client_address
from py_lsh.logging import Logger
from py_lsh.outcomes import LoopStatus
from py_lsh.reader import END_OF_INPUT, LineReader, ResourceExhaustedError
from py_lsh.shell import Shell
from py_lsh.tokenizer import Tokenizer

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class LoopState(StrEnum):
    """The two states of the interactive loop."""

    RUNNING = "running"
    TERMINATED = "terminated"


class InteractiveLoop:
    """Drive one interactive session from first prompt to exit."""

    def __init__(
        self,
        shell: Shell,
        *,
        reader: LineReader | None = None,
        tokenizer: Tokenizer | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        config: ShellConfig | None = None,
    ) -> None:
        """Create a loop around *shell*.

        Args:
            shell: Dispatcher for each command.
            reader: Source of input lines (stdin by default).
            tokenizer: Splits each line into arguments.
            stdout: Where the prompt is written.
            stderr: Where fatal errors are reported.
            config: Prompt, reader, and tokenizer settings.

        """
        self._config = config or ShellConfig()
        self._shell = shell
        self._reader = reader if reader is not None else LineReader(config=self._config.reader)
        self._tokenizer = tokenizer if tokenizer is not None else Tokenizer(self._config.tokenizer)
        self._stdout = stdout if stdout is not None else sys.stdout
        self._stderr = stderr if stderr is not None else sys.stderr
        self._state = LoopState.RUNNING
        self._prompt_count = 0

    @property
    def state(self) -> LoopState:
        """Return the current loop state."""
        return self._state

    @property
    def prompt_count(self) -> int:
        """Return how many prompts have been shown."""
        return self._prompt_count

    def run(self) -> int:
        """Run until end-of-input or ``exit``.

        Returns:
            ``EXIT_SUCCESS`` on a clean finish, ``EXIT_FAILURE`` if the
            reader ran out of memory, ``EXIT_INTERRUPTED`` on Ctrl+C at the
            prompt.

        """
        try:
            while self._state is LoopState.RUNNING:
                self._stdout.write(self._config.prompt)
                self._stdout.flush()
                self._prompt_count += 1

                try:
                    line = self._reader.read_line()
                except ResourceExhaustedError as e:
                    print(f"lsh: {e}", file=self._stderr)
                    self._state = LoopState.TERMINATED
                    return EXIT_FAILURE

                if line is END_OF_INPUT:
                    self._state = LoopState.TERMINATED
                    break

                args = self._tokenizer.split(line)
                if self._shell.execute(args) is LoopStatus.TERMINATE:
                    self._state = LoopState.TERMINATED
        except KeyboardInterrupt:
            # Ctrl+C at the prompt; a running child absorbs it in the launcher.
            print("\nInterrupted.", file=self._stdout)
            self._state = LoopState.TERMINATED
            return EXIT_INTERRUPTED

        return EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser for the ``py-lsh`` program."""
    parser = argparse.ArgumentParser(prog="py-lsh", description="A tiny command interpreter.")
    parser.add_argument("--prompt", default=ShellConfig().prompt, help="prompt string")
    parser.add_argument(
        "--whitelist",
        type=Path,
        default=None,
        help="file of allowed client addresses; enables the session gate",
    )
    parser.add_argument(
        "--max-sessions",
        type=int,
        default=GateConfig().max_sessions,
        help="maximum concurrent sessions when the gate is enabled",
    )
    parser.add_argument("--audit-log", type=Path, default=None, help="append audit entries here")
    return parser


def run(argv: Sequence[str] | None = None) -> int:
    """Parse *argv*, pass the session gate, and run the interactive loop.

    Returns:
        The process exit status.

    """
    options = build_parser().parse_args(argv)
    logger = Logger(path=options.audit_log)

    gate = Gate(
        GateConfig(whitelist_path=options.whitelist, max_sessions=options.max_sessions),
        logger=logger,
    )
    if gate.enabled and gate.authorize(client_address()) is Verdict.DENIED:
        return EXIT_FAILURE

    config = ShellConfig(prompt=options.prompt)
    loop = InteractiveLoop(Shell(logger=logger), config=config)
    return loop.run()
