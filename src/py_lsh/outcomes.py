"""Result types passed between the shell's components.

Nothing in the command cycle signals failure by raising: each step
returns a value that the caller inspects.

- **LoopStatus** — what the dispatcher tells the loop after a command.
- **ChildOutcome** — what happened to an external program: it ran to
  completion, it could not be started, or a signal killed it.
"""

import signal
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias


class LoopStatus(StrEnum):
    """Whether the interactive loop should prompt again."""

    CONTINUE = "continue"
    TERMINATE = "terminate"


@dataclass(frozen=True)
class Succeeded:
    """The child exited on its own, with any exit code."""

    exit_code: int = 0


@dataclass(frozen=True)
class SpawnFailed:
    """The program could not be started (not found, not executable, no fork)."""

    reason: str


@dataclass(frozen=True)
class TerminatedBySignal:
    """The child was killed by a signal.

    Signals without a name in ``signal.Signals`` (real-time signals, for
    instance) are kept as plain integers.
    """

    signal: signal.Signals | int


ChildOutcome: TypeAlias = Succeeded | SpawnFailed | TerminatedBySignal
