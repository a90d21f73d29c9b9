"""Configuration values for the interpreter.

Buffer sizes, delimiters, and the prompt are passed explicitly into the
constructors that need them instead of living in module-level globals.
Every config object is a frozen dataclass, so a running shell can never
have its settings changed underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CAPACITY = 1024
DEFAULT_DELIMITERS = " \t\r\n\a"
DEFAULT_PROMPT = "> "


@dataclass(frozen=True)
class ReaderConfig:
    """Control how the line reader grows its buffer.

    Attributes:
        initial_capacity: Characters requested by the first read of a line.
        growth_increment: How much the request grows each time a chunk
            fills up without reaching the end of the line.

    """

    initial_capacity: int = DEFAULT_CAPACITY
    growth_increment: int = DEFAULT_CAPACITY

    def __post_init__(self) -> None:
        """Reject sizes that would stall the reader."""
        if self.initial_capacity <= 0:
            msg = f"initial_capacity must be positive, got {self.initial_capacity}"
            raise ValueError(msg)
        if self.growth_increment <= 0:
            msg = f"growth_increment must be positive, got {self.growth_increment}"
            raise ValueError(msg)


@dataclass(frozen=True)
class TokenizerConfig:
    """Characters that separate words on a command line."""

    delimiters: str = DEFAULT_DELIMITERS

    def __post_init__(self) -> None:
        """Require at least one delimiter."""
        if not self.delimiters:
            msg = "delimiters must not be empty"
            raise ValueError(msg)


@dataclass(frozen=True)
class ShellConfig:
    """Top-level settings for one interactive session."""

    prompt: str = DEFAULT_PROMPT
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)


@dataclass(frozen=True)
class GateConfig:
    """Settings for the session gate that runs before the shell starts.

    Attributes:
        whitelist_path: File listing allowed client addresses.  ``None``
            disables the gate entirely.
        max_sessions: How many copies of the shell may run at once.
        program_name: Process name counted against ``max_sessions``.
        proc_root: Where to look for running processes.

    """

    whitelist_path: Path | None = None
    max_sessions: int = 1
    program_name: str = "py-lsh"
    proc_root: Path = Path("/proc")
