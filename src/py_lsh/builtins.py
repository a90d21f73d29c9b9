"""Builtin commands — the closed set of commands the shell runs itself.

Some commands cannot be external programs.  ``cd`` has to change the
*shell's* working directory (a child changing its own would achieve
nothing), and ``exit`` has to stop the shell's own loop.

Each builtin is a small class with a ``name`` and a ``run()`` method.
The ``BuiltinTable`` maps names to instances.  It is built once, keeps
registration order (which is the order ``help`` lists them in), and has
no way to add or remove entries afterwards.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar, Protocol

from py_lsh.outcomes import LoopStatus

if TYPE_CHECKING:
    from typing import TextIO

PROGRAM = "lsh"


@dataclass(frozen=True)
class Console:
    """The output streams a builtin writes to."""

    stdout: TextIO
    stderr: TextIO


class Builtin(Protocol):
    """Interface shared by every builtin command."""

    name: ClassVar[str]

    def run(self, args: list[str], console: Console, table: BuiltinTable) -> LoopStatus:
        """Run the command with its full argument list (``args[0]`` is the name)."""
        ...


class ChangeDirectory:
    """``cd DIR`` — change the shell's working directory."""

    name: ClassVar[str] = "cd"

    def run(self, args: list[str], console: Console, table: BuiltinTable) -> LoopStatus:  # noqa: ARG002
        """Change directory, reporting a missing argument or OS error."""
        if len(args) < 2:  # noqa: PLR2004
            print(f'{PROGRAM}: expected argument to "cd"', file=console.stderr)
            return LoopStatus.CONTINUE
        try:
            os.chdir(args[1])
        except (OSError, ValueError) as e:
            reason = getattr(e, "strerror", None) or str(e)
            print(f"{PROGRAM}: {reason}: {args[1]}", file=console.stderr)
        return LoopStatus.CONTINUE


class Help:
    """``help`` — print a usage banner and the builtin names."""

    name: ClassVar[str] = "help"

    def run(self, args: list[str], console: Console, table: BuiltinTable) -> LoopStatus:  # noqa: ARG002
        """Print the banner; arguments are ignored."""
        lines = [
            "py-lsh, a tiny command interpreter",
            "Type program names and arguments, and hit enter.",
            "The following are built in:",
            *(f"  {name}" for name in table.names),
            "Use the man command for information on other programs.",
        ]
        print("\n".join(lines), file=console.stdout)
        return LoopStatus.CONTINUE


class Exit:
    """``exit`` — leave the shell."""

    name: ClassVar[str] = "exit"

    def run(self, args: list[str], console: Console, table: BuiltinTable) -> LoopStatus:  # noqa: ARG002
        """Always terminate, whatever arguments were given."""
        return LoopStatus.TERMINATE


class BuiltinTable:
    """Read-only, ordered mapping from command name to builtin."""

    def __init__(self, builtins: Sequence[Builtin]) -> None:
        """Build the table from *builtins* in registration order.

        Raises:
            ValueError: If two builtins share a name.

        """
        table: dict[str, Builtin] = {}
        for builtin in builtins:
            if builtin.name in table:
                msg = f"Duplicate builtin name: {builtin.name}"
                raise ValueError(msg)
            table[builtin.name] = builtin
        self._table = MappingProxyType(table)

    @property
    def names(self) -> tuple[str, ...]:
        """Return builtin names in registration order."""
        return tuple(self._table)

    def lookup(self, name: str) -> Builtin | None:
        """Return the builtin called exactly *name*, or ``None``."""
        return self._table.get(name)

    def __contains__(self, name: object) -> bool:
        """Return True if *name* is a builtin."""
        return name in self._table

    def __iter__(self) -> Iterator[Builtin]:
        """Iterate over builtins in registration order."""
        return iter(self._table.values())

    def __len__(self) -> int:
        """Return the number of builtins."""
        return len(self._table)


def default_builtins() -> BuiltinTable:
    """Return the standard table: ``cd``, ``help``, ``exit``."""
    return BuiltinTable([ChangeDirectory(), Help(), Exit()])
