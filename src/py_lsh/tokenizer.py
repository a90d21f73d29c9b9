"""Tokenizer — split a command line into words.

Splitting is deliberately naive: there is no quoting, escaping, or
expansion.  Any run of delimiter characters separates two words, and
leading or trailing delimiters produce nothing.  So ``"a  b\\tc"``
becomes ``["a", "b", "c"]`` and a blank line becomes ``[]``.
"""

import re

from py_lsh.config import TokenizerConfig


class Tokenizer:
    """Split lines on a fixed set of delimiter characters."""

    def __init__(self, config: TokenizerConfig | None = None) -> None:
        """Create a tokenizer.

        Args:
            config: Delimiter settings.  Defaults to space, tab, CR,
                LF, and BEL.

        """
        self._config = config or TokenizerConfig()
        self._pattern = re.compile(f"[{re.escape(self._config.delimiters)}]+")

    @property
    def delimiters(self) -> str:
        """Return the characters treated as word separators."""
        return self._config.delimiters

    def split(self, line: str) -> list[str]:
        """Return the words of *line* in order, with no empty entries."""
        return [token for token in self._pattern.split(line) if token]
