"""py-lsh — a small interactive command interpreter.

Read a line, split it into words, then either run a builtin inside the
interpreter or spawn an external program and wait for it to finish.
"""

__version__ = "0.1.0"
