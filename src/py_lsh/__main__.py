"""Allow ``python -m py_lsh``."""

import sys

from py_lsh.repl import run

sys.exit(run())
