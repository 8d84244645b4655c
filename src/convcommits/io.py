"""Console output and exit helpers for the CLI boundary."""

from __future__ import annotations

import sys
from typing import NoReturn

EXIT_INVALID = 1
"""Exit status for a message (or range) that failed validation."""

EXIT_USAGE = 2
"""Exit status for bad input, configuration, or environment."""


def say(message: str) -> None:
    """Print a result line to stdout.

    Example:
        >>> say("type: feat")
        type: feat
    """
    print(message)


def die(message: str, code: int = EXIT_INVALID) -> NoReturn:
    """Report ``message`` on stderr and exit with ``code``."""
    print(f"error: {message}", file=sys.stderr)
    sys.exit(code)
