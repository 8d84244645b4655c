"""convcommits package metadata and parser entry points.

Example:
    >>> from convcommits import __version__
    >>> isinstance(__version__, str)
    True
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("convcommits")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"

from .config import ParserOptions  # noqa: E402
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticSink  # noqa: E402
from .machine import Machine, parse  # noqa: E402
from .message import Message  # noqa: E402
from .profiles import Profile  # noqa: E402

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSink",
    "Machine",
    "Message",
    "ParserOptions",
    "Profile",
    "__version__",
    "parse",
]
