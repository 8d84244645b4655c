"""Leveled terminal logging for convcommits commands.

Levels at ``warning`` and above go to stderr, everything else to stdout.
``CONVCOMMITS_LOG_LEVEL`` picks the threshold; ``NO_COLOR`` or
``CONVCOMMITS_NO_COLOR`` (or ``--no-color``) disables styling.
"""

from __future__ import annotations

import os
import sys
from enum import IntEnum

from rich.console import Console
from rich.text import Text

from .diagnostics import Diagnostic

LOG_LEVEL_ENV_VAR = "CONVCOMMITS_LOG_LEVEL"
NO_COLOR_ENV_VARS = ("NO_COLOR", "CONVCOMMITS_NO_COLOR")


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


LEVEL_NAMES = tuple(level.name.lower() for level in LogLevel)
_ALIASES = {"warn": LogLevel.WARNING}
_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}
_configured_level: LogLevel | None = None
_no_color: bool | None = None


def level_from_name(value: str | None, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """Map a level name to a ``LogLevel``; unknown or blank names give ``default``.

    Example:
        >>> level_from_name(" Warn ")
        <LogLevel.WARNING: 40>
        >>> level_from_name("loud")
        <LogLevel.INFO: 30>
    """
    name = (value or "").strip().lower()
    if name in _ALIASES:
        return _ALIASES[name]
    if name in LEVEL_NAMES:
        return LogLevel[name.upper()]
    return default


def configured_level() -> LogLevel:
    global _configured_level
    if _configured_level is None:
        _configured_level = level_from_name(os.environ.get(LOG_LEVEL_ENV_VAR))
    return _configured_level


def set_level(value: str | None) -> None:
    """Override the threshold taken from the environment."""
    global _configured_level
    _configured_level = level_from_name(value)


def set_no_color(value: bool) -> None:
    global _no_color
    _no_color = value


def is_enabled(level: LogLevel) -> bool:
    return level >= configured_level()


def _color_disabled() -> bool:
    if _no_color is not None:
        return _no_color
    return any(os.environ.get(name) for name in NO_COLOR_ENV_VARS)


def emit(level: LogLevel, message: str) -> None:
    if not is_enabled(level):
        return
    stream = sys.stderr if level >= LogLevel.WARNING else sys.stdout
    console = Console(file=stream, soft_wrap=True, highlight=False, no_color=_color_disabled())
    console.print(Text(message, style=_STYLES[level]))


def trace(message: str) -> None:
    emit(LogLevel.TRACE, message)


def debug(message: str) -> None:
    emit(LogLevel.DEBUG, message)


def info(message: str) -> None:
    emit(LogLevel.INFO, message)


def success(message: str) -> None:
    emit(LogLevel.SUCCESS, message)


def warning(message: str) -> None:
    emit(LogLevel.WARNING, message)


def error(message: str) -> None:
    emit(LogLevel.ERROR, message)


class LogSink:
    """Diagnostic sink forwarding parse events to the terminal log.

    Capture events are logged at debug level. Every recorded diagnostic,
    including ones a later writer replaces, is logged at trace level.
    """

    def info(self, message: str, **fields: object) -> None:
        if not is_enabled(LogLevel.DEBUG):
            return
        details = " ".join(f"{key}={value!r}" for key, value in fields.items())
        debug(f"{message} {details}" if details else message)

    def error(self, diagnostic: Diagnostic) -> None:
        trace(f"diagnostic recorded: {diagnostic}")
