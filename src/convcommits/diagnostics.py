"""Position-aware diagnostics produced by the commit message automaton.

A parse attempt holds at most one diagnostic at a time. Three kinds of
writers decide whether a new diagnostic replaces the current one:

- ``advise`` records an early-exit advisory when the byte just consumed is
  the last one but the grammar still needs more input;
- ``write_if_unset`` (defensive) only records when nothing is recorded yet, so
  it never hides an advisory;
- ``write`` (unconditional) always records, because its caller knows a real
  offending byte is available.

Example:
    >>> recorder = DiagnosticRecorder(b"feat!")
    >>> recorder.advise(4)
    >>> recorder.write_if_unset_on_current(DiagnosticKind.MISSING_COLON, 5)
    >>> str(recorder.diagnostic)
    "early exit after '!' character: col=04"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

COLUMN_TEMPLATE = ": col={column:02d}"


class DiagnosticKind(str, Enum):
    ILLEGAL_TYPE_CHAR = "illegal-type-char"
    MISSING_COLON = "missing-colon"
    INCOMPLETE_TYPE = "incomplete-type"
    MALFORMED_SCOPE = "malformed-scope"
    EMPTY_INPUT = "empty-input"
    EARLY_EXIT = "early-exit"
    MISSING_DESCRIPTION_INITIAL_SPACE = "missing-description-initial-space"
    MISSING_DESCRIPTION = "missing-description"
    ILLEGAL_NEWLINE = "illegal-newline"
    MISSING_BLANK_LINE_AT_BODY_BEGIN = "missing-blank-line-at-body-begin"

    @property
    def template(self) -> str:
        return _TEMPLATES[self]


_TEMPLATES: dict[DiagnosticKind, str] = {
    DiagnosticKind.ILLEGAL_TYPE_CHAR: "illegal '{char}' character in commit message type",
    DiagnosticKind.MISSING_COLON: "expecting colon (':') character, got '{char}' character",
    DiagnosticKind.INCOMPLETE_TYPE: "incomplete commit message type after '{char}' character",
    DiagnosticKind.MALFORMED_SCOPE: "illegal '{char}' character in scope",
    DiagnosticKind.EMPTY_INPUT: "empty input",
    DiagnosticKind.EARLY_EXIT: "early exit after '{char}' character",
    DiagnosticKind.MISSING_DESCRIPTION_INITIAL_SPACE: (
        "expecting at least one white-space (' ') character, got '{char}' character"
    ),
    DiagnosticKind.MISSING_DESCRIPTION: (
        "expecting a description text (without newlines) after '{char}' character"
    ),
    DiagnosticKind.ILLEGAL_NEWLINE: "illegal newline",
    DiagnosticKind.MISSING_BLANK_LINE_AT_BODY_BEGIN: "body must begin with a blank line",
}


@dataclass(frozen=True)
class Diagnostic:
    """A single parse failure.

    Attributes:
        kind: Catalog entry the failure belongs to.
        message: Formatted message without the position suffix.
        column: Byte offset the message refers to.
    """

    kind: DiagnosticKind
    message: str
    column: int

    def __str__(self) -> str:
        return self.message + COLUMN_TEMPLATE.format(column=self.column)

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind.value, "message": self.message, "column": self.column}


class DiagnosticSink(Protocol):
    """Observer for parse events. Sinks never influence the parse outcome."""

    def info(self, message: str, **fields: object) -> None: ...

    def error(self, diagnostic: Diagnostic) -> None: ...


def render_char(byte: int) -> str:
    return chr(byte)


def make_diagnostic(kind: DiagnosticKind, column: int, char: str | None = None) -> Diagnostic:
    if char is None:
        message = kind.template
    else:
        message = kind.template.format(char=char)
    return Diagnostic(kind=kind, message=message, column=column)


class DiagnosticRecorder:
    """Holds the current diagnostic of one parse attempt."""

    def __init__(self, data: bytes, sink: DiagnosticSink | None = None) -> None:
        self._data = data
        self._sink = sink
        self.diagnostic: Diagnostic | None = None

    def _record(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        if self._sink is not None:
            self._sink.error(diagnostic)

    def advise(self, pos: int) -> None:
        """Record an early-exit advisory about the byte at ``pos``."""
        self._record(
            make_diagnostic(DiagnosticKind.EARLY_EXIT, pos, render_char(self._data[pos]))
        )

    def write(self, kind: DiagnosticKind, column: int) -> None:
        self._record(make_diagnostic(kind, column))

    def write_on_current(self, kind: DiagnosticKind, pos: int) -> None:
        self._record(make_diagnostic(kind, pos, render_char(self._data[pos])))

    def write_on_previous(self, kind: DiagnosticKind, pos: int) -> None:
        self._record(make_diagnostic(kind, pos, render_char(self._data[pos - 1])))

    def write_if_unset_on_current(self, kind: DiagnosticKind, pos: int) -> None:
        if self.diagnostic is None:
            self.write_on_current(kind, pos)
