"""Commit message file helpers for git hooks."""

from __future__ import annotations

from pathlib import Path

from .config import ParserOptions
from .diagnostics import DiagnosticSink
from .machine import Machine

COMMENT_CHAR = "#"
SCISSORS_MARKER = "------------------------ >8 ------------------------"
_IGNORED_PREFIXES: tuple[str, ...] = ("Merge ", "Revert ", "fixup! ", "squash! ", "amend! ")
_TRAILING_BLANKS = " \t\r"


def clean_commit_message(text: str, comment_char: str = COMMENT_CHAR) -> str:
    """Strip a commit message the way ``git commit --cleanup=strip`` does.

    Lines are split on LF only. Comment lines are dropped, everything below a
    scissors line is dropped, trailing spaces, tabs and CRs are removed from
    each line, and leading/trailing blank lines are removed. The result has no
    trailing newline.

    Example:
        >>> clean_commit_message("# note\\nfeat: x  \\n\\nbody\\n\\n")
        'feat: x\\n\\nbody'
    """
    lines: list[str] = []
    for line in text.split("\n"):
        if line.startswith(comment_char):
            if SCISSORS_MARKER in line:
                break
            continue
        lines.append(line.rstrip(_TRAILING_BLANKS))
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def is_ignored_message(message: str) -> bool:
    """Return whether ``message`` is a git-generated header exempt from checks."""
    return message.startswith(_IGNORED_PREFIXES)


def validate_commit_message(
    text: str,
    options: ParserOptions | None = None,
    *,
    sink: DiagnosticSink | None = None,
) -> str | None:
    """Validate raw commit message text.

    Args:
        text: Message as written by the user, comments included. Bytes that
            are not UTF-8 may be carried as ``surrogateescape`` code points.
        options: Parser options; defaults to ``ParserOptions()``.
        sink: Optional parse event observer.

    Returns:
        ``None`` when the message is valid or intentionally ignored,
        otherwise the diagnostic text.
    """
    message = clean_commit_message(text)
    if not message or is_ignored_message(message):
        return None
    data = message.encode("utf-8", errors="surrogateescape")
    _parsed, diagnostic = Machine(options, sink=sink).parse(data)
    if diagnostic is None:
        return None
    return str(diagnostic)


def validate_commit_message_file(
    path: Path,
    options: ParserOptions | None = None,
    *,
    sink: DiagnosticSink | None = None,
) -> str | None:
    """Validate a commit message file.

    Args:
        path: Path to the commit message file supplied by git hooks.
        options: Parser options; defaults to ``ParserOptions()``.
        sink: Optional parse event observer.

    Returns:
        ``None`` when the message is valid, otherwise an error string.
    """
    try:
        payload = path.read_bytes().decode("utf-8", errors="surrogateescape")
    except OSError as exc:
        return f"failed to read commit message file: {exc}"
    return validate_commit_message(payload, options, sink=sink)
