"""Git helper functions used by the convcommits CLI."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from .io import EXIT_USAGE, die

_RECORD_SEPARATOR = "\x1e"
_UNIT_SEPARATOR = "\x1f"


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    message: str


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path.

    Example:
        >>> git_command(["status"])
        ['git', 'status']
    """
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def _run_git_or_die(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        die(f"missing required command: {cmd[0]}", code=EXIT_USAGE)


def git_hooks_dir(repo_dir: Path, *, git_path: str | None = None) -> Path | None:
    """Return the hooks directory git uses for ``repo_dir``.

    Honors ``core.hooksPath`` and linked worktrees.

    Returns:
        Absolute hooks directory, or ``None`` outside a git repository.
    """
    result = _run_git_or_die(
        git_command(
            ["-C", str(repo_dir), "rev-parse", "--path-format=absolute", "--git-path", "hooks"],
            git_path=git_path,
        )
    )
    if result.returncode != 0:
        return None
    resolved = result.stdout.strip()
    if not resolved:
        return None
    return Path(resolved)


def git_commit_messages(
    repo_dir: Path, rev_range: str, *, git_path: str | None = None
) -> list[CommitRecord]:
    """Return commit messages for a revision range.

    Args:
        repo_dir: Git repository directory.
        rev_range: Any ``git log`` revision expression (e.g. ``main..HEAD``).

    Returns:
        Commits, most recent first.
    """
    result = _run_git_or_die(
        git_command(
            [
                "-C",
                str(repo_dir),
                "log",
                f"--format=%H{_UNIT_SEPARATOR}%B{_RECORD_SEPARATOR}",
                rev_range,
            ],
            git_path=git_path,
        )
    )
    if result.returncode != 0:
        stderr = result.stderr.strip()
        die(f"git log {rev_range} failed: {stderr or 'unknown error'}", code=EXIT_USAGE)
    records: list[CommitRecord] = []
    for chunk in result.stdout.split(_RECORD_SEPARATOR):
        if _UNIT_SEPARATOR not in chunk:
            continue
        sha, message = chunk.split(_UNIT_SEPARATOR, 1)
        records.append(CommitRecord(sha=sha.strip(), message=message))
    return records
