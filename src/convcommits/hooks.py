"""Git hook installation helpers."""

from __future__ import annotations

import shlex
from pathlib import Path

from .profiles import Profile

COMMIT_MSG_HOOK = "commit-msg"
HOOK_MARKER = "# installed by convcommits"


def render_commit_msg_hook(
    profile: Profile | None = None, *, executable: str = "convcommits"
) -> str:
    """Render the shell script git runs as its commit-msg hook.

    Example:
        >>> print(render_commit_msg_hook(Profile.FALCO), end="")
        #!/bin/sh
        # installed by convcommits
        exec convcommits hook commit-msg --profile falco "$1"
    """
    command = [executable, "hook", "commit-msg"]
    if profile is not None:
        command.extend(["--profile", profile.value])
    rendered = " ".join(shlex.quote(part) for part in command)
    return f'#!/bin/sh\n{HOOK_MARKER}\nexec {rendered} "$1"\n'


def is_managed_hook(path: Path) -> bool:
    """Return whether ``path`` is a hook this tool wrote."""
    try:
        return HOOK_MARKER in path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False


def install_commit_msg_hook(
    hooks_dir: Path, profile: Profile | None = None, *, force: bool = False
) -> Path:
    """Write the commit-msg hook into ``hooks_dir``.

    Args:
        hooks_dir: Hooks directory of the repository.
        profile: Profile passed to the hook; ``None`` defers to configuration.
        force: Replace an existing hook that this tool did not write.

    Returns:
        Path of the installed hook.

    Raises:
        FileExistsError: When a foreign hook exists and ``force`` is false.
    """
    path = hooks_dir / COMMIT_MSG_HOOK
    if path.exists() and not force and not is_managed_hook(path):
        raise FileExistsError(f"{path} already exists (use --force to replace it)")
    hooks_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(render_commit_msg_hook(profile), encoding="utf-8")
    path.chmod(0o755)
    return path
