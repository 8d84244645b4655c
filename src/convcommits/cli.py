"""Command line interface for convcommits."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

from . import __version__, commit_messages, config, git, hooks
from . import log as convcommits_log
from .diagnostics import Diagnostic
from .io import EXIT_USAGE, die, say
from .machine import Machine
from .message import Message
from .profiles import PROFILE_VALUES, Profile, keywords_for, parse_profile

app = typer.Typer(
    help="Validate and decompose Conventional Commits messages.",
    no_args_is_help=True,
    add_completion=False,
)
hook_app = typer.Typer(help="Git hook entry points.", no_args_is_help=True)
app.add_typer(hook_app, name="hook")


def _validate_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in convcommits_log.LEVEL_NAMES and normalized != "warn":
        allowed = ", ".join(convcommits_log.LEVEL_NAMES)
        raise typer.BadParameter(f"expected one of: {allowed}")
    return normalized


def _validate_profile(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized not in PROFILE_VALUES:
        raise typer.BadParameter(f"expected one of: {', '.join(PROFILE_VALUES)}")
    return normalized


def _version_callback(value: bool) -> None:
    if value:
        say(f"convcommits {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level (trace, debug, info, success, warning, error).",
        callback=_validate_log_level,
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Validate and decompose Conventional Commits messages."""
    if log_level is not None:
        convcommits_log.set_level(log_level)
    if no_color:
        convcommits_log.set_no_color(True)


def _read_input(message: str | None, file: Path | None) -> bytes:
    if message is not None and file is not None:
        die("pass either a MESSAGE argument or --file, not both", code=EXIT_USAGE)
    if message is not None:
        return message.encode("utf-8")
    if file is not None:
        try:
            return file.read_bytes()
        except OSError as exc:
            die(f"failed to read {file}: {exc}", code=EXIT_USAGE)
    if sys.stdin.isatty():
        die("no commit message given (pass MESSAGE, --file, or pipe stdin)", code=EXIT_USAGE)
    return typer.get_binary_stream("stdin").read()


def _machine(
    profile: str | None, best_effort: bool | None, config_path: Path | None
) -> Machine:
    options = config.resolve_options(config_path, profile=profile, best_effort=best_effort)
    convcommits_log.debug(
        f"profile={options.profile.value} best_effort={str(options.best_effort).lower()}"
    )
    return Machine(options, sink=convcommits_log.LogSink())


def _print_message(message: Message) -> None:
    say(f"type: {message.type}")
    if message.scope is not None:
        say(f"scope: {message.scope}")
    say(f"breaking: {str(message.breaking).lower()}")
    say(f"description: {message.description}")
    if message.body is not None:
        say("body:")
        say(message.body)


def _print_json(message: Message | None, diagnostic: Diagnostic | None) -> None:
    payload = {
        "message": message.model_dump(mode="json") if message is not None else None,
        "diagnostic": diagnostic.to_dict() if diagnostic is not None else None,
    }
    say(json.dumps(payload, indent=2))


_MESSAGE_ARGUMENT = typer.Argument(None, help="Commit message (reads stdin when omitted).")
_FILE_OPTION = typer.Option(None, "--file", "-f", help="Read the commit message from a file.")
_PROFILE_OPTION = typer.Option(
    None,
    "--profile",
    "-p",
    help=f"Keyword profile ({', '.join(PROFILE_VALUES)}).",
    callback=_validate_profile,
)
_BEST_EFFORT_OPTION = typer.Option(
    False,
    "--best-effort",
    help="Report the partial message alongside a diagnostic.",
)
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to a JSON config file.")


@app.command("parse")
def parse_command(
    message: str | None = _MESSAGE_ARGUMENT,
    file: Path | None = _FILE_OPTION,
    profile: str | None = _PROFILE_OPTION,
    best_effort: bool = _BEST_EFFORT_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """Parse a commit message and print its fields."""
    data = _read_input(message, file)
    parsed, diagnostic = _machine(profile, best_effort or None, config_path).parse(data)
    if as_json:
        _print_json(parsed, diagnostic)
        if diagnostic is not None:
            raise typer.Exit(code=1)
        return
    if parsed is not None:
        _print_message(parsed)
    if diagnostic is not None:
        die(f"invalid commit message: {diagnostic}")


@app.command("check")
def check_command(
    message: str | None = _MESSAGE_ARGUMENT,
    file: Path | None = _FILE_OPTION,
    profile: str | None = _PROFILE_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Validate a commit message; the exit code reports the outcome."""
    data = _read_input(message, file)
    _parsed, diagnostic = _machine(profile, False, config_path).parse(data)
    if diagnostic is not None:
        die(f"invalid commit message: {diagnostic}")
    convcommits_log.success("valid commit message")


@hook_app.command("commit-msg")
def commit_msg_hook(
    message_file: Path = typer.Argument(..., help="Commit message file passed by git."),
    profile: str | None = _PROFILE_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Validate the message file git passes to the commit-msg hook."""
    options = config.resolve_options(config_path, profile=profile, best_effort=False)
    error = commit_messages.validate_commit_message_file(
        message_file, options, sink=convcommits_log.LogSink()
    )
    if error:
        die(f"invalid commit message: {error}")


@app.command("profiles")
def profiles_command() -> None:
    """List the commit types each profile recognizes."""
    for profile in Profile:
        say(f"{profile.value}: {', '.join(keywords_for(profile))}")


_REPO_OPTION = typer.Option(Path("."), "--repo", help="Path inside the git repository.")


@hook_app.command("install")
def install_hook_command(
    repo: Path = _REPO_OPTION,
    profile: str | None = _PROFILE_OPTION,
    force: bool = typer.Option(False, "--force", "-F", help="Replace an existing hook."),
) -> None:
    """Install the commit-msg hook into a git repository."""
    hooks_dir = git.git_hooks_dir(repo)
    if hooks_dir is None:
        die(f"not a git repository: {repo}", code=EXIT_USAGE)
    selected = parse_profile(profile) if profile is not None else None
    try:
        path = hooks.install_commit_msg_hook(hooks_dir, selected, force=force)
    except FileExistsError as exc:
        die(str(exc), code=EXIT_USAGE)
    convcommits_log.success(f"installed {path}")


@app.command("lint")
def lint_command(
    rev_range: str = typer.Argument(..., help="Revision range, e.g. main..HEAD."),
    repo: Path = _REPO_OPTION,
    profile: str | None = _PROFILE_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
) -> None:
    """Validate every commit message in a revision range."""
    options = config.resolve_options(config_path, profile=profile, best_effort=False)
    records = git.git_commit_messages(repo, rev_range)
    sink = convcommits_log.LogSink()
    failures = 0
    for record in records:
        error = commit_messages.validate_commit_message(record.message, options, sink=sink)
        if error:
            failures += 1
            convcommits_log.error(f"{record.sha[:12]}: {error}")
    if failures:
        die(f"{failures} of {len(records)} commit messages are invalid")
    convcommits_log.success(f"{len(records)} commit messages are valid")
