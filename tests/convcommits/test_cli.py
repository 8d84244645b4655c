import json
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

import convcommits.cli as cli

runner = CliRunner()


def test_parse_prints_fields() -> None:
    result = runner.invoke(cli.app, ["parse", "feat(api)!: add x"])

    assert result.exit_code == 0
    assert "type: feat" in result.output
    assert "scope: api" in result.output
    assert "breaking: true" in result.output
    assert "description: add x" in result.output


def test_parse_reports_diagnostic() -> None:
    result = runner.invoke(cli.app, ["parse", "feat!"])

    assert result.exit_code == 1
    assert "invalid commit message: early exit after '!' character: col=04" in result.output
    assert "type:" not in result.output


def test_parse_best_effort_prints_partial_message() -> None:
    result = runner.invoke(cli.app, ["parse", "--best-effort", "feat: x\nbody"])

    assert result.exit_code == 1
    assert "type: feat" in result.output
    assert "body must begin with a blank line: col=08" in result.output


def test_parse_json_output() -> None:
    result = runner.invoke(cli.app, ["parse", "--json", "fix(): x\n\nbody"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload == {
        "message": {
            "type": "fix",
            "scope": "",
            "breaking": False,
            "description": "x",
            "body": "body",
        },
        "diagnostic": None,
    }


def test_parse_json_output_with_diagnostic() -> None:
    result = runner.invoke(cli.app, ["parse", "--json", "nope: x"])

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["message"] is None
    assert payload["diagnostic"] == {
        "kind": "illegal-type-char",
        "message": "illegal 'n' character in commit message type",
        "column": 0,
    }


def test_parse_reads_file(tmp_path: Path) -> None:
    message_file = tmp_path / "msg.txt"
    message_file.write_bytes(b"docs: explain\n\nmore")

    result = runner.invoke(
        cli.app, ["parse", "--file", str(message_file), "--profile", "conventional"]
    )

    assert result.exit_code == 0
    assert "type: docs" in result.output
    assert "more" in result.output


def test_parse_reads_stdin() -> None:
    result = runner.invoke(cli.app, ["parse"], input="fix: from stdin")

    assert result.exit_code == 0
    assert "description: from stdin" in result.output


def test_parse_rejects_message_and_file(tmp_path: Path) -> None:
    message_file = tmp_path / "msg.txt"
    message_file.write_text("fix: x", encoding="utf-8")

    result = runner.invoke(cli.app, ["parse", "fix: x", "--file", str(message_file)])

    assert result.exit_code == 2
    assert "not both" in result.output


def test_parse_rejects_unknown_profile() -> None:
    result = runner.invoke(cli.app, ["parse", "--profile", "angular", "fix: x"], color=False)

    assert result.exit_code != 0
    assert "expected one of" in result.output.lower()


def test_parse_uses_environment_profile(monkeypatch) -> None:
    monkeypatch.setenv("CONVCOMMITS_PROFILE", "falco")

    result = runner.invoke(cli.app, ["parse", "rule: detect"])

    assert result.exit_code == 0
    assert "type: rule" in result.output


def test_parse_uses_config_file(tmp_path: Path) -> None:
    config_file = tmp_path / "convcommits.json"
    config_file.write_text('{"profile": "conventional", "best_effort": true}', encoding="utf-8")

    result = runner.invoke(
        cli.app, ["parse", "--config", str(config_file), "chore: x\nno blank line"]
    )

    assert result.exit_code == 1
    assert "type: chore" in result.output


def test_check_succeeds_quietly() -> None:
    result = runner.invoke(cli.app, ["check", "fix: x"])

    assert result.exit_code == 0
    assert "valid commit message" in result.output


def test_check_fails_on_invalid_message() -> None:
    result = runner.invoke(cli.app, ["check", "feat(a(b)): x"])

    assert result.exit_code == 1
    assert "illegal '(' character in scope: col=06" in result.output


def test_hook_commit_msg_accepts_valid_file(tmp_path: Path) -> None:
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text("# comment\nfeat(worker): bootstrap hooks\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["hook", "commit-msg", str(message_file)])

    assert result.exit_code == 0


def test_hook_commit_msg_rejects_invalid_file(tmp_path: Path) -> None:
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text("update readme\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["hook", "commit-msg", str(message_file)])

    assert result.exit_code == 1
    assert "invalid commit message: illegal 'u' character" in result.output


def test_hook_commit_msg_delegates_to_validator(tmp_path: Path) -> None:
    message_file = tmp_path / "COMMIT_EDITMSG"
    with patch(
        "convcommits.cli.commit_messages.validate_commit_message_file", return_value=None
    ) as validate:
        result = runner.invoke(
            cli.app, ["hook", "commit-msg", str(message_file), "--profile", "falco"]
        )

    assert result.exit_code == 0
    args, kwargs = validate.call_args
    assert args[0] == message_file
    assert args[1].profile.value == "falco"
    assert args[1].best_effort is False
    assert kwargs["sink"] is not None


def test_profiles_lists_keywords() -> None:
    result = runner.invoke(cli.app, ["profiles"])

    assert result.exit_code == 0
    assert "minimal: feat, fix" in result.output
    assert "falco: build, chore, ci, docs, feat, fix, new, perf, revert, rule, test, update" in (
        result.output
    )


def test_version_flag() -> None:
    result = runner.invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert result.output.startswith("convcommits ")


def test_hook_install_writes_hook(tmp_path: Path) -> None:
    hooks_dir = tmp_path / ".git" / "hooks"
    with patch("convcommits.cli.git.git_hooks_dir", return_value=hooks_dir):
        result = runner.invoke(
            cli.app, ["hook", "install", "--repo", str(tmp_path), "--profile", "falco"]
        )

    assert result.exit_code == 0
    assert "--profile falco" in (hooks_dir / "commit-msg").read_text(encoding="utf-8")


def test_hook_install_outside_repository(tmp_path: Path) -> None:
    with patch("convcommits.cli.git.git_hooks_dir", return_value=None):
        result = runner.invoke(cli.app, ["hook", "install", "--repo", str(tmp_path)])

    assert result.exit_code == 2
    assert "not a git repository" in result.output


def test_hook_install_refuses_foreign_hook(tmp_path: Path) -> None:
    (tmp_path / "commit-msg").write_text("#!/bin/sh\n", encoding="utf-8")
    with patch("convcommits.cli.git.git_hooks_dir", return_value=tmp_path):
        result = runner.invoke(cli.app, ["hook", "install"])

    assert result.exit_code == 2
    assert "already exists" in result.output


def test_lint_reports_invalid_commits() -> None:
    records = [
        cli.git.CommitRecord(sha="a" * 40, message="feat: ok\n"),
        cli.git.CommitRecord(sha="b" * 40, message="wip stuff\n"),
        cli.git.CommitRecord(sha="c" * 40, message="Merge branch 'main'\n"),
    ]
    with patch("convcommits.cli.git.git_commit_messages", return_value=records) as log:
        result = runner.invoke(cli.app, ["lint", "main..HEAD"])

    assert result.exit_code == 1
    log.assert_called_once_with(Path("."), "main..HEAD")
    assert "bbbbbbbbbbbb: illegal 'w' character in commit message type: col=00" in result.output
    assert "1 of 3 commit messages are invalid" in result.output


def test_lint_accepts_valid_range() -> None:
    records = [cli.git.CommitRecord(sha="a" * 40, message="docs: x\n")]
    with patch("convcommits.cli.git.git_commit_messages", return_value=records):
        result = runner.invoke(cli.app, ["lint", "HEAD~1..HEAD", "--profile", "conventional"])

    assert result.exit_code == 0
    assert "1 commit messages are valid" in result.output
