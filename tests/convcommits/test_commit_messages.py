from __future__ import annotations

from pathlib import Path

import pytest

from convcommits import commit_messages
from convcommits.config import ParserOptions
from convcommits.profiles import Profile

from tests.convcommits.helpers import RecordingSink


def test_clean_commit_message_strips_comments_and_blank_edges() -> None:
    text = (
        "\n# Please enter the commit message\n"
        "feat(worker): bootstrap hooks   \n\nbody\n# trailing\n\n"
    )
    assert commit_messages.clean_commit_message(text) == "feat(worker): bootstrap hooks\n\nbody"


def test_clean_commit_message_stops_at_scissors() -> None:
    text = (
        "fix: x\n"
        "# ------------------------ >8 ------------------------\n"
        "diff --git a/file b/file\n"
    )
    assert commit_messages.clean_commit_message(text) == "fix: x"


def test_clean_commit_message_custom_comment_char() -> None:
    assert commit_messages.clean_commit_message("; note\nfix: x\n", comment_char=";") == "fix: x"


def test_validate_commit_message_accepts_valid_message() -> None:
    assert commit_messages.validate_commit_message("feat(worker): bootstrap hooks\n") is None


def test_validate_commit_message_reports_diagnostic() -> None:
    error = commit_messages.validate_commit_message("feat(worker) bootstrap hooks\n")
    assert error == "expecting colon (':') character, got ' ' character: col=12"


def test_validate_commit_message_requires_blank_line_before_body() -> None:
    error = commit_messages.validate_commit_message("fix: x\nbody\n")
    assert error == "body must begin with a blank line: col=07"


def test_validate_commit_message_uses_profile() -> None:
    options = ParserOptions(profile=Profile.CONVENTIONAL)
    assert commit_messages.validate_commit_message("docs: explain hooks", options) is None
    assert commit_messages.validate_commit_message("docs: explain hooks") is not None


def test_validate_commit_message_ignores_generated_headers() -> None:
    assert commit_messages.validate_commit_message("Merge branch 'main' into topic\n") is None
    assert commit_messages.validate_commit_message("fixup! feat: x\n") is None
    assert commit_messages.validate_commit_message("# only comments\n") is None


def test_validate_commit_message_forwards_sink() -> None:
    sink = RecordingSink()
    commit_messages.validate_commit_message("fix: x\n", sink=sink)
    assert "valid commit message description" in sink.messages()


def test_validate_commit_message_file_uses_cleaned_text(tmp_path: Path) -> None:
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_text(
        "# comment\n\nfeat(worker): bootstrap hooks\n\nbody\n",
        encoding="utf-8",
    )
    assert commit_messages.validate_commit_message_file(message_file) is None


def test_validate_commit_message_file_reports_read_errors(tmp_path: Path) -> None:
    error = commit_messages.validate_commit_message_file(tmp_path / "missing")
    assert error is not None
    assert error.startswith("failed to read commit message file:")


@pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x1e", "\x85", "\u2028", "\u2029"])
def test_clean_commit_message_splits_on_newlines_only(separator: str) -> None:
    text = f"fix: page{separator}break\n"
    assert commit_messages.clean_commit_message(text) == f"fix: page{separator}break"
    assert commit_messages.validate_commit_message(text) is None


def test_clean_commit_message_trims_each_line() -> None:
    text = "fix: x \t\r\n\r\nbody line  \nlast\t\n"
    assert commit_messages.clean_commit_message(text) == "fix: x\n\nbody line\nlast"


def test_validate_commit_message_file_accepts_non_utf8_bytes(tmp_path: Path) -> None:
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_bytes(b"# latin-1 editor\nfeat: caf\xe9 cr\xe8me\n\nd\xe9tails\n")
    assert commit_messages.validate_commit_message_file(message_file) is None


def test_validate_commit_message_file_reports_byte_columns(tmp_path: Path) -> None:
    message_file = tmp_path / "COMMIT_EDITMSG"
    message_file.write_bytes(b"feat(caf\xe9) x\n")
    error = commit_messages.validate_commit_message_file(message_file)
    assert error == "expecting colon (':') character, got ' ' character: col=10"
