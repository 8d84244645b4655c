# ruff: noqa: E402

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import convcommits.config as config
import convcommits.log as convcommits_log
import convcommits.paths as paths


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(paths, "user_config_path", lambda: tmp_path / "user" / "config.json")
    monkeypatch.delenv(config.PROFILE_ENV_VAR, raising=False)
    monkeypatch.delenv(config.BEST_EFFORT_ENV_VAR, raising=False)
    monkeypatch.setattr(convcommits_log, "_configured_level", convcommits_log.LogLevel.INFO)
    monkeypatch.setattr(convcommits_log, "_no_color", True)
