"""Parser configuration.

Options are read from (lowest precedence first) built-in defaults, the user
config file, an explicit config file, ``CONVCOMMITS_*`` environment
variables, and finally explicit overrides such as CLI flags. Every layer is
validated with ``ParserOptions``.

Example:
    >>> ParserOptions.model_validate({"profile": " Falco ", "best_effort": "yes"})
    ParserOptions(profile=<Profile.FALCO: 'falco'>, best_effort=True)
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from . import paths
from .io import EXIT_USAGE, die
from .profiles import Profile, parse_profile

PROFILE_ENV_VAR = "CONVCOMMITS_PROFILE"
BEST_EFFORT_ENV_VAR = "CONVCOMMITS_BEST_EFFORT"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


class ParserOptions(BaseModel):
    """Options controlling one ``Machine``.

    Attributes:
        profile: Keyword profile recognized as commit types.
        best_effort: Return partial messages alongside diagnostics.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    profile: Profile = Profile.MINIMAL
    best_effort: bool = False

    @field_validator("profile", mode="before")
    @classmethod
    def normalize_profile(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return parse_profile(value)
        return value

    @field_validator("best_effort", mode="before")
    @classmethod
    def normalize_best_effort(cls, value: object) -> object:
        if value is None:
            return False
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in _TRUE_VALUES:
                return True
            if normalized in _FALSE_VALUES:
                return False
        return value


def load_json(path: Path) -> dict | None:
    """Load a JSON object from ``path``.

    Returns:
        Parsed payload, or ``None`` when the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        die(f"failed to read config at {path}: {exc}", code=EXIT_USAGE)
    if not isinstance(payload, dict):
        die(f"invalid convcommits config at {path}: expected a JSON object", code=EXIT_USAGE)
    return payload


def parse_options(payload: Mapping[str, object], source: Path | str | None = None) -> ParserOptions:
    """Validate a config payload."""
    try:
        return ParserOptions.model_validate(dict(payload))
    except ValidationError as exc:
        location = f" at {source}" if source else ""
        die(f"invalid convcommits config{location}:\n{exc}", code=EXIT_USAGE)


def env_overrides(env: Mapping[str, str] | None = None) -> dict[str, object]:
    """Return option overrides taken from ``CONVCOMMITS_*`` variables."""
    source = os.environ if env is None else env
    overrides: dict[str, object] = {}
    profile = source.get(PROFILE_ENV_VAR, "").strip()
    if profile:
        overrides["profile"] = profile
    best_effort = source.get(BEST_EFFORT_ENV_VAR, "").strip()
    if best_effort:
        overrides["best_effort"] = best_effort
    return overrides


def resolve_options(
    config_path: Path | None = None,
    *,
    profile: str | Profile | None = None,
    best_effort: bool | None = None,
    env: Mapping[str, str] | None = None,
    user_config: Path | None = None,
) -> ParserOptions:
    """Merge every configuration layer into one ``ParserOptions``.

    Args:
        config_path: Explicit config file; it must exist when given.
        profile: Override from the caller (e.g. ``--profile``).
        best_effort: Override from the caller (e.g. ``--best-effort``).
        env: Environment mapping; defaults to ``os.environ``.
        user_config: User config file; defaults to the platform location.

    Returns:
        Validated options.
    """
    merged: dict[str, object] = {}
    user_path = user_config if user_config is not None else paths.user_config_path()
    user_payload = load_json(user_path)
    if user_payload:
        parse_options(user_payload, source=user_path)
        merged.update(user_payload)
    if config_path is not None:
        if not config_path.exists():
            die(f"config file not found: {config_path}", code=EXIT_USAGE)
        payload = load_json(config_path) or {}
        parse_options(payload, source=config_path)
        merged.update(payload)
    merged.update(env_overrides(env))
    if profile is not None:
        merged["profile"] = profile
    if best_effort is not None:
        merged["best_effort"] = best_effort
    return parse_options(merged)
