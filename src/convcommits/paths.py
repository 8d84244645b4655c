"""Path helpers for locating convcommits configuration files."""

from pathlib import Path

from platformdirs import user_config_dir

CONVCOMMITS_APP_NAME = "convcommits"
USER_CONFIG_FILENAME = "config.json"


def convcommits_config_dir() -> Path:
    """Return the base convcommits configuration directory.

    Returns:
        Path to the user config directory for convcommits.

    Example:
        >>> isinstance(convcommits_config_dir(), Path)
        True
    """
    return Path(user_config_dir(CONVCOMMITS_APP_NAME))


def user_config_path() -> Path:
    """Return the path to the user-level defaults file.

    Example:
        >>> user_config_path().name == USER_CONFIG_FILENAME
        True
    """
    return convcommits_config_dir() / USER_CONFIG_FILENAME
