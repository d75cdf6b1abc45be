"""XDG-compliant locations of the backsync configuration files.

Everything lives in $XDG_CONFIG_HOME/backsync/, falling back to
~/.config/backsync/.
"""

import os
from pathlib import Path

APP_NAME = "backsync"


def get_config_dir() -> Path:
    """Get the configuration directory.

    An unset or empty XDG_CONFIG_HOME falls back to ~/.config.
    """
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


def get_config_path() -> Path:
    """Get the path of config.toml."""
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the path of the user's theme.toml overrides."""
    return get_config_dir() / "theme.toml"
