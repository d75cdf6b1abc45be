"""Synchronizer configuration and settings.

Configuration is stored in ~/.config/backsync/config.toml. A missing
file means defaults; a malformed file is an error.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from backsync.core.paths import get_config_path

logger = logging.getLogger(__name__)

# How approval is obtained before applying
SyncMode = Literal["confirm", "select", "apply"]

DEFAULT_CONFIRM_WORD = "continue"


class SyncConfig(BaseModel):
    """Configuration for backsync.

    Attributes:
        exclude: fnmatch patterns for entry names ignored in both trees.
        default_mode: Approval mode used when --mode is not given.
        confirm_word: Word the user must type to approve in confirm mode.
    """

    model_config = ConfigDict(extra="forbid")

    exclude: Annotated[
        list[str],
        Field(description="Entry name patterns to ignore"),
    ] = []
    default_mode: Annotated[
        SyncMode,
        Field(description="Approval mode: confirm, select or apply"),
    ] = "confirm"
    confirm_word: Annotated[
        str,
        Field(min_length=1, description="Word to type to approve all changes"),
    ] = DEFAULT_CONFIRM_WORD

    @field_validator("exclude")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Reject empty patterns and patterns containing path separators."""
        for pattern in v:
            if not pattern.strip():
                msg = "exclude patterns cannot be empty"
                raise ValueError(msg)
            if "/" in pattern:
                msg = f"exclude patterns match names, not paths: {pattern!r}"
                raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> SyncConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated SyncConfig; defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content doesn't
            match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return SyncConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return SyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: SyncConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The SyncConfig object to save.
        path: Path to save the config. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
