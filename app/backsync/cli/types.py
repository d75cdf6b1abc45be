"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

import os
from enum import Enum
from pathlib import Path

import typer

from backsync.core.config import ConfigError, SyncConfig, load_config
from backsync.utils.formatting import print_error


class ModeChoice(str, Enum):
    """How differences are approved before applying."""

    CONFIRM = "confirm"
    SELECT = "select"
    APPLY = "apply"


class RootsError(ValueError):
    """Raised when the source and target paths cannot be synchronized."""


def validate_roots(source: Path, target: Path) -> tuple[str, str]:
    """Check that two paths form a valid source/target pair.

    Args:
        source: Source directory.
        target: Target (backup) directory.

    Returns:
        Tuple of (source, target) as absolute path strings.

    Raises:
        RootsError: If either path is not a directory, both are the same,
            or one lies inside the other.
    """
    if not source.is_dir():
        raise RootsError(f"Source path is not a directory: {source}")
    if not target.is_dir():
        raise RootsError(f"Backup path is not a directory: {target}")

    real_source = os.path.realpath(source)
    real_target = os.path.realpath(target)
    if real_source == real_target:
        raise RootsError("Source path is the same as backup path.")
    if os.path.commonpath([real_source, real_target]) in (real_source, real_target):
        raise RootsError("Source and backup paths must not be nested inside each other.")

    return os.path.abspath(source), os.path.abspath(target)


def resolve_roots(source: Path, target: Path) -> tuple[str, str]:
    """Validate the source/target pair or exit with an error.

    Raises:
        typer.Exit: If the paths are invalid.
    """
    try:
        return validate_roots(source, target)
    except RootsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def require_config() -> SyncConfig:
    """Load the configuration or exit with an error.

    Raises:
        typer.Exit: If the config file is invalid.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
