"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

# Whole seconds, so every filesystem stores them exactly
BASE_MTIME_NS = 1_700_000_000 * 1_000_000_000
SECOND_NS = 1_000_000_000

MakeFile = Callable[..., Path]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def trees(tmp_path: Path) -> tuple[Path, Path]:
    """Create empty source and backup directories."""
    source = tmp_path / "source"
    target = tmp_path / "backup"
    source.mkdir()
    target.mkdir()
    return source, target


@pytest.fixture
def make_file() -> MakeFile:
    """Factory writing a file with a given modification time.

    The mtime is given in seconds relative to BASE_MTIME_NS.
    """

    def _make(path: Path, content: str = "content", age: int = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        mtime = BASE_MTIME_NS + age * SECOND_NS
        os.utime(path, ns=(mtime, mtime))
        return path

    return _make


@pytest.fixture
def mtime_of() -> Callable[[Path], int]:
    """Return a path's modification time in nanoseconds."""

    def _mtime(path: Path) -> int:
        return path.stat().st_mtime_ns

    return _mtime
