"""Fixtures for CLI tests."""

from collections.abc import Iterator

import pytest
from backsync.utils.formatting import console, err_console


@pytest.fixture(autouse=True)
def wide_console() -> Iterator[None]:
    """Render tables wide enough that names are never truncated."""
    widths = (console._width, err_console._width)  # pyright: ignore[reportPrivateUsage]
    console.width = 200
    err_console.width = 200
    yield
    console._width, err_console._width = widths  # pyright: ignore[reportPrivateUsage]
