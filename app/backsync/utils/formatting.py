"""Shared Rich consoles and message helpers for CLI output."""

import sys

from rich.console import Console
from rich.text import Text

from backsync.core.theme import get_theme
from backsync.models.entry import printable

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def _make_console(stderr: bool = False) -> Console:
    stream = sys.stderr if stderr else sys.stdout
    # Full hex colours on a terminal, plain text when redirected
    color_system = "truecolor" if stream.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console()
err_console = _make_console(stderr=True)


def format_size(size_bytes: int | None) -> str:
    """Format a byte count as a human-readable string, e.g. "1.5 KB"."""
    size = float(size_bytes or 0)
    for unit in _SIZE_UNITS[:-1]:
        if size < 1024:
            break
        size /= 1024
    else:
        unit = _SIZE_UNITS[-1]
    return f"{int(size)} B" if unit == "B" else f"{size:.1f} {unit}"


def print_info(message: str) -> None:
    console.print(Text(printable(message), style="info"))


def print_success(message: str) -> None:
    console.print(Text(printable(message), style="success"))


def print_warning(message: str) -> None:
    """Print a warning to stderr."""
    err_console.print(Text.assemble(("Warning: ", "warning"), printable(message)))


def print_error(message: str) -> None:
    """Print an error to stderr."""
    err_console.print(Text.assemble(("Error: ", "error"), printable(message)))
