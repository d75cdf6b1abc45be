"""CLI package for backsync.

This package contains the Typer application and all subcommands.
"""

from backsync.cli.main import app

__all__ = ["app"]
