"""CLI commands for backsync.

This package contains all subcommand implementations.
"""

from backsync.cli.commands import config, diff, sync

__all__ = ["config", "diff", "sync"]
