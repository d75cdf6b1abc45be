"""Command-line entry point.

Defines the `backsync` Typer application, its global options and the
logging setup shared by all commands.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from backsync import __version__
from backsync.cli.commands import config, diff, sync
from backsync.utils.formatting import err_console

app = typer.Typer(
    name="backsync",
    help="One-way, timestamp-based directory synchronizer for backups.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"backsync version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log everything down to DEBUG; wins over quiet.
        quiet: Log errors only.
    """
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    handler = RichHandler(console=err_console, show_path=False, markup=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every copy and removal."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Log errors only."),
    ] = False,
) -> None:
    """backsync - Keep a backup directory in sync with its source.

    Compares a source tree with a backup tree by modification time,
    flags changes that look unsafe to overwrite, and copies approved
    changes from source to backup. The source is never modified.
    """
    configure_logging(verbose, quiet)


app.command(name="diff")(diff.diff_trees)
app.command(name="sync")(sync.sync_trees)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
