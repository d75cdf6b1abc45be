"""Config commands.

Shows, creates and locates the backsync configuration file.
"""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from backsync.cli.types import require_config
from backsync.core.config import ConfigError, SyncConfig, save_config
from backsync.core.paths import get_config_path
from backsync.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the configuration file.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    config = require_config()
    path = get_config_path()

    table = Table(
        title="Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    table.add_row("exclude", escape(", ".join(config.exclude)) or "[muted]-[/muted]")
    table.add_row("default_mode", config.default_mode)
    table.add_row("confirm_word", escape(config.confirm_word))

    console.print(table)
    if path.exists():
        console.print(f"[muted]Loaded from {escape(str(path))}[/muted]")
    else:
        console.print("[muted]No config file found, showing defaults.[/muted]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_info(f"Config already exists: {path} (use --force to overwrite)")
        return

    try:
        saved = save_config(SyncConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Config written: {saved}")


@app.command()
def path() -> None:
    """Print the config file path."""
    typer.echo(str(get_config_path()))
