"""Sync command implementation.

Runs the full pipeline for one source/backup pair: compare, verify,
obtain approval, apply. Approval depends on the mode:

- confirm: show everything, then type the confirmation word to apply all.
- select: toggle individual differences; problems start deselected.
- apply: apply every difference without asking.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from backsync.cli.display import (
    create_differences_table,
    create_results_table,
    print_diff_summary,
    print_results_summary,
)
from backsync.cli.types import ModeChoice, require_config, resolve_roots
from backsync.core.session import SyncSession
from backsync.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)


def sync_trees(
    source: Annotated[
        Path,
        typer.Argument(help="Source directory (never modified)."),
    ],
    target: Annotated[
        Path,
        typer.Argument(help="Backup directory to update."),
    ],
    mode: Annotated[
        ModeChoice | None,
        typer.Option(
            "--mode",
            "-m",
            help="Approval mode: confirm, select or apply (default from config).",
            case_sensitive=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be done without changing anything."),
    ] = False,
) -> None:
    """Bring a backup directory in line with its source.

    Examples:
        backsync sync ~/docs /mnt/backup/docs
        backsync sync ~/docs /mnt/backup/docs --mode select
        backsync sync ~/docs /mnt/backup/docs --dry-run
    """
    source_root, target_root = resolve_roots(source, target)
    config = require_config()
    selected_mode = mode or ModeChoice(config.default_mode)

    session = SyncSession(source_root, target_root, exclude=config.exclude)
    session.analyze()

    if not session.selections:
        print_success("Found NO differences. Backup is up-to-date.")
        return

    _print_session(session, numbered=False)

    if selected_mode == ModeChoice.CONFIRM:
        if not dry_run and not _confirm_all(session, config.confirm_word):
            print_info("Aborted.")
            raise typer.Exit(code=0)
        session.set_all(True)
    elif selected_mode == ModeChoice.SELECT:
        _select_interactively(session)
        count = len(session.approved())
        if count == 0:
            print_info("Nothing selected. Aborted.")
            raise typer.Exit(code=0)
        if not dry_run and not typer.confirm(
            f"\nApply {count} selected difference(s)?",
            default=False,
        ):
            print_info("Aborted.")
            raise typer.Exit(code=0)
    else:
        session.set_all(True)

    results = session.apply_selected(dry_run=dry_run)

    console.print(create_results_table(results))
    print_results_summary(results)

    if not dry_run and session.selections:
        print_warning(f"{len(session.selections)} difference(s) remain between source and backup.")

    if any(r.failed for r in results):
        raise typer.Exit(code=1)


def _print_session(session: SyncSession, numbered: bool) -> None:
    """Display the current differences of a session."""
    differences = [s.difference for s in session.selections]
    approved = [s.approved for s in session.selections] if numbered else None
    console.print(
        create_differences_table(
            differences,
            session.problems,
            session.source_root,
            session.target_root,
            approved=approved,
        )
    )
    if not numbered:
        print_diff_summary(differences, session.problems)


def _confirm_all(session: SyncSession, confirm_word: str) -> bool:
    """Ask the user to type the confirmation word to apply everything.

    Returns:
        True if the user typed the confirmation word.
    """
    count = len(session.selections)
    if session.problems:
        console.print(
            "\n[problem]Problems found (see above).[/problem] "
            "Please study the problems carefully and decide how to proceed."
        )
    else:
        console.print(
            f"\n{count} difference(s) found. 0 problems were detected, "
            "but there is no guarantee that this is correct."
        )
    answer = typer.prompt(
        f'To override ALL {count} difference(s) in the backup, type "{confirm_word}"',
        default="",
        show_default=False,
    )
    return answer.strip() == confirm_word


def _select_interactively(session: SyncSession) -> None:
    """Let the user toggle differences until they press Enter."""
    while True:
        _print_session(session, numbered=True)
        answer = typer.prompt(
            "Toggle numbers (e.g. '1 3'), 'all', 'none', or Enter to continue",
            default="",
            show_default=False,
        ).strip()
        if not answer:
            return
        if answer.lower() == "all":
            session.set_all(True)
            continue
        if answer.lower() == "none":
            session.set_all(False)
            continue
        for token in answer.replace(",", " ").split():
            try:
                session.toggle(int(token) - 1)
            except ValueError:
                print_error(f"Not a number: {token}")
            except IndexError as e:
                print_error(str(e))
