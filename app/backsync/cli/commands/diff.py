"""Diff command implementation.

Compares a source tree with its backup and shows every difference,
highlighting the ones that look unsafe to apply. Never modifies either
tree.
"""

import json
from pathlib import Path
from typing import Annotated, cast

import typer

from backsync.cli.display import create_differences_table, print_diff_summary
from backsync.cli.types import require_config, resolve_roots
from backsync.core.differ import DiffResult, compare
from backsync.core.verifier import check
from backsync.models.difference import Difference
from backsync.utils.formatting import console, print_error, print_info, print_success


def diff_trees(
    source: Annotated[
        Path,
        typer.Argument(help="Source directory (never modified)."),
    ],
    target: Annotated[
        Path,
        typer.Argument(help="Backup directory to compare against."),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
    export_path: Annotated[
        Path | None,
        typer.Option(
            "--export",
            "-e",
            help="Export results to JSON file.",
        ),
    ] = None,
    problems_only: Annotated[
        bool,
        typer.Option(
            "--problems-only",
            "-p",
            help="Show only differences flagged as problems.",
        ),
    ] = False,
) -> None:
    """Compare a source directory with its backup.

    Difference types:
      [+] NEW: Only in source (or deleted in backup)
      [x] DELETED: Only in backup (or deleted in source)
      [~] MODIFIED: In both, with differing modification times

    Examples:
        backsync diff ~/docs /mnt/backup/docs
        backsync diff ~/docs /mnt/backup/docs --json
    """
    source_root, target_root = resolve_roots(source, target)
    config = require_config()

    result = DiffResult.from_differences(compare(source_root, target_root, config.exclude))
    problems = check(result.differences)

    shown: tuple[Difference, ...] = result.differences
    if problems_only:
        shown = tuple(d for d in shown if d in problems)

    if export_path is not None:
        _export_results(result, problems, export_path)

    if json_output:
        console.print_json(json.dumps(_to_json(result, problems, shown)))
        return

    if result.is_in_sync:
        print_success("Found NO differences. Backup is up-to-date.")
        return

    if shown:
        console.print(create_differences_table(shown, problems, source_root, target_root))
    else:
        print_info("No problems found.")
    print_diff_summary(result.differences, problems)


def _to_json(
    result: DiffResult,
    problems: dict[Difference, str],
    shown: tuple[Difference, ...],
) -> dict[str, object]:
    """Build the JSON document for a diff result."""
    data = result.to_dict()
    summary = cast(dict[str, int], data["summary"])
    summary["problems"] = len(problems)
    data["differences"] = [{**d.to_dict(), "problem": problems.get(d)} for d in shown]
    return data


def _export_results(
    result: DiffResult,
    problems: dict[Difference, str],
    export_path: Path,
) -> None:
    """Export all differences to a JSON file."""
    export_path = export_path.resolve()
    if export_path.is_dir():
        print_error(f"Export path is a directory: {export_path}")
        raise typer.Exit(code=1)

    data = _to_json(result, problems, result.differences)
    try:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(data, indent=2))
        print_info(f"Results exported to {export_path}")
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e
