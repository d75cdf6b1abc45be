"""Shared Rich display functions for differences and results.

Provides reusable table builders and summary printers for the diff and
sync commands.
"""

from collections.abc import Mapping, Sequence

from rich.markup import escape
from rich.table import Table

from backsync.models.difference import ChangeType, Difference
from backsync.models.entry import printable
from backsync.models.result import ApplyOperation, ApplyResult
from backsync.utils.formatting import console, format_size, print_success

_CHANGE_STYLES: dict[ChangeType, tuple[str, str]] = {
    ChangeType.NEW: ("[+]", "added"),
    ChangeType.DELETED: ("[x]", "removed"),
    ChangeType.MODIFIED: ("[~]", "changed"),
}


def create_differences_table(
    differences: Sequence[Difference],
    problems: Mapping[Difference, str],
    source_root: str,
    target_root: str,
    approved: Sequence[bool] | None = None,
) -> Table:
    """Create a Rich table displaying differences.

    Args:
        differences: Differences to display, in display order.
        problems: Problem descriptions keyed by difference.
        source_root: Root of the source tree.
        target_root: Root of the target tree.
        approved: Approval flag per difference. When given, the table is
            numbered and shows a checkbox column.

    Returns:
        Rich Table configured for difference display.
    """
    table = Table(
        title="Differences",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    if approved is not None:
        table.add_column("#", justify="right", width=4)
        table.add_column("", width=3, justify="center")
    table.add_column("Status", width=6, justify="center")
    table.add_column("Difference", no_wrap=True)
    table.add_column("Directory", style="muted")
    table.add_column("Problem")

    for index, d in enumerate(differences):
        icon, style = _CHANGE_STYLES[d.change]
        problem = problems.get(d)
        row = [
            f"[{style}]{escape(icon)}[/{style}]",
            f"[{style}]{escape(d.describe_short())}[/{style}]",
            escape(d.relative_directory(source_root, target_root)),
            f"[problem]{escape(problem)}[/problem]" if problem else "",
        ]
        if approved is not None:
            mark = "[success]x[/success]" if approved[index] else " "
            row = [str(index + 1), mark, *row]
        table.add_row(*row)

    return table


def print_diff_summary(
    differences: Sequence[Difference],
    problems: Mapping[Difference, str],
) -> None:
    """Print a summary line of differences and problems.

    Args:
        differences: All differences found.
        problems: Problem descriptions keyed by difference.
    """
    counts = {change: 0 for change in ChangeType}
    for d in differences:
        counts[d.change] += 1

    parts: list[str] = []
    if counts[ChangeType.NEW]:
        parts.append(f"[added]{counts[ChangeType.NEW]} new[/added]")
    if counts[ChangeType.MODIFIED]:
        parts.append(f"[changed]{counts[ChangeType.MODIFIED]} modified[/changed]")
    if counts[ChangeType.DELETED]:
        parts.append(f"[removed]{counts[ChangeType.DELETED]} deleted[/removed]")

    if not parts:
        console.print("\n[muted]No differences found.[/muted]")
        return

    console.print(f"\nSummary: {', '.join(parts)} ({len(differences)} total differences)")
    if problems:
        console.print(f"[problem]{len(problems)} problem(s) need review.[/problem]")


def create_results_table(results: Sequence[ApplyResult]) -> Table:
    """Create a Rich table displaying apply results.

    Args:
        results: Results to display.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Action", width=8)
    table.add_column("Difference", no_wrap=True)
    table.add_column("Message")

    for result in results:
        if result.dry_run:
            status = "[info]dry-run[/info]"
            message = "Would " + result.operation.value
        elif result.success:
            status = "[success]OK[/success]"
            message = (
                "removed"
                if result.operation == ApplyOperation.REMOVE
                else f"{format_size(result.bytes_written)} written"
            )
        else:
            status = "[error]FAIL[/error]"
            message = printable(result.error or "Unknown error")

        table.add_row(
            status,
            result.operation.value,
            escape(result.difference.describe_short()),
            f"[muted]{escape(message)}[/muted]",
        )

    return table


def print_results_summary(results: Sequence[ApplyResult]) -> None:
    """Print a summary of apply results.

    Args:
        results: List of apply results.
    """
    if any(r.dry_run for r in results):
        console.print(f"\n[info]Dry-run: {len(results)} difference(s) would be applied.[/info]")
        return

    success_count = sum(1 for r in results if r.success)
    fail_count = sum(1 for r in results if r.failed)
    written = sum(r.bytes_written for r in results)

    if fail_count == 0:
        print_success(
            f"All {success_count} difference(s) applied successfully "
            f"({format_size(written)} written)."
        )
    else:
        console.print(
            f"\n[success]{success_count} succeeded[/success], [error]{fail_count} failed[/error]"
        )
