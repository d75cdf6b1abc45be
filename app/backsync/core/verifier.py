"""Divergence verifier.

Directories carry no reliable timestamp and files deleted from the
source leave no trace, so a target-only entry may either be stale (safe
to delete) or have been added straight into the backup (must be kept).
The verifier estimates the last point at which both trees agreed, the
divergence watermark, and flags every difference that cannot be shown
to be safe. The result is advisory and never blocks applying.
"""

import logging
from collections.abc import Iterable

from backsync.models.difference import Difference

logger = logging.getLogger(__name__)

# Earliest representable timestamp (signed 64-bit nanoseconds)
EARLIEST_TIMESTAMP_NS: int = -(2**63)

PROBLEM_TARGET_NEWER = "NEWER in backup directory"
PROBLEM_TARGET_ONLY_DIR = "Directory exists in backup directory, but NOT in source directory."
PROBLEM_TARGET_ONLY_FILE = (
    "File exists in backup directory, but NOT in source directory "
    "and cannot be verified to be old."
)
PROBLEM_KIND_CONFLICT = (
    "File and directory share this name; the backup node will be replaced entirely."
)


def divergence_watermark(differences: Iterable[Difference]) -> int:
    """Compute the assumed time of the last synchronization.

    This is the newest source-side modification time among the files
    present on both sides with differing timestamps.

    Args:
        differences: Differences produced by the tree differ.

    Returns:
        Watermark in nanoseconds, or EARLIEST_TIMESTAMP_NS if no
        two-sided file difference exists.
    """
    watermark = EARLIEST_TIMESTAMP_NS
    for d in differences:
        times = _file_times(d)
        if times is not None:
            watermark = max(watermark, times[0])
    return watermark


def check(differences: Iterable[Difference]) -> dict[Difference, str]:
    """Flag differences that are unsafe to apply without review.

    Rules:
    - Modified files are problems when the backup copy is newer.
    - Target-only directories are always problems.
    - Target-only files are problems when modified at or after the
      divergence watermark.
    - Source-only differences are never problems.

    Kind conflicts (a file on one side, a directory on the other) are
    flagged as well. That rule is independent of the watermark: applying
    a conflict replaces the whole backup node, so it always needs review.

    Args:
        differences: Differences produced by the tree differ.

    Returns:
        Mapping from each problematic difference to a description.
    """
    diffs = list(differences)
    watermark = divergence_watermark(diffs)
    problems: dict[Difference, str] = {}

    for d in diffs:
        times = _file_times(d)
        if d.is_kind_conflict:
            problems[d] = PROBLEM_KIND_CONFLICT
        elif times is not None and times[1] > times[0]:
            problems[d] = PROBLEM_TARGET_NEWER
        elif d.source is None and d.target is not None:
            if d.target.is_dir:
                problems[d] = PROBLEM_TARGET_ONLY_DIR
            elif d.target.modified is not None and d.target.modified >= watermark:
                problems[d] = PROBLEM_TARGET_ONLY_FILE

    logger.debug("Verified %d difference(s): %d problem(s)", len(diffs), len(problems))
    return problems


def _file_times(difference: Difference) -> tuple[int, int] | None:
    """Get (source, target) mtimes of a file present on both sides."""
    source, target = difference.source, difference.target
    if source is None or target is None:
        return None
    if source.modified is None or target.modified is None:
        return None
    return source.modified, target.modified
