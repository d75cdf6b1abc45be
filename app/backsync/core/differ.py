"""Tree differ for comparing a source tree with its backup.

Produces a minimal set of self-contained Difference records: a
directory present on only one side is reported once and never descended
into, while directories present on both sides are searched recursively.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from backsync.core.snapshot import scan
from backsync.models.difference import ChangeType, Difference

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Result of comparing a source tree with a target tree.

    Attributes:
        differences: All differences found, in display order.
    """

    differences: tuple[Difference, ...]

    @classmethod
    def from_differences(cls, differences: Iterable[Difference]) -> DiffResult:
        """Build a result with differences sorted for display.

        Args:
            differences: Differences in any order.

        Returns:
            DiffResult with differences ordered by path.
        """
        return cls(differences=tuple(sorted(differences, key=lambda d: d.sort_key)))

    @property
    def is_in_sync(self) -> bool:
        """Check if the trees are identical.

        Returns:
            True if there are no differences, False otherwise.
        """
        return not self.differences

    @property
    def modified(self) -> tuple[Difference, ...]:
        """Differences present on both sides."""
        return self._of(ChangeType.MODIFIED)

    @property
    def new(self) -> tuple[Difference, ...]:
        """Differences present only in source."""
        return self._of(ChangeType.NEW)

    @property
    def deleted(self) -> tuple[Difference, ...]:
        """Differences present only in target."""
        return self._of(ChangeType.DELETED)

    @property
    def total_changes(self) -> int:
        """Total number of differences found."""
        return len(self.differences)

    def _of(self, change: ChangeType) -> tuple[Difference, ...]:
        return tuple(d for d in self.differences if d.change == change)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the diff result.
        """
        return {
            "in_sync": self.is_in_sync,
            "summary": {
                "modified": len(self.modified),
                "new": len(self.new),
                "deleted": len(self.deleted),
                "total": self.total_changes,
            },
            "differences": [d.to_dict() for d in self.differences],
        }


def compare(
    source_root: str,
    target_root: str,
    exclude: Sequence[str] = (),
) -> list[Difference]:
    """Compare two directory trees.

    Reads both trees and never modifies either of them. The order of the
    returned differences follows directory nesting but is otherwise
    unspecified; sort by ``Difference.sort_key`` for display.

    Args:
        source_root: Root of the authoritative source tree.
        target_root: Root of the backup tree.
        exclude: fnmatch-style patterns for entry names to ignore.

    Returns:
        List of differences between the trees.
    """
    collector: list[Difference] = []
    _compare_level(str(source_root), str(target_root), tuple(exclude), collector)
    logger.debug(
        "Compared %s with %s: %d difference(s)", source_root, target_root, len(collector)
    )
    return collector


def _compare_level(
    source_dir: str,
    target_dir: str,
    exclude: tuple[str, ...],
    collector: list[Difference],
) -> None:
    """Compare one directory level and recurse into shared subdirectories.

    Args:
        source_dir: Directory in the source tree.
        target_dir: Corresponding directory in the target tree.
        exclude: fnmatch-style patterns for entry names to ignore.
        collector: List that receives the differences found.
    """
    source_entries = scan(source_dir, exclude)
    target_entries = scan(target_dir, exclude)

    for name, target_entry in target_entries.items():
        if name not in source_entries:
            collector.append(Difference(source=None, target=target_entry))

    for name, source_entry in source_entries.items():
        target_entry = target_entries.get(name)
        if target_entry is None:
            collector.append(Difference(source=source_entry, target=None))
        elif source_entry.is_dir and target_entry.is_dir:
            _compare_level(source_entry.path, target_entry.path, exclude, collector)
        elif source_entry.kind != target_entry.kind or (
            source_entry.modified != target_entry.modified
        ):
            collector.append(Difference(source=source_entry, target=target_entry))
