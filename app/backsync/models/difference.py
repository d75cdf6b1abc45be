"""Difference model for a single divergence between source and target.

A Difference has exactly one of three shapes:

- source and target present: same name on both sides, contents differ
  (or one side is a file and the other a directory).
- source only: new in source, or deleted in the backup.
- target only: deleted in source, or new in the backup.

A one-sided Difference whose entry is a directory stands for the whole
subtree below it.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import cast

from backsync.models.entry import Entry, printable


class ChangeType(str, Enum):
    """Shape of a difference.

    Attributes:
        MODIFIED: Present on both sides with differing content.
        NEW: Present only in source.
        DELETED: Present only in target.
    """

    MODIFIED = "modified"
    NEW = "new"
    DELETED = "deleted"


class NodeKind(str, Enum):
    """Kind of the node a difference refers to.

    Attributes:
        FILE: All present sides are files.
        DIRECTORY: All present sides are directories.
        CONFLICT: One side is a file and the other a directory.
    """

    FILE = "file"
    DIRECTORY = "directory"
    CONFLICT = "conflict"


def _kind_label(entry: Entry) -> str:
    return "DIR" if entry.is_dir else "FILE"


@dataclass(frozen=True, slots=True)
class Difference:
    """A single unit of divergence between the source and target trees.

    Attributes:
        source: Entry in the source tree, or None if absent there.
        target: Entry in the target tree, or None if absent there.
    """

    source: Entry | None
    target: Entry | None

    def __post_init__(self) -> None:
        """Validate difference data after initialization."""
        if self.source is None and self.target is None:
            msg = "Difference requires at least one side"
            raise ValueError(msg)
        if (
            self.source is not None
            and self.target is not None
            and self.source.name != self.target.name
        ):
            msg = f"Entry names differ: {self.source.name!r} != {self.target.name!r}"
            raise ValueError(msg)

    @property
    def change(self) -> ChangeType:
        """Shape of this difference."""
        if self.source is not None and self.target is not None:
            return ChangeType.MODIFIED
        if self.source is not None:
            return ChangeType.NEW
        return ChangeType.DELETED

    @property
    def node_kind(self) -> NodeKind:
        """Kind of the node, reporting a conflict when the sides disagree."""
        entries = [e for e in (self.source, self.target) if e is not None]
        if all(e.is_dir for e in entries):
            return NodeKind.DIRECTORY
        if all(e.is_file for e in entries):
            return NodeKind.FILE
        return NodeKind.CONFLICT

    @property
    def is_kind_conflict(self) -> bool:
        """Check if one side is a file and the other a directory."""
        return self.node_kind == NodeKind.CONFLICT

    @property
    def name(self) -> str:
        """Base name shared by both sides."""
        return self.entry.name

    @property
    def entry(self) -> Entry:
        """The source entry if present, otherwise the target entry."""
        return cast(Entry, self.source or self.target)

    @property
    def sort_key(self) -> str:
        """Key used to order differences for display."""
        return self.entry.sort_key

    @property
    def source_is_newer(self) -> bool | None:
        """Whether the source file is newer than the target file.

        Returns:
            True or False for two-sided file differences, None otherwise.
        """
        source, target = self.source, self.target
        if source is None or target is None:
            return None
        if source.modified is None or target.modified is None:
            return None
        return source.modified > target.modified

    def _kind_text(self) -> str:
        source, target = self.source, self.target
        if source is not None and target is not None and source.kind != target.kind:
            return f"{_kind_label(source)}->{_kind_label(target)}"
        return _kind_label(self.entry)

    def describe(self) -> str:
        """Describe this difference in a full sentence.

        Returns:
            Human-readable one-line description.
        """
        kind = self._kind_text()
        name = self.entry.display_name
        if self.change == ChangeType.NEW:
            return f"NEW in source (or deleted in backup): {kind}[{name}]"
        if self.change == ChangeType.DELETED:
            return f"DELETED in source (or new in backup): {kind}[{name}]"
        if self.is_kind_conflict:
            return f"MODIFIED (kind changed): {kind}[{name}]"
        newer = "source is newer" if self.source_is_newer else "backup is newer"
        return f"MODIFIED ({newer}): {kind}[{name}]"

    def describe_short(self) -> str:
        """Describe this difference compactly, for checklists.

        Returns:
            Short one-line description.
        """
        kind = self._kind_text()
        name = self.entry.display_name
        if self.change == ChangeType.NEW:
            return f'NEW: {kind}["{name}"]'
        if self.change == ChangeType.DELETED:
            return f'DELETED: {kind}["{name}"]'
        if self.is_kind_conflict:
            return f'MODIFIED (kind changed): {kind}["{name}"]'
        newer = "source new" if self.source_is_newer else "backup new"
        return f'MODIFIED ({newer}): {kind}["{name}"]'

    def relative_directory(self, source_root: str, target_root: str) -> str:
        """Directory containing this node, relative to its own tree root.

        Args:
            source_root: Root of the source tree.
            target_root: Root of the target tree.

        Returns:
            Printable relative directory path, "." for nodes directly
            under the root.
        """
        root = source_root if self.source is not None else target_root
        return printable(os.path.relpath(os.path.dirname(self.entry.path), root))

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization.

        Names and paths are made printable, so the result always encodes
        as UTF-8.

        Returns:
            Dictionary representation of the difference.
        """
        return {
            "name": self.entry.display_name,
            "change": self.change.value,
            "node_kind": self.node_kind.value,
            "summary": self.describe_short(),
            "source": _entry_to_dict(self.source),
            "target": _entry_to_dict(self.target),
        }


def _entry_to_dict(entry: Entry | None) -> dict[str, object] | None:
    """Convert an Entry to a dictionary.

    Args:
        entry: The Entry to convert, or None.

    Returns:
        Dictionary with path, kind and modification time, or None.
    """
    if entry is None:
        return None
    return {
        "path": printable(entry.path),
        "kind": entry.kind.value,
        "modified": entry.modified_iso,
    }
