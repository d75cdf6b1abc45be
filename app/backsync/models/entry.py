"""Entry model for filesystem objects observed during a scan.

An Entry is an ephemeral snapshot of one child of a directory. Entries
are matched across trees by ``name`` and ordered for display by ``path``;
these are two independent relations and the dataclass itself defines
neither ordering nor name-based equality.
"""

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum


def printable(text: str) -> str:
    """Make a file name or path safe to print.

    Bytes that are not valid UTF-8 come back from the OS as lone
    surrogates, which no output stream can encode. They are shown as
    backslash escapes instead, e.g. "bad\\xff.txt".

    Args:
        text: Name or path as returned by os functions.

    Returns:
        Text that encodes cleanly as UTF-8.
    """
    return os.fsencode(text).decode("utf-8", "backslashreplace")


class EntryKind(str, Enum):
    """Kind of filesystem object.

    Attributes:
        FILE: Anything that is not a directory (regular file, fifo, ...).
        DIRECTORY: Directory (symlinks to directories are followed).
    """

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class Entry:
    """One filesystem object as observed during a scan.

    Attributes:
        path: Full path of the object, used for all I/O.
        name: Base name, used to match entries between trees.
        kind: File or directory.
        modified: Modification time in nanoseconds since the epoch for
            files. Always None for directories, whose timestamps are not
            reliable across filesystems.
    """

    path: str
    name: str
    kind: EntryKind
    modified: int | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name:
            msg = "Entry name cannot be empty"
            raise ValueError(msg)
        if self.kind == EntryKind.DIRECTORY and self.modified is not None:
            msg = f"Directory entries carry no modification time: {self.path}"
            raise ValueError(msg)
        if self.kind == EntryKind.FILE and self.modified is None:
            msg = f"File entries require a modification time: {self.path}"
            raise ValueError(msg)

    @property
    def is_dir(self) -> bool:
        """Check if this entry is a directory."""
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        """Check if this entry is a file."""
        return self.kind == EntryKind.FILE

    @property
    def display_name(self) -> str:
        """Name safe to print or serialize."""
        return printable(self.name)

    @property
    def sort_key(self) -> str:
        """Key used to order entries for display."""
        return self.path

    @property
    def modified_iso(self) -> str | None:
        """Modification time as an ISO 8601 string (None for directories)."""
        if self.modified is None:
            return None
        dt = datetime.fromtimestamp(self.modified / 1_000_000_000, tz=UTC)
        return dt.isoformat()
