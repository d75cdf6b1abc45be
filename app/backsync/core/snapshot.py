"""Directory snapshots.

Lists the immediate children of one directory as Entry objects keyed by
name. Unreadable or missing directories produce an empty snapshot so a
comparison never aborts halfway through a tree.
"""

import fnmatch
import logging
import os
from collections.abc import Iterable

from backsync.models.entry import Entry, EntryKind

logger = logging.getLogger(__name__)


def is_excluded(name: str, exclude: Iterable[str]) -> bool:
    """Check if an entry name matches any exclude pattern.

    Args:
        name: Base name of the entry.
        exclude: fnmatch-style patterns.

    Returns:
        True if the name matches at least one pattern.
    """
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in exclude)


def scan(directory: str, exclude: Iterable[str] = ()) -> dict[str, Entry]:
    """Snapshot the immediate children of a directory.

    Symbolic links are followed. Children whose metadata cannot be read
    (for example dangling symlinks) are skipped with a warning.

    Args:
        directory: Directory to list.
        exclude: fnmatch-style patterns for names to leave out.

    Returns:
        Mapping from entry name to Entry. Empty if the directory does not
        exist or cannot be read.
    """
    patterns = tuple(exclude)
    entries: dict[str, Entry] = {}

    try:
        with os.scandir(directory) as it:
            children = list(it)
    except FileNotFoundError:
        logger.debug("Directory does not exist: %s", directory)
        return entries
    except OSError as e:
        logger.warning("Cannot read directory %s: %s", directory, e)
        return entries

    for child in children:
        if patterns and is_excluded(child.name, patterns):
            continue
        try:
            if child.is_dir():
                entry = Entry(path=child.path, name=child.name, kind=EntryKind.DIRECTORY)
            else:
                entry = Entry(
                    path=child.path,
                    name=child.name,
                    kind=EntryKind.FILE,
                    modified=child.stat().st_mtime_ns,
                )
        except OSError as e:
            logger.warning("Cannot read metadata of %s: %s", child.path, e)
            continue
        entries[entry.name] = entry

    return entries
