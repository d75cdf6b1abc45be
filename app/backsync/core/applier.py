"""Sync applier.

Propagates approved differences from the source tree into the target
tree. Every difference is applied independently: a failure is recorded
on its result and never stops the remaining differences. Copies are
built under a temporary name beside their destination and moved into
place, so a failed copy or replacement leaves the target as it was. Copied files
keep the source modification time so a fresh comparison afterwards
finds nothing left to do. Nothing under the source root is ever written.
"""

import logging
import os
import shutil
import tempfile
from collections.abc import Iterable, Sequence

from backsync.core.snapshot import is_excluded
from backsync.models.difference import ChangeType, Difference
from backsync.models.entry import Entry
from backsync.models.result import ApplyOperation, ApplyResult

logger = logging.getLogger(__name__)

# Prefix of the temporary siblings a copy is built in before it is moved into place
_STAGING_PREFIX = ".backsync-"


class UnsafePathError(OSError):
    """Raised when an operation would touch a path outside the target tree."""


class SyncApplier:
    """Applies differences to the target tree.

    Attributes:
        _dry_run: If True, report planned operations without touching
            the filesystem.
        _exclude: fnmatch patterns for names skipped while copying
            directory subtrees.
    """

    def __init__(self, dry_run: bool = False, exclude: Sequence[str] = ()) -> None:
        """Initialize the SyncApplier.

        Args:
            dry_run: If True, report what would be done without doing it.
            exclude: fnmatch patterns for names to skip inside copied
                subtrees (should match the ones used for comparing).
        """
        self._dry_run = dry_run
        self._exclude = tuple(exclude)

    def apply(
        self,
        source_root: str,
        target_root: str,
        differences: Iterable[Difference],
    ) -> list[ApplyResult]:
        """Apply differences and return one result per difference.

        Args:
            source_root: Root of the source tree (read only).
            target_root: Root of the target tree.
            differences: Any subset of the differences found by compare().

        Returns:
            List of ApplyResult in input order.
        """
        source_root = str(source_root)
        target_root = str(target_root)
        results = [self._apply_single(source_root, target_root, d) for d in differences]

        failed = sum(1 for r in results if r.failed)
        if failed:
            logger.warning("%d of %d difference(s) failed to apply", failed, len(results))
        return results

    @staticmethod
    def operation_for(difference: Difference) -> ApplyOperation:
        """Get the operation that applying a difference performs.

        Args:
            difference: The difference to classify.

        Returns:
            COPY for source-only, REMOVE for target-only, REPLACE otherwise.
        """
        if difference.change == ChangeType.NEW:
            return ApplyOperation.COPY
        if difference.change == ChangeType.DELETED:
            return ApplyOperation.REMOVE
        return ApplyOperation.REPLACE

    def _apply_single(
        self,
        source_root: str,
        target_root: str,
        difference: Difference,
    ) -> ApplyResult:
        """Apply one difference, isolating any failure.

        Args:
            source_root: Root of the source tree.
            target_root: Root of the target tree.
            difference: The difference to apply.

        Returns:
            ApplyResult indicating success or failure.
        """
        operation = self.operation_for(difference)
        source = difference.source

        try:
            destination = self._destination(source_root, target_root, difference)
            follow = operation != ApplyOperation.REMOVE
            if _is_within(destination, source_root, follow_leaf=follow):
                msg = f"Refusing to write inside source tree: {destination}"
                raise UnsafePathError(msg)

            if self._dry_run:
                logger.info("Dry-run: would %s %s", operation.value, destination)
                return ApplyResult(
                    difference=difference,
                    operation=operation,
                    success=True,
                    dry_run=True,
                )

            if source is None:
                logger.info("Removing %s", destination)
                _remove_node(destination)
                written = 0
            elif difference.is_kind_conflict:
                logger.info("Replacing %s (file/directory conflict)", destination)
                written = self._replace_node(source, destination)
            else:
                logger.info("Copying %s -> %s", source.path, destination)
                written = self._copy_node(source, destination)

        except OSError as e:
            logger.warning(
                "Failed to %s %s: %s", operation.value, difference.entry.display_name, e
            )
            return ApplyResult(
                difference=difference,
                operation=operation,
                success=False,
                error=str(e),
            )

        logger.info("Done: %s %s (%d bytes written)", operation.value, destination, written)
        return ApplyResult(
            difference=difference,
            operation=operation,
            success=True,
            bytes_written=written,
        )

    @staticmethod
    def _destination(source_root: str, target_root: str, difference: Difference) -> str:
        """Get the target path a difference writes to or removes.

        Args:
            source_root: Root of the source tree.
            target_root: Root of the target tree.
            difference: The difference being applied.

        Returns:
            Path under the target root.
        """
        if difference.target is not None:
            return difference.target.path
        source_path = difference.entry.path
        relative = os.path.relpath(source_path, source_root)
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            msg = f"Source entry is outside the source root: {source_path}"
            raise UnsafePathError(msg)
        return os.path.join(target_root, relative)

    def _copy_node(self, source: Entry, destination: str) -> int:
        """Copy a source file or directory subtree to the destination.

        The copy is built under a temporary name next to the destination
        and moved into place when complete, so a failed copy leaves
        nothing behind and an existing file is replaced in one step.

        Args:
            source: Source entry to copy.
            destination: Target path.

        Returns:
            Number of bytes written.
        """
        parent = os.path.dirname(destination)
        if source.is_dir:
            staging = tempfile.mkdtemp(dir=parent, prefix=_STAGING_PREFIX)
            copy = self._copy_tree
        else:
            fd, staging = tempfile.mkstemp(dir=parent, prefix=_STAGING_PREFIX)
            os.close(fd)
            copy = _copy_file

        try:
            written = copy(source.path, staging)
            os.replace(staging, destination)
        except OSError:
            _discard(staging)
            raise
        return written

    def _replace_node(self, source: Entry, destination: str) -> int:
        """Replace a target node of the other kind with a copy of the source.

        The old node is moved aside first and put back if the copy fails.

        Args:
            source: Source entry to copy.
            destination: Target path currently holding the other kind.

        Returns:
            Number of bytes written.
        """
        aside = tempfile.mkdtemp(dir=os.path.dirname(destination), prefix=_STAGING_PREFIX)
        parked = os.path.join(aside, os.path.basename(destination))
        os.rename(destination, parked)
        try:
            written = self._copy_node(source, destination)
        except OSError:
            os.rename(parked, destination)
            os.rmdir(aside)
            raise
        shutil.rmtree(aside)
        return written

    def _copy_tree(self, source_dir: str, destination: str) -> int:
        """Recursively copy a directory, keeping permissions and file mtimes.

        Args:
            source_dir: Source directory.
            destination: Target directory (created if missing).

        Returns:
            Number of bytes written.
        """
        os.makedirs(destination, exist_ok=True)
        written = 0

        with os.scandir(source_dir) as it:
            children = sorted(it, key=lambda c: c.name)

        for child in children:
            if self._exclude and is_excluded(child.name, self._exclude):
                continue
            child_destination = os.path.join(destination, child.name)
            if child.is_dir():
                written += self._copy_tree(child.path, child_destination)
            elif child.is_symlink() and not os.path.exists(child.path):
                logger.warning("Skipping dangling symlink: %s", child.path)
            else:
                written += _copy_file(child.path, child_destination)

        # Permissions last, so read-only directories can still be filled
        shutil.copymode(source_dir, destination)
        return written


def _copy_file(source: str, destination: str) -> int:
    """Copy file content and mode, and set the destination mtime to the source's.

    Args:
        source: Source file path.
        destination: Target file path (overwritten if present).

    Returns:
        Number of bytes written.
    """
    stat = os.stat(source)
    shutil.copyfile(source, destination)
    shutil.copymode(source, destination)
    os.utime(destination, ns=(stat.st_atime_ns, stat.st_mtime_ns))
    return os.stat(destination).st_size


def _discard(path: str) -> None:
    """Remove a partial copy, logging instead of raising."""
    try:
        _remove_node(path)
    except OSError as e:
        logger.warning("Cannot remove partial copy %s: %s", path, e)


def _remove_node(path: str) -> None:
    """Remove a file, symlink or whole directory subtree.

    Args:
        path: Path to remove.

    Raises:
        FileNotFoundError: If the path does not exist.
    """
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def _is_within(path: str, root: str, follow_leaf: bool = True) -> bool:
    """Check if a path is the root itself or lies below it.

    Both paths are resolved, so symlinked aliases are detected.

    Args:
        path: Path to test.
        root: Candidate ancestor.
        follow_leaf: If False, only the parent of path is resolved, so a
            symlink that is itself removed is not followed.

    Returns:
        True if path is root or a descendant of root.
    """
    if follow_leaf:
        real_path = os.path.realpath(path)
    else:
        parent, leaf = os.path.split(os.path.abspath(path))
        real_path = os.path.join(os.path.realpath(parent), leaf)
    real_root = os.path.realpath(root)
    try:
        return os.path.commonpath([real_path, real_root]) == real_root
    except ValueError:
        return False


def apply(
    source_root: str,
    target_root: str,
    differences: Iterable[Difference],
    dry_run: bool = False,
) -> list[ApplyResult]:
    """Apply differences with a default SyncApplier.

    Args:
        source_root: Root of the source tree.
        target_root: Root of the target tree.
        differences: Differences to apply.
        dry_run: If True, report without changing the filesystem.

    Returns:
        List of ApplyResult, one per difference.
    """
    return SyncApplier(dry_run=dry_run).apply(source_root, target_root, differences)
