"""Result models for applying differences to the target tree."""

from dataclasses import dataclass
from enum import Enum

from backsync.models.difference import Difference


class ApplyOperation(Enum):
    """Filesystem operation performed for a difference.

    Attributes:
        COPY: Copy a source-only file or subtree into the target.
        REPLACE: Overwrite a target node with its source counterpart.
        REMOVE: Delete a target-only file or subtree.
    """

    COPY = "copy"
    REPLACE = "replace"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Result of applying a single difference.

    Attributes:
        difference: The difference that was applied.
        operation: The operation performed for it.
        success: Whether the operation completed successfully.
        bytes_written: Bytes copied into the target (0 for removals).
        error: Error message if the operation failed, None otherwise.
        dry_run: Whether this was a dry-run (no filesystem changes).
    """

    difference: Difference
    operation: ApplyOperation
    success: bool
    bytes_written: int = 0
    error: str | None = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return not self.success
