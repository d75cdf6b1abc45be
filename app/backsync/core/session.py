"""Interactive selection session.

Holds the differences of one source/target pair together with an
approval flag per difference, for front-ends that let the user pick
which changes to apply. All work goes through compare(), check() and
SyncApplier.apply().
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from backsync.core.applier import SyncApplier
from backsync.core.differ import compare
from backsync.core.verifier import check
from backsync.models.difference import Difference
from backsync.models.result import ApplyResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Selection:
    """A difference and whether the user approved it.

    Attributes:
        difference: The difference offered for approval.
        approved: Whether it will be applied.
        problem: Problem description from the verifier, if any.
    """

    difference: Difference
    approved: bool
    problem: str | None = None


class SyncSession:
    """Mutable list of differences with approval flags.

    Problems start out unapproved; every other difference starts out
    approved.

    Args:
        source_root: Root of the source tree.
        target_root: Root of the target tree.
        exclude: fnmatch patterns for entry names to ignore.
    """

    def __init__(self, source_root: str, target_root: str, exclude: Sequence[str] = ()) -> None:
        self.source_root = str(source_root)
        self.target_root = str(target_root)
        self._exclude = tuple(exclude)
        self.selections: list[Selection] = []
        self.problems: dict[Difference, str] = {}

    def analyze(self) -> list[Selection]:
        """Compare the trees again and reset all approvals.

        Returns:
            The new selections, ordered by path.
        """
        differences = sorted(
            compare(self.source_root, self.target_root, self._exclude),
            key=lambda d: d.sort_key,
        )
        self.problems = check(differences)
        self.selections = [
            Selection(
                difference=d,
                approved=d not in self.problems,
                problem=self.problems.get(d),
            )
            for d in differences
        ]
        logger.debug(
            "Analyzed %s -> %s: %d difference(s), %d problem(s)",
            self.source_root,
            self.target_root,
            len(self.selections),
            len(self.problems),
        )
        return self.selections

    def toggle(self, index: int) -> bool:
        """Flip the approval of one selection.

        Args:
            index: Zero-based position in ``selections``.

        Returns:
            The new approval state.

        Raises:
            IndexError: If index is out of range.
        """
        if not 0 <= index < len(self.selections):
            msg = f"No difference at position {index + 1}"
            raise IndexError(msg)
        selection = self.selections[index]
        selection.approved = not selection.approved
        return selection.approved

    def set_all(self, approved: bool) -> None:
        """Approve or reject every selection."""
        for selection in self.selections:
            selection.approved = approved

    def approved(self) -> list[Difference]:
        """Get the approved differences."""
        return [s.difference for s in self.selections if s.approved]

    def apply_selected(self, dry_run: bool = False) -> list[ApplyResult]:
        """Apply the approved differences, then analyze again.

        Args:
            dry_run: If True, report without changing the filesystem and
                keep the current selections.

        Returns:
            One ApplyResult per approved difference.
        """
        applier = SyncApplier(dry_run=dry_run, exclude=self._exclude)
        results = applier.apply(self.source_root, self.target_root, self.approved())
        if not dry_run:
            self.analyze()
        return results
