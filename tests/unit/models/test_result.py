"""Unit tests for apply result models."""

from backsync.models.difference import Difference
from backsync.models.entry import Entry, EntryKind
from backsync.models.result import ApplyOperation, ApplyResult


def _difference() -> Difference:
    entry = Entry(path="/src/a", name="a", kind=EntryKind.FILE, modified=1)
    return Difference(source=entry, target=None)


class TestApplyResult:
    """Tests for ApplyResult dataclass."""

    def test_success_defaults(self) -> None:
        result = ApplyResult(difference=_difference(), operation=ApplyOperation.COPY, success=True)

        assert result.failed is False
        assert result.bytes_written == 0
        assert result.error is None
        assert result.dry_run is False

    def test_failed(self) -> None:
        result = ApplyResult(
            difference=_difference(),
            operation=ApplyOperation.COPY,
            success=False,
            error="disk full",
        )

        assert result.failed is True
        assert result.error == "disk full"
