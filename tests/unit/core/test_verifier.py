"""Unit tests for the divergence verifier."""

from backsync.core.verifier import (
    EARLIEST_TIMESTAMP_NS,
    PROBLEM_KIND_CONFLICT,
    PROBLEM_TARGET_NEWER,
    PROBLEM_TARGET_ONLY_DIR,
    PROBLEM_TARGET_ONLY_FILE,
    check,
    divergence_watermark,
)
from backsync.models.difference import Difference
from backsync.models.entry import Entry, EntryKind


def _file(root: str, name: str, modified: int) -> Entry:
    return Entry(path=f"{root}/{name}", name=name, kind=EntryKind.FILE, modified=modified)


def _dir(root: str, name: str) -> Entry:
    return Entry(path=f"{root}/{name}", name=name, kind=EntryKind.DIRECTORY)


def modified(name: str, source_time: int, target_time: int) -> Difference:
    return Difference(source=_file("/s", name, source_time), target=_file("/t", name, target_time))


def target_only_file(name: str, modified_at: int) -> Difference:
    return Difference(source=None, target=_file("/t", name, modified_at))


class TestDivergenceWatermark:
    """Tests for divergence_watermark()."""

    def test_no_differences(self) -> None:
        assert divergence_watermark([]) == EARLIEST_TIMESTAMP_NS

    def test_no_modified_files(self) -> None:
        """Without shared modified files there is no evidence of shared history."""
        differences = [
            Difference(source=_file("/s", "a", 500), target=None),
            target_only_file("b", 600),
            Difference(source=None, target=_dir("/t", "d")),
        ]
        assert divergence_watermark(differences) == EARLIEST_TIMESTAMP_NS

    def test_max_source_time_of_modified_files(self) -> None:
        differences = [
            modified("a", 300, 100),
            modified("b", 700, 900),
            modified("c", 500, 100),
        ]
        assert divergence_watermark(differences) == 700

    def test_kind_conflicts_ignored(self) -> None:
        conflict = Difference(source=_file("/s", "x", 999), target=_dir("/t", "x"))
        assert divergence_watermark([conflict, modified("a", 10, 5)]) == 10


class TestCheck:
    """Tests for check()."""

    def test_empty(self) -> None:
        assert check([]) == {}

    def test_modified_source_newer_not_a_problem(self) -> None:
        assert check([modified("f1", 200, 100)]) == {}

    def test_modified_target_newer_is_a_problem(self) -> None:
        d = modified("f1", 100, 200)
        assert check([d]) == {d: PROBLEM_TARGET_NEWER}

    def test_target_only_directory_always_a_problem(self) -> None:
        """Directories have no timestamp evidence, whatever the watermark."""
        d = Difference(source=None, target=_dir("/t", "d4"))
        assert check([d, modified("f1", 10**18, 1)]) == {d: PROBLEM_TARGET_ONLY_DIR}

    def test_target_only_file_older_than_watermark(self) -> None:
        """Files older than the last confirmed agreement are assumed stale."""
        stale = target_only_file("old", 100)
        assert check([stale, modified("f1", 500, 50)]) == {}

    def test_target_only_file_at_watermark(self) -> None:
        d = target_only_file("same", 500)
        assert check([d, modified("f1", 500, 50)]) == {d: PROBLEM_TARGET_ONLY_FILE}

    def test_target_only_file_newer_than_watermark(self) -> None:
        d = target_only_file("f3", 900)
        assert check([d, modified("f1", 500, 50)]) == {d: PROBLEM_TARGET_ONLY_FILE}

    def test_no_watermark_flags_every_target_only_file(self) -> None:
        """With no shared modified file every backup-only file is flagged."""
        very_old = target_only_file("a", -(10**18))
        recent = target_only_file("b", 10**18)

        problems = check([very_old, recent])

        assert set(problems) == {very_old, recent}

    def test_source_only_never_a_problem(self) -> None:
        differences = [
            Difference(source=_file("/s", "a", 1), target=None),
            Difference(source=_dir("/s", "d"), target=None),
        ]
        assert check(differences) == {}

    def test_kind_conflict_is_a_problem(self) -> None:
        d = Difference(source=_file("/s", "x", 1), target=_dir("/t", "x"))
        assert check([d]) == {d: PROBLEM_KIND_CONFLICT}

    def test_accepts_iterators(self) -> None:
        """The watermark and the flags are computed from one pass of input."""
        d = target_only_file("f3", 900)
        assert check(iter([modified("f1", 500, 50), d])) == {d: PROBLEM_TARGET_ONLY_FILE}
