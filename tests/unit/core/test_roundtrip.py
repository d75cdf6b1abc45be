"""End-to-end properties of compare, check and apply on real trees."""

import os
from pathlib import Path

from backsync.core.applier import SyncApplier
from backsync.core.differ import compare
from backsync.core.verifier import check
from backsync.models.difference import ChangeType


def _fingerprint(root: Path) -> dict[str, tuple[str, int | None, bytes | None]]:
    """Map every path below root to its kind, mtime and content."""
    result: dict[str, tuple[str, int | None, bytes | None]] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames:
            result[os.path.relpath(os.path.join(dirpath, name), root)] = ("dir", None, None)
        for name in filenames:
            path = Path(dirpath) / name
            rel = os.path.relpath(path, root)
            result[rel] = ("file", path.stat().st_mtime_ns, path.read_bytes())
    return result


def _build_divergent_trees(source: Path, target: Path, make_file) -> None:
    make_file(source / "same.txt")
    make_file(target / "same.txt")
    make_file(source / "changed.txt", content="v2", age=20)
    make_file(target / "changed.txt", content="v1", age=10)
    make_file(source / "edited_in_backup.txt", content="s", age=10)
    make_file(target / "edited_in_backup.txt", content="b", age=30)
    make_file(source / "new_dir" / "a.txt", age=3)
    make_file(source / "new_dir" / "deep" / "b.txt", age=4)
    make_file(target / "stale_dir" / "x.txt")
    (target / "empty_backup_dir").mkdir()
    make_file(target / "stale.txt", age=1)
    make_file(source / "shared" / "nested" / "new.txt", age=8)
    make_file(source / "shared" / "keep.txt")
    make_file(target / "shared" / "keep.txt")
    make_file(target / "shared" / "nested" / "gone.txt", age=40)
    make_file(source / "swap", content="now a file")
    make_file(target / "swap" / "inner.txt")


class TestConvergence:
    """Applying every difference leaves nothing to compare."""

    def test_full_apply_converges(self, trees: tuple[Path, Path], make_file) -> None:
        source, target = trees
        _build_divergent_trees(source, target, make_file)
        differences = compare(str(source), str(target))
        assert differences

        results = SyncApplier().apply(str(source), str(target), differences)

        assert all(r.success for r in results), [r.error for r in results]
        assert compare(str(source), str(target)) == []
        assert _fingerprint(source) == _fingerprint(target)

    def test_partial_apply_leaves_the_rest(self, trees: tuple[Path, Path], make_file) -> None:
        source, target = trees
        _build_divergent_trees(source, target, make_file)
        differences = compare(str(source), str(target))
        problems = check(differences)
        approved = [d for d in differences if d not in problems]

        SyncApplier().apply(str(source), str(target), approved)

        remaining = compare(str(source), str(target))
        assert {d.name for d in remaining} == {d.name for d in problems}


class TestSourceImmutability:
    """No operation ever touches the source tree."""

    def test_source_untouched(self, trees: tuple[Path, Path], make_file) -> None:
        source, target = trees
        _build_divergent_trees(source, target, make_file)
        before = _fingerprint(source)

        differences = compare(str(source), str(target))
        check(differences)
        SyncApplier().apply(str(source), str(target), differences)

        assert _fingerprint(source) == before


class TestSelfContainment:
    """One-sided directory differences cover their whole subtree."""

    def test_no_difference_below_one_sided_directory(
        self, trees: tuple[Path, Path], make_file
    ) -> None:
        source, target = trees
        _build_divergent_trees(source, target, make_file)

        differences = compare(str(source), str(target))

        one_sided_dirs = [
            d.entry.path
            for d in differences
            if d.change != ChangeType.MODIFIED and d.entry.is_dir
        ]
        assert one_sided_dirs
        for directory in one_sided_dirs:
            for d in differences:
                for entry in (d.source, d.target):
                    if entry is not None:
                        assert not entry.path.startswith(directory + os.sep)


class TestScenarios:
    """Reference scenarios."""

    def test_new_file_in_new_directory(self, trees: tuple[Path, Path], make_file, mtime_of) -> None:
        source, target = trees
        for root in trees:
            make_file(root / "f1")
            make_file(root / "f2")
        make_file(source / "d1" / "new.txt", content="fresh", age=9)

        differences = compare(str(source), str(target))

        assert len(differences) == 1
        assert differences[0].change == ChangeType.NEW
        assert check(differences) == {}

        SyncApplier().apply(str(source), str(target), differences)

        copied = target / "d1" / "new.txt"
        assert copied.read_text() == "fresh"
        assert mtime_of(copied) == mtime_of(source / "d1" / "new.txt")

    def test_extra_recent_file_in_backup(self, trees: tuple[Path, Path], make_file) -> None:
        source, target = trees
        for root in trees:
            make_file(root / "f1")
        make_file(target / "f3", age=100)

        differences = compare(str(source), str(target))

        assert len(differences) == 1
        assert differences[0].change == ChangeType.DELETED
        assert differences[0] in check(differences)

        SyncApplier().apply(str(source), str(target), differences)

        assert not (target / "f3").exists()

    def test_extra_empty_directory_in_backup(self, trees: tuple[Path, Path], make_file) -> None:
        source, target = trees
        (target / "d4").mkdir()

        differences = compare(str(source), str(target))

        assert len(differences) == 1
        assert differences[0].change == ChangeType.DELETED
        assert differences[0].entry.is_dir
        assert differences[0] in check(differences)

    def test_rewritten_file_in_source(self, trees: tuple[Path, Path], make_file, mtime_of) -> None:
        source, target = trees
        make_file(target / "f1", content="old")
        make_file(source / "f1", content="rewritten", age=60)

        differences = compare(str(source), str(target))

        assert len(differences) == 1
        assert differences[0].source_is_newer is True
        assert check(differences) == {}

        SyncApplier().apply(str(source), str(target), differences)

        assert (target / "f1").read_text() == "rewritten"
        assert mtime_of(target / "f1") == mtime_of(source / "f1")
