import errno
import os
from pathlib import Path

import pytest

from picksort.core.errors import CrossDeviceError, DestinationError
from picksort.core.filesystem import LocalFileSystem
from picksort.core.transfer import BatchResult, TransferMode, TransferOutcome, transfer


class FailingCopyFileSystem(LocalFileSystem):
    """Copy fails with the given errno for sources whose name is in ``fail_names``."""

    def __init__(self, fail_names, err=errno.EACCES):
        self.fail_names = set(fail_names)
        self.err = err
        self.copy_calls = []

    def copy_file(self, src, dst):
        self.copy_calls.append((src, dst))
        if src.name in self.fail_names:
            raise OSError(self.err, os.strerror(self.err), str(dst))
        super().copy_file(src, dst)


class CrossDeviceFileSystem(LocalFileSystem):
    """Every rename behaves as if source and target were on different volumes."""

    def __init__(self, copy_error: int | None = None, remove_error: int | None = None):
        self.copy_error = copy_error
        self.remove_error = remove_error
        self.renames = 0
        self.removed = []

    def rename(self, src, dst):
        self.renames += 1
        raise CrossDeviceError(errno.EXDEV, "Invalid cross-device link", str(src))

    def copy_file(self, src, dst):
        if self.copy_error is not None:
            raise OSError(self.copy_error, "No space left on device", str(dst))
        super().copy_file(src, dst)

    def remove(self, path):
        self.removed.append(path)
        if self.remove_error is not None:
            raise OSError(self.remove_error, os.strerror(self.remove_error), str(path))
        super().remove(path)


class TestCopy:
    def test_copy_keeps_sources(self, tmp_path, make_file):
        a = make_file("src/a.jpg", b"AAA")
        b = make_file("src/b.png", b"BBB")
        dest = tmp_path / "out"

        result = transfer([a, b], dest, TransferMode.COPY)

        assert result.success
        assert result.error is None
        assert a.read_bytes() == b"AAA"
        assert b.read_bytes() == b"BBB"
        assert (dest / "a.jpg").read_bytes() == b"AAA"
        assert (dest / "b.png").read_bytes() == b"BBB"
        assert [o.destination for o in result.outcomes] == [dest / "a.jpg", dest / "b.png"]

    def test_accepts_string_mode_and_paths(self, tmp_path, make_file):
        a = make_file("src/a.jpg")
        result = transfer([str(a)], str(tmp_path / "out"), "copy")
        assert result.mode == TransferMode.COPY
        assert result.outcomes[0].source == a

    def test_creates_nested_destination(self, tmp_path, make_file):
        a = make_file("src/a.jpg")
        dest = tmp_path / "x" / "y" / "z"
        result = transfer([a], dest, TransferMode.COPY)
        assert result.success
        assert (dest / "a.jpg").exists()

    def test_same_file_twice_never_overwrites(self, tmp_path, make_file):
        a = make_file("src/photo.jpg", b"first")
        dest = tmp_path / "out"

        transfer([a], dest, TransferMode.COPY)
        a.write_bytes(b"second")
        result = transfer([a], dest, TransferMode.COPY)

        assert result.outcomes[0].destination == dest / "photo_1.jpg"
        assert (dest / "photo.jpg").read_bytes() == b"first"
        assert (dest / "photo_1.jpg").read_bytes() == b"second"

    def test_collision_counter_keeps_counting(self, tmp_path, make_file):
        a = make_file("src/photo.jpg")
        make_file("out/photo.jpg")
        make_file("out/photo_1.jpg")
        result = transfer([a], tmp_path / "out", TransferMode.COPY)
        assert result.outcomes[0].destination == tmp_path / "out" / "photo_2.jpg"

    def test_duplicate_sources_in_one_batch(self, tmp_path, make_file):
        a = make_file("src/a.gif")
        result = transfer([a, a], tmp_path / "out", TransferMode.COPY)
        assert result.success
        assert [o.destination.name for o in result.outcomes] == ["a.gif", "a_1.gif"]

    def test_file_without_extension(self, tmp_path, make_file):
        a = make_file("src/README")
        make_file("out/README")
        result = transfer([a], tmp_path / "out", TransferMode.COPY)
        assert result.outcomes[0].destination.name == "README_1"

    def test_missing_source_is_a_per_file_failure(self, tmp_path, make_file):
        a = make_file("src/a.jpg")
        missing = tmp_path / "src" / "gone.jpg"
        c = make_file("src/c.jpg")

        result = transfer([a, missing, c], tmp_path / "out", TransferMode.COPY)

        assert not result.success
        assert [o.success for o in result.outcomes] == [True, False, True]
        assert result.outcomes[1].destination is None
        assert result.outcomes[1].error
        assert not (tmp_path / "out" / "gone.jpg").exists()


class TestPartialFailure:
    def test_middle_file_fails(self, tmp_path, make_file):
        paths = [make_file(f"src/{n}.jpg") for n in ("one", "two", "three")]
        fs = FailingCopyFileSystem({"two.jpg"})

        result = transfer(paths, tmp_path / "out", TransferMode.COPY, fs=fs)

        assert result.success is False
        assert result.outcomes[0].success is True
        assert result.outcomes[1].success is False
        assert result.outcomes[1].error == "Permission denied"
        assert result.outcomes[2].success is True
        assert "1" in result.error
        assert result.error.startswith("1 of 3 files failed to copy")
        assert "two.jpg" in result.error
        # The batch kept going after the failure
        assert len(fs.copy_calls) == 3

    def test_outcome_order_matches_input(self, tmp_path, make_file):
        names = ["z.jpg", "a.jpg", "m.jpg", "b.jpg"]
        paths = [make_file(f"src/{n}") for n in names]
        fs = FailingCopyFileSystem({"a.jpg", "b.jpg"})

        result = transfer(paths, tmp_path / "out", TransferMode.COPY, fs=fs)

        assert [o.source.name for o in result.outcomes] == names
        assert [o.success for o in result.outcomes] == [True, False, True, False]
        assert [o.source.name for o in result.failed] == ["a.jpg", "b.jpg"]
        assert [o.source.name for o in result.succeeded] == ["z.jpg", "m.jpg"]

    def test_summary_lists_only_first_names(self, tmp_path, make_file):
        paths = [make_file(f"src/{i}.jpg") for i in range(5)]
        fs = FailingCopyFileSystem({p.name for p in paths})

        result = transfer(paths, tmp_path / "out", TransferMode.COPY, fs=fs)

        assert result.error == "5 of 5 files failed to copy: 0.jpg, 1.jpg, 2.jpg, ..."
        assert not result.succeeded

    def test_progress_callback(self, tmp_path, make_file):
        paths = [make_file(f"src/{i}.png") for i in range(3)]
        calls = []
        transfer(paths, tmp_path / "out", TransferMode.COPY, progress_cb=lambda c, t: calls.append((c, t)))
        assert calls == [(1, 3), (2, 3), (3, 3)]


class TestMove:
    def test_move_removes_sources(self, tmp_path, make_file):
        a = make_file("src/a.jpg", b"A")
        b = make_file("src/b.webp", b"B")
        dest = tmp_path / "out"

        result = transfer([a, b], dest, TransferMode.MOVE)

        assert result.success
        assert not a.exists()
        assert not b.exists()
        assert (dest / "a.jpg").read_bytes() == b"A"
        assert (dest / "b.webp").read_bytes() == b"B"
        assert result.moved_sources == [a, b]

    def test_move_resolves_collisions(self, tmp_path, make_file):
        a = make_file("src/a.jpg", b"new")
        make_file("out/a.jpg", b"old")

        result = transfer([a], tmp_path / "out", TransferMode.MOVE)

        assert result.outcomes[0].destination == tmp_path / "out" / "a_1.jpg"
        assert (tmp_path / "out" / "a.jpg").read_bytes() == b"old"
        assert (tmp_path / "out" / "a_1.jpg").read_bytes() == b"new"

    def test_cross_device_move_matches_same_device_effect(self, tmp_path, make_file):
        a = make_file("src/a.jpg", b"payload")
        fs = CrossDeviceFileSystem()

        result = transfer([a], tmp_path / "out", TransferMode.MOVE, fs=fs)

        assert result.success
        assert fs.renames == 1
        assert fs.removed == [a]
        assert not a.exists()
        assert (tmp_path / "out" / "a.jpg").read_bytes() == b"payload"

    def test_failed_copy_in_fallback_keeps_source(self, tmp_path, make_file):
        a = make_file("src/a.jpg", b"precious")
        fs = CrossDeviceFileSystem(copy_error=errno.ENOSPC)

        result = transfer([a], tmp_path / "out", TransferMode.MOVE, fs=fs)

        assert not result.success
        assert result.outcomes[0].success is False
        assert "No space left" in result.outcomes[0].error
        assert fs.removed == []
        assert a.read_bytes() == b"precious"
        assert not (tmp_path / "out" / "a.jpg").exists()
        assert result.moved_sources == []

    def test_undeletable_source_reports_where_the_copy_is(self, tmp_path, make_file):
        a = make_file("src/a.jpg", b"twice")
        fs = CrossDeviceFileSystem(remove_error=errno.EACCES)

        result = transfer([a], tmp_path / "out", TransferMode.MOVE, fs=fs)

        outcome = result.outcomes[0]
        assert outcome.success is False
        assert outcome.destination == tmp_path / "out" / "a.jpg"
        assert "could not be deleted" in outcome.error
        assert "Permission denied" in outcome.error
        assert a.read_bytes() == b"twice"
        assert outcome.destination.read_bytes() == b"twice"
        assert result.moved_sources == []

    def test_moved_sources_exclude_failures(self, tmp_path, make_file):
        a = make_file("src/a.jpg")
        missing = tmp_path / "src" / "missing.jpg"
        result = transfer([a, missing], tmp_path / "out", TransferMode.MOVE)
        assert result.moved_sources == [a]
        assert result.error.startswith("1 of 2 files failed to move")

    def test_copy_result_reports_no_moved_sources(self, tmp_path, make_file):
        a = make_file("src/a.jpg")
        result = transfer([a], tmp_path / "out", TransferMode.COPY)
        assert result.moved_sources == []


class TestSetup:
    def test_empty_input_has_no_side_effects(self, tmp_path):
        dest = tmp_path / "never-created"
        result = transfer([], dest, TransferMode.MOVE)
        assert result == BatchResult(mode=TransferMode.MOVE)
        assert result.success is True
        assert result.outcomes == ()
        assert not dest.exists()

    def test_destination_creation_failure_raises(self, tmp_path, make_file):
        a = make_file("src/a.jpg")
        blocker = make_file("blocker")  # a file where the folder should go
        fs = FailingCopyFileSystem(set())

        with pytest.raises(DestinationError) as excinfo:
            transfer([a], blocker / "out", TransferMode.COPY, fs=fs)

        assert excinfo.value.destination == blocker / "out"
        assert fs.copy_calls == []
        assert a.exists()

    def test_invalid_mode(self, tmp_path, make_file):
        with pytest.raises(ValueError):
            transfer([make_file("src/a.jpg")], tmp_path / "out", "rename")


def test_outcome_is_immutable():
    outcome = TransferOutcome(source=Path("a.jpg"), success=True, destination=Path("b/a.jpg"))
    with pytest.raises(AttributeError):
        outcome.success = False
