"""Tests for deleting and moving duplicates."""

import errno
from pathlib import Path
from unittest.mock import patch

import pytest

from ddh_remover.core.disposer import (
    DRY_RUN_REASON,
    Disposer,
    Outcome,
    PathResult,
    destination_for,
)
from ddh_remover.core.errors import FileNameError
from ddh_remover.core.resolver import RetentionPolicy


@pytest.fixture
def duplicates(tmp_path):
    """Three identical files in different folders."""
    paths = []
    for folder in ("ny", "concerts", "misc"):
        (tmp_path / folder).mkdir()
        path = tmp_path / folder / "00097.jpg"
        path.write_bytes(b"same content")
        paths.append(path)
    return paths


@pytest.fixture
def holding(tmp_path):
    directory = tmp_path / "holding"
    directory.mkdir()
    return directory


class TestDestination:
    def test_destination_uses_file_name(self):
        assert destination_for("/data/x/a.jpg", Path("/out")) == Path("/out/a.jpg")

    @pytest.mark.parametrize("path", ["", "/", "..", "/data/.."])
    def test_no_file_name(self, path):
        with pytest.raises(FileNameError):
            destination_for(path, Path("/out"))


class TestDelete:
    def test_deletes_files(self, duplicates):
        disposer = Disposer(RetentionPolicy())

        results = disposer.dispose([str(p) for p in duplicates[:2]])

        assert [r.outcome for r in results] == [Outcome.deleted, Outcome.deleted]
        assert all(r.ok for r in results)
        assert not duplicates[0].exists()
        assert not duplicates[1].exists()
        assert duplicates[2].exists()

    def test_second_run_reports_missing_files(self, duplicates):
        disposer = Disposer(RetentionPolicy())
        paths = [str(duplicates[0])]

        disposer.dispose(paths)
        results = disposer.dispose(paths)

        assert results[0].outcome is Outcome.failed
        assert not results[0].ok
        assert results[0].reason

    def test_failure_does_not_stop_the_batch(self, duplicates, tmp_path):
        missing = str(tmp_path / "missing.jpg")
        disposer = Disposer(RetentionPolicy())

        results = disposer.dispose([str(duplicates[0]), missing, str(duplicates[1])])

        assert [r.outcome for r in results] == [
            Outcome.deleted,
            Outcome.failed,
            Outcome.deleted,
        ]
        assert [r.path for r in results] == [str(duplicates[0]), missing, str(duplicates[1])]

    def test_directory_is_not_deleted(self, tmp_path):
        directory = tmp_path / "folder"
        directory.mkdir()

        results = Disposer(RetentionPolicy()).dispose([str(directory)])

        assert results[0].outcome is Outcome.failed
        assert directory.exists()

    def test_trash(self, duplicates):
        disposer = Disposer(RetentionPolicy(use_trash=True))

        with patch("ddh_remover.core.disposer.send2trash") as mock_trash:
            results = disposer.dispose([str(duplicates[0])])

        mock_trash.assert_called_once_with(str(duplicates[0]))
        assert results == [PathResult(str(duplicates[0]), Outcome.trashed)]

    def test_trash_missing_file(self, tmp_path):
        disposer = Disposer(RetentionPolicy(use_trash=True))

        with patch("ddh_remover.core.disposer.send2trash") as mock_trash:
            results = disposer.dispose([str(tmp_path / "missing.jpg")])

        mock_trash.assert_not_called()
        assert results[0].outcome is Outcome.failed

    def test_trash_error_is_reported(self, duplicates):
        disposer = Disposer(RetentionPolicy(use_trash=True))

        with patch(
            "ddh_remover.core.disposer.send2trash",
            side_effect=PermissionError("no trash can"),
        ):
            results = disposer.dispose([str(duplicates[0])])

        assert results[0].outcome is Outcome.failed
        assert "no trash can" in results[0].reason


class TestMove:
    def test_moves_into_destination(self, duplicates, holding):
        disposer = Disposer(RetentionPolicy(destination=holding))

        results = disposer.dispose([str(duplicates[0])])

        target = holding / "00097.jpg"
        assert results == [PathResult(str(duplicates[0]), Outcome.moved, str(target))]
        assert target.read_bytes() == b"same content"
        assert not duplicates[0].exists()

    def test_existing_destination_is_not_overwritten(self, duplicates, holding):
        disposer = Disposer(RetentionPolicy(destination=holding))

        results = disposer.dispose([str(duplicates[0]), str(duplicates[1])])

        assert results[0].outcome is Outcome.moved
        assert results[1].outcome is Outcome.failed
        assert "already exists" in results[1].reason
        assert duplicates[1].exists()

    def test_missing_source(self, tmp_path, holding):
        disposer = Disposer(RetentionPolicy(destination=holding))

        results = disposer.dispose([str(tmp_path / "gone.jpg")])

        assert results[0].outcome is Outcome.failed
        assert results[0].destination == str(holding / "gone.jpg")
        assert list(holding.iterdir()) == []

    def test_path_without_file_name(self, holding):
        disposer = Disposer(RetentionPolicy(destination=holding))

        results = disposer.dispose(["/"])

        assert results[0].outcome is Outcome.failed
        assert results[0].destination is None

    def test_cross_device_move_copies(self, duplicates, holding):
        disposer = Disposer(RetentionPolicy(destination=holding))
        cross_device = OSError(errno.EXDEV, "Invalid cross-device link")

        with patch("os.rename", side_effect=cross_device):
            results = disposer.dispose([str(duplicates[0])])

        assert results[0].outcome is Outcome.moved
        assert (holding / "00097.jpg").read_bytes() == b"same content"
        assert not duplicates[0].exists()


class TestDryRun:
    def test_delete_dry_run_touches_nothing(self, duplicates):
        disposer = Disposer(RetentionPolicy(dry_run=True))

        results = disposer.dispose([str(p) for p in duplicates])

        assert all(r.outcome is Outcome.skipped for r in results)
        assert all(r.reason == DRY_RUN_REASON for r in results)
        assert all(r.ok for r in results)
        assert all(p.exists() for p in duplicates)

    def test_move_dry_run_reports_destination(self, duplicates, holding):
        disposer = Disposer(RetentionPolicy(destination=holding, dry_run=True))

        results = disposer.dispose([str(duplicates[0]), "/"])

        assert results[0].destination == str(holding / "00097.jpg")
        assert results[1].outcome is Outcome.skipped
        assert results[1].destination is None
        assert duplicates[0].exists()
        assert list(holding.iterdir()) == []

    def test_trash_dry_run(self, duplicates):
        disposer = Disposer(RetentionPolicy(dry_run=True, use_trash=True))

        with patch("ddh_remover.core.disposer.send2trash") as mock_trash:
            disposer.dispose([str(duplicates[0])])

        mock_trash.assert_not_called()
        assert duplicates[0].exists()


def test_result_to_dict():
    result = PathResult("/a.jpg", Outcome.failed, reason="boom")

    assert result.to_dict() == {
        "path": "/a.jpg",
        "outcome": "failed",
        "destination": None,
        "reason": "boom",
    }
