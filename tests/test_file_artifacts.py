"""
Tests for upload storage and per-request file bookkeeping.
"""

from pathlib import Path

import pytest

from ott_cms.content import FileArtifactManager


class TestStorageService:
    """Test upload storage layout and deletion."""

    def test_files_stored_by_kind_and_date(self, storage):
        relative_path = storage.save_file(b"poster", "images", "Poster.PNG")

        parts = Path(relative_path).parts
        # images/YYYY/MM/DD/{uuid}.png
        assert parts[0] == "images"
        assert len(parts) == 5
        assert relative_path.endswith(".png")
        assert "Poster" not in relative_path
        assert storage.exists(relative_path)

    def test_identical_content_gets_distinct_files(self, storage):
        first = storage.save_file(b"same", "images", "a.png")
        second = storage.save_file(b"same", "images", "a.png")

        assert first != second

    def test_delete_removes_empty_directories(self, storage, media_dir):
        relative_path = storage.save_file(b"poster", "images", "a.png")

        assert storage.delete_file(relative_path) is True
        assert not (media_dir / "images").exists()

    def test_delete_missing_file_is_not_an_error(self, storage):
        assert storage.delete_file("images/2026/01/01/missing.png") is False
        assert storage.delete_file(None) is False

    def test_paths_cannot_escape_storage_root(self, storage):
        with pytest.raises(ValueError):
            storage.get_absolute_path("../outside.txt")

        assert storage.delete_file("../outside.txt") is False

    def test_failed_write_leaves_nothing_behind(self, storage, media_dir, monkeypatch):
        def write_then_fail(path, data):
            with open(path, "wb") as f:
                f.write(data[:3])
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(Path, "write_bytes", write_then_fail)

        with pytest.raises(OSError):
            storage.save_file(b"poster", "images", "a.png")

        assert list(media_dir.rglob("*")) == []


class TestFileArtifactManager:
    """Test commit, rollback and supersede semantics."""

    def test_exception_in_block_rolls_back(self, storage):
        with pytest.raises(RuntimeError):
            with FileArtifactManager(storage) as artifacts:
                path = storage.save_file(b"x", "images", "a.png")
                artifacts.record_written(path)
                raise RuntimeError("persist failed")

        assert not storage.exists(path)
        assert artifacts.pending == ()

    def test_commit_keeps_files(self, storage):
        with FileArtifactManager(storage) as artifacts:
            path = storage.save_file(b"x", "images", "a.png")
            artifacts.record_written(path)
            artifacts.commit()

        assert storage.exists(path)
        assert artifacts.committed

    def test_failure_after_commit_keeps_files(self, storage):
        with pytest.raises(RuntimeError):
            with FileArtifactManager(storage) as artifacts:
                path = storage.save_file(b"x", "images", "a.png")
                artifacts.record_written(path)
                artifacts.commit()
                raise RuntimeError("late failure")

        assert storage.exists(path)

    def test_rollback_is_idempotent(self, storage):
        artifacts = FileArtifactManager(storage)
        path = storage.save_file(b"x", "images", "a.png")
        artifacts.record_written(path)

        artifacts.rollback()
        artifacts.rollback()

        assert not storage.exists(path)

    def test_rollback_tolerates_files_already_gone(self, storage):
        artifacts = FileArtifactManager(storage)
        path = storage.save_file(b"x", "images", "a.png")
        artifacts.record_written(path)
        storage.delete_file(path)

        artifacts.rollback()

        assert artifacts.pending == ()

    def test_supersede_requires_commit(self, storage):
        artifacts = FileArtifactManager(storage)
        old = storage.save_file(b"old", "images", "old.png")

        with pytest.raises(RuntimeError):
            artifacts.supersede(old)

        assert storage.exists(old)

    def test_supersede_deletes_replaced_files(self, storage):
        old = storage.save_file(b"old", "images", "old.png")
        artifacts = FileArtifactManager(storage)
        new = storage.save_file(b"new", "images", "new.png")
        artifacts.record_written(new)
        artifacts.commit()

        artifacts.supersede(old, None)

        assert not storage.exists(old)
        assert storage.exists(new)

    def test_record_after_commit_rejected(self, storage):
        artifacts = FileArtifactManager(storage)
        artifacts.commit()

        with pytest.raises(RuntimeError):
            artifacts.record_written("images/late.png")
