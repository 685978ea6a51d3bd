"""On-disk storage for uploaded images and videos."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

from loguru import logger


class StorageService:
    """Keeps upload bytes under a single media root.

    Layout is ``{kind}/YYYY/MM/DD/{uuid}{ext}``. Callers only ever see paths
    relative to the root; those are what the database stores and what
    ``/uploads/`` serves.
    """

    def __init__(self, base_dir: str | Path):
        self.base_dir: Path = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def get_storage_path(self, kind: str, original_filename: str) -> Path:
        """
        Allocate a new absolute path for an upload of the given kind.

        Only the lowercased extension of the client filename survives. The stem
        is a random uuid, so identical uploads still land in separate files and
        removing one record's file never affects another record.
        """
        day_dir = self.base_dir.joinpath(kind, *datetime.now(UTC).strftime("%Y/%m/%d").split("/"))
        day_dir.mkdir(parents=True, exist_ok=True)
        return day_dir / (uuid4().hex + Path(original_filename).suffix.lower())

    def save_file(self, file_bytes: bytes, kind: str, original_filename: str = "file") -> str:
        """Write ``file_bytes`` and return the new file's relative path."""
        target = self.get_storage_path(kind, original_filename)
        try:
            _ = target.write_bytes(file_bytes)
        except OSError:
            # Never leave a partial file nobody knows about
            target.unlink(missing_ok=True)
            self._prune_empty_parents(target.parent)
            raise
        logger.debug(f"Stored {len(file_bytes)} bytes at {target}")
        return target.relative_to(self.base_dir).as_posix()

    def delete_file(self, relative_path: str | None) -> bool:
        """
        Remove a stored file if it is there.

        Args:
            relative_path: Path as returned by ``save_file``; None is accepted

        Returns:
            True only when a file was actually removed. Missing files, paths
            outside the root and OS errors all give False (the last two are
            logged).
        """
        if not relative_path:
            return False

        try:
            target = self.get_absolute_path(relative_path)
            if not target.exists():
                return False
            target.unlink()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not delete stored file {relative_path}: {e}")
            return False

        self._prune_empty_parents(target.parent)
        return True

    def exists(self, relative_path: str) -> bool:
        return self.get_absolute_path(relative_path).is_file()

    def get_absolute_path(self, relative_path: str) -> Path:
        """Resolve ``relative_path`` under the root, refusing anything outside it."""
        resolved = (self.base_dir / relative_path).resolve()
        if not resolved.is_relative_to(self.base_dir):
            raise ValueError(f"Path escapes storage directory: {relative_path}")
        return resolved

    def _prune_empty_parents(self, directory: Path) -> None:
        # Walk up towards the root, stopping at the first non-empty directory
        while directory != self.base_dir:
            try:
                directory.rmdir()
            except OSError:
                # Not empty, or already removed by a concurrent request
                return
            directory = directory.parent
