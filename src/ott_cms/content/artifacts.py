"""Per-request bookkeeping for files written to upload storage."""

from __future__ import annotations

from types import TracebackType

from loguru import logger

from ..common.storage import StorageService


class FileArtifactManager:
    """Tracks the files one request has written so none of them outlive a failure.

    Lifecycle: ``record_written`` after every write, then exactly one of
    ``commit`` (the record now owns the files) or ``rollback`` (delete them).
    ``supersede`` removes files a committed write has replaced.

    Used as a context manager, leaving the block with an exception rolls back
    whatever was not committed, which also covers request cancellation.
    """

    def __init__(self, storage: StorageService):
        self.storage: StorageService = storage
        self._pending: list[str] = []
        self._committed: bool = False

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    @property
    def committed(self) -> bool:
        return self._committed

    def record_written(self, path: str) -> None:
        if self._committed:
            raise RuntimeError("Cannot record files after commit")
        self._pending.append(path)

    def commit(self) -> None:
        """Hand ownership of the pending files to the persisted record."""
        if self._pending:
            logger.debug(f"Committed {len(self._pending)} uploaded file(s)")
        self._pending.clear()
        self._committed = True

    def rollback(self) -> None:
        """Delete every pending file. Idempotent; deletion failures are only logged."""
        if not self._pending:
            return
        paths, self._pending = self._pending, []
        logger.info(f"Rolling back {len(paths)} uploaded file(s)")
        for path in paths:
            if not self.storage.delete_file(path):
                logger.debug(f"Nothing to remove for {path}")

    def supersede(self, *paths: str | None) -> None:
        """Delete files a committed write no longer references.

        Only valid after ``commit``; before that the old record still points at
        them and removing them would corrupt it.
        """
        if not self._committed:
            raise RuntimeError("Cannot supersede files before commit")
        for path in paths:
            if path and self.storage.delete_file(path):
                logger.debug(f"Removed superseded file {path}")

    def __enter__(self) -> FileArtifactManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self.rollback()
