"""Validated create/update/delete with file lifecycle guarantees.

Order of a write:

1. validate the payload (pure, nothing written yet)
2. check required files, load the stored record (update), run the prepare hook
3. write uploads, each recorded with the artifact manager
4. persist
5. commit the artifacts; on update, delete the files the write replaced

Any failure before 5 rolls back the files from 3, so a failed request never
leaves an orphan upload behind. Replaced and deleted files are removed only
after the datastore has accepted the change.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from fastapi import UploadFile
from loguru import logger
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..common.config import BaseConfig
from ..common.exceptions import PayloadValidationError
from ..common.storage import StorageService
from ..db_service import Repository
from .artifacts import FileArtifactManager
from .resources import Resource
from .uploads import UploadedFile, save_uploads
from .validation import validate_payload

SchemaT = TypeVar("SchemaT", bound=BaseModel)

Files = dict[str, list[UploadFile]]


class MutationPipeline(Generic[SchemaT]):
    def __init__(
        self,
        resource: Resource,
        db: Session,
        storage: StorageService,
        config: BaseConfig,
    ):
        self.resource: Resource = resource
        self.repository: Repository[SchemaT] = resource.repository(db)
        self.storage: StorageService = storage
        self.config: BaseConfig = config

    async def create(
        self,
        payload: dict[str, Any],
        files: Files | None = None,
        extra: dict[str, Any] | None = None,
    ) -> SchemaT:
        """Validate, store uploads, persist.

        Args:
            payload: Raw non-file fields
            files: Uploads keyed by multipart field name
            extra: Server-side values (e.g. the owning user) merged after validation
        """
        files = files or {}
        values = validate_payload(self.resource.create_model, payload)

        for file_field in self.resource.files:
            if file_field.required_on_create and not files.get(file_field.name):
                raise PayloadValidationError(
                    f'"{file_field.name}" is required', field=file_field.name
                )

        if extra:
            values.update(extra)
        if self.resource.prepare is not None:
            values = self.resource.prepare(values, None, set(files))

        with FileArtifactManager(self.storage) as artifacts:
            uploaded = await save_uploads(
                files, self.resource.files, artifacts, self.storage, self.config
            )
            values.update(self._file_values(uploaded))

            record = self.repository.create(values)
            artifacts.commit()

        logger.info(f"{self.resource.name} created: {getattr(record, 'id', '?')}")
        return record

    async def update(
        self,
        id: str,
        payload: dict[str, Any],
        files: Files | None = None,
    ) -> SchemaT:
        """Partial update; fields not sent are left untouched.

        Files that the update replaces are deleted only after the new values
        are committed. If persisting fails, the new uploads are removed and
        the old ones kept.
        """
        files = files or {}
        values = validate_payload(self.resource.update_model, payload, partial=True)
        if not values and not files:
            raise PayloadValidationError("At least one field must be provided for update")

        existing = self.repository.get_model(id)
        if self.resource.prepare is not None:
            values = self.resource.prepare(values, existing, set(files))
        before = self._file_paths(existing)

        with FileArtifactManager(self.storage) as artifacts:
            uploaded = await save_uploads(
                files, self.resource.files, artifacts, self.storage, self.config
            )
            values.update(self._file_values(uploaded))

            record = self.repository.update(id, values)
            artifacts.commit()

        # The committed row is existing overlaid with values
        stale = before - self._file_paths(existing, overrides=values)
        if stale:
            artifacts.supersede(*sorted(stale))

        logger.info(f"{self.resource.name} updated: {id}")
        return record

    def delete(self, id: str) -> SchemaT:
        """Delete the record, then the files it owned."""
        existing = self.repository.get_model(id)
        owned = self._file_paths(existing)

        # Raises (and keeps every file) if the row can't be deleted
        record = self.repository.delete(id)

        for path in sorted(owned):
            _ = self.storage.delete_file(path)

        logger.info(f"{self.resource.name} deleted: {id}")
        return record

    def _file_values(self, uploaded: list[UploadedFile]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for file_field in self.resource.files:
            paths = [u.path for u in uploaded if u.field_name == file_field.name]
            if not paths:
                continue
            values[file_field.column] = paths if file_field.multiple else paths[0]
        return values

    def _file_paths(self, obj: Any, overrides: Mapping[str, Any] | None = None) -> set[str]:
        """Every upload path the row references, with ``overrides`` taking precedence."""
        overrides = overrides or {}
        paths: set[str] = set()
        for column in self.resource.file_columns():
            value = overrides[column] if column in overrides else getattr(obj, column, None)
            if isinstance(value, list):
                paths.update(p for p in value if p)
            elif value:
                paths.add(value)
        return paths
