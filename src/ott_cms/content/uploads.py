"""Multipart parsing and upload policy."""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from fastapi import Request, UploadFile
from loguru import logger

from ..common.config import MiB, BaseConfig
from ..common.exceptions import PayloadValidationError
from ..common.storage import StorageService
from .artifacts import FileArtifactManager

IMAGES = "images"
VIDEOS = "videos"

_MIME_FAMILY = {IMAGES: "image/", VIDEOS: "video/"}


@dataclass(frozen=True)
class FileField:
    """A multipart field an entity accepts files on."""

    name: str
    column: str
    kind: str = IMAGES
    max_count: int = 1
    required_on_create: bool = False

    @property
    def multiple(self) -> bool:
        return self.max_count > 1


@dataclass(frozen=True)
class UploadedFile:
    field_name: str
    path: str
    mime_type: str
    size: int


async def read_payload(request: Request) -> tuple[dict[str, Any], dict[str, list[UploadFile]]]:
    """Split a request body into plain fields and file parts.

    JSON bodies carry no files. For multipart and urlencoded forms, parts with
    an empty filename (an untouched file input) are dropped.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except json.JSONDecodeError:
            raise PayloadValidationError("Request body must be valid JSON")
        if not isinstance(body, dict):
            raise PayloadValidationError("Request body must be a JSON object")
        return body, {}

    form = await request.form()
    fields: dict[str, Any] = {}
    files: dict[str, list[UploadFile]] = defaultdict(list)
    for key, value in form.multi_items():
        if isinstance(value, str):
            fields[key] = value
        elif value.filename:
            files[key].append(value)
    return fields, dict(files)


def check_upload_policy(
    files: dict[str, list[UploadFile]],
    policy: Iterable[FileField],
) -> None:
    """Reject undeclared fields, too many files, and wrong content types."""
    declared = {f.name: f for f in policy}
    for name, uploads in files.items():
        file_field = declared.get(name)
        if file_field is None:
            raise PayloadValidationError(f'"{name}" is not allowed', field=name)
        if len(uploads) > file_field.max_count:
            raise PayloadValidationError(
                f'"{name}" must contain at most {file_field.max_count} file(s)', field=name
            )
        family = _MIME_FAMILY[file_field.kind]
        for upload in uploads:
            if not (upload.content_type or "").startswith(family):
                raise PayloadValidationError(
                    f'"{name}" must be a{"n" if file_field.kind == IMAGES else ""} {family[:-1]} file',
                    field=name,
                )


def size_limit(kind: str, config: BaseConfig) -> int:
    return config.max_video_size if kind == VIDEOS else config.max_image_size


async def save_uploads(
    files: dict[str, list[UploadFile]],
    policy: Iterable[FileField],
    artifacts: FileArtifactManager,
    storage: StorageService,
    config: BaseConfig,
) -> list[UploadedFile]:
    """Write accepted files to storage, recording each one as soon as it lands.

    A size violation raises after earlier files were written; the caller's
    artifact manager rolls those back.
    """
    policy = list(policy)
    check_upload_policy(files, policy)
    declared = {f.name: f for f in policy}

    saved: list[UploadedFile] = []
    for name, uploads in files.items():
        file_field = declared[name]
        limit = size_limit(file_field.kind, config)
        for upload in uploads:
            if upload.size is not None and upload.size > limit:
                raise _too_large(name, limit)
            file_bytes = await upload.read()
            if len(file_bytes) > limit:
                raise _too_large(name, limit)

            path = storage.save_file(file_bytes, file_field.kind, upload.filename or "file")
            artifacts.record_written(path)
            logger.debug(f"Stored upload {name}={upload.filename} at {path}")
            saved.append(
                UploadedFile(
                    field_name=name,
                    path=path,
                    mime_type=upload.content_type or "application/octet-stream",
                    size=len(file_bytes),
                )
            )
    return saved


def _too_large(name: str, limit: int) -> PayloadValidationError:
    return PayloadValidationError(
        f'"{name}" must be smaller than {limit / MiB:g} MiB', field=name
    )
