from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from fastapi import APIRouter, Depends, Path, Request
from fastapi.params import Depends as DependsParam
from fastapi.responses import JSONResponse

from ...common.auth import require_admin
from ..dependencies import pipeline_for, repository_for
from ..pipeline import MutationPipeline
from ..resources import Resource
from ..responses import ApiResponse, respond
from ..uploads import read_payload

Guard = Callable[..., Any]

CREATE = "create"
READ = "read"
UPDATE = "update"
DELETE = "delete"


def _guards(guard: Guard | None) -> Sequence[DependsParam]:
    return [Depends(guard)] if guard is not None else []


def register_crud(
    router: APIRouter,
    resource: Resource,
    path: str,
    *,
    operations: Sequence[str] = (CREATE, READ, UPDATE, DELETE),
    create_guard: Guard | None = require_admin,
    read_guard: Guard | None = None,
    write_guard: Guard | None = require_admin,
) -> None:
    """Attach POST /{path}, GET|PUT|DELETE /{path}/{id} for one resource.

    Create and update accept multipart forms (fields plus the resource's file
    fields) or a JSON body.
    """
    name = resource.name
    tag = resource.plural.lower()
    get_pipeline = pipeline_for(resource)
    get_repository = repository_for(resource)

    if CREATE in operations:

        @router.post(
            f"/{path}",
            tags=[tag],
            summary=f"Create {name}",
            status_code=201,
            operation_id=f"create_{path}",
            response_model=ApiResponse,
            dependencies=_guards(create_guard),
        )
        async def create(
            request: Request,
            pipeline: MutationPipeline[Any] = Depends(get_pipeline),
        ) -> JSONResponse:
            payload, files = await read_payload(request)
            record = await pipeline.create(payload, files)
            return respond(201, f"{name} created successfully", record)

    if READ in operations:

        @router.get(
            f"/{path}/{{id}}",
            tags=[tag],
            summary=f"Get {name}",
            operation_id=f"get_{path}",
            response_model=ApiResponse,
            dependencies=_guards(read_guard),
        )
        async def get_one(
            id: str = Path(..., title=f"{name} Id"),
            repository: Any = Depends(get_repository),
        ) -> JSONResponse:
            record = repository.find_by_id(id)
            return respond(200, f"{name} found successfully", record)

    if UPDATE in operations:

        @router.put(
            f"/{path}/{{id}}",
            tags=[tag],
            summary=f"Update {name}",
            operation_id=f"update_{path}",
            response_model=ApiResponse,
            dependencies=_guards(write_guard),
        )
        async def update(
            request: Request,
            id: str = Path(..., title=f"{name} Id"),
            pipeline: MutationPipeline[Any] = Depends(get_pipeline),
        ) -> JSONResponse:
            payload, files = await read_payload(request)
            record = await pipeline.update(id, payload, files)
            return respond(200, f"{name} updated successfully", record)

    if DELETE in operations:

        @router.delete(
            f"/{path}/{{id}}",
            tags=[tag],
            summary=f"Delete {name}",
            operation_id=f"delete_{path}",
            response_model=ApiResponse,
            dependencies=_guards(write_guard),
        )
        async def delete(
            id: str = Path(..., title=f"{name} Id"),
            pipeline: MutationPipeline[Any] = Depends(get_pipeline),
        ) -> JSONResponse:
            record = pipeline.delete(id)
            return respond(200, f"{name} deleted successfully", record)
