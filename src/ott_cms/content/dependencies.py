from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import Depends, Query, Request
from pydantic.alias_generators import to_snake
from sqlalchemy.orm import Session

from ..common.database import get_db
from ..common.storage import StorageService
from ..db_service.queries import MAX_LIMIT, ListQuery, build_list_query
from .config import CmsConfig
from .pipeline import MutationPipeline
from .resources import Resource


def get_config(request: Request) -> CmsConfig:
    """Dependency to get CmsConfig from app state."""
    return request.app.state.config  # pyright: ignore[reportAny]


def get_storage(request: Request) -> StorageService:
    return request.app.state.storage  # pyright: ignore[reportAny]


def pipeline_for(resource: Resource) -> Callable[..., MutationPipeline[Any]]:
    """Build a dependency that yields the mutation pipeline of one resource."""

    def dependency(
        db: Session = Depends(get_db),
        storage: StorageService = Depends(get_storage),
        config: CmsConfig = Depends(get_config),
    ) -> MutationPipeline[Any]:
        return MutationPipeline(resource, db, storage, config)

    dependency.__name__ = f"get_{resource.plural.lower()}_pipeline"
    return dependency


def repository_for(resource: Resource) -> Callable[..., Any]:
    """Build a dependency that yields the read-side repository of one resource."""

    def dependency(db: Session = Depends(get_db)) -> Any:
        return resource.repository(db)

    dependency.__name__ = f"get_{resource.plural.lower()}_repository"
    return dependency


def list_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=MAX_LIMIT, description="Items per page (max 100)"),
    query: str = Query("", description="Case-insensitive substring search"),
    sort: str | None = Query(None, description="Sort column, '-' prefix for descending"),
) -> ListQuery:
    """Common list query parameters."""
    if sort:
        descending = sort.startswith("-")
        sort = ("-" if descending else "") + to_snake(sort.lstrip("-+"))
    return build_list_query(page=page, limit=limit, query=query, sort=sort)
