"""List queries: pagination, free-text search, equality filters, sorting."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..common.exceptions import PayloadValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass
class ListQuery:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    query: str = ""
    filters: dict[str, Any] = field(default_factory=dict)
    # Column name, "-" prefix for descending; None means the repository default
    sort: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def with_filters(self, **filters: Any) -> ListQuery:
        """Copy with extra equality filters; None values are dropped."""
        merged = {**self.filters, **{k: v for k, v in filters.items() if v is not None}}
        return replace(self, filters=merged)


def build_list_query(
    page: int | None = None,
    limit: int | None = None,
    query: str | None = None,
    sort: str | None = None,
    **filters: Any,
) -> ListQuery:
    """Normalize raw list parameters.

    Missing values fall back to page 1, limit 10 and an empty search; filters
    whose value is None are dropped.

    Raises:
        PayloadValidationError: page < 1, or limit outside 1..100
    """
    page = DEFAULT_PAGE if page is None else page
    limit = DEFAULT_LIMIT if limit is None else limit

    if page < 1:
        raise PayloadValidationError('"page" must be greater than or equal to 1', field="page")
    if limit < 1 or limit > MAX_LIMIT:
        raise PayloadValidationError(
            f'"limit" must be between 1 and {MAX_LIMIT}', field="limit"
        )

    return ListQuery(
        page=page,
        limit=limit,
        query=(query or "").strip(),
        filters={k: v for k, v in filters.items() if v is not None},
        sort=sort or None,
    )


@dataclass
class Page(Generic[SchemaT]):
    items: list[SchemaT]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_wrapper(self, count_key: str) -> dict[str, Any]:
        """Render the list wrapper, e.g. {data, totalPages, currentPage, totalMovies}."""
        return {
            "data": [item.model_dump(mode="json", by_alias=True) for item in self.items],
            "totalPages": self.total_pages,
            "currentPage": self.page,
            count_key: self.total,
        }
