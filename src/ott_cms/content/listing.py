from __future__ import annotations

from typing import Any

from ..common.exceptions import NotFoundError
from ..db_service import ListQuery, Page, Repository
from .resources import Resource


def paginate(
    repository: Repository[Any],
    resource: Resource,
    query: ListQuery,
    empty_message: str | None = None,
) -> dict[str, Any]:
    """Run a list query and render the list wrapper.

    An empty page is a NotFoundError, matching how clients of the admin panel
    already detect the end of a listing.
    """
    items, total = repository.find_many(query)
    if not items:
        raise NotFoundError(empty_message or f"No {resource.label} found")
    return Page(items=items, total=total, page=query.page, limit=query.limit).to_wrapper(
        resource.count_key
    )
