"""Movies, categories, banners and the admin dashboard counters."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...common.auth import require_admin
from ...common.database import get_db
from ...common.exceptions import NotFoundError
from ...common.models import MovieStatus
from ...db_service import (
    BannerRepository,
    CategoryRepository,
    CountsSchema,
    EnquiryRepository,
    ListQuery,
    MovieRepository,
    PackageRepository,
    ServiceBookingRepository,
    ServiceRepository,
    UserRepository,
)
from ..dependencies import list_params, repository_for
from ..listing import paginate
from ..resources import BANNER, CATEGORY, MOVIE
from ..responses import ApiResponse, respond
from .crud import register_crud

# ─────────────────────────────────────
# Movies
# ─────────────────────────────────────

movie_router = APIRouter(prefix="/api/movie/v1")
register_crud(movie_router, MOVIE, "movie")


@movie_router.get(
    "/movies",
    tags=["movies"],
    summary="List Movies",
    description="Newest first. Searches name and description.",
    operation_id="get_movies",
    response_model=ApiResponse,
)
async def get_movies(
    params: ListQuery = Depends(list_params),
    category_id: str | None = Query(None, alias="categoryId"),
    status: MovieStatus | None = Query(None),
    repository: MovieRepository = Depends(repository_for(MOVIE)),
) -> JSONResponse:
    query = params.with_filters(category_id=category_id, status=status)
    return respond(200, "Movies retrieved successfully", paginate(repository, MOVIE, query))


# ─────────────────────────────────────
# Categories
# ─────────────────────────────────────

category_router = APIRouter(prefix="/api/category/v1")
register_crud(category_router, CATEGORY, "category")


@category_router.get(
    "/categories",
    tags=["categories"],
    summary="List All Categories",
    description="Every category, ordered by name.",
    operation_id="get_all_categories",
    response_model=ApiResponse,
)
async def get_all_categories(
    repository: CategoryRepository = Depends(repository_for(CATEGORY)),
) -> JSONResponse:
    categories = repository.find_all(sort="name")
    if not categories:
        raise NotFoundError("No categories found")
    return respond(200, "Categories retrieved successfully", categories)


@category_router.get(
    "/categories/paginated",
    tags=["categories"],
    summary="List Categories",
    operation_id="get_paginated_categories",
    response_model=ApiResponse,
)
async def get_paginated_categories(
    params: ListQuery = Depends(list_params),
    repository: CategoryRepository = Depends(repository_for(CATEGORY)),
) -> JSONResponse:
    return respond(
        200, "Categories retrieved successfully", paginate(repository, CATEGORY, params)
    )


# ─────────────────────────────────────
# Banners
# ─────────────────────────────────────

banner_router = APIRouter(prefix="/api/banner/v1")
register_crud(banner_router, BANNER, "banner")


@banner_router.get(
    "/banners",
    tags=["banners"],
    summary="List Banners",
    description="Newest first, optionally capped to the first `length` banners.",
    operation_id="get_banners",
    response_model=ApiResponse,
)
async def get_banners(
    length: int | None = Query(None, ge=1, description="Maximum number of banners"),
    status: int | None = Query(None, ge=0, le=1),
    repository: BannerRepository = Depends(repository_for(BANNER)),
) -> JSONResponse:
    banners = repository.find_all(limit=length, status=status)
    if not banners:
        raise NotFoundError("No banners found")
    return respond(200, "Banners retrieved successfully", banners)


# ─────────────────────────────────────
# Counts
# ─────────────────────────────────────

counts_router = APIRouter(prefix="/api/counts/v1")


@counts_router.get(
    "",
    tags=["counts"],
    summary="Get Counts",
    description="Row counts per entity for the admin dashboard.",
    operation_id="get_counts",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def get_counts(db: Session = Depends(get_db)) -> JSONResponse:
    counts = CountsSchema(
        movies=MovieRepository(db).count(),
        categories=CategoryRepository(db).count(),
        banners=BannerRepository(db).count(),
        users=UserRepository(db).count(),
        services=ServiceRepository(db).count(),
        packages=PackageRepository(db).count(),
        bookings=ServiceBookingRepository(db).count(),
        enquiries=EnquiryRepository(db).count(),
    )
    return respond(200, "Counts retrieved successfully", counts)
