"""Per-entity wiring of the mutation pipeline.

A resource names the repository, payload models and file fields of one
entity, plus an optional ``prepare`` hook for rules that need the stored
record (merged cross-field checks, derived columns).
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from ..common.auth import hash_password
from ..common.exceptions import PayloadValidationError
from ..common.models import VideoSource
from ..db_service import (
    BannerRepository,
    CategoryRepository,
    EnquiryRepository,
    MovieRepository,
    PackageRepository,
    Repository,
    ServiceBookingRepository,
    ServiceRepository,
    UserRepository,
)
from . import validation as v
from .uploads import VIDEOS, FileField

# (values, stored record or None on create, names of file fields in the request) -> values
PrepareHook = Callable[[dict[str, Any], Any, Collection[str]], dict[str, Any]]


@dataclass(frozen=True)
class Resource:
    name: str
    plural: str
    repository: type[Repository[Any]]
    create_model: type[BaseModel]
    update_model: type[BaseModel]
    files: tuple[FileField, ...] = ()
    prepare: PrepareHook | None = None
    # Lowercase plural for messages; defaults to plural.lower()
    plural_label: str | None = None

    @property
    def count_key(self) -> str:
        """Key of the total in list responses, e.g. ``totalMovies``."""
        return f"total{self.plural}"

    @property
    def label(self) -> str:
        return self.plural_label or self.plural.lower()

    def file_columns(self) -> tuple[str, ...]:
        return tuple(f.column for f in self.files)


# ─────────────────────────────────────
# Prepare hooks
# ─────────────────────────────────────


def prepare_user(values: dict[str, Any], existing: Any, files: Collection[str]) -> dict[str, Any]:
    _ = existing, files
    if values.get("password"):
        values["password"] = hash_password(values["password"])
    return values


def prepare_movie(values: dict[str, Any], existing: Any, files: Collection[str]) -> dict[str, Any]:
    """Resolve the video descriptor into exactly one of video_path / video_url."""
    source = values.get("video_source") or (
        existing.video_source if existing is not None else VideoSource.UPLOAD
    )

    if source == VideoSource.LINK:
        if "movie" in files:
            raise PayloadValidationError(
                '"movie" is not allowed when "videoSource" is LINK', field="movie"
            )
        url = values.get("video_url") or (existing.video_url if existing is not None else None)
        if not url:
            raise PayloadValidationError(
                '"videoUrl" is required when "videoSource" is LINK', field="videoUrl"
            )
        values.update(video_source=VideoSource.LINK, video_url=url, video_path=None)
        return values

    has_video = "movie" in files or (existing is not None and existing.video_path)
    if not has_video:
        raise PayloadValidationError(
            '"movie" is required when "videoSource" is UPLOAD', field="movie"
        )
    if "video_url" in values and values["video_url"]:
        raise PayloadValidationError(
            '"videoUrl" is not allowed when "videoSource" is UPLOAD', field="videoUrl"
        )
    values.update(video_source=VideoSource.UPLOAD, video_url=None)
    return values


def prepare_service(values: dict[str, Any], existing: Any, files: Collection[str]) -> dict[str, Any]:
    _ = files
    if existing is None:
        # Create payloads are checked by the model itself
        return values
    amount = values.get("amount", existing.amount)
    discount = values.get("discount", existing.discount)
    try:
        v.check_discount(amount, discount)
    except ValueError as e:
        raise PayloadValidationError(str(e), field="discount") from e
    return values


# ─────────────────────────────────────
# Registry
# ─────────────────────────────────────

CATEGORY = Resource(
    name="Category",
    plural="Categories",
    repository=CategoryRepository,
    create_model=v.CategoryCreate,
    update_model=v.CategoryUpdate,
    files=(FileField("image", "image_url"),),
)

MOVIE = Resource(
    name="Movie",
    plural="Movies",
    repository=MovieRepository,
    create_model=v.MovieCreate,
    update_model=v.MovieUpdate,
    files=(
        FileField("image", "image_url", required_on_create=True),
        FileField("movie", "video_path", kind=VIDEOS),
    ),
    prepare=prepare_movie,
)

BANNER = Resource(
    name="Banner",
    plural="Banners",
    repository=BannerRepository,
    create_model=v.BannerCreate,
    update_model=v.BannerUpdate,
    files=(FileField("image", "image", required_on_create=True),),
)

USER = Resource(
    name="User",
    plural="Users",
    repository=UserRepository,
    create_model=v.UserCreate,
    update_model=v.UserUpdate,
    files=(FileField("image", "image"),),
    prepare=prepare_user,
)

SERVICE = Resource(
    name="Service",
    plural="Services",
    repository=ServiceRepository,
    create_model=v.ServiceCreate,
    update_model=v.ServiceUpdate,
    files=(FileField("image", "image"),),
    prepare=prepare_service,
)

PACKAGE = Resource(
    name="Package",
    plural="Packages",
    repository=PackageRepository,
    create_model=v.PackageCreate,
    update_model=v.PackageUpdate,
    files=(FileField("image", "image"),),
)

BOOKING = Resource(
    name="Service booking",
    plural="ServiceBookings",
    plural_label="service bookings",
    repository=ServiceBookingRepository,
    create_model=v.BookingCreate,
    update_model=v.BookingUpdate,
)

ENQUIRY = Resource(
    name="Enquiry",
    plural="Enquiries",
    repository=EnquiryRepository,
    create_model=v.EnquiryCreate,
    update_model=v.EnquiryUpdate,
    files=(
        FileField("image", "image"),
        FileField("images", "images", max_count=10),
    ),
)

RESOURCES: tuple[Resource, ...] = (CATEGORY, MOVIE, BANNER, USER, SERVICE, PACKAGE, BOOKING, ENQUIRY)
