from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from ..common.models import BookingStatus, MovieStatus, PaymentType, UserStatus, VideoSource


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; both accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordSchema(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: int | None = None
    updated_at: int | None = None

    def to_json(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


# ─────────────────────────────────────
# Nested value objects
# ─────────────────────────────────────


class PackageInclude(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    items: list[str]


class PackageFaq(CamelModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class UploadedVideo(BaseModel):
    kind: Literal["UPLOAD"] = "UPLOAD"
    path: str


class LinkedVideo(BaseModel):
    kind: Literal["LINK"] = "LINK"
    url: str


# ─────────────────────────────────────
# Records
# ─────────────────────────────────────


class AdminSchema(RecordSchema):
    """Admin record; the password hash is never part of the schema."""

    email: str


class UserSchema(RecordSchema):
    """User record; the password hash is never part of the schema."""

    name: str
    email: str
    status: UserStatus = UserStatus.ACTIVE
    image: str | None = None


class CategorySchema(RecordSchema):
    name: str
    image_url: str | None = None


class MovieSchema(RecordSchema):
    name: str
    description: str
    image_url: str
    status: MovieStatus = MovieStatus.PENDING
    category_id: str
    category: CategorySchema | None = None

    video_source: VideoSource = Field(VideoSource.UPLOAD, exclude=True)
    video_path: str | None = Field(None, exclude=True)
    video_url: str | None = Field(None, exclude=True)

    @computed_field
    @property
    def video(self) -> UploadedVideo | LinkedVideo | None:
        if self.video_source == VideoSource.LINK and self.video_url:
            return LinkedVideo(url=self.video_url)
        if self.video_source == VideoSource.UPLOAD and self.video_path:
            return UploadedVideo(path=self.video_path)
        return None


class BannerSchema(RecordSchema):
    image: str
    status: int = 1


class ServiceSchema(RecordSchema):
    name: str
    description: str
    image: str | None = None
    amount: float
    discount: float | None = None
    fasting_time: str | None = None
    result_duration: str | None = None
    sample_type: str | None = None
    age_group: str | None = None
    home_sample_collection: str | None = None


class PackageSchema(RecordSchema):
    name: str
    description: str
    price: float
    discount: float | None = None
    image: str | None = None
    includes: list[PackageInclude] = Field(default_factory=list)
    faqs: list[PackageFaq] = Field(default_factory=list)
    service_id: str
    service: ServiceSchema | None = None


class ServiceBookingSchema(RecordSchema):
    patient_name: str
    mobile_number: str
    preference: str
    address: str | None = None
    date: datetime.date
    time: str
    payment_type: PaymentType
    total_price: float
    status: BookingStatus = BookingStatus.PENDING
    service_id: str
    user_id: str
    service: ServiceSchema | None = None


class EnquirySchema(RecordSchema):
    enquiry: str | None = None
    phone_number: str
    formatted_date: str | None = None
    image: str | None = None
    images: list[str] = Field(default_factory=list)
    status: str | None = None
    remarks: str | None = None


class CountsSchema(BaseModel):
    movies: int
    categories: int
    banners: int
    users: int
    services: int
    packages: int
    bookings: int
    enquiries: int
