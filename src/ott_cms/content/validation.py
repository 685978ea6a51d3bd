"""Declarative payload rules for every entity.

Create models reject unknown fields; update models drop them and make every
field optional. ``validate_payload`` turns the first pydantic error into a
``PayloadValidationError`` naming the offending wire field.
"""

from __future__ import annotations

import datetime
import json
import re
from collections.abc import Mapping
from typing import Annotated, Any, ClassVar, Self

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..common.exceptions import PayloadValidationError
from ..common.models import BookingStatus, MovieStatus, PaymentType, UserStatus, VideoSource
from ..db_service.schemas import PackageFaq, PackageInclude

PHONE_PATTERN = r"^\+?[1-9]\d{7,14}$"


def _decode_json(value: Any) -> Any:
    # Multipart forms carry nested lists as JSON text
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            raise ValueError("must be valid JSON")
    return value


_http_url: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    value = value.strip()
    try:
        _ = _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid http or https URL")
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]
HttpUrlStr = Annotated[str, AfterValidator(_check_http_url)]
JsonIncludes = Annotated[list[PackageInclude], BeforeValidator(_decode_json), Field(min_length=1)]
JsonFaqs = Annotated[list[PackageFaq], BeforeValidator(_decode_json)]


class CreatePayload(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class UpdatePayload(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    # Columns an update may clear with an explicit null
    nullable_fields: ClassVar[frozenset[str]] = frozenset()


# ─────────────────────────────────────
# Users
# ─────────────────────────────────────


class UserCreate(CreatePayload):
    name: NonEmptyStr = Field(validation_alias=AliasChoices("name", "fullName"))
    email: EmailStr
    password: str = Field(min_length=6)
    status: UserStatus = UserStatus.ACTIVE


class UserUpdate(UpdatePayload):
    name: NonEmptyStr | None = Field(None, validation_alias=AliasChoices("name", "fullName"))
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=6)
    status: UserStatus | None = None


class LoginPayload(CreatePayload):
    # Matched against stored accounts only; an unknown address is a 401
    email: NonEmptyStr
    password: NonEmptyStr


# ─────────────────────────────────────
# Catalog
# ─────────────────────────────────────


class CategoryCreate(CreatePayload):
    name: NonEmptyStr


class CategoryUpdate(UpdatePayload):
    name: NonEmptyStr | None = None


class MovieCreate(CreatePayload):
    name: NonEmptyStr
    description: NonEmptyStr
    status: MovieStatus = MovieStatus.PENDING
    category_id: NonEmptyStr
    video_source: VideoSource = VideoSource.UPLOAD
    video_url: HttpUrlStr | None = None

    @model_validator(mode="after")
    def link_needs_url(self) -> Self:
        if self.video_source == VideoSource.LINK and not self.video_url:
            raise ValueError('"videoUrl" is required when "videoSource" is LINK')
        return self


class MovieUpdate(UpdatePayload):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"video_url"})

    name: NonEmptyStr | None = None
    description: NonEmptyStr | None = None
    status: MovieStatus | None = None
    category_id: NonEmptyStr | None = None
    video_source: VideoSource | None = None
    video_url: HttpUrlStr | None = None


class BannerCreate(CreatePayload):
    status: int = Field(1, ge=0, le=1)


class BannerUpdate(UpdatePayload):
    status: int | None = Field(None, ge=0, le=1)


# ─────────────────────────────────────
# Services, packages, bookings
# ─────────────────────────────────────


class ServiceCreate(CreatePayload):
    name: NonEmptyStr
    description: NonEmptyStr
    amount: float = Field(gt=0)
    discount: float | None = Field(None, ge=0)
    fasting_time: str | None = None
    result_duration: str | None = None
    sample_type: str | None = None
    age_group: str | None = None
    home_sample_collection: str | None = None

    @model_validator(mode="after")
    def discount_within_amount(self) -> Self:
        check_discount(self.amount, self.discount)
        return self


class ServiceUpdate(UpdatePayload):
    nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"discount", "fasting_time", "result_duration", "sample_type", "age_group", "home_sample_collection"}
    )

    name: NonEmptyStr | None = None
    description: NonEmptyStr | None = None
    amount: float | None = Field(None, gt=0)
    discount: float | None = Field(None, ge=0)
    fasting_time: str | None = None
    result_duration: str | None = None
    sample_type: str | None = None
    age_group: str | None = None
    home_sample_collection: str | None = None


def check_discount(amount: float | None, discount: float | None) -> None:
    """A service discount is an absolute amount and can't exceed the price."""
    if amount is not None and discount is not None and discount > amount:
        raise ValueError('"discount" must be less than or equal to "amount"')


class PackageCreate(CreatePayload):
    name: NonEmptyStr
    description: NonEmptyStr
    price: float = Field(gt=0)
    # Percentage
    discount: float | None = Field(None, ge=0, le=100)
    includes: JsonIncludes
    faqs: JsonFaqs = Field(default_factory=list)
    service_id: NonEmptyStr


class PackageUpdate(UpdatePayload):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"discount"})

    name: NonEmptyStr | None = None
    description: NonEmptyStr | None = None
    price: float | None = Field(None, gt=0)
    discount: float | None = Field(None, ge=0, le=100)
    includes: JsonIncludes | None = None
    faqs: JsonFaqs | None = None
    service_id: NonEmptyStr | None = None


class BookingCreate(CreatePayload):
    patient_name: NonEmptyStr
    mobile_number: Phone
    preference: NonEmptyStr
    address: str | None = None
    date: datetime.date
    time: NonEmptyStr
    payment_type: PaymentType
    total_price: float = Field(gt=0)
    status: BookingStatus = BookingStatus.PENDING
    service_id: NonEmptyStr


class BookingUpdate(UpdatePayload):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"address"})

    patient_name: NonEmptyStr | None = None
    mobile_number: Phone | None = None
    preference: NonEmptyStr | None = None
    address: str | None = None
    date: datetime.date | None = None
    time: NonEmptyStr | None = None
    payment_type: PaymentType | None = None
    total_price: float | None = Field(None, gt=0)
    status: BookingStatus | None = None
    service_id: NonEmptyStr | None = None


class BookingStatusUpdate(CreatePayload):
    status: BookingStatus


_FORMATTED_DATE = AliasChoices("formattedDate", "formatted_date", "formated_date")


class EnquiryCreate(CreatePayload):
    enquiry: str | None = None
    phone_number: Phone
    formatted_date: str | None = Field(None, validation_alias=_FORMATTED_DATE)
    status: str | None = None
    remarks: str | None = None


class EnquiryUpdate(UpdatePayload):
    nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"enquiry", "formatted_date", "status", "remarks"}
    )

    enquiry: str | None = None
    phone_number: Phone | None = None
    formatted_date: str | None = Field(None, validation_alias=_FORMATTED_DATE)
    status: str | None = None
    remarks: str | None = None


# ─────────────────────────────────────
# Entry point
# ─────────────────────────────────────

_SHOULD = re.compile(r"^(Input|String|Value|List|Dictionary) should\b")


def describe_error(error: Mapping[str, Any]) -> tuple[str, str | None]:
    loc = [str(part) for part in error.get("loc", ()) if not isinstance(part, int)]
    field = ".".join(loc) or None
    msg = str(error.get("msg", "is invalid"))
    kind = error.get("type")

    if kind == "missing":
        return f'"{field}" is required', field
    if kind == "extra_forbidden":
        return f'"{field}" is not allowed', field
    if kind == "value_error":
        msg = msg.removeprefix("Value error, ")
        if field is None or msg.startswith('"'):
            return msg, field
        return f'"{field}" {msg}', field

    msg = _SHOULD.sub("must", msg)
    return (f'"{field}" {msg}' if field else msg), field


def validate_payload(
    model: type[BaseModel],
    payload: Mapping[str, Any],
    partial: bool = False,
) -> dict[str, Any]:
    """Validate and normalize a raw payload.

    Args:
        model: Create or update model for the entity
        payload: Raw fields (form or JSON body); file parts excluded
        partial: Only return the fields the caller actually sent

    Returns:
        Normalized values keyed by column name

    Raises:
        PayloadValidationError: first failing field
    """
    try:
        parsed = model.model_validate(dict(payload))
    except ValidationError as e:
        errors = e.errors()
        message, field = describe_error(errors[0]) if errors else ("Invalid payload", None)
        raise PayloadValidationError(message, field=field) from e

    values = parsed.model_dump(exclude_unset=partial)
    if partial:
        nullable: frozenset[str] = getattr(model, "nullable_fields", frozenset())
        for key, value in values.items():
            if value is None and key not in nullable:
                wire = to_camel(key)
                raise PayloadValidationError(f'"{wire}" must not be null', field=wire)
    return values
