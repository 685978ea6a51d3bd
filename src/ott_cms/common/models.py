from __future__ import annotations

from enum import StrEnum
from typing import Any, override
from uuid import uuid4

from sqlalchemy import JSON, BigInteger, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .utils import now_timestamp


class Base(DeclarativeBase):
    """Base class for CMS models."""

    pass


class UserStatus(StrEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"


class MovieStatus(StrEnum):
    PUBLISHED = "PUBLISHED"
    PENDING = "PENDING"


class VideoSource(StrEnum):
    UPLOAD = "UPLOAD"
    LINK = "LINK"


class PaymentType(StrEnum):
    ONLINE = "ONLINE"
    CASH = "CASH"


class BookingStatus(StrEnum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


def new_id() -> str:
    return str(uuid4())


class TimestampMixin:
    # Epoch milliseconds, UTC
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_timestamp, index=True)
    updated_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_timestamp, onupdate=now_timestamp
    )


class Admin(TimestampMixin, Base):
    __tablename__: str = "admins"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String, nullable=False)

    @override
    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, email={self.email})>"


class User(TimestampMixin, Base):
    __tablename__: str = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default=UserStatus.ACTIVE)
    image: Mapped[str | None] = mapped_column(String, nullable=True)

    bookings: Mapped[list[ServiceBooking]] = relationship(
        "ServiceBooking", back_populates="user", passive_deletes="all"
    )

    @override
    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Category(TimestampMixin, Base):
    __tablename__: str = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)

    movies: Mapped[list[Movie]] = relationship(
        "Movie", back_populates="category", passive_deletes="all"
    )

    @override
    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"


class Movie(TimestampMixin, Base):
    __tablename__: str = "movies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(String, nullable=False)

    # Tagged video descriptor: exactly one of video_path / video_url per video_source
    video_source: Mapped[str] = mapped_column(String, nullable=False, default=VideoSource.UPLOAD)
    video_path: Mapped[str | None] = mapped_column(String, nullable=True)
    video_url: Mapped[str | None] = mapped_column(String, nullable=True)

    status: Mapped[str] = mapped_column(String, nullable=False, default=MovieStatus.PENDING)
    category_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("categories.id"), nullable=False, index=True
    )

    category: Mapped[Category] = relationship("Category", back_populates="movies")

    @override
    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, name={self.name})>"


class Banner(TimestampMixin, Base):
    __tablename__: str = "banners"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    image: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class Service(TimestampMixin, Base):
    __tablename__: str = "services"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String, nullable=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    discount: Mapped[float | None] = mapped_column(Float, nullable=True)
    fasting_time: Mapped[str | None] = mapped_column(String, nullable=True)
    result_duration: Mapped[str | None] = mapped_column(String, nullable=True)
    sample_type: Mapped[str | None] = mapped_column(String, nullable=True)
    age_group: Mapped[str | None] = mapped_column(String, nullable=True)
    home_sample_collection: Mapped[str | None] = mapped_column(String, nullable=True)

    packages: Mapped[list[Package]] = relationship(
        "Package", back_populates="service", passive_deletes="all"
    )

    @override
    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name={self.name})>"


class Package(TimestampMixin, Base):
    __tablename__: str = "packages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discount: Mapped[float | None] = mapped_column(Float, nullable=True)
    image: Mapped[str | None] = mapped_column(String, nullable=True)
    includes: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    faqs: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    service_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("services.id"), nullable=False, index=True
    )

    service: Mapped[Service] = relationship("Service", back_populates="packages")


class ServiceBooking(TimestampMixin, Base):
    __tablename__: str = "service_bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    patient_name: Mapped[str] = mapped_column(String, nullable=False)
    mobile_number: Mapped[str] = mapped_column(String, nullable=False)
    preference: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    date: Mapped[Any] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String, nullable=False)
    payment_type: Mapped[str] = mapped_column(String, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default=BookingStatus.PENDING)
    service_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("services.id"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )

    service: Mapped[Service] = relationship("Service")
    user: Mapped[User] = relationship("User", back_populates="bookings")


class Enquiry(TimestampMixin, Base):
    __tablename__: str = "enquiries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    enquiry: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str] = mapped_column(String, nullable=False)
    formatted_date: Mapped[str | None] = mapped_column(String, nullable=True)
    image: Mapped[str | None] = mapped_column(String, nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
