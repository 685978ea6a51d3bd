from __future__ import annotations

from typing import ClassVar

from sqlalchemy import select

from ..common.auth import verify_password
from ..common.exceptions import AuthError, ForbiddenError
from ..common.models import (
    Admin,
    Banner,
    Category,
    Enquiry,
    Movie,
    Package,
    Service,
    ServiceBooking,
    User,
    UserStatus,
)
from .base import Repository
from .schemas import (
    AdminSchema,
    BannerSchema,
    CategorySchema,
    EnquirySchema,
    MovieSchema,
    PackageSchema,
    ServiceBookingSchema,
    ServiceSchema,
    UserSchema,
)


class CategoryRepository(Repository[CategorySchema]):
    model_class = Category
    schema_class = CategorySchema
    entity_name = "Category"
    search_fields = ("name",)
    default_sort = "name"


class MovieRepository(Repository[MovieSchema]):
    model_class = Movie
    schema_class = MovieSchema
    entity_name = "Movie"
    search_fields = ("name", "description")
    filter_fields = ("category_id", "status")
    references: ClassVar = {"category_id": (Category, "category")}


class BannerRepository(Repository[BannerSchema]):
    model_class = Banner
    schema_class = BannerSchema
    entity_name = "Banner"
    filter_fields = ("status",)


class UserRepository(Repository[UserSchema]):
    model_class = User
    schema_class = UserSchema
    entity_name = "User"
    search_fields = ("name", "email")
    filter_fields = ("status",)

    def authenticate(self, email: str, password: str) -> UserSchema:
        user = self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if user is None:
            raise AuthError("No user found with entered email")
        if not verify_password(password, user.password):
            raise AuthError("Invalid password entered")
        if user.status != UserStatus.ACTIVE:
            raise ForbiddenError("Your account is not active.")
        return self._to_schema(user)


class ServiceRepository(Repository[ServiceSchema]):
    model_class = Service
    schema_class = ServiceSchema
    entity_name = "Service"
    search_fields = ("name", "description")


class PackageRepository(Repository[PackageSchema]):
    model_class = Package
    schema_class = PackageSchema
    entity_name = "Package"
    search_fields = ("name", "description")
    filter_fields = ("service_id",)
    references: ClassVar = {"service_id": (Service, "service")}


class ServiceBookingRepository(Repository[ServiceBookingSchema]):
    model_class = ServiceBooking
    schema_class = ServiceBookingSchema
    entity_name = "Service booking"
    search_fields = ("patient_name", "mobile_number")
    filter_fields = ("status", "service_id", "payment_type", "user_id")
    references: ClassVar = {
        "service_id": (Service, "service"),
        "user_id": (User, "user"),
    }


class EnquiryRepository(Repository[EnquirySchema]):
    model_class = Enquiry
    schema_class = EnquirySchema
    entity_name = "Enquiry"
    search_fields = ("enquiry", "phone_number", "status")
    filter_fields = ("status",)


class AdminRepository(Repository[AdminSchema]):
    model_class = Admin
    schema_class = AdminSchema
    entity_name = "Admin"

    def find_by_email(self, email: str) -> Admin | None:
        return self.db.execute(select(Admin).where(Admin.email == email)).scalar_one_or_none()

    def authenticate(self, email: str, password: str) -> AdminSchema:
        admin = self.find_by_email(email)
        if admin is None:
            raise AuthError("No admin found with entered email")
        if not verify_password(password, admin.password):
            raise AuthError("Invalid password entered")
        return self._to_schema(admin)
