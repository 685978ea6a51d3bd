from .admin import ensure_admin
from .base import Repository
from .queries import ListQuery, Page, build_list_query
from .repositories import (
    AdminRepository,
    BannerRepository,
    CategoryRepository,
    EnquiryRepository,
    MovieRepository,
    PackageRepository,
    ServiceBookingRepository,
    ServiceRepository,
    UserRepository,
)
from .schemas import (
    AdminSchema,
    BannerSchema,
    CategorySchema,
    CountsSchema,
    EnquirySchema,
    MovieSchema,
    PackageFaq,
    PackageInclude,
    PackageSchema,
    ServiceBookingSchema,
    ServiceSchema,
    UserSchema,
)

__all__ = [
    "ensure_admin",
    "Repository",
    "ListQuery",
    "Page",
    "build_list_query",
    "AdminRepository",
    "BannerRepository",
    "CategoryRepository",
    "EnquiryRepository",
    "MovieRepository",
    "PackageRepository",
    "ServiceBookingRepository",
    "ServiceRepository",
    "UserRepository",
    "AdminSchema",
    "BannerSchema",
    "CategorySchema",
    "CountsSchema",
    "EnquirySchema",
    "MovieSchema",
    "PackageFaq",
    "PackageInclude",
    "PackageSchema",
    "ServiceBookingSchema",
    "ServiceSchema",
    "UserSchema",
]
