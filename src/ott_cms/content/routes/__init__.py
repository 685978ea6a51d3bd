from .accounts import admin_router, user_router
from .bookings import booking_router, enquiry_router, package_router, service_router
from .catalog import banner_router, category_router, counts_router, movie_router

routers = [
    admin_router,
    user_router,
    movie_router,
    category_router,
    banner_router,
    service_router,
    package_router,
    booking_router,
    enquiry_router,
    counts_router,
]

__all__ = ["routers"]
