"""Lab services, packages, service bookings and enquiries."""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends, Path, Query, Request
from fastapi.responses import JSONResponse

from ...common.auth import UserPayload, require_admin, require_user
from ...common.exceptions import NotFoundError
from ...common.models import BookingStatus, PaymentType
from ...db_service import (
    EnquiryRepository,
    ListQuery,
    PackageRepository,
    ServiceBookingRepository,
    ServiceRepository,
)
from ..dependencies import list_params, pipeline_for, repository_for
from ..listing import paginate
from ..pipeline import MutationPipeline
from ..resources import BOOKING, ENQUIRY, PACKAGE, SERVICE
from ..responses import ApiResponse, respond
from ..uploads import read_payload
from ..validation import BookingStatusUpdate, validate_payload
from .crud import DELETE, READ, UPDATE, register_crud

# ─────────────────────────────────────
# Services
# ─────────────────────────────────────

service_router = APIRouter(prefix="/api/service/v1")
register_crud(service_router, SERVICE, "service")


@service_router.get(
    "/services",
    tags=["services"],
    summary="List Services",
    operation_id="get_services",
    response_model=ApiResponse,
)
async def get_services(
    params: ListQuery = Depends(list_params),
    repository: ServiceRepository = Depends(repository_for(SERVICE)),
) -> JSONResponse:
    return respond(200, "Services retrieved successfully", paginate(repository, SERVICE, params))


@service_router.get(
    "/services/all",
    tags=["services"],
    summary="List All Services",
    description="Every service, ordered by name.",
    operation_id="get_all_services",
    response_model=ApiResponse,
)
async def get_all_services(
    repository: ServiceRepository = Depends(repository_for(SERVICE)),
) -> JSONResponse:
    services = repository.find_all(sort="name")
    if not services:
        raise NotFoundError("No services found")
    return respond(200, "All services retrieved successfully", services)


# ─────────────────────────────────────
# Packages
# ─────────────────────────────────────

package_router = APIRouter(prefix="/api/package/v1")
register_crud(package_router, PACKAGE, "package")


@package_router.get(
    "/packages",
    tags=["packages"],
    summary="List Packages",
    operation_id="get_packages",
    response_model=ApiResponse,
)
async def get_packages(
    params: ListQuery = Depends(list_params),
    service_id: str | None = Query(None, alias="serviceId"),
    repository: PackageRepository = Depends(repository_for(PACKAGE)),
) -> JSONResponse:
    query = params.with_filters(service_id=service_id)
    return respond(200, "Packages retrieved successfully", paginate(repository, PACKAGE, query))


# ─────────────────────────────────────
# Service bookings
# ─────────────────────────────────────

booking_router = APIRouter(prefix="/api/booking/v1")
# Creation is user-owned and handled below
register_crud(
    booking_router,
    BOOKING,
    "booking",
    operations=(READ, UPDATE, DELETE),
    read_guard=require_admin,
)

# tab -> status filter
_BOOKING_TABS: dict[str, Any] = {
    "history": BookingStatus.COMPLETED,
    "booked": [BookingStatus.PENDING, BookingStatus.CANCELLED],
}


@booking_router.post(
    "/booking",
    tags=["servicebookings"],
    summary="Book Service",
    description="Books a service for the authenticated user.",
    status_code=201,
    operation_id="create_booking",
    response_model=ApiResponse,
)
async def create_booking(
    request: Request,
    principal: UserPayload = Depends(require_user),
    pipeline: MutationPipeline[Any] = Depends(pipeline_for(BOOKING)),
) -> JSONResponse:
    payload, files = await read_payload(request)
    booking = await pipeline.create(payload, files, extra={"user_id": principal.id})
    return respond(201, "Service booking created successfully", booking)


@booking_router.get(
    "/bookings/me",
    tags=["servicebookings"],
    summary="List My Bookings",
    description="`history` lists completed bookings, `booked` pending and cancelled ones.",
    operation_id="get_my_bookings",
    response_model=ApiResponse,
)
async def get_my_bookings(
    params: ListQuery = Depends(list_params),
    tab: Literal["history", "booked"] | None = Query(None),
    principal: UserPayload = Depends(require_user),
    repository: ServiceBookingRepository = Depends(repository_for(BOOKING)),
) -> JSONResponse:
    query = params.with_filters(user_id=principal.id, status=_BOOKING_TABS.get(tab or ""))
    data = paginate(repository, BOOKING, query, "No service bookings found for this user")
    return respond(200, "User service bookings retrieved successfully", data)


@booking_router.get(
    "/bookings",
    tags=["servicebookings"],
    summary="List Bookings",
    operation_id="get_bookings",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def get_bookings(
    params: ListQuery = Depends(list_params),
    status: BookingStatus | None = Query(None),
    service_id: str | None = Query(None, alias="serviceId"),
    payment_type: PaymentType | None = Query(None, alias="paymentType"),
    repository: ServiceBookingRepository = Depends(repository_for(BOOKING)),
) -> JSONResponse:
    query = params.with_filters(status=status, service_id=service_id, payment_type=payment_type)
    return respond(
        200, "Service bookings retrieved successfully", paginate(repository, BOOKING, query)
    )


@booking_router.patch(
    "/booking/{id}/status",
    tags=["servicebookings"],
    summary="Update Booking Status",
    description="Any status may move to any other status.",
    operation_id="update_booking_status",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def update_booking_status(
    request: Request,
    id: str = Path(..., title="Service booking Id"),
    pipeline: MutationPipeline[Any] = Depends(pipeline_for(BOOKING)),
) -> JSONResponse:
    payload, _files = await read_payload(request)
    values = validate_payload(BookingStatusUpdate, payload)
    booking = await pipeline.update(id, values)
    return respond(200, "Service booking status updated successfully", booking)


# ─────────────────────────────────────
# Enquiries
# ─────────────────────────────────────

enquiry_router = APIRouter(prefix="/api/enquiry/v1")
# Anyone may submit an enquiry; reading and managing them is admin-only
register_crud(
    enquiry_router,
    ENQUIRY,
    "enquiry",
    create_guard=None,
    read_guard=require_admin,
)


@enquiry_router.get(
    "/enquiries",
    tags=["enquiries"],
    summary="List Enquiries",
    operation_id="get_enquiries",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def get_enquiries(
    params: ListQuery = Depends(list_params),
    status: str | None = Query(None),
    repository: EnquiryRepository = Depends(repository_for(ENQUIRY)),
) -> JSONResponse:
    query = params.with_filters(status=status)
    return respond(200, "Enquiries retrieved successfully", paginate(repository, ENQUIRY, query))


@enquiry_router.get(
    "/enquiries/all",
    tags=["enquiries"],
    summary="List All Enquiries",
    description="Every enquiry, newest first, without pagination.",
    operation_id="get_all_enquiries",
    response_model=ApiResponse,
    dependencies=[Depends(require_admin)],
)
async def get_all_enquiries(
    repository: EnquiryRepository = Depends(repository_for(ENQUIRY)),
) -> JSONResponse:
    enquiries = repository.find_all()
    if not enquiries:
        raise NotFoundError("No enquiries found")
    return respond(200, "Enquiries retrieved successfully", enquiries)
