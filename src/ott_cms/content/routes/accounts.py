"""Admin and user login, user management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...common.auth import UserPayload, create_access_token
from ...common.database import get_db
from ...common.models import UserStatus
from ...db_service import AdminRepository, ListQuery, UserRepository
from ..config import CmsConfig
from ..dependencies import get_config, list_params, repository_for
from ..listing import paginate
from ..resources import USER
from ..responses import ApiResponse, respond
from ..uploads import read_payload
from ..validation import LoginPayload, validate_payload
from .crud import register_crud

# ─────────────────────────────────────
# Admin
# ─────────────────────────────────────

admin_router = APIRouter(prefix="/api/admin/v1")


@admin_router.post(
    "/login",
    tags=["auth"],
    summary="Admin Login",
    description="Exchanges admin credentials for a bearer token.",
    operation_id="admin_login",
    response_model=ApiResponse,
)
async def admin_login(
    request: Request,
    db: Session = Depends(get_db),
    config: CmsConfig = Depends(get_config),
) -> JSONResponse:
    payload, _files = await read_payload(request)
    credentials = validate_payload(LoginPayload, payload)

    admin = AdminRepository(db).authenticate(credentials["email"], credentials["password"])
    token = create_access_token(UserPayload(id=admin.id, email=admin.email, role="admin"), config)
    return respond(
        200,
        "Login successful",
        {"admin": {"id": admin.id, "email": admin.email}, "token": token},
    )


# ─────────────────────────────────────
# Users
# ─────────────────────────────────────

user_router = APIRouter(prefix="/api/user/v1")
register_crud(user_router, USER, "user")


@user_router.post(
    "/login",
    tags=["auth"],
    summary="User Login",
    description="Exchanges user credentials for a bearer token. Only active users may log in.",
    operation_id="user_login",
    response_model=ApiResponse,
)
async def user_login(
    request: Request,
    db: Session = Depends(get_db),
    config: CmsConfig = Depends(get_config),
) -> JSONResponse:
    payload, _files = await read_payload(request)
    credentials = validate_payload(LoginPayload, payload)

    user = UserRepository(db).authenticate(credentials["email"], credentials["password"])
    token = create_access_token(UserPayload(id=user.id, email=user.email, role="user"), config)
    return respond(200, "Login successful", {"user": user.to_json(), "token": token})


@user_router.get(
    "/users",
    tags=["users"],
    summary="List Users",
    description="Searches name and email. Passwords are never returned.",
    operation_id="get_users",
    response_model=ApiResponse,
)
async def get_users(
    params: ListQuery = Depends(list_params),
    status: UserStatus | None = Query(None),
    repository: UserRepository = Depends(repository_for(USER)),
) -> JSONResponse:
    query = params.with_filters(status=status)
    return respond(200, "Users retrieved successfully", paginate(repository, USER, query))
