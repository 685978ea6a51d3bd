from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, ClassVar, Literal

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, ValidationError
from sqlalchemy.orm import Session

from .database import get_db
from .exceptions import AuthError, ForbiddenError
from .models import User, UserStatus

if TYPE_CHECKING:
    from .config import BaseConfig

# ─────────────────────────────────────
# Passwords
# ─────────────────────────────────────

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


# ─────────────────────────────────────
# JWT payload model
# ─────────────────────────────────────

Role = Literal["admin", "user"]


class UserPayload(BaseModel):
    """JWT token payload for authenticated admins and users."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    id: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def create_access_token(principal: UserPayload, config: BaseConfig) -> str:
    expires = datetime.now(UTC) + timedelta(minutes=config.jwt_expires_minutes)
    claims = principal.model_dump()
    claims["exp"] = expires
    return jwt.encode(claims, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: BaseConfig) -> UserPayload:
    try:
        raw = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require_exp": True},
        )
        return UserPayload.model_validate(raw)

    except ExpiredSignatureError:
        raise AuthError("Your session has expired. Please log in again.")

    except ValidationError:
        raise AuthError("Token payload is invalid.")

    except JWTError:
        raise AuthError("Could not validate credentials.")


# ─────────────────────────────────────
# OAuth2
# ─────────────────────────────────────

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="api/admin/v1/login",
    auto_error=False,
)


# ─────────────────────────────────────
# Principal dependencies
# ─────────────────────────────────────


async def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
) -> UserPayload | None:
    """Decode the bearer token, if any, into a principal."""
    if token is None:
        return None
    config: BaseConfig = request.app.state.config
    return decode_access_token(token, config)


async def require_admin(
    request: Request,
    current_user: UserPayload | None = Depends(get_current_user),
) -> UserPayload | None:
    config: BaseConfig = request.app.state.config

    # Demo mode: admin routes are open
    if config.no_auth:
        return current_user

    if current_user is None:
        raise AuthError("You are not authenticated.")

    if not current_user.is_admin:
        raise ForbiddenError("Insufficient permissions. Admin access required.")

    return current_user


def require_user(
    current_user: UserPayload | None = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserPayload:
    """Require a registered, active user; bookings are owned by this principal."""
    if current_user is None:
        raise AuthError("You are not authenticated.")

    if current_user.role != "user":
        raise ForbiddenError("This action is only available to users.")

    user = db.get(User, current_user.id)
    if user is None:
        raise AuthError("User not found.")
    if user.status != UserStatus.ACTIVE:
        raise ForbiddenError("Your account is not active.")

    return current_user
