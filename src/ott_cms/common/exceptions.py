"""Error taxonomy shared by the validator, repositories, pipeline and auth."""

from __future__ import annotations

from typing import Any, ClassVar


class CmsError(Exception):
    """Base class for every error rendered into the response envelope."""

    kind: ClassVar[str] = "InternalError"
    status_code: ClassVar[int] = 500

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.message: str = message
        self.data: Any = data


class PayloadValidationError(CmsError):
    """Raised when a payload field is missing or malformed."""

    kind = "ValidationError"
    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, data={"field": field} if field else None)
        self.field: str | None = field


class InvalidReferenceError(CmsError):
    """Raised when a foreign key does not point at an existing row."""

    kind = "ReferenceError"
    status_code = 400


class AuthError(CmsError):
    kind = "AuthError"
    status_code = 401


class ForbiddenError(CmsError):
    kind = "AuthError"
    status_code = 403


class NotFoundError(CmsError):
    """Raised when an entity, or a filtered list page, has no rows."""

    kind = "NotFoundError"
    status_code = 404


class ConflictError(CmsError):
    kind = "ConflictError"
    status_code = 409


class InternalError(CmsError):
    kind = "InternalError"
    status_code = 500
