from .exceptions import (
    AuthError,
    CmsError,
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidReferenceError,
    NotFoundError,
    PayloadValidationError,
)
from .storage import StorageService

__all__ = [
    "AuthError",
    "CmsError",
    "ConflictError",
    "ForbiddenError",
    "InternalError",
    "InvalidReferenceError",
    "NotFoundError",
    "PayloadValidationError",
    "StorageService",
]
