from __future__ import annotations

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..common.auth import hash_password
from ..common.models import Admin
from .repositories import AdminRepository
from .schemas import AdminSchema


def ensure_admin(db: Session, email: str, password: str) -> tuple[AdminSchema, bool]:
    """Create the bootstrap admin if it does not exist yet.

    Safe to call on every startup, and from several workers at once: a
    concurrent insert that wins the race turns this call into a no-op.

    Returns:
        (admin, created)
    """
    repo = AdminRepository(db)

    existing = repo.find_by_email(email)
    if existing is not None:
        logger.info(f"Admin already exists with email: {email}")
        return AdminSchema.model_validate(existing), False

    admin = Admin(email=email, password=hash_password(password))
    try:
        db.add(admin)
        db.commit()
    except IntegrityError:
        db.rollback()
        winner = repo.find_by_email(email)
        if winner is None:
            raise
        logger.info(f"Admin already exists with email: {email}")
        return AdminSchema.model_validate(winner), False

    db.refresh(admin)
    logger.info(f"Admin created with email: {email}")
    return AdminSchema.model_validate(admin), True
