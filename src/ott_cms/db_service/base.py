from __future__ import annotations

import re
from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..common.database import is_locked_error, with_retry
from ..common.exceptions import (
    ConflictError,
    InternalError,
    InvalidReferenceError,
    NotFoundError,
    PayloadValidationError,
)
from ..common.models import Base
from .queries import ListQuery

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_UNIQUE_COLUMN = re.compile(r"unique constraint failed: \w+\.(\w+)|key \((\w+)\)=", re.IGNORECASE)


class Repository(Generic[SchemaT]):
    """CRUD for one entity over a request-scoped session.

    Every method commits or rolls back its own unit of work, so each call is
    one atomic write. Errors come out of the datastore already translated:

    - unknown id -> NotFoundError
    - foreign key pointing nowhere -> InvalidReferenceError
    - unique column collision, or deleting a row still referenced -> ConflictError
    - anything else SQLAlchemy raises -> InternalError

    Subclasses declare the model, the read schema and the list behaviour.
    """

    model_class: ClassVar[type[Base]]
    schema_class: ClassVar[type[BaseModel]]
    entity_name: ClassVar[str]

    search_fields: ClassVar[tuple[str, ...]] = ()
    filter_fields: ClassVar[tuple[str, ...]] = ()
    # column -> (referenced model, label used in the error message)
    references: ClassVar[dict[str, tuple[type[Base], str]]] = {}
    default_sort: ClassVar[str] = "-created_at"

    def __init__(self, db: Session):
        self.db: Session = db

    # ─────────────────────────────────────
    # Reads
    # ─────────────────────────────────────

    @with_retry()
    def find_by_id(self, id: str) -> SchemaT:
        return self._to_schema(self._get_or_404(id))

    @with_retry()
    def find_many(self, query: ListQuery) -> tuple[list[SchemaT], int]:
        """Return one page of matching records and the total match count."""
        try:
            stmt = self._apply_filters(select(self.model_class), query)
            total = self.db.execute(
                select(func.count()).select_from(stmt.order_by(None).subquery())
            ).scalar_one()

            stmt = self._apply_sort(stmt, query.sort).offset(query.offset).limit(query.limit)
            rows = self.db.execute(stmt).scalars().all()
            return [self._to_schema(r) for r in rows], total
        except SQLAlchemyError as e:
            if is_locked_error(e):
                raise
            logger.error(f"Failed to list {self.entity_name}: {e}")
            raise InternalError(f"Failed to list {self.entity_name}") from e

    @with_retry()
    def find_all(
        self, sort: str | None = None, limit: int | None = None, **filters: Any
    ) -> list[SchemaT]:
        """Unpaginated listing, equality filters only."""
        stmt = self._apply_filters(select(self.model_class), ListQuery().with_filters(**filters))
        stmt = self._apply_sort(stmt, sort)
        if limit:
            stmt = stmt.limit(limit)
        rows = self.db.execute(stmt).scalars().all()
        return [self._to_schema(r) for r in rows]

    @with_retry()
    def count(self, **filters: Any) -> int:
        stmt = self._apply_filters(select(self.model_class), ListQuery().with_filters(**filters))
        return self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

    def get_model(self, id: str) -> Base:
        """Return the ORM row, for callers that need columns the schema hides."""
        return self._get_or_404(id)

    # ─────────────────────────────────────
    # Writes
    # ─────────────────────────────────────

    @with_retry()
    def create(self, values: dict[str, Any]) -> SchemaT:
        self.check_references(values)
        obj = self.model_class(**values)
        try:
            logger.debug(f"Creating {self.entity_name}: {sorted(values)}")
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except IntegrityError as e:
            self.db.rollback()
            raise self._translate_integrity_error(e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            if is_locked_error(e):
                raise
            logger.error(f"Failed to create {self.entity_name}: {e}")
            raise InternalError(f"Failed to create {self.entity_name}") from e

        logger.debug(f"Created {self.entity_name} with id={obj.id}")
        return self._to_schema(obj)

    @with_retry()
    def update(self, id: str, values: dict[str, Any]) -> SchemaT:
        obj = self._get_or_404(id)
        self.check_references(values)
        try:
            logger.debug(f"Updating {self.entity_name} id={id}: {sorted(values)}")
            for key, value in values.items():
                setattr(obj, key, value)
            self.db.commit()
            self.db.refresh(obj)
        except IntegrityError as e:
            self.db.rollback()
            raise self._translate_integrity_error(e) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            if is_locked_error(e):
                raise
            logger.error(f"Failed to update {self.entity_name} id={id}: {e}")
            raise InternalError(f"Failed to update {self.entity_name}") from e

        return self._to_schema(obj)

    @with_retry()
    def delete(self, id: str) -> SchemaT:
        """Delete a record and return it as it was before deletion."""
        obj = self._get_or_404(id)
        # Serialize first: relationships can't lazy-load once the row is gone
        deleted = self._to_schema(obj)
        try:
            self.db.delete(obj)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(
                f"{self.entity_name} is still referenced by other records"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            if is_locked_error(e):
                raise
            logger.error(f"Failed to delete {self.entity_name} id={id}: {e}")
            raise InternalError(f"Failed to delete {self.entity_name}") from e

        logger.debug(f"Deleted {self.entity_name} id={id}")
        return deleted

    def check_references(self, values: dict[str, Any]) -> None:
        """Fail fast on dangling foreign keys.

        The FK constraint still decides; a row removed between this check and
        the commit surfaces as the same InvalidReferenceError.
        """
        for column, (target, label) in self.references.items():
            ref_id = values.get(column)
            if ref_id is not None and self.db.get(target, ref_id) is None:
                raise InvalidReferenceError(f"The specified {label} ID does not exist")

    # ─────────────────────────────────────
    # Internals
    # ─────────────────────────────────────

    def _get_or_404(self, id: str) -> Base:
        obj = self.db.get(self.model_class, id)
        if obj is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return obj

    def _apply_filters(self, stmt: Select[Any], query: ListQuery) -> Select[Any]:
        if query.query and self.search_fields:
            pattern = f"%{query.query}%"
            stmt = stmt.where(
                or_(*(getattr(self.model_class, f).ilike(pattern) for f in self.search_fields))
            )

        for key, value in query.filters.items():
            # Unknown keys are ignored rather than rejected
            if key not in self.filter_fields:
                continue
            column = getattr(self.model_class, key)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    def _apply_sort(self, stmt: Select[Any], sort: str | None) -> Select[Any]:
        sort = sort or self.default_sort
        descending = sort.startswith("-")
        name = sort.lstrip("-+")
        sortable = {"created_at", "updated_at", *self.search_fields, *self.filter_fields}
        if name not in sortable:
            raise PayloadValidationError(f'"sort" must be one of {sorted(sortable)}', field="sort")
        column = getattr(self.model_class, name)
        # id as tie-breaker keeps pages stable when timestamps collide
        return stmt.order_by(column.desc() if descending else column.asc(), self.model_class.id)

    def _translate_integrity_error(self, e: IntegrityError) -> Exception:
        message = str(e.orig)
        lowered = message.lower()
        if "foreign key" in lowered:
            return InvalidReferenceError("A referenced record does not exist")
        if "unique" in lowered or "duplicate" in lowered:
            match = _UNIQUE_COLUMN.search(message)
            column = next((g for g in match.groups() if g), None) if match else None
            if column:
                return ConflictError(
                    f"{self.entity_name} with this {column} already exists",
                    data={"field": column},
                )
            return ConflictError(f"{self.entity_name} already exists")
        logger.error(f"Integrity error on {self.entity_name}: {message}")
        return InternalError(f"Failed to save {self.entity_name}")

    def _to_schema(self, orm_obj: Any) -> SchemaT:
        """Convert ORM to Pydantic."""
        return self.schema_class.model_validate(orm_obj)  # type: ignore[return-value]
