"""Engine, sessions, schema setup and lock retries."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

from fastapi import Request
from loguru import logger
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine.interfaces import DBAPIConnection
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

T = TypeVar("T")
P = ParamSpec("P")

PACKAGED_MIGRATIONS = Path(__file__).resolve().parent.parent / "migrations"

# Only meaningful for on-disk databases
_FILE_DB_PRAGMAS = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "busy_timeout=10000",
)


def _is_sqlite(db_url: str) -> bool:
    return db_url.lower().startswith("sqlite")


def _is_sqlite_memory(db_url: str) -> bool:
    return db_url.strip() == "sqlite://" or ":memory:" in db_url


def sqlite_on_connect(dbapi_conn: DBAPIConnection, _connection_record: object) -> None:
    """Per-connection SQLite setup.

    Foreign keys are off by default in SQLite and every reference rule of the
    CMS depends on them. WAL lets readers proceed while one request writes.
    """
    cursor = dbapi_conn.cursor()
    try:
        # Rows are (seq, name, file); file is "" for an in-memory database
        cursor.execute("PRAGMA database_list")
        in_memory = any(row[2] == "" for row in cursor.fetchall())
        if not in_memory:
            for pragma in _FILE_DB_PRAGMAS:
                cursor.execute(f"PRAGMA {pragma}")
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def create_db_engine(db_url: str, *, echo: bool = False) -> Engine:
    """Build the engine for ``db_url``.

    In-memory SQLite gets a single shared connection, otherwise each pooled
    connection would open its own empty database.
    """
    options: dict[str, Any] = {"echo": echo}
    if not _is_sqlite(db_url):
        options.update(pool_size=20, max_overflow=40, pool_pre_ping=True)
    elif _is_sqlite_memory(db_url):
        options.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        options.update(connect_args={"check_same_thread": False}, pool_size=20, max_overflow=40)

    engine = create_engine(db_url, **options)
    if _is_sqlite(db_url):
        event.listen(engine, "connect", sqlite_on_connect)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    # Records are serialized after commit, so keep their state loaded
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Request-scoped session from the factory the lifespan put on app.state."""
    session_factory: sessionmaker[Session] = request.app.state.session_factory
    with session_factory() as db:
        yield db


def init_schema(engine: Engine) -> None:
    """Create missing tables from the models, without migration history."""
    Base.metadata.create_all(bind=engine)


def run_migrations(engine: Engine) -> None:
    """Upgrade the database behind ``engine`` to the newest packaged revision.

    Alembic is handed a connection of this engine instead of a URL, so an
    in-memory database is migrated in place.
    """
    from alembic import command
    from alembic.config import Config as AlembicConfig

    alembic_cfg = AlembicConfig()
    alembic_cfg.set_main_option("script_location", str(PACKAGED_MIGRATIONS))
    logger.info(f"Migrating database {engine.url!r} to head")
    with engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        command.upgrade(alembic_cfg, "head")


def is_locked_error(e: Exception) -> bool:
    return isinstance(e, OperationalError) and "database is locked" in str(e).lower()


def with_retry(
    max_retries: int = 5, initial_delay: float = 0.5
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Retry the wrapped call while SQLite reports the database as locked.

    The delay doubles after every attempt; the last lock error is re-raised
    once the attempts are used up. Any other error propagates immediately.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            delay = initial_delay
            for attempt in range(1, max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except OperationalError as e:
                    if not is_locked_error(e) or attempt == max_retries:
                        raise
                    logger.warning(
                        f"{func.__qualname__}: database locked "
                        + f"(attempt {attempt}/{max_retries}), retrying in {delay}s"
                    )
                    time.sleep(delay)
                    delay *= 2
            raise AssertionError("unreachable")

        return wrapper

    return decorator
