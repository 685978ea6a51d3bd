"""Filesystem and time helpers."""

import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import NoReturn

SERVER_DIR_ENV = "OTT_CMS_DIR"


def _startup_error(*lines: str) -> NoReturn:
    print("ERROR: " + "\n".join(lines), file=sys.stderr)
    raise SystemExit(1)


def ensure_server_dir(create_if_missing: bool = True) -> Path:
    """Return the server directory named by OTT_CMS_DIR.

    The directory holds the default SQLite database and the uploads tree, so
    it must be a readable and writable directory. It is created on demand
    unless ``create_if_missing`` is False.

    Raises:
        SystemExit: when the variable is unset or the directory is unusable.
    """
    configured = os.getenv(SERVER_DIR_ENV)
    if not configured:
        _startup_error(
            f"{SERVER_DIR_ENV} environment variable is not set.",
            "Point it at a writable directory for the database and uploads.",
        )

    server_dir = Path(configured)

    if not server_dir.exists():
        if not create_if_missing:
            _startup_error(f"{SERVER_DIR_ENV} does not exist: {server_dir}", f"Run: mkdir -p {server_dir}")
        try:
            server_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _startup_error(f"Failed to create {SERVER_DIR_ENV}: {server_dir}", f"Reason: {e}")
        print(f"Created {SERVER_DIR_ENV}: {server_dir}")

    if not server_dir.is_dir():
        _startup_error(f"{SERVER_DIR_ENV} is not a directory: {server_dir}")

    if not os.access(server_dir, os.R_OK | os.W_OK):
        _startup_error(f"{SERVER_DIR_ENV} is not readable and writable: {server_dir}")

    return server_dir


def get_db_url(server_dir: Path) -> str:
    """DATABASE_URL if set, else a SQLite file inside the server directory."""
    return os.getenv("DATABASE_URL") or f"sqlite:///{server_dir}/ott_cms.db"


def now_timestamp() -> int:
    """Return current UTC timestamp in milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)
