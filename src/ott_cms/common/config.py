from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from pydantic import BaseModel, ConfigDict

MiB = 1024 * 1024


class BaseConfig(BaseModel, Namespace):
    """Settings shared by the API and the migration tooling, compliant with Namespace."""

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    def __init__(self, **kwargs):
        # Satisfy both BaseModel and Namespace
        BaseModel.__init__(self, **kwargs)
        Namespace.__init__(self)

    # Paths (populated after CLI parsing by finalize_base)
    server_dir: Path | None = None
    media_storage_dir: Path | None = None
    database_url: str = "sqlite://"

    # Auth
    no_auth: bool = False
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 24 * 60

    # Upload policy
    max_image_size: int = 5 * MiB
    max_video_size: int = 500 * MiB

    def finalize_base(self) -> None:
        """Derive storage paths and the database URL from OTT_CMS_DIR."""
        from .utils import ensure_server_dir, get_db_url

        server_dir = ensure_server_dir(create_if_missing=True)
        self.server_dir = server_dir
        self.media_storage_dir = server_dir / "uploads"
        self.database_url = get_db_url(server_dir)
