from __future__ import annotations

import os
from argparse import ArgumentParser
from pathlib import Path
from typing import ClassVar

from pydantic import EmailStr

from ..common.config import MiB, BaseConfig


class CmsConfig(BaseConfig):
    """Unified CMS service configuration and CLI arguments."""

    _instance: ClassVar[CmsConfig | None] = None

    # CLI Fields (mapped from argparse)
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: str = "info"
    no_migrate: bool = False

    # Bootstrap admin
    admin_email: EmailStr = "admin@example.com"
    admin_password: str = "admin123"

    @classmethod
    def get_config(cls) -> CmsConfig:
        """Get or create the unified CmsConfig singleton."""
        if cls._instance is None:
            cls._instance = cls._from_cli_args()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    @classmethod
    def _from_cli_args(cls, argv: list[str] | None = None) -> CmsConfig:
        """Parse CLI arguments and environment, return a CmsConfig instance."""
        parser = ArgumentParser(prog="ott-cms")
        _ = parser.add_argument("--no-auth", action="store_true", help="Disable admin authentication")
        _ = parser.add_argument("--no-migrate", action="store_true", help="Skip running DB migrations")
        _ = parser.add_argument("--port", "-p", type=int, default=int(os.getenv("PORT", "8000")))
        _ = parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
        _ = parser.add_argument("--reload", action="store_true", help="Enable uvicorn reload (dev)")
        _ = parser.add_argument(
            "--log-level",
            default="info",
            choices=["critical", "error", "warning", "info", "debug", "trace"],
        )
        _ = parser.add_argument(
            "--max-image-size", type=int, default=5 * MiB, help="Max image upload size in bytes"
        )
        _ = parser.add_argument(
            "--max-video-size", type=int, default=500 * MiB, help="Max video upload size in bytes"
        )

        # Ignore unknown args, uvicorn's reloader re-imports with its own argv
        args, _unknown = parser.parse_known_args(argv)

        config_dict = vars(args).copy()
        config_dict.update(_env_overrides())

        config = cls.model_validate(config_dict)
        # Paths and database URL come from OTT_CMS_DIR / DATABASE_URL
        config.finalize_base()
        return config


def _env_overrides() -> dict[str, object]:
    overrides: dict[str, object] = {}
    if secret := os.getenv("JWT_SECRET"):
        overrides["jwt_secret"] = secret
    if expires := os.getenv("JWT_EXPIRES_MINUTES"):
        overrides["jwt_expires_minutes"] = int(expires)
    if email := os.getenv("ADMIN_EMAIL"):
        overrides["admin_email"] = email
    if password := os.getenv("ADMIN_PASSWORD"):
        overrides["admin_password"] = password
    return overrides


def get_config() -> CmsConfig:
    return CmsConfig.get_config()


def media_dir(config: CmsConfig) -> Path:
    """Upload root; falls back to ./uploads when no server dir was configured."""
    return config.media_storage_dir or Path("uploads")
