# src/ott_cms/main.py
from __future__ import annotations

import sys

import uvicorn

from .common.log import setup_logging
from .content.config import CmsConfig


def main() -> int:
    # Parses the CLI once; the app's lifespan reuses this singleton
    config = CmsConfig.get_config()
    setup_logging(config.log_level)

    # Start server (blocks)
    try:
        # Pass app as import string for reload to work
        uvicorn.run(
            "ott_cms:app",
            host=config.host,
            port=config.port,
            reload=config.reload,
            log_level=config.log_level,
        )
    except Exception as exc:
        print(f"Error starting service: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
