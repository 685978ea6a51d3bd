"""OTT CMS Server."""

from .content import create_app

app = create_app()

__all__ = ["app", "create_app"]
