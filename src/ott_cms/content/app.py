"""OTT CMS Server."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Path, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..common.database import (
    create_db_engine,
    create_session_factory,
    init_schema,
    run_migrations,
)
from ..common.exceptions import CmsError, NotFoundError
from ..common.storage import StorageService
from ..db_service import ensure_admin
from .config import CmsConfig, media_dir
from .dependencies import get_storage
from .responses import respond
from .routes import routers
from .validation import describe_error

INTERNAL_ERROR_MESSAGE = "Something went wrong, please try again later or contact support."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler:
    - Startup: configuration, database schema, upload storage, bootstrap admin
    - Shutdown: dispose the engine
    """
    # -------- Startup --------
    config: CmsConfig | None = getattr(app.state, "config", None)
    if config is None:
        config = CmsConfig.get_config()
        app.state.config = config
        logger.info("Loaded core configuration via get_config()")

    engine = create_db_engine(config.database_url)
    if config.no_migrate:
        init_schema(engine)
    else:
        run_migrations(engine)

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.storage = StorageService(media_dir(config))

    with app.state.session_factory() as db:
        _ = ensure_admin(db, config.admin_email, config.admin_password)

    logger.info("CMS service initialized")

    try:
        yield  # ---- application runs here ----
    finally:
        # -------- Shutdown --------
        engine.dispose()
        logger.info("CMS service shutdown complete")


def create_app(config: CmsConfig | None = None) -> FastAPI:
    """Build the application; ``config`` defaults to the CLI/environment singleton at startup."""
    app = FastAPI(title="OTT CMS", version="v1", lifespan=lifespan)
    if config is not None:
        app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in routers:
        app.include_router(router)

    _register_system_routes(app)
    _register_exception_handlers(app)
    return app


def _register_system_routes(app: FastAPI) -> None:
    @app.get("/", tags=["health"], summary="Health Check", operation_id="health")
    async def health() -> JSONResponse:
        return respond(200, "Server is running")

    @app.get(
        "/uploads/{file_path:path}",
        tags=["media"],
        summary="Get Uploaded File",
        operation_id="get_upload",
    )
    async def get_upload(
        file_path: str = Path(..., title="Relative upload path"),
        storage: StorageService = Depends(get_storage),
    ) -> FileResponse:
        try:
            absolute = storage.get_absolute_path(file_path)
        except ValueError:
            raise NotFoundError("File not found")
        if not absolute.is_file():
            raise NotFoundError("File not found")
        return FileResponse(absolute)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CmsError)
    async def cms_error_handler(_request: Request, exc: CmsError):
        if exc.status_code >= 500:
            logger.error(f"{exc.kind}: {exc.message}")
        return respond(exc.status_code, exc.message, exc.data)

    # Also catches FastAPI's HTTPException and the router's own 404 / 405
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
        return respond(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if not errors:
            return respond(400, "Invalid request")
        # Drop the "query" / "path" / "body" prefix
        first = dict(errors[0])
        first["loc"] = tuple(first.get("loc", ()))[1:]
        message, field = describe_error(first)
        return respond(400, message, {"field": field} if field else None)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
        return respond(500, INTERNAL_ERROR_MESSAGE)
