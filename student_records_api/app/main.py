"""
Main entrypoint for the Student Records API.

This module assembles the FastAPI application: logging, the record
stores, error translation and routers.  ``create_app`` builds and
configures the app; an instance built from environment settings is
created at import time as ``app`` so it can be served directly::

    STUDENTS_CSV=students.csv QUIZ_RESULTS_CSV=quiz-results.csv \
        uvicorn student_records_api.app.main:app

Every response carries ``Access-Control-Allow-Origin: *`` and every
error body has the shape ``{"error": "<message>"}``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.router import router
from .core.config import Settings, settings
from .core.logging_config import setup_logging
from .core.storage import PersistenceError, Records

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    """Condense pydantic validation errors into one message."""
    errors = exc.errors()
    if any(err["loc"][:1] == ("path",) for err in errors):
        return "Invalid student ID"
    if any(err["type"] == "json_invalid" for err in errors):
        return "Invalid JSON format"
    missing = [str(err["loc"][-1]) for err in errors if err["type"] == "missing" and len(err["loc"]) > 1]
    if not missing and any(err["type"] == "missing" for err in errors):
        return "Missing request body"
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    parts = []
    for err in errors:
        field = ".".join(str(part) for part in err["loc"][1:])
        parts.append(f"{field}: {err['msg']}" if field else err["msg"])
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _validation_message(exc)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return _error(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(PersistenceError)
    async def persistence_exception_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("%s %s could not be persisted: %s", request.method, request.url.path, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to persist changes: {exc}")


def create_app(app_settings: Optional[Settings] = None, records: Optional[Records] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use; defaults to the module-level ``settings``
        read from the environment.
    records : Optional[Records]
        Pre-built record stores.  When omitted, stores are built from
        ``app_settings`` at startup.  Either way every configured table
        is loaded at startup, and a missing data file aborts startup.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, app_settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        stores = records if records is not None else Records.from_settings(app_settings)
        stores.load_all()
        app.state.records = stores
        logger.info("%s ready", app_settings.project_name)
        yield

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        lifespan=lifespan,
    )
    app.state.records = None

    # CORSMiddleware answers preflight requests; the header middleware
    # below adds the origin header to responses of requests without an
    # Origin header too.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def allow_any_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
        return response

    register_exception_handlers(app)
    app.include_router(router)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
