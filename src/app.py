"""Storefront FastAPI application.

Serves the order and cart endpoints over a single database. Domain errors
raised by the services are translated to status codes here and nowhere
else.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ordering.api.routes import cart_router, order_router
from ordering.services import build_services
from shared.config import Settings, load_settings
from shared.db import create_engine_from_settings, setup_db
from shared.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------
def _error(status_code: int, error, data: dict | None = None) -> JSONResponse:
    content = {"error": error}
    if data:
        content["data"] = data
    return JSONResponse(status_code=status_code, content=content)


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, exc.messages)


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages: dict[str, list[str]] = {}
    for err in exc.errors():
        # Drop the leading "body"/"path"/"header" marker
        loc = ".".join(str(part) for part in err.get("loc", ())[1:]) or "request"
        messages.setdefault(loc, []).append(err.get("msg", "Invalid value"))
    return _error(400, messages)


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, exc.message)


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(409, exc.message, exc.data)


async def _internal_error(request: Request, exc: InternalError) -> JSONResponse:
    logger.error("Request failed with internal error", path=request.url.path)
    return _error(500, exc.message)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, exc.detail)


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return _error(500, "Internal server error")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.logging)

    engine = create_engine_from_settings(settings.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_schema:
            setup_db(engine)
        logger.info("Storefront started", env=settings.env)
        yield
        engine.dispose()

    app = FastAPI(
        title="Storefront API",
        description="Order placement and cart management",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.services = build_services(engine, lock_timeout_ms=settings.database.lock_timeout_ms)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind request details to every log line emitted while serving it."""
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            method=request.method,
            path=request.url.path,
            user_id=request.headers.get("x-user-id"),
        )
        return await call_next(request)

    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(InternalError, _internal_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unexpected_error)

    app.include_router(order_router)
    app.include_router(cart_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "env": settings.env})

    return app


app = create_app()
