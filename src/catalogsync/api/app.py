"""FastAPI application serving the verified content listing."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalogsync.app import build_services, ensure_storage
from catalogsync.domain.errors import (
    ClientInitializationError,
    InvalidSessionError,
    RemoteError,
    ShopNotFoundError,
)

from .routes import router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from catalogsync.app import CatalogServices

log = getLogger(__name__)


def create_app(services: CatalogServices | None = None) -> FastAPI:
    """Build the application.

    Without ``services`` the default Shopify and SQLAlchemy wiring is used and
    the database is started on application startup.
    """

    manage_storage = services is None

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if manage_storage:
            ensure_storage()
        yield

    app = FastAPI(title="catalogsync", lifespan=lifespan)
    app.state.services = services or build_services()
    app.include_router(router)
    _register_error_handlers(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid query parameters",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(InvalidSessionError)
    async def _invalid_session(_: Request, exc: InvalidSessionError) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"error": "Shopify authentication failed", "details": str(exc)},
        )

    @app.exception_handler(ClientInitializationError)
    async def _client_init(_: Request, exc: ClientInitializationError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to initialize Shopify connection", "details": str(exc)},
        )

    @app.exception_handler(ShopNotFoundError)
    async def _shop_not_found(_: Request, exc: ShopNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Shop not found", "details": str(exc)})

    @app.exception_handler(RemoteError)
    async def _remote_failure(_: Request, exc: RemoteError) -> JSONResponse:
        log.error("Remote pipeline failed: %s", exc)
        return JSONResponse(
            status_code=remote_status(exc),
            content={
                "error": "Failed to fetch data from Shopify",
                "details": str(exc),
                "code": exc.code,
            },
        )

    @app.exception_handler(Exception)
    async def _unexpected(_: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error while serving request", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def remote_status(exc: RemoteError) -> int:
    status = exc.status_code
    if status is None or not 400 <= status <= 599:
        return 500
    return status
