"""
HTTP application — FastAPI app factory and error mapping.

    app = create_app(Settings.from_env())
    uvicorn.run(app)

The database is opened in the lifespan, stores are built once and kept on
app.state, and the engine is disposed at shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import cast

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from storefront.config import Settings
from storefront.db import create_database
from storefront.errors import GENERIC_FAILURE_MESSAGE, ShopError
from storefront.logs import configure_logging
from storefront.seed import seed_demo
from storefront.api._routes import router
from storefront.api._services import build_services

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════════════════════
# Error mapping — every failure is {"error": message}
# ═══════════════════════════════════════════════════════════════════════════════


async def _shop_error(request: Request, raised: Exception) -> JSONResponse:
    exc = cast(ShopError, raised)
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            code=exc.code,
            error=exc.message,
            cause=repr(exc.cause) if exc.cause else None,
        )
        return JSONResponse(
            status_code=exc.status_code, content={"error": GENERIC_FAILURE_MESSAGE}
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _validation_error(request: Request, raised: Exception) -> JSONResponse:
    errors = cast(RequestValidationError, raised).errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    return JSONResponse(status_code=400, content={"error": message})


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})


# ═══════════════════════════════════════════════════════════════════════════════
# App factory
# ═══════════════════════════════════════════════════════════════════════════════


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        session_factory, engine = await create_database(settings.database_url)
        services = build_services(session_factory, settings)
        if settings.seed_demo:
            await seed_demo(services.buyers, services.ledger)
            logger.info("demo_data_seeded")
        app.state.services = services
        app.state.engine = engine
        logger.info(
            "storefront_started",
            database_url=_redact(settings.database_url),
            price_source=settings.price_source.value,
            verify_stock=settings.verify_stock,
            status_policy=settings.status_policy.name.lower(),
        )
        try:
            yield
        finally:
            await _shutdown(engine)

    app = FastAPI(title="storefront", lifespan=lifespan)
    app.add_exception_handler(ShopError, _shop_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unexpected_error)
    app.include_router(router)
    return app


async def _shutdown(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("storefront_stopped")


def _redact(url: str) -> str:
    """Hide credentials in a database URL."""
    scheme, sep, rest = url.partition("://")
    if "@" not in rest:
        return url
    return f"{scheme}{sep}***@{rest.split('@', 1)[1]}"


__all__ = ("create_app",)
