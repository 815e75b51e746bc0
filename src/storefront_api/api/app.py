"""
storefront_api.api.app

FastAPI app factory for the storefront API.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Derive the read-only `ApiConfig` once and attach it to app.state.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from storefront_api import __version__
from storefront_api.api.errors import register_error_handlers
from storefront_api.api.negotiation import ContentTypeMiddleware
from storefront_api.api.routers.checkouts import router as checkouts_router
from storefront_api.api.routers.health import router as health_router
from storefront_api.api.routers.orders import router as orders_router
from storefront_api.api.routers.products import router as products_router
from storefront_api.auth.config import ApiConfig
from storefront_api.db.session import create_engine, create_sessionmaker, init_db
from storefront_api.observability.logging import configure_logging, get_logger
from storefront_api.observability.middleware import RequestContextMiddleware
from storefront_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            requires_authentication=settings.requires_authentication,
        )
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Storefront API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.api_config = ApiConfig.from_settings(settings)

    # Last added runs outermost: request context wraps content negotiation.
    app.add_middleware(ContentTypeMiddleware)
    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(products_router)
    app.include_router(orders_router)
    app.include_router(checkouts_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; the auth pipeline runs as a router dependency
# (`auth.deps.api_context`), not as middleware, so health probes stay open.
