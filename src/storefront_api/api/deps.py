"""
storefront_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, API config and DB sessions.
- Provide the outbound payment gateway client.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront_api.auth.config import ApiConfig
from storefront_api.payments.gateway import PaymentGateway
from storefront_api.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Settings are attached in `storefront_api.api.app.create_app`.
    return request.app.state.settings  # type: ignore[no-any-return]


def api_config_dep(request: Request) -> ApiConfig:
    return request.app.state.api_config  # type: ignore[no-any-return]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created during app lifespan startup.
    return request.app.state.sessionmaker  # type: ignore[no-any-return]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session shared by the auth pipeline and the resource router.
    async with session_factory() as session:
        yield session


async def payment_gateway(
    settings: Settings = Depends(settings_dep),
) -> AsyncIterator[PaymentGateway]:
    async with httpx.AsyncClient(base_url=settings.payment_gateway_url) as http:
        yield PaymentGateway(http=http)


# --- Module Notes -----------------------------------------------------------
# Tests swap the gateway via `app.dependency_overrides[payment_gateway]`.
