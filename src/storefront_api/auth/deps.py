"""
storefront_api.auth.deps

FastAPI dependency that runs the auth pipeline.

Responsibilities:
- Build the per-request `RequestContext` from the incoming request.
- Run `AuthPipeline` against the request-scoped stores.
- Expose the resolved context to routers and error handlers.
"""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_api.api.deps import api_config_dep, db_session
from storefront_api.api.negotiation import content_type_for, requested_format
from storefront_api.auth.config import ApiConfig
from storefront_api.auth.context import RequestContext
from storefront_api.auth.credentials import extract_credentials, order_reference, request_params
from storefront_api.auth.pipeline import AuthPipeline
from storefront_api.db.repositories.orders import OrderRepo
from storefront_api.db.repositories.users import UserRepo


async def api_context(
    request: Request,
    session: AsyncSession = Depends(db_session),
    config: ApiConfig = Depends(api_config_dep),
) -> RequestContext:
    fmt = requested_format(request)
    ctx = RequestContext(
        credentials=extract_credentials(request),
        order_reference=order_reference(request_params(request)),
        format=fmt,
        content_type=content_type_for(fmt),
    )
    # Stashed before the pipeline runs so error handlers can reach the context.
    request.state.api_context = ctx

    pipeline = AuthPipeline(
        config=config,
        users=UserRepo(session, user_model=config.user_model),
        orders=OrderRepo(session),
    )
    return await pipeline.run(ctx)


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so routers that declare both
# `Depends(api_context)` and `Depends(db_session)` share one session and one context.
