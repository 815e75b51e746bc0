"""
storefront_api.api.routers.products

Catalog product endpoints.

Responsibilities:
- List products through the role-aware product scope.
- Show a product by slug, falling back to its id.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from storefront_api.api.deps import db_session
from storefront_api.api.negotiation import render
from storefront_api.api.serializers import product_payload
from storefront_api.auth.context import RequestContext
from storefront_api.auth.deps import api_context
from storefront_api.catalog.scopes import product_scope
from storefront_api.db.models import Product
from storefront_api.db.repositories.products import ProductRepo

router = APIRouter(prefix="/api/v1/products", tags=["products"])


async def find_product(
    ctx: RequestContext,
    repo: ProductRepo,
    identifier: str,
    *,
    show_deleted: str | None = None,
    show_discontinued: str | None = None,
) -> Product:
    scope = product_scope(
        ctx.ability(), show_deleted=show_deleted, show_discontinued=show_discontinued
    )
    return await repo.find(scope, identifier)


@router.get("")
async def list_products(
    show_deleted: str | None = None,
    show_discontinued: str | None = None,
    ctx: RequestContext = Depends(api_context),
    session: AsyncSession = Depends(db_session),
) -> Response:
    scope = product_scope(
        ctx.ability(), show_deleted=show_deleted, show_discontinued=show_discontinued
    )
    products = await ProductRepo(session).list_scoped(scope)
    return render(
        {"count": len(products), "products": [product_payload(p) for p in products]},
        fmt=ctx.format,
        root="products",
    )


@router.get("/{product_id}")
async def show_product(
    product_id: str,
    show_deleted: str | None = None,
    show_discontinued: str | None = None,
    ctx: RequestContext = Depends(api_context),
    session: AsyncSession = Depends(db_session),
) -> Response:
    product = await find_product(
        ctx,
        ProductRepo(session),
        product_id,
        show_deleted=show_deleted,
        show_discontinued=show_discontinued,
    )
    return render(product_payload(product), fmt=ctx.format, root="product")
