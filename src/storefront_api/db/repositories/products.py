"""
storefront_api.db.repositories.products

Repository for catalog products.

Responsibilities:
- Execute product read-scopes built by `storefront_api.catalog.scopes`.
- Find a product by slug, falling back to its primary key.
"""

from __future__ import annotations

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_api.db.models import Product
from storefront_api.errors import RecordNotFound


class ProductRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_scoped(self, scope: Select[tuple[Product]]) -> list[Product]:
        stmt = scope.order_by(Product.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def find_by_slug(self, scope: Select[tuple[Product]], slug: str) -> Product | None:
        stmt = scope.where(Product.slug == slug)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get(self, scope: Select[tuple[Product]], product_id: int) -> Product | None:
        stmt = scope.where(Product.id == product_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def find(self, scope: Select[tuple[Product]], identifier: str) -> Product:
        product = await self.find_by_slug(scope, identifier)
        # Only a slug miss falls through to the primary key lookup.
        if product is None and identifier.isdigit():
            product = await self.get(scope, int(identifier))
        if product is None:
            raise RecordNotFound(f"Couldn't find Product with 'id'={identifier}")
        return product
