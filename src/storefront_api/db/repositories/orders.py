from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront_api.db.models import LineItem, Order, Variant


class OrderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_number(self, number: str | None) -> Order | None:
        if not number:
            return None
        stmt = (
            select(Order)
            .where(Order.number == number)
            .options(selectinload(Order.line_items).selectinload(LineItem.variant))
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_variant(self, variant_id: int) -> Variant | None:
        return await self._session.get(Variant, variant_id)

    async def find_variant_by_sku(self, sku: str) -> Variant | None:
        stmt = select(Variant).where(Variant.sku == sku).limit(1)
        return (await self._session.execute(stmt)).scalar_one_or_none()
