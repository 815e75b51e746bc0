"""
storefront_api.catalog.scopes

Composable product read-scopes.

Responsibilities:
- Filters: not deleted, not discontinued, active (available and neither).
- `product_scope`: the role-aware scope every product endpoint reads through.
- `product_includes`: eager-load options for product payloads.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ColumnElement, Select, and_, or_, select
from sqlalchemy.orm import selectinload

from storefront_api.auth.ability import Ability
from storefront_api.db.models import (
    OptionValue,
    Product,
    ProductProperty,
    Variant,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import LoaderOption


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.utcnow()


def not_deleted() -> ColumnElement[bool]:
    return Product.deleted_at.is_(None)


def not_discontinued(now: datetime | None = None) -> ColumnElement[bool]:
    return or_(Product.discontinue_on.is_(None), Product.discontinue_on > _now(now))


def available(now: datetime | None = None) -> ColumnElement[bool]:
    return and_(Product.available_on.is_not(None), Product.available_on <= _now(now))


def active(now: datetime | None = None) -> ColumnElement[bool]:
    return and_(not_deleted(), not_discontinued(now), available(now))


def _variant_includes(relation) -> list[LoaderOption]:
    return [
        selectinload(relation).selectinload(Variant.option_values).selectinload(
            OptionValue.option_type
        ),
        selectinload(relation).selectinload(Variant.images),
    ]


def product_includes() -> list[LoaderOption]:
    return [
        selectinload(Product.option_types),
        selectinload(Product.taxons),
        selectinload(Product.product_properties).selectinload(ProductProperty.property),
        *_variant_includes(Product.variants),
        *_variant_includes(Product.master),
    ]


def product_scope(
    ability: Ability,
    *,
    show_deleted: str | None = None,
    show_discontinued: str | None = None,
    now: datetime | None = None,
) -> Select[tuple[Product]]:
    readable = ability.accessible_condition("read", Product)
    # Flags are raw query values: any non-empty value turns one on.
    if ability.is_admin:
        stmt = select(Product).where(readable)
        if not show_deleted:
            stmt = stmt.where(not_deleted())
        if not show_discontinued:
            stmt = stmt.where(not_discontinued(now))
    else:
        # Visibility flags are ignored for everyone but admins.
        stmt = select(Product).where(readable, active(now))
    return stmt.options(*product_includes())


# --- Module Notes -----------------------------------------------------------
# Admin role plus an explicit flag is the only way to see deleted or discontinued
# products.
