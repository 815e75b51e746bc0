"""
storefront_api.api.routers.orders

Order endpoints.

Responsibilities:
- Show an order to its owner, an admin, or a caller holding its order token.
- Update an order's email and line items through role-gated permitted attributes.
- Add or change a single line item.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from storefront_api.api.attributes import (
    ORDER_ATTRIBUTES,
    AttributeMap,
    map_nested_attributes_keys,
    permit,
    permitted_line_item_attributes,
    require_param,
)
from storefront_api.api.deps import db_session
from storefront_api.api.negotiation import render
from storefront_api.api.serializers import order_payload
from storefront_api.auth.ability import Action
from storefront_api.auth.context import RequestContext
from storefront_api.auth.deps import api_context
from storefront_api.db.models import LineItem, Order, Variant
from storefront_api.db.repositories.orders import OrderRepo
from storefront_api.errors import ParameterMissing, RecordInvalid, RecordNotFound

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


async def load_order(
    ctx: RequestContext, orders: OrderRepo, number: str, action: Action
) -> Order:
    order = ctx.order
    if order is None or order.number != number:
        order = await orders.find_by_number(number)
    if order is None:
        raise RecordNotFound(f"Couldn't find Order with number={number}")
    ctx.ability().authorize(action, order, token=ctx.credentials.order_token)
    return order


@router.get("/{order_id}")
async def show_order(
    order_id: str,
    ctx: RequestContext = Depends(api_context),
    session: AsyncSession = Depends(db_session),
) -> Response:
    order = await load_order(ctx, OrderRepo(session), order_id, "read")
    return render(order_payload(order), fmt=ctx.format, root="order")


@router.put("/{order_id}")
async def update_order(
    order_id: str,
    body: dict[str, Any] = Body(...),
    ctx: RequestContext = Depends(api_context),
    session: AsyncSession = Depends(db_session),
) -> Response:
    orders = OrderRepo(session)
    order = await load_order(ctx, orders, order_id, "update")

    order_params = require_param(body, "order")
    if not isinstance(order_params, Mapping):
        raise ParameterMissing("order")
    attrs = permit(map_nested_attributes_keys(Order, order_params), ORDER_ATTRIBUTES)

    if "email" in attrs:
        order.email = attrs["email"]
    permitted = permitted_line_item_attributes(ctx.roles)
    for item_params in _nested_collection(attrs.get("line_items_attributes")):
        await _apply_line_item(order, permit(item_params, permitted), orders)

    order.update_totals()
    await session.commit()
    return render(order_payload(order), fmt=ctx.format, root="order")


@router.put("/{order_id}/line_items")
async def update_line_item(
    order_id: str,
    body: dict[str, Any] = Body(...),
    ctx: RequestContext = Depends(api_context),
    session: AsyncSession = Depends(db_session),
) -> Response:
    orders = OrderRepo(session)
    order = await load_order(ctx, orders, order_id, "update")

    item_params = require_param(body, "line_item")
    if not isinstance(item_params, Mapping):
        raise ParameterMissing("line_item")
    await _apply_line_item(
        order, permit(item_params, permitted_line_item_attributes(ctx.roles)), orders
    )

    order.update_totals()
    await session.commit()
    return render(order_payload(order), fmt=ctx.format, root="order")


def _nested_collection(value: Any) -> list[AttributeMap]:
    # Nested collections arrive either as a list or as an index-keyed mapping.
    if value is None:
        return []
    if isinstance(value, Mapping):
        value = list(value.values())
    if not isinstance(value, list) or not all(isinstance(v, Mapping) for v in value):
        raise RecordInvalid("Validation failed: Line items are invalid")
    return [AttributeMap(v) for v in value]


async def _apply_line_item(order: Order, attrs: AttributeMap, orders: OrderRepo) -> None:
    item: LineItem | None = None
    if attrs.get("id") is not None:
        item_id = _integer(attrs["id"], "Id")
        item = next((li for li in order.line_items if li.id == item_id), None)
        if item is None:
            raise RecordNotFound(f"Couldn't find LineItem with 'id'={item_id}")

    variant = await _variant_for(attrs, orders)
    if item is None:
        if variant is None:
            raise RecordInvalid("Validation failed: Variant can't be blank")
        item = LineItem(variant=variant, quantity=1, price=variant.price)
        order.line_items.append(item)
    elif variant is not None:
        item.variant = variant
        item.price = variant.price

    if "quantity" in attrs:
        quantity = _integer(attrs["quantity"], "Quantity")
        if quantity < 1:
            raise RecordInvalid("Validation failed: Quantity must be greater than 0")
        item.quantity = quantity
    if "price" in attrs:
        item.price = _price(attrs["price"])


async def _variant_for(attrs: AttributeMap, orders: OrderRepo) -> Variant | None:
    if attrs.get("variant_id") is not None:
        variant_id = _integer(attrs["variant_id"], "Variant")
        variant = await orders.get_variant(variant_id)
        if variant is None:
            raise RecordNotFound(f"Couldn't find Variant with 'id'={variant_id}")
        return variant
    if attrs.get("sku"):
        variant = await orders.find_variant_by_sku(str(attrs["sku"]))
        if variant is None:
            raise RecordNotFound(f"Couldn't find Variant with 'sku'={attrs['sku']}")
        return variant
    return None


def _integer(value: Any, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise RecordInvalid(f"Validation failed: {field} is not a number") from None


def _price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise RecordInvalid("Validation failed: Price is not a number") from None
    if not price.is_finite() or price < 0:
        raise RecordInvalid("Validation failed: Price must be greater than or equal to 0")
    return price
