"""
storefront_api.api.serializers

Response payload builders for catalog and order resources.

All relations read here must be eager-loaded by the caller (see
`catalog.scopes.product_includes` and `OrderRepo.find_by_number`).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from storefront_api.db.models import LineItem, Order, Product, Variant


def _money(value: Decimal | None) -> str | None:
    return None if value is None else f"{value:.2f}"


def variant_payload(variant: Variant) -> dict[str, Any]:
    return {
        "id": variant.id,
        "sku": variant.sku,
        "price": _money(variant.price),
        "is_master": variant.is_master,
        "option_values": [
            {
                "id": ov.id,
                "name": ov.name,
                "presentation": ov.presentation,
                "option_type_name": ov.option_type.name,
            }
            for ov in variant.option_values
        ],
        "images": [{"id": img.id, "url": img.url, "alt": img.alt} for img in variant.images],
    }


def product_payload(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "description": product.description,
        "available_on": product.available_on.isoformat() if product.available_on else None,
        "discontinue_on": product.discontinue_on.isoformat() if product.discontinue_on else None,
        "deleted_at": product.deleted_at.isoformat() if product.deleted_at else None,
        "master": variant_payload(product.master) if product.master is not None else None,
        "variants": [variant_payload(v) for v in product.variants],
        "option_types": [
            {"id": ot.id, "name": ot.name, "presentation": ot.presentation}
            for ot in product.option_types
        ],
        "taxon_ids": [t.id for t in product.taxons],
        "product_properties": [
            {"property_name": pp.property.name, "value": pp.value}
            for pp in product.product_properties
        ],
    }


def line_item_payload(item: LineItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "variant_id": item.variant_id,
        "sku": item.variant.sku if item.variant is not None else None,
        "quantity": item.quantity,
        "price": _money(item.price),
    }


def order_payload(order: Order) -> dict[str, Any]:
    return {
        "number": order.number,
        "email": order.email,
        "state": order.state,
        "payment_state": order.payment_state,
        "total": _money(order.total),
        "line_items": [line_item_payload(li) for li in order.line_items],
    }
