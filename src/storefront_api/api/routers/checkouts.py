"""
storefront_api.api.routers.checkouts

Checkout endpoints.

Responsibilities:
- Capture an order's payment through the payment gateway.

Gateway failures propagate as `GatewayError` and are rendered by the API boundary
as the order's own validation errors.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from storefront_api.api.deps import db_session, payment_gateway
from storefront_api.api.negotiation import render
from storefront_api.api.routers.orders import load_order
from storefront_api.api.serializers import order_payload
from storefront_api.auth.context import RequestContext
from storefront_api.auth.deps import api_context
from storefront_api.db.repositories.orders import OrderRepo
from storefront_api.errors import RecordInvalid
from storefront_api.payments.gateway import PaymentGateway

router = APIRouter(prefix="/api/v1/checkouts", tags=["checkouts"])


@router.post("/{checkout_id}/payment")
async def capture_payment(
    checkout_id: str,
    ctx: RequestContext = Depends(api_context),
    session: AsyncSession = Depends(db_session),
    gateway: PaymentGateway = Depends(payment_gateway),
) -> Response:
    order = await load_order(ctx, OrderRepo(session), checkout_id, "update")
    if not order.line_items:
        raise RecordInvalid("Validation failed: Order has no line items")

    await gateway.capture(order=order, amount=order.total)
    order.payment_state = "paid"
    order.state = "complete"
    await session.commit()
    return render(order_payload(order), fmt=ctx.format, root="order")
