"""
storefront_api.payments.gateway

HTTP client boundary for the external payment gateway.

Responsibilities:
- Capture an order's payment through the gateway's HTTP API.
- Translate transport and gateway-side failures into `GatewayError`, carrying the
  order so the API boundary can render them as order validation errors.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import httpx

from storefront_api.db.models import Order
from storefront_api.errors import GatewayError


class PaymentGateway:
    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def capture(self, *, order: Order, amount: Decimal) -> dict[str, Any]:
        try:
            r = await self._http.post(
                "/v1/captures",
                json={"order_number": order.number, "amount": f"{amount:.2f}"},
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GatewayError(_failure_message(e.response), order=order) from e
        except httpx.HTTPError as e:
            raise GatewayError(f"Payment gateway unavailable: {e}", order=order) from e
        return r.json()


def _failure_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Payment gateway responded with status {response.status_code}"


# --- Module Notes -----------------------------------------------------------
# No retries: a failed capture surfaces immediately as a 422 on the order.
