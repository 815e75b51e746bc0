"""
storefront_api.auth.credentials

Credential extraction from an incoming request.

Responsibilities:
- Read the API key and order token (header first, then query parameter).
- Read the order reference from its aliased request parameters.
"""

from __future__ import annotations

from collections.abc import Mapping

from starlette.requests import Request

from storefront_api.auth.models import Credentials

API_KEY_HEADER = "X-Refinery-Token"
API_KEY_PARAM = "token"
ORDER_TOKEN_HEADER = "X-Refinery-Order-Token"
ORDER_TOKEN_PARAM = "order_token"

# First non-empty wins.
ORDER_REFERENCE_PARAMS = ("order_id", "checkout_id", "order_number")


def request_params(request: Request) -> dict[str, str]:
    # Path parameters win over query parameters of the same name.
    return {**request.query_params, **request.path_params}


def extract_credentials(request: Request) -> Credentials:
    return Credentials(
        api_key=_header_or_param(request, API_KEY_HEADER, API_KEY_PARAM),
        order_token=_header_or_param(request, ORDER_TOKEN_HEADER, ORDER_TOKEN_PARAM),
    )


def order_reference(params: Mapping[str, object]) -> str | None:
    for name in ORDER_REFERENCE_PARAMS:
        value = params.get(name)
        if value is not None and str(value).strip():
            return str(value)
    return None


def _header_or_param(request: Request, header: str, param: str) -> str | None:
    # A header that is present takes precedence even when empty.
    value = request.headers.get(header)
    if value is None:
        value = request.query_params.get(param)
    return _present(value)


def _present(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
