"""
tests.test_api_auth

End-to-end authentication behavior with authentication optional (the default).
"""

from __future__ import annotations

from xml.etree import ElementTree

import httpx
import pytest

from tests.conftest import ADMIN_KEY, CUSTOMER_KEY, ORDER_TOKEN

INVALID_KEY_BODY = {"error": "Invalid API key (bogus) specified."}


@pytest.mark.asyncio
async def test_anonymous_caller_is_allowed(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/products")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_unmatched_api_key_is_rejected_even_when_auth_is_optional(
    client: httpx.AsyncClient,
) -> None:
    r = await client.get("/api/v1/products", headers={"X-Refinery-Token": "bogus"})
    assert r.status_code == 401
    assert r.json() == INVALID_KEY_BODY


@pytest.mark.asyncio
async def test_api_key_accepted_from_query_parameter(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/products", params={"token": ADMIN_KEY})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_header_api_key_wins_over_query_parameter(client: httpx.AsyncClient) -> None:
    r = await client.get(
        "/api/v1/products",
        params={"token": ADMIN_KEY},
        headers={"X-Refinery-Token": "bogus"},
    )
    assert r.status_code == 401
    assert r.json() == INVALID_KEY_BODY


@pytest.mark.asyncio
async def test_json_format_sets_content_type_on_errors(client: httpx.AsyncClient) -> None:
    r = await client.get(
        "/api/v1/products", params={"format": "json"}, headers={"X-Refinery-Token": "bogus"}
    )
    assert r.status_code == 401
    assert r.headers["content-type"] == "application/json; charset=utf-8"


@pytest.mark.asyncio
async def test_json_format_sets_content_type_on_success(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/products", params={"format": "json"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/json; charset=utf-8"


@pytest.mark.asyncio
async def test_xml_format_renders_xml_errors(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/products/nope", params={"format": "xml"})
    assert r.status_code == 404
    assert r.headers["content-type"] == "text/xml; charset=utf-8"
    doc = ElementTree.fromstring(r.content)
    assert doc.findtext("error") == "The resource you were looking for could not be found."


@pytest.mark.asyncio
async def test_wrong_order_token_is_unauthorized_before_key_check(
    client: httpx.AsyncClient,
) -> None:
    r = await client.get(
        "/api/v1/orders/R100",
        headers={"X-Refinery-Token": "bogus", "X-Refinery-Order-Token": "wrong"},
    )
    assert r.status_code == 401
    assert r.json() == {"error": "You are not authorized to perform that action."}


@pytest.mark.asyncio
async def test_valid_order_token_with_bad_key_is_anonymous(client: httpx.AsyncClient) -> None:
    r = await client.get(
        "/api/v1/orders/R100",
        headers={"X-Refinery-Token": "bogus", "X-Refinery-Order-Token": ORDER_TOKEN},
    )
    assert r.status_code == 200
    assert r.json()["number"] == "R100"


@pytest.mark.asyncio
async def test_order_token_for_unknown_order_is_unauthorized(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/orders/R999", params={"order_token": ORDER_TOKEN})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_customer_key_resolves_identity(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/orders/R100", headers={"X-Refinery-Token": CUSTOMER_KEY})
    assert r.status_code == 200
