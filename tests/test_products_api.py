"""
tests.test_products_api

Role-aware product visibility and slug/id lookup.
"""

from __future__ import annotations

import httpx
import pytest

from tests.conftest import ADMIN_KEY, CUSTOMER_KEY, Seed


async def _slugs(client: httpx.AsyncClient, **kwargs) -> set[str]:
    r = await client.get("/api/v1/products", **kwargs)
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == len(body["products"])
    return {p["slug"] for p in body["products"]}


@pytest.mark.asyncio
async def test_anonymous_sees_only_active_products(client: httpx.AsyncClient) -> None:
    assert await _slugs(client) == {"ruby-tote"}


@pytest.mark.asyncio
async def test_non_admin_visibility_flags_are_ignored(client: httpx.AsyncClient) -> None:
    slugs = await _slugs(
        client,
        params={"show_deleted": "true", "show_discontinued": "true"},
        headers={"X-Refinery-Token": CUSTOMER_KEY},
    )
    assert slugs == {"ruby-tote"}


@pytest.mark.asyncio
async def test_non_admin_arbitrary_flag_values_are_not_validated(
    client: httpx.AsyncClient,
) -> None:
    slugs = await _slugs(
        client,
        params={"show_deleted": "anything", "show_discontinued": "1x"},
        headers={"X-Refinery-Token": CUSTOMER_KEY},
    )
    assert slugs == {"ruby-tote"}


@pytest.mark.asyncio
async def test_admin_flag_is_on_for_any_non_empty_value(client: httpx.AsyncClient) -> None:
    headers = {"X-Refinery-Token": ADMIN_KEY}
    slugs = await _slugs(client, params={"show_deleted": "yes please"}, headers=headers)
    assert "ghost-shirt" in slugs

    slugs = await _slugs(client, params={"show_deleted": ""}, headers=headers)
    assert "ghost-shirt" not in slugs


@pytest.mark.parametrize(
    ("params", "expected"),
    [
        ({}, {"ruby-tote", "future-cap"}),
        ({"show_deleted": "true"}, {"ruby-tote", "future-cap", "ghost-shirt"}),
        ({"show_discontinued": "true"}, {"ruby-tote", "future-cap", "retired-mug"}),
        (
            {"show_deleted": "true", "show_discontinued": "true"},
            {"ruby-tote", "future-cap", "ghost-shirt", "retired-mug"},
        ),
    ],
)
@pytest.mark.asyncio
async def test_admin_visibility_follows_flags(
    client: httpx.AsyncClient, params: dict[str, str], expected: set[str]
) -> None:
    slugs = await _slugs(client, params=params, headers={"X-Refinery-Token": ADMIN_KEY})
    assert slugs == expected


@pytest.mark.asyncio
async def test_show_product_by_slug(client: httpx.AsyncClient, seed: Seed) -> None:
    r = await client.get("/api/v1/products/ruby-tote")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == seed.tote_id
    assert body["master"]["sku"] == "TOTE"
    assert [v["sku"] for v in body["variants"]] == ["TOTE-RED"]
    assert body["variants"][0]["price"] == "17.00"
    assert body["variants"][0]["option_values"][0]["option_type_name"] == "color"
    assert body["product_properties"] == [{"property_name": "material", "value": "canvas"}]


@pytest.mark.asyncio
async def test_show_product_falls_back_to_id(client: httpx.AsyncClient, seed: Seed) -> None:
    r = await client.get(f"/api/v1/products/{seed.tote_id}")
    assert r.status_code == 200
    assert r.json()["slug"] == "ruby-tote"


@pytest.mark.asyncio
async def test_hidden_product_is_not_found_for_non_admin(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/products/retired-mug")
    assert r.status_code == 404
    assert r.json() == {"error": "The resource you were looking for could not be found."}


@pytest.mark.asyncio
async def test_admin_can_show_discontinued_product_with_flag(client: httpx.AsyncClient) -> None:
    headers = {"X-Refinery-Token": ADMIN_KEY}
    r = await client.get("/api/v1/products/retired-mug", headers=headers)
    assert r.status_code == 404

    r = await client.get(
        "/api/v1/products/retired-mug", params={"show_discontinued": "true"}, headers=headers
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_unknown_product_is_not_found(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/products/999999")
    assert r.status_code == 404
