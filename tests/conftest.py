"""
tests.conftest

Shared fixtures: a test-mode app on a throwaway SQLite database, seeded with a
small catalog, users with roles, and guest/owned orders.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from storefront_api.api.app import create_app
from storefront_api.db.models import (
    Image,
    LineItem,
    OptionType,
    OptionValue,
    Order,
    Product,
    ProductProperty,
    Property,
    Role,
    Taxon,
    User,
    Variant,
)
from storefront_api.settings import Settings

ADMIN_KEY = "admin-key"
CUSTOMER_KEY = "customer-key"
OTHER_CUSTOMER_KEY = "other-customer-key"
ORDER_TOKEN = "guest-token-r100"
OTHER_ORDER_TOKEN = "guest-token-r200"


@dataclass(frozen=True)
class Seed:
    admin_id: int
    customer_id: int
    tote_id: int
    tote_master_id: int
    tote_red_id: int
    line_item_id: int


@pytest.fixture
def requires_authentication() -> bool:
    return False


@pytest.fixture
def settings(tmp_path: Path, requires_authentication: bool) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        requires_authentication=requires_authentication,
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not drive lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def seed(app: FastAPI) -> Seed:
    now = datetime.utcnow()
    async with app.state.sessionmaker() as session:
        admin_role = Role(title="admin")
        customer_role = Role(title="customer")
        admin = User(email="admin@example.com", api_key=ADMIN_KEY, roles=[admin_role])
        customer = User(email="shopper@example.com", api_key=CUSTOMER_KEY, roles=[customer_role])
        other = User(email="other@example.com", api_key=OTHER_CUSTOMER_KEY, roles=[customer_role])

        color = OptionType(name="color", presentation="Color")
        red = OptionValue(option_type=color, name="red", presentation="Red")
        tote_master = Variant(sku="TOTE", price=Decimal("15.00"), is_master=True)
        tote_red = Variant(
            sku="TOTE-RED",
            price=Decimal("17.00"),
            option_values=[red],
            images=[Image(url="https://cdn.example.com/tote-red.png", alt="Red tote")],
        )
        tote = Product(
            name="Ruby Tote",
            slug="ruby-tote",
            available_on=now - timedelta(days=30),
            variants_including_master=[tote_master, tote_red],
            option_types=[color],
            taxons=[Taxon(name="Bags", permalink="categories/bags")],
            product_properties=[
                ProductProperty(
                    property=Property(name="material", presentation="Material"), value="canvas"
                )
            ],
        )
        mug = Product(
            name="Retired Mug",
            slug="retired-mug",
            available_on=now - timedelta(days=300),
            discontinue_on=now - timedelta(days=1),
            variants_including_master=[Variant(sku="MUG", price=Decimal("9.00"), is_master=True)],
        )
        shirt = Product(
            name="Ghost Shirt",
            slug="ghost-shirt",
            available_on=now - timedelta(days=30),
            deleted_at=now - timedelta(days=2),
            variants_including_master=[
                Variant(sku="SHIRT", price=Decimal("25.00"), is_master=True)
            ],
        )
        cap = Product(
            name="Future Cap",
            slug="future-cap",
            available_on=now + timedelta(days=10),
            variants_including_master=[Variant(sku="CAP", price=Decimal("12.00"), is_master=True)],
        )

        line_item = LineItem(variant=tote_red, quantity=2, price=Decimal("17.00"))
        owned = Order(
            number="R100",
            token=ORDER_TOKEN,
            email="shopper@example.com",
            user=customer,
            total=Decimal("34.00"),
            line_items=[line_item],
        )
        guest = Order(number="R200", token=OTHER_ORDER_TOKEN, total=Decimal("0"))

        session.add_all([admin, customer, other, tote, mug, shirt, cap, owned, guest])
        await session.commit()

        return Seed(
            admin_id=admin.id,
            customer_id=customer.id,
            tote_id=tote.id,
            tote_master_id=tote_master.id,
            tote_red_id=tote_red.id,
            line_item_id=line_item.id,
        )


@pytest_asyncio.fixture
async def client(app: FastAPI, seed: Seed) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
