"""
storefront_api.db.models

Persistence schema for the stores the API layer reads from.

Responsibilities:
- Users and role assignments (API identity + role titles).
- Orders and line items (order-token authorization subject).
- Catalog: products, variants and the associations product scopes eager-load.

`__nested_attributes__` lists the relations a model accepts nested attribute
payloads for; see `storefront_api.api.attributes.map_nested_attributes_keys`.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, ForeignKey, Numeric, String, Table, Text, and_
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront_api.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps throughout; comparisons in catalog scopes use the same clock.
    return datetime.utcnow()


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

product_option_types = Table(
    "product_option_types",
    Base.metadata,
    Column("product_id", ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("option_type_id", ForeignKey("option_types.id", ondelete="CASCADE"), primary_key=True),
)

product_taxons = Table(
    "product_taxons",
    Base.metadata,
    Column("product_id", ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("taxon_id", ForeignKey("taxons.id", ondelete="CASCADE"), primary_key=True),
)

variant_option_values = Table(
    "variant_option_values",
    Base.metadata,
    Column("variant_id", ForeignKey("variants.id", ondelete="CASCADE"), primary_key=True),
    Column("option_value_id", ForeignKey("option_values.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    api_key: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    roles: Mapped[list[Role]] = relationship(secondary=user_roles)
    orders: Mapped[list[Order]] = relationship(back_populates="user")


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)


class Order(Base):
    __tablename__ = "orders"

    __nested_attributes__ = ("line_items",)

    id: Mapped[int] = mapped_column(primary_key=True)
    number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)
    # Guest token; grants read access to this order only.
    token: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    state: Mapped[str] = mapped_column(String(32), nullable=False, default="cart")
    payment_state: Mapped[str | None] = mapped_column(String(32), nullable=True)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    user: Mapped[User | None] = relationship(back_populates="orders")
    line_items: Mapped[list[LineItem]] = relationship(
        back_populates="order", cascade="all, delete-orphan", order_by="LineItem.id"
    )

    @property
    def errors(self) -> dict[str, list[str]]:
        # Transient validation messages, rendered with `invalid_resource`; never persisted.
        return self.__dict__.setdefault("_errors", {})

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def update_totals(self) -> None:
        self.total = sum(
            (item.price * item.quantity for item in self.line_items), start=Decimal("0")
        )


class LineItem(Base):
    __tablename__ = "line_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    variant_id: Mapped[int] = mapped_column(ForeignKey("variants.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False, default=1)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    order: Mapped[Order] = relationship(back_populates="line_items")
    variant: Mapped[Variant] = relationship()


class Product(Base):
    __tablename__ = "products"

    __nested_attributes__ = ("variants", "product_properties")

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    slug: Mapped[str] = mapped_column(String(256), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    available_on: Mapped[datetime | None] = mapped_column(nullable=True)
    discontinue_on: Mapped[datetime | None] = mapped_column(nullable=True)
    # Soft delete: rows stay in place and catalog scopes filter on this column.
    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    variants_including_master: Mapped[list[Variant]] = relationship(
        back_populates="product", cascade="all, delete-orphan", order_by="Variant.id"
    )
    variants: Mapped[list[Variant]] = relationship(
        primaryjoin=lambda: and_(Product.id == Variant.product_id, Variant.is_master.is_(False)),
        order_by=lambda: Variant.id,
        viewonly=True,
    )
    master: Mapped[Variant | None] = relationship(
        primaryjoin=lambda: and_(Product.id == Variant.product_id, Variant.is_master.is_(True)),
        uselist=False,
        viewonly=True,
    )
    option_types: Mapped[list[OptionType]] = relationship(secondary=product_option_types)
    taxons: Mapped[list[Taxon]] = relationship(secondary=product_taxons)
    product_properties: Mapped[list[ProductProperty]] = relationship(
        back_populates="product", cascade="all, delete-orphan"
    )


class Variant(Base):
    __tablename__ = "variants"

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False, index=True)
    sku: Mapped[str] = mapped_column(String(64), nullable=False, default="", index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    is_master: Mapped[bool] = mapped_column(nullable=False, default=False)

    product: Mapped[Product] = relationship(back_populates="variants_including_master")
    option_values: Mapped[list[OptionValue]] = relationship(secondary=variant_option_values)
    images: Mapped[list[Image]] = relationship(
        back_populates="variant", cascade="all, delete-orphan", order_by="Image.position"
    )


class OptionType(Base):
    __tablename__ = "option_types"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    presentation: Mapped[str] = mapped_column(String(128), nullable=False)

    option_values: Mapped[list[OptionValue]] = relationship(back_populates="option_type")


class OptionValue(Base):
    __tablename__ = "option_values"

    id: Mapped[int] = mapped_column(primary_key=True)
    option_type_id: Mapped[int] = mapped_column(ForeignKey("option_types.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    presentation: Mapped[str] = mapped_column(String(128), nullable=False)

    option_type: Mapped[OptionType] = relationship(back_populates="option_values")


class Image(Base):
    __tablename__ = "images"

    id: Mapped[int] = mapped_column(primary_key=True)
    variant_id: Mapped[int] = mapped_column(ForeignKey("variants.id"), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(512), nullable=False)
    alt: Mapped[str | None] = mapped_column(String(256), nullable=True)
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    variant: Mapped[Variant] = relationship(back_populates="images")


class Taxon(Base):
    __tablename__ = "taxons"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    permalink: Mapped[str] = mapped_column(String(256), nullable=False)


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    presentation: Mapped[str] = mapped_column(String(128), nullable=False)


class ProductProperty(Base):
    __tablename__ = "product_properties"

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False, index=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), nullable=False)
    value: Mapped[str | None] = mapped_column(String(256), nullable=True)

    product: Mapped[Product] = relationship(back_populates="product_properties")
    property: Mapped[Property] = relationship()


# --- Module Notes -----------------------------------------------------------
# `Product.variants` and `Product.master` are read-only views over
# `variants_including_master`; write variants through the latter.
