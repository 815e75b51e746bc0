"""
storefront_api.auth.ability

Capability-based authorization.

Responsibilities:
- Answer "may this principal perform <action> on <subject>?" for single records.
- Produce SQL conditions restricting a query to the rows a principal may access.

Rules:
- `admin` may perform any action on any existing record.
- An order is readable/updatable with its own order token, or by its owner.
- Products are readable by everyone; visibility of deleted/discontinued products
  is handled by `storefront_api.catalog.scopes`.
- A missing subject (None) is always denied.
"""

from __future__ import annotations

import secrets
from typing import Any, Literal

from sqlalchemy import ColumnElement, false, true

from storefront_api.auth.models import AnonymousUser, Principal
from storefront_api.db.models import Order, Product
from storefront_api.errors import AccessDenied

Action = Literal["read", "create", "update", "destroy"]

ADMIN_ROLE = "admin"

_ORDER_ACTIONS: frozenset[str] = frozenset({"read", "update"})


class Ability:
    def __init__(
        self, principal: Principal | None = None, roles: frozenset[str] = frozenset()
    ) -> None:
        self.principal: Principal = principal if principal is not None else AnonymousUser()
        self.roles = roles

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    def can(self, action: Action, subject: Any, *, token: str | None = None) -> bool:
        if subject is None:
            return False
        if self.is_admin:
            return True
        if isinstance(subject, Order):
            return action in _ORDER_ACTIONS and (
                _token_matches(subject.token, token) or self._owns(subject)
            )
        if isinstance(subject, Product):
            return action == "read"
        return False

    def authorize(self, action: Action, subject: Any, *, token: str | None = None) -> None:
        if not self.can(action, subject, token=token):
            raise AccessDenied(action, subject)

    def accessible_condition(self, action: Action, model: type[Any]) -> ColumnElement[bool]:
        if self.is_admin:
            return true()
        if model is Product:
            return true() if action == "read" else false()
        if model is Order and action in _ORDER_ACTIONS and self.principal.is_authenticated:
            return Order.user_id == self.principal.id
        return false()

    def _owns(self, order: Order) -> bool:
        return (
            self.principal.is_authenticated
            and order.user_id is not None
            and order.user_id == self.principal.id
        )


def _token_matches(expected: str | None, supplied: str | None) -> bool:
    if not expected or not supplied:
        return False
    return secrets.compare_digest(expected.encode(), supplied.encode())
