"""
storefront_api.auth.context

Per-request API context.

Responsibilities:
- Hold everything the auth pipeline resolves for one request: credentials, order
  reference, negotiated content type, principal, authorized order and role titles.
- Enforce resolve-once semantics for the principal and load-once for roles.

One context is created per request and passed to every downstream operation; it
is never shared across requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from storefront_api.auth.ability import Ability
from storefront_api.auth.models import Credentials, Principal
from storefront_api.db.models import Order
from storefront_api.db.repositories.users import UserRepo


@dataclass(slots=True)
class RequestContext:
    credentials: Credentials
    order_reference: str | None = None
    format: str | None = None
    content_type: str | None = None

    # User record matched by API key (None when absent or unmatched).
    user: Any | None = None
    # Order authorized through its order token, when one was supplied.
    order: Order | None = None

    _principal: Principal | None = field(default=None, repr=False)
    _roles: frozenset[str] | None = field(default=None, repr=False)

    @property
    def is_resolved(self) -> bool:
        return self._principal is not None

    @property
    def principal(self) -> Principal:
        if self._principal is None:
            raise RuntimeError("principal has not been resolved for this request")
        return self._principal

    def resolve_principal(self, principal: Principal) -> None:
        if self._principal is not None:
            raise RuntimeError("principal is already resolved for this request")
        self._principal = principal

    @property
    def roles(self) -> frozenset[str]:
        if self._roles is None:
            raise RuntimeError("roles have not been loaded for this request")
        return self._roles

    async def load_roles(self, users: UserRepo) -> frozenset[str]:
        if self._roles is not None:
            return self._roles
        principal = self.principal
        if principal.is_authenticated:
            self._roles = await users.role_titles(principal.id)
        else:
            self._roles = frozenset()
        return self._roles

    def ability(self) -> Ability:
        return Ability(self.principal, self.roles)
