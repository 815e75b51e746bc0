"""
storefront_api.auth.pipeline

Per-request authentication/authorization pipeline.

Responsibilities:
- Resolve the API user from the API key.
- Authorize an order-token caller against the referenced order (before the gate).
- Run the authentication gate and fix the request principal.
- Load the principal's role titles.

Steps run strictly in that order; a rejection at any step raises and nothing
after it executes.
"""

from __future__ import annotations

import structlog

from storefront_api.auth.ability import Ability
from storefront_api.auth.config import ApiConfig
from storefront_api.auth.context import RequestContext
from storefront_api.auth.gate import GateState, evaluate_gate
from storefront_api.auth.models import AnonymousUser, AuthenticatedUser
from storefront_api.db.repositories.orders import OrderRepo
from storefront_api.db.repositories.users import UserRepo
from storefront_api.errors import AccessDenied, InvalidApiKey, MustSpecifyApiKey
from storefront_api.observability.logging import get_logger

log = get_logger(__name__)


class AuthPipeline:
    def __init__(self, *, config: ApiConfig, users: UserRepo, orders: OrderRepo) -> None:
        self._config = config
        self._users = users
        self._orders = orders

    async def run(self, ctx: RequestContext) -> RequestContext:
        await self.load_user(ctx)
        if ctx.credentials.order_token:
            await self.authorize_for_order(ctx)
        self.authenticate_user(ctx)
        roles = await ctx.load_roles(self._users)

        structlog.contextvars.bind_contextvars(
            principal="user" if ctx.principal.is_authenticated else "anonymous",
            roles=sorted(roles),
        )
        return ctx

    async def load_user(self, ctx: RequestContext) -> None:
        ctx.user = await self._users.find_by_api_key(ctx.credentials.api_key)

    async def authorize_for_order(self, ctx: RequestContext) -> None:
        # A missing order is passed through; the ability denies a None subject.
        order = await self._orders.find_by_number(ctx.order_reference)
        if ctx.user is not None:
            principal = AuthenticatedUser.from_record(ctx.user)
            # Used for this check only; the request's roles are loaded after the gate.
            roles = await self._users.role_titles(principal.id)
        else:
            principal, roles = AnonymousUser(), frozenset()
        try:
            Ability(principal, roles).authorize("read", order, token=ctx.credentials.order_token)
        except AccessDenied:
            log.info("order_token_denied", order_number=ctx.order_reference)
            raise
        ctx.order = order

    def authenticate_user(self, ctx: RequestContext) -> GateState:
        state = evaluate_gate(
            user_found=ctx.user is not None,
            requires_authentication=self._config.requires_authentication,
            api_key=ctx.credentials.api_key,
            order_token=ctx.credentials.order_token,
        )
        if state.is_rejected:
            log.info("authentication_rejected", reason=state.value)
        if state is GateState.must_specify_api_key:
            raise MustSpecifyApiKey()
        if state is GateState.invalid_api_key:
            raise InvalidApiKey(ctx.credentials.api_key)

        if state is GateState.resolved:
            ctx.resolve_principal(AuthenticatedUser.from_record(ctx.user))
        else:
            ctx.resolve_principal(AnonymousUser())
        return state


# --- Module Notes -----------------------------------------------------------
# An order-token grant covers only the order check above; the caller stays anonymous
# for the rest of the request unless an API key also resolved a user.
