"""
storefront_api.db.repositories.users

Repository for API users and their role assignments.

Responsibilities:
- Look up a user by API key (exact match; absence is a normal outcome).
- Project the role titles assigned to a user.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront_api.db.models import Role, User, user_roles


class UserRepo:
    def __init__(self, session: AsyncSession, *, user_model: type[Any] = User) -> None:
        self._session = session
        # Pluggable user entity; it must expose `id` and `api_key` columns.
        self._model = user_model

    async def find_by_api_key(self, api_key: str | None) -> Any | None:
        if not api_key:
            return None
        stmt = select(self._model).where(self._model.api_key == api_key)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def role_titles(self, user_id: int) -> frozenset[str]:
        # Titles only; full role records are never loaded on the request path.
        stmt = (
            select(Role.title)
            .join(user_roles, user_roles.c.role_id == Role.id)
            .where(user_roles.c.user_id == user_id)
        )
        return frozenset((await self._session.execute(stmt)).scalars().all())
