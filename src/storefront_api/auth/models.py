"""
storefront_api.auth.models

Auth domain models.

Responsibilities:
- Define the caller identity types (`AuthenticatedUser`, `AnonymousUser`).
- Define the credentials extracted from a request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """
    Caller resolved from an API key.
    """

    id: int
    api_key: str

    @property
    def is_authenticated(self) -> bool:
        return True

    @classmethod
    def from_record(cls, user: Any) -> AuthenticatedUser:
        return cls(id=user.id, api_key=user.api_key)


@dataclass(frozen=True, slots=True)
class AnonymousUser:
    @property
    def is_authenticated(self) -> bool:
        return False


Principal = AuthenticatedUser | AnonymousUser


@dataclass(frozen=True, slots=True)
class Credentials:
    # Blank values are normalized to None at extraction time.
    api_key: str | None = None
    order_token: str | None = None


# --- Module Notes -----------------------------------------------------------
# Role titles are not part of the principal; they are loaded once per request onto
# `auth.context.RequestContext`.
