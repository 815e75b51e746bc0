"""
storefront_api.auth.gate

Authentication gate.

Responsibilities:
- Decide, from request shape alone, whether a request proceeds as an authenticated
  caller, proceeds anonymously, or is rejected with a 401.

The decision is a pure function so it can be evaluated (and tested) without a
request or a store.
"""

from __future__ import annotations

import enum


class GateState(enum.StrEnum):
    resolved = "RESOLVED"
    must_specify_api_key = "MUST_SPECIFY_API_KEY"
    invalid_api_key = "INVALID_API_KEY"
    anonymous = "ANONYMOUS"

    @property
    def is_rejected(self) -> bool:
        return self in (GateState.must_specify_api_key, GateState.invalid_api_key)


def evaluate_gate(
    *,
    user_found: bool,
    requires_authentication: bool,
    api_key: str | None,
    order_token: str | None,
) -> GateState:
    if user_found:
        return GateState.resolved

    # Branch order matters: a missing key is reported before a bad one.
    if requires_authentication and not api_key and not order_token:
        return GateState.must_specify_api_key
    if not order_token and (requires_authentication or api_key):
        return GateState.invalid_api_key
    return GateState.anonymous
