"""
storefront_api.errors

Error taxonomy shared by the auth pipeline, repositories and routers.

Responsibilities:
- Name every failure the API boundary knows how to render.
- Carry the data each rendering needs (api key, denied subject, failing order).

Rendering (status codes, bodies, content type) lives in `storefront_api.api.errors`.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    pass


class ParameterMissing(ApiError):
    def __init__(self, param: str) -> None:
        super().__init__(f"param is missing or the value is empty: {param}")
        self.param = param


class RecordInvalid(ApiError):
    pass


class RecordNotFound(ApiError):
    pass


class AccessDenied(ApiError):
    def __init__(self, action: str, subject: Any) -> None:
        super().__init__(f"not authorized to {action} {type(subject).__name__}")
        self.action = action
        self.subject = subject


class GatewayError(ApiError):
    """Failure reported by an external payment/shipping dependency."""

    def __init__(self, message: str, *, order: Any = None) -> None:
        super().__init__(message)
        self.order = order


class AuthenticationError(ApiError):
    pass


class MustSpecifyApiKey(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("You must specify an API key.")


class InvalidApiKey(AuthenticationError):
    def __init__(self, api_key: str | None) -> None:
        super().__init__(f"Invalid API key ({api_key or ''}) specified.")
        self.api_key = api_key
