"""
storefront_api.auth.config

Process-wide API authentication policy.

Responsibilities:
- Hold the auth-required flag and the pluggable user entity type.
- Build that policy once from `Settings` so requests never read ambient config.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Any

from storefront_api.settings import Settings


@dataclass(frozen=True, slots=True)
class ApiConfig:
    requires_authentication: bool
    user_model: type[Any]

    @classmethod
    def from_settings(cls, settings: Settings) -> ApiConfig:
        return cls(
            requires_authentication=settings.requires_authentication,
            user_model=resolve_user_model(settings.user_model),
        )


def resolve_user_model(path: str) -> type[Any]:
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ValueError(f"user_model must be a dotted path, got {path!r}")
    return getattr(importlib.import_module(module_name), attr)
