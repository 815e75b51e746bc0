"""
storefront_api.api.attributes

Request-attribute helpers shared by resource routers.

Responsibilities:
- `AttributeMap`: a dict with indifferent key access.
- Rename nested-relation keys to their `<key>_attributes` form.
- Role-gated permitted attribute sets and filtering (`permit`, `require_param`).
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from typing import Any

from storefront_api.auth.ability import ADMIN_ROLE
from storefront_api.errors import ParameterMissing

LINE_ITEM_ATTRIBUTES: tuple[str, ...] = ("id", "variant_id", "quantity")

# Extra writable line-item fields per role; admins may set prices when importing orders.
ROLE_LINE_ITEM_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    ADMIN_ROLE: ("price", "variant_id", "sku"),
}

ORDER_ATTRIBUTES: tuple[str, ...] = ("email", "line_items_attributes")


def _key(key: Any) -> Any:
    # Enum members (e.g. StrEnum field names) address the same entry as their value.
    if isinstance(key, enum.Enum):
        return str(key.value)
    return key


def _convert(value: Any) -> Any:
    if isinstance(value, AttributeMap):
        return value
    if isinstance(value, Mapping):
        return AttributeMap(value)
    if isinstance(value, list):
        return [_convert(v) for v in value]
    return value


class AttributeMap(dict):
    """
    Insertion-ordered mapping whose keys are normalized on the way in and out, so
    `m["label"]` and `m[Field.label]` (a StrEnum member) are equivalent. Nested
    mappings are converted on assignment. Copies, `|` merges and `fromkeys` return
    `AttributeMap`s too.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.update(*args, **kwargs)

    def __getitem__(self, key: Any) -> Any:
        return super().__getitem__(_key(key))

    def __setitem__(self, key: Any, value: Any) -> None:
        super().__setitem__(_key(key), _convert(value))

    def __delitem__(self, key: Any) -> None:
        super().__delitem__(_key(key))

    def __contains__(self, key: object) -> bool:
        return super().__contains__(_key(key))

    def get(self, key: Any, default: Any = None) -> Any:
        return super().get(_key(key), default)

    def pop(self, key: Any, *args: Any) -> Any:
        return super().pop(_key(key), *args)

    def setdefault(self, key: Any, default: Any = None) -> Any:
        key = _key(key)
        if key not in self:
            self[key] = default
        return super().__getitem__(key)

    def update(self, *args: Any, **kwargs: Any) -> None:
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def copy(self) -> AttributeMap:
        return AttributeMap(self)

    @classmethod
    def fromkeys(cls, keys: Iterable[Any], value: Any = None) -> AttributeMap:
        return cls((key, value) for key in keys)

    def __or__(self, other: Any) -> AttributeMap:
        if not isinstance(other, Mapping):
            return NotImplemented
        merged = self.copy()
        merged.update(other)
        return merged

    def __ror__(self, other: Any) -> AttributeMap:
        if not isinstance(other, Mapping):
            return NotImplemented
        merged = AttributeMap(other)
        merged.update(self)
        return merged

    def __ior__(self, other: Any) -> AttributeMap:
        self.update(other)
        return self


def map_nested_attributes_keys(model: type[Any], attributes: Mapping[Any, Any]) -> AttributeMap:
    nested_keys = frozenset(getattr(model, "__nested_attributes__", ()))
    mapped = AttributeMap()
    for key, value in attributes.items():
        name = _key(key)
        mapped[f"{name}_attributes" if name in nested_keys else name] = value
    return mapped


def permitted_line_item_attributes(roles: Iterable[str]) -> tuple[str, ...]:
    roles = frozenset(roles)
    permitted = list(LINE_ITEM_ATTRIBUTES)
    for role, extra in ROLE_LINE_ITEM_ATTRIBUTES.items():
        if role in roles:
            permitted.extend(field for field in extra if field not in permitted)
    return tuple(permitted)


def permit(attributes: Mapping[Any, Any], permitted: Iterable[str]) -> AttributeMap:
    allowed = frozenset(permitted)
    return AttributeMap((k, v) for k, v in AttributeMap(attributes).items() if k in allowed)


def require_param(params: Mapping[Any, Any], key: str) -> Any:
    value = AttributeMap(params).get(key) if isinstance(params, Mapping) else None
    if value is None or value == "" or value == {} or value == []:
        raise ParameterMissing(key)
    return value
