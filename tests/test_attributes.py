from __future__ import annotations

import enum

import pytest

from storefront_api.api.attributes import (
    LINE_ITEM_ATTRIBUTES,
    AttributeMap,
    map_nested_attributes_keys,
    permit,
    permitted_line_item_attributes,
    require_param,
)
from storefront_api.db.models import Order, Product
from storefront_api.errors import ParameterMissing


class Field(enum.StrEnum):
    label = "label"
    variants = "variants"
    variants_attributes = "variants_attributes"


def test_nested_relation_keys_are_renamed() -> None:
    variants = [{"sku": "A"}, {"sku": "B"}]
    mapped = map_nested_attributes_keys(Product, {"variants": variants, "name": "x"})

    assert mapped == {"variants_attributes": variants, "name": "x"}
    assert list(mapped) == ["variants_attributes", "name"]


def test_other_keys_pass_through_unchanged() -> None:
    mapped = map_nested_attributes_keys(Order, {"email": "a@example.com", "variants": []})
    assert mapped == {"email": "a@example.com", "variants": []}


def test_mapped_attributes_are_indifferently_accessible() -> None:
    mapped = map_nested_attributes_keys(Product, {Field.variants: [], Field.label: "x"})

    assert mapped["label"] == "x"
    assert mapped[Field.label] == "x"
    assert Field.variants_attributes in mapped
    assert mapped.get("variants_attributes") == []
    assert "variants" not in mapped


def test_attribute_map_converts_nested_mappings() -> None:
    attrs = AttributeMap({"order": {"line_items": [{"quantity": 1}]}})
    assert isinstance(attrs["order"], AttributeMap)
    assert isinstance(attrs["order"]["line_items"][0], AttributeMap)

    attrs.setdefault(Field.label, "tote")
    assert attrs["label"] == "tote"
    assert attrs.pop(Field.label) == "tote"
    assert "label" not in attrs


def test_copies_and_merges_stay_attribute_maps() -> None:
    attrs = AttributeMap({"label": "tote"})

    copied = attrs.copy()
    assert isinstance(copied, AttributeMap)
    copied[Field.label] = "bag"
    assert attrs["label"] == "tote"

    merged = attrs | {Field.variants: [{"sku": "A"}]}
    assert isinstance(merged, AttributeMap)
    assert [type(k) for k in merged] == [str, str]
    assert isinstance(merged["variants"][0], AttributeMap)

    merged = {Field.label: "left"} | attrs
    assert isinstance(merged, AttributeMap)
    assert merged == {"label": "tote"}

    attrs |= {Field.variants: []}
    assert type(list(attrs)[-1]) is str

    keys = AttributeMap.fromkeys([Field.label, "sku"])
    assert isinstance(keys, AttributeMap)
    assert keys == {"label": None, "sku": None}


def test_admin_gets_extra_line_item_fields() -> None:
    permitted = permitted_line_item_attributes({"admin"})
    assert set(permitted) == set(LINE_ITEM_ATTRIBUTES) | {"price", "variant_id", "sku"}
    assert len(permitted) == len(set(permitted))


@pytest.mark.parametrize("roles", [frozenset(), frozenset({"customer"})])
def test_non_admin_gets_base_line_item_fields(roles: frozenset[str]) -> None:
    assert permitted_line_item_attributes(roles) == LINE_ITEM_ATTRIBUTES


def test_permit_drops_unpermitted_keys() -> None:
    attrs = permit({"quantity": 2, "price": "1.00", "sku": "X"}, LINE_ITEM_ATTRIBUTES)
    assert attrs == {"quantity": 2}


def test_require_param() -> None:
    assert require_param({"order": {"email": "a"}}, "order") == {"email": "a"}
    for params in ({}, {"order": ""}, {"order": {}}, {"order": None}):
        with pytest.raises(ParameterMissing) as exc_info:
            require_param(params, "order")
        assert exc_info.value.param == "order"
