"""Pytest configuration and shared fixtures for variant engine tests."""

from typing import Any, Callable

import pytest

from variant_engine.catalog.models import AttributeCatalog, AttributeSelection
from variant_engine.domain.entities import Variant
from variant_engine.domain.value_objects import VariantId


@pytest.fixture
def catalog_payload() -> list[dict[str, Any]]:
    """Raw attribute schema of an apparel category."""
    return [
        {
            "id": "size",
            "name": "Size",
            "rank": 2,
            "is_active": True,
            "values": [
                {"id": "s", "value": "S", "rank": 1},
                {"id": "m", "value": "M", "rank": 2},
                {"id": "l", "value": "L", "rank": 3},
            ],
        },
        {
            "id": "color",
            "name": "Color",
            "rank": 1,
            "is_active": True,
            "values": [
                {"id": "red", "value": "Red", "rank": 1},
                {"id": "blue", "value": "Blue", "rank": 2},
                {"id": "green", "value": "Green", "rank": 3},
            ],
        },
        {
            "id": "material",
            "name": "Material",
            "rank": 3,
            "is_active": False,
            "values": ["Cotton", "Linen"],
        },
    ]


@pytest.fixture
def catalog(catalog_payload: list[dict[str, Any]]) -> AttributeCatalog:
    """Normalized Color/Size catalog."""
    return AttributeCatalog.from_payload(catalog_payload)


@pytest.fixture
def select() -> Callable[..., AttributeSelection]:
    """Build a selection from ``attribute_id -> value ids``."""

    def _select(**values: list[str]) -> AttributeSelection:
        return AttributeSelection.of(values)

    return _select


@pytest.fixture
def make_variant() -> Callable[..., Variant]:
    """Build a saved variant for a combination."""

    def _make(*value_ids: str, variant_id: str | None = None, **fields: Any) -> Variant:
        return Variant(
            id=VariantId(variant_id) if variant_id else VariantId.generate(),
            option_value_ids=tuple(value_ids),
            **fields,
        )

    return _make
