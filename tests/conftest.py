"""Pytest configuration and shared fixtures."""

from typing import Any

import pytest

from stridematch.catalog import load_catalog
from stridematch.matching.normalizer import load_vocabulary
from stridematch.state.models import CatalogEntry, RaceReadiness


@pytest.fixture
def catalog() -> tuple[CatalogEntry, ...]:
    """The bundled shoe catalog."""
    return load_catalog()


@pytest.fixture
def vocabulary():
    """The bundled vocabulary."""
    return load_vocabulary()


@pytest.fixture
def make_entry():
    """Factory for catalog entries with sensible geometry defaults."""

    def _make(brand: str, model: str, **overrides: Any) -> CatalogEntry:
        fields: dict[str, Any] = {
            "brand": brand,
            "model": model,
            "types": ("daily trainer",),
            "heel_height": 35,
            "forefoot_height": 27,
            "drop": 8,
            "weight": 250,
            "race_readiness": RaceReadiness.NO,
        }
        fields.update(overrides)
        return CatalogEntry(**fields)

    return _make
