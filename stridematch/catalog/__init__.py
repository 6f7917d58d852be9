"""Shoe catalog access."""

from .loader import BUNDLED_CATALOG_PATH, CatalogError, get_catalog, load_catalog

__all__ = [
    "BUNDLED_CATALOG_PATH",
    "CatalogError",
    "get_catalog",
    "load_catalog",
]
