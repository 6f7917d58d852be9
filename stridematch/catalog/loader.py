"""Shoe catalog loading."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from stridematch.config.settings import settings
from stridematch.state.models import CatalogEntry

logger = structlog.get_logger()

BUNDLED_CATALOG_PATH = Path(__file__).parent.parent / "data" / "shoes.json"

_entries_adapter = TypeAdapter(list[CatalogEntry])


class CatalogError(Exception):
    """Raised when a catalog file is missing or malformed."""


@lru_cache(maxsize=8)
def load_catalog(path: Optional[Path] = None) -> tuple[CatalogEntry, ...]:
    """Load and validate a shoe catalog from a JSON file.

    Args:
        path: JSON file holding a list of catalog entries (None = bundled catalog)

    Returns:
        Catalog entries in file order

    Raises:
        CatalogError: If the file cannot be read or does not validate
    """
    catalog_path = Path(path) if path else BUNDLED_CATALOG_PATH

    try:
        with open(catalog_path, encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {catalog_path} is not valid JSON: {e}") from e

    try:
        entries = _entries_adapter.validate_python(raw)
    except ValidationError as e:
        raise CatalogError(f"Catalog {catalog_path} has invalid entries: {e}") from e

    logger.info("Catalog loaded", path=str(catalog_path), entries=len(entries))
    return tuple(entries)


def get_catalog() -> tuple[CatalogEntry, ...]:
    """Get the catalog configured in settings."""
    return load_catalog(settings.catalog_path)
