"""
Catalog - Card definitions and catalog loading.
"""

from .cards import (
    AttackDirection,
    CardType,
    CardConfig,
    CardCatalog,
    DEFAULT_ATTACK,
    CLIENT_CARDS,
    default_catalog,
    ledger_fallback_catalog,
)
from .loader import CatalogError, CardRecord, load_catalog, catalog_from_records, catalog_to_records

__all__ = [
    "AttackDirection",
    "CardType",
    "CardConfig",
    "CardCatalog",
    "DEFAULT_ATTACK",
    "CLIENT_CARDS",
    "default_catalog",
    "ledger_fallback_catalog",
    "CatalogError",
    "CardRecord",
    "load_catalog",
    "catalog_from_records",
    "catalog_to_records",
]
