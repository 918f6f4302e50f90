"""Catalog — каталог SKU, прайс-листы и загрузка каталога из документа."""

from .ledger import InventoryLedger
from .loader import CatalogEntry, load_catalog, parse_catalog

__all__ = [
    "InventoryLedger",
    "CatalogEntry",
    "load_catalog",
    "parse_catalog",
]
