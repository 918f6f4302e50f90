"""
Contract Validation Module

Модуль для валидации JSON контрактов salekit (каталог, чек покупки).
"""

from .validators import (
    CatalogValidator,
    ContractValidator,
    PurchaseReceiptValidator,
    SchemaLoader,
    validate_catalog,
    validate_purchase_receipt,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CatalogValidator",
    "PurchaseReceiptValidator",
    # Functions
    "validate_catalog",
    "validate_purchase_receipt",
]
