"""
Domain models and value objects.

Contains fundamental domain entities like Sku, price entries, Purchase, receipts.
"""

from salekit.core.domain.constants import (
    PRICE_CONVERT_VIA_ORACLE,
    PRICE_SWAP_VIA_ORACLE,
    SKU_KEY_SIZE,
    SUPPLY_UNLIMITED,
    TOKEN_ETH,
    ZERO_ADDRESS,
    is_zero_address,
    sku_key,
    sku_name,
)
from salekit.core.domain.purchase import (
    ESTIMATE_PATH,
    PURCHASE_PATH,
    LifeCycleStage,
    Purchase,
    PurchaseEstimate,
    PurchaseReceipt,
    Transfer,
)
from salekit.core.domain.sku import (
    FixedPrice,
    OracleConvertedPrice,
    OracleSwappedPrice,
    PriceEntry,
    Sku,
    TokenPrice,
    price_entry_from_value,
    price_entry_to_value,
)

__all__ = [
    # Constants
    "PRICE_CONVERT_VIA_ORACLE",
    "PRICE_SWAP_VIA_ORACLE",
    "SKU_KEY_SIZE",
    "SUPPLY_UNLIMITED",
    "TOKEN_ETH",
    "ZERO_ADDRESS",
    "is_zero_address",
    "sku_key",
    "sku_name",
    # Purchase record
    "ESTIMATE_PATH",
    "PURCHASE_PATH",
    "LifeCycleStage",
    "Purchase",
    "PurchaseEstimate",
    "PurchaseReceipt",
    "Transfer",
    # Sku model
    "FixedPrice",
    "OracleConvertedPrice",
    "OracleSwappedPrice",
    "PriceEntry",
    "Sku",
    "TokenPrice",
    "price_entry_from_value",
    "price_entry_to_value",
]
