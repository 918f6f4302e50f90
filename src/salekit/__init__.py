"""salekit — движок жизненного цикла покупок.

Каталог SKU, pipeline покупки из пяти этапов (validation, pricing, payment,
delivery, notification), oracle-цены, оплата через своп и последовательная
выдача инвентаря.
"""

from salekit.catalog import InventoryLedger, load_catalog
from salekit.core.domain import (
    PRICE_CONVERT_VIA_ORACLE,
    PRICE_SWAP_VIA_ORACLE,
    SUPPLY_UNLIMITED,
    TOKEN_ETH,
    ZERO_ADDRESS,
    LifeCycleStage,
    PurchaseEstimate,
    PurchaseReceipt,
    sku_key,
)
from salekit.core.errors import SaleError
from salekit.interfaces import Currency, PriceOracle, PurchaseNotificationsReceiver
from salekit.inventory import FixedOrderInventorySale
from salekit.oracle import OracleSale, OracleSwapSale
from salekit.sale import Sale, SaleConfig

__version__ = "0.3.0"

__all__ = [
    # Sales
    "Sale",
    "SaleConfig",
    "OracleSale",
    "OracleSwapSale",
    "FixedOrderInventorySale",
    # Catalog
    "InventoryLedger",
    "load_catalog",
    "sku_key",
    # Results
    "LifeCycleStage",
    "PurchaseEstimate",
    "PurchaseReceipt",
    # Collaborators
    "Currency",
    "PriceOracle",
    "PurchaseNotificationsReceiver",
    # Constants
    "PRICE_CONVERT_VIA_ORACLE",
    "PRICE_SWAP_VIA_ORACLE",
    "SUPPLY_UNLIMITED",
    "TOKEN_ETH",
    "ZERO_ADDRESS",
    # Errors
    "SaleError",
]
