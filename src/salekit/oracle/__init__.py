"""Oracle — динамические цены по курсу oracle и оплата через своп."""

from .pricing import OraclePricingStage, OracleSale, reference_total_price
from .swap import OracleSwapPaymentStage, OracleSwapPricingStage, OracleSwapSale

__all__ = [
    "OraclePricingStage",
    "OracleSale",
    "reference_total_price",
    "OracleSwapPricingStage",
    "OracleSwapPaymentStage",
    "OracleSwapSale",
]
