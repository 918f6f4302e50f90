"""Oracle Pricing — динамическая цена по курсу oracle.

Запись OracleConvertedPrice в прайс-листе означает "цена определяется курсом
oracle относительно reference-цены". Для любой другой записи этап pricing
делегирует базовому расчёту по фиксированной цене (точно, без округления).

Расчёт:
- reference_total = quantity * reference_price
- rate = oracle.conversion_rate(token, reference_token) (fixed-point 18)
- total_price = reference_total * 10^18 / rate (округление вниз)
- pricing_data = [PRICE_CONVERT_VIA_ORACLE, rate]
"""

import logging
from dataclasses import replace
from typing import Mapping, Sequence

from salekit.core.domain.constants import PRICE_CONVERT_VIA_ORACLE, sku_name
from salekit.core.domain.purchase import Purchase
from salekit.core.domain.sku import FixedPrice, OracleConvertedPrice, Sku
from salekit.core.errors import PricingError
from salekit.core.math.fixed_point import checked_mul, convert_from_reference
from salekit.interfaces import Currency, PriceOracle, PurchaseNotificationsReceiver
from salekit.sale.sale import Sale, SaleConfig
from salekit.sale.stages import PricingStage, StagePipeline, default_pipeline

logger = logging.getLogger(__name__)


def reference_total_price(sku: Sku, reference_token: str, quantity: int) -> int:
    """
    Полная цена в reference-валюте.

    Raises:
        PricingError: "undefined reference price", если reference-запись не фиксированная
    """
    entry = sku.price_for(reference_token)
    if not isinstance(entry, FixedPrice):
        raise PricingError("undefined_reference_price", "undefined reference price")
    return checked_mul(quantity, entry.amount)


class OraclePricingStage(PricingStage):
    """PRICING с перехватом записей OracleConvertedPrice."""

    def execute(self, sale: Sale, purchase: Purchase) -> None:
        if not self.oracle_pricing(sale, purchase):
            super().execute(sale, purchase)

    def oracle_pricing(self, sale: "OracleSale", purchase: Purchase) -> bool:
        """
        Returns:
            True если цена рассчитана через oracle, False если запись не oracle
        """
        sku = sale.ledger.get_sku(purchase.sku)
        if not isinstance(sku.price_for(purchase.token), OracleConvertedPrice):
            return False

        reference_total = reference_total_price(sku, sale.reference_token, purchase.quantity)
        rate = sale.conversion_rate(purchase.token, sale.reference_token, purchase.user_data)

        total_price = convert_from_reference(reference_total, rate)
        if total_price == 0:
            raise PricingError("zero_price", "zero price")

        purchase.total_price = total_price
        purchase.pricing_data = [PRICE_CONVERT_VIA_ORACLE, rate]

        logger.debug(
            "[sku=%s] oracle pricing: reference_total=%d rate=%d total_price=%d",
            sku_name(purchase.sku),
            reference_total,
            rate,
            total_price,
        )
        return True


class OracleSale(Sale):
    """Продажа с фиксированными и oracle-ценами."""

    def __init__(
        self,
        owner: str,
        config: SaleConfig,
        currencies: Mapping[str, Currency],
        oracle: PriceOracle,
        receivers: Mapping[str, PurchaseNotificationsReceiver] | None = None,
        stages: StagePipeline | None = None,
        address: str | None = None,
    ):
        self.oracle = oracle
        super().__init__(owner, config, currencies, receivers=receivers, stages=stages, address=address)

    def default_stages(self) -> StagePipeline:
        return replace(default_pipeline(), pricing=OraclePricingStage())

    def conversion_rate(self, from_token: str, to_token: str, data: bytes = b"") -> int:
        """
        Raises:
            PricingError: "undefined rate"
        """
        rate = self.oracle.conversion_rate(from_token, to_token, data)
        if not rate:
            raise PricingError("undefined_rate", "undefined rate")
        return rate

    def conversion_rates(self, tokens: Sequence[str], data: bytes = b"") -> tuple[int, ...]:
        """
        Курсы каждой валюты к reference-валюте.

        Raises:
            PricingError: "undefined rate", если хотя бы одна пара не котируется
        """
        return tuple(self.conversion_rate(token, self.reference_token, data) for token in tokens)
