"""Oracle Swap — оплата любой валютой с обменом в reference-валюту.

Pricing (OracleSwappedPrice):
- reference_total = quantity * reference_price
- total_price = oracle.estimate_swap(token, reference_token, reference_total)
- rate = reference_total * 10^18 / total_price
- pricing_data = [PRICE_SWAP_VIA_ORACLE, rate]

Payment (pricing_data[0] == PRICE_SWAP_VIA_ORACLE):
1. Сбор total_price с покупателя на счёт продажи
2. reference_amount = rate * total_price / 10^18
3. Своп через oracle: продажа отдаёт consumed, получает reference_amount
4. Сдача total_price - consumed возвращается покупателю
5. reference_amount пересылается на payout wallet

Переводы oracle записываются в журнал запроса, поэтому сбой любого шага
откатывает и сбор, и своп.
"""

import logging
from dataclasses import replace
from typing import Sequence

from salekit.core.domain.constants import PRICE_SWAP_VIA_ORACLE, TOKEN_ETH, sku_name
from salekit.core.domain.purchase import Purchase
from salekit.core.domain.sku import OracleSwappedPrice
from salekit.core.errors import PaymentError, PricingError, SaleError
from salekit.core.math.fixed_point import convert_to_reference, rate_from_amounts
from salekit.oracle.pricing import OraclePricingStage, OracleSale, reference_total_price
from salekit.sale.sale import Sale
from salekit.sale.stages import PaymentStage, StagePipeline, default_pipeline

logger = logging.getLogger(__name__)


class OracleSwapPricingStage(OraclePricingStage):
    """PRICING: OracleSwappedPrice → своп, OracleConvertedPrice → курс, иначе фиксированная цена."""

    def execute(self, sale: Sale, purchase: Purchase) -> None:
        if not self.swap_pricing(sale, purchase):
            super().execute(sale, purchase)

    def swap_pricing(self, sale: "OracleSwapSale", purchase: Purchase) -> bool:
        sku = sale.ledger.get_sku(purchase.sku)
        if not isinstance(sku.price_for(purchase.token), OracleSwappedPrice):
            return False

        reference_total = reference_total_price(sku, sale.reference_token, purchase.quantity)
        total_price = sale.estimate_swap(purchase.token, reference_total, purchase.user_data)

        purchase.total_price = total_price
        purchase.pricing_data = [PRICE_SWAP_VIA_ORACLE, rate_from_amounts(reference_total, total_price)]

        logger.debug(
            "[sku=%s] swap pricing: reference_total=%d total_price=%d",
            sku_name(purchase.sku),
            reference_total,
            total_price,
        )
        return True


class OracleSwapPaymentStage(PaymentStage):
    """PAYMENT через своп, если pricing записал swap-маркер."""

    def execute(self, sale: Sale, purchase: Purchase) -> None:
        if not purchase.pricing_data or purchase.pricing_data[0] != PRICE_SWAP_VIA_ORACLE:
            super().execute(sale, purchase)
            return
        self.swap_payment(sale, purchase)

    def swap_payment(self, sale: "OracleSwapSale", purchase: Purchase) -> None:
        token = purchase.token
        total_price = purchase.total_price
        reference_token = sale.reference_token

        if token == TOKEN_ETH and purchase.value < total_price:
            raise PaymentError("insufficient_funds", "insufficient funds")

        sale.require_balance(token, purchase.purchaser, total_price)
        sale.settle(purchase, token, purchase.purchaser, sale.address, total_price)

        reference_amount = convert_to_reference(total_price, purchase.pricing_data[1])
        consumed = sale.swap(purchase, token, reference_amount)

        sale.settle(purchase, token, sale.address, purchase.purchaser, total_price - consumed)
        sale.settle(purchase, reference_token, sale.address, sale.payout_wallet, reference_amount)

        purchase.payment_data = [consumed, reference_amount]

        logger.debug(
            "[sku=%s] swap payment: consumed=%d reference_amount=%d change=%d",
            sku_name(purchase.sku),
            consumed,
            reference_amount,
            total_price - consumed,
        )


class OracleSwapSale(OracleSale):
    """Продажа с фиксированными ценами, oracle-ценами и оплатой через своп."""

    def default_stages(self) -> StagePipeline:
        return replace(
            default_pipeline(),
            pricing=OracleSwapPricingStage(),
            payment=OracleSwapPaymentStage(),
        )

    def estimate_swap(self, token: str, reference_amount: int, data: bytes = b"") -> int:
        """
        Сумма в token, необходимая для получения reference_amount.

        Raises:
            PricingError: "cannot estimate"
        """
        estimate = self.oracle.estimate_swap(token, self.reference_token, reference_amount, data)
        if not estimate:
            raise PricingError("cannot_estimate", "cannot estimate")
        return estimate

    def swap_rates(self, tokens: Sequence[str], reference_amount: int, data: bytes = b"") -> tuple[int, ...]:
        """
        Курсы свопа: reference_amount * 10^18 / estimate для каждой валюты.

        Raises:
            PricingError: "cannot estimate"
        """
        return tuple(
            rate_from_amounts(reference_amount, self.estimate_swap(token, reference_amount, data))
            for token in tokens
        )

    def swap(self, purchase: Purchase, token: str, reference_amount: int) -> int:
        """
        Своп собранной суммы в reference_amount reference-валюты.

        Returns:
            Израсходованная сумма в token

        Raises:
            PaymentError: "swap failed"
        """
        try:
            consumed = self.oracle.swap(
                token, self.reference_token, reference_amount, purchase.user_data, self.address
            )
        except SaleError:
            raise
        except Exception as e:
            raise PaymentError("swap_failed", f"swap failed: {e}") from e

        self.record_external_transfer(purchase, token, self.address, self.oracle.address, consumed)
        self.record_external_transfer(
            purchase, self.reference_token, self.oracle.address, self.address, reference_amount
        )

        if consumed > purchase.total_price:
            raise PaymentError("swap_failed", "swap failed")
        return consumed
