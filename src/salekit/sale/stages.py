"""Stages — пять этапов жизненного цикла покупки.

Порядок этапов фиксирован:
- VALIDATION: пауза, нулевые адреса, существование SKU, количество, остаток
- PRICING: total_price и pricing_data
- PAYMENT: перемещение ценности от покупателя к payout wallet
- DELIVERY: списание остатка (и выдача идентификаторов в вариантах)
- NOTIFICATION: вызов получателя уведомлений SKU, если он задан

Каждый этап — объект-стратегия. Вариант продажи выбирает набор этапов при
создании; переопределённый этап либо делегирует базовой реализации
(super().execute), либо полностью её заменяет.

Этапы не хранят состояние запроса: всё состояние запроса лежит в Purchase,
всё состояние продажи — в Sale.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from salekit.core.domain.constants import TOKEN_ETH, is_zero_address, sku_name
from salekit.core.domain.purchase import LifeCycleStage, Purchase, PurchaseReceipt
from salekit.core.domain.sku import FixedPrice
from salekit.core.errors import (
    NotificationError,
    PaymentError,
    PricingError,
    PurchaseValidationError,
    SaleError,
)
from salekit.core.math.fixed_point import checked_mul, is_uint256

if TYPE_CHECKING:
    from salekit.sale.sale import Sale

logger = logging.getLogger(__name__)


class Stage(ABC):
    """Базовый этап pipeline."""

    stage: LifeCycleStage

    def name(self) -> str:
        return type(self).__name__

    def run(self, sale: "Sale", purchase: Purchase) -> None:
        logger.debug("[sku=%s] STAGE %s", sku_name(purchase.sku), self.name())
        self.execute(sale, purchase)
        purchase.lifecycle_path |= self.stage
        logger.debug("[sku=%s] STAGE %s OK", sku_name(purchase.sku), self.name())

    @abstractmethod
    def execute(self, sale: "Sale", purchase: Purchase) -> None: ...

    def compensate(self, sale: "Sale", purchase: Purchase) -> None:
        """Откат внутренних изменений этапа. По умолчанию этап ничего не меняет."""


# =============================================================================
# VALIDATION
# =============================================================================


class ValidationStage(Stage):
    """
    Порядок проверок:
    1. Пауза продажи
    2. Нулевые recipient / token
    3. Прикреплённое value при оплате не нативной единицей
    4. Количество > 0
    5. Существование SKU
    6. Количество <= remaining_supply (кроме неограниченных SKU)
    7. Количество <= max_quantity_per_purchase
    """

    stage = LifeCycleStage.VALIDATION

    def execute(self, sale: "Sale", purchase: Purchase) -> None:
        if sale.paused:
            raise PurchaseValidationError("paused")

        if is_zero_address(purchase.recipient):
            raise PurchaseValidationError("zero_address_recipient", "zero address recipient")

        if is_zero_address(purchase.token):
            raise PurchaseValidationError("zero_address_token", "zero address token")

        if purchase.value != 0 and purchase.token != TOKEN_ETH:
            raise PurchaseValidationError("unexpected_value", "unexpected value")

        if not is_uint256(purchase.quantity) or purchase.quantity == 0:
            raise PurchaseValidationError("zero_quantity", "zero quantity")

        sku = sale.ledger.get_sku(purchase.sku)

        if not sku.is_unlimited() and purchase.quantity > sku.remaining_supply:
            raise PurchaseValidationError("insufficient_supply", "insufficient supply")

        if purchase.quantity > sku.max_quantity_per_purchase:
            raise PurchaseValidationError("above_max_quantity", "above max quantity")


# =============================================================================
# PRICING
# =============================================================================


class PricingStage(Stage):
    """Фиксированная цена: total_price = quantity * amount."""

    stage = LifeCycleStage.PRICING

    def execute(self, sale: "Sale", purchase: Purchase) -> None:
        entry = sale.ledger.get_sku(purchase.sku).price_for(purchase.token)

        # Oracle-записи базовый этап не обрабатывает
        if not isinstance(entry, FixedPrice):
            raise PricingError("undefined_price", "undefined price")

        purchase.total_price = checked_mul(purchase.quantity, entry.amount)


# =============================================================================
# PAYMENT
# =============================================================================


class PaymentStage(Stage):
    """
    Прямой перевод total_price от покупателя на payout wallet.

    Нативная единица требует прикреплённого value >= total_price.
    """

    stage = LifeCycleStage.PAYMENT

    def execute(self, sale: "Sale", purchase: Purchase) -> None:
        if purchase.token == TOKEN_ETH and purchase.value < purchase.total_price:
            raise PaymentError("insufficient_funds", "insufficient funds")

        sale.require_balance(purchase.token, purchase.purchaser, purchase.total_price)
        sale.settle(purchase, purchase.token, purchase.purchaser, sale.payout_wallet, purchase.total_price)


# =============================================================================
# DELIVERY
# =============================================================================


class DeliveryStage(Stage):
    """Списание остатка SKU. delivery_data остаётся пустым."""

    stage = LifeCycleStage.DELIVERY

    def execute(self, sale: "Sale", purchase: Purchase) -> None:
        sale.ledger.decrease_remaining_supply(purchase.sku, purchase.quantity)

    def compensate(self, sale: "Sale", purchase: Purchase) -> None:
        sale.ledger.restore_remaining_supply(purchase.sku, purchase.quantity)


# =============================================================================
# NOTIFICATION
# =============================================================================


class NotificationStage(Stage):
    """
    Уведомление получателя SKU. Отказ получателя отменяет покупку целиком.

    Получатель видит неизменяемый снимок PurchaseReceipt: журнал переводов и
    входные данные компенсаций остаются недоступны участнику.
    """

    stage = LifeCycleStage.NOTIFICATION

    def execute(self, sale: "Sale", purchase: Purchase) -> None:
        address = sale.ledger.get_sku(purchase.sku).notifications_receiver
        if address is None:
            return

        receiver = sale.notifications_receiver(address)
        try:
            accepted = receiver.on_purchase(PurchaseReceipt.from_purchase(purchase))
        except SaleError:
            raise
        except Exception as e:
            raise NotificationError("notification_failed", f"notification failed: {e}") from e

        if not accepted:
            raise NotificationError("notification_failed", "notification failed")


# =============================================================================
# PIPELINE
# =============================================================================


@dataclass(frozen=True)
class StagePipeline:
    """Набор этапов варианта продажи в фиксированном порядке."""

    validation: Stage
    pricing: Stage
    payment: Stage
    delivery: Stage
    notification: Stage

    def estimate_stages(self) -> tuple[Stage, ...]:
        return (self.validation, self.pricing)

    def purchase_stages(self) -> tuple[Stage, ...]:
        return (self.validation, self.pricing, self.payment, self.delivery, self.notification)


def default_pipeline() -> StagePipeline:
    return StagePipeline(
        validation=ValidationStage(),
        pricing=PricingStage(),
        payment=PaymentStage(),
        delivery=DeliveryStage(),
        notification=NotificationStage(),
    )
