"""
Purchase — Запись покупки, проходящая через все этапы pipeline

Purchase создаётся одним вызовом estimate_purchase / purchase_for,
принадлежит только ему и отбрасывается по завершении вызова.

Слоты pricing_data / payment_data / delivery_data — расширяемые данные,
которые этапы записывают для последующих этапов и для внешнего аудита
(например, курс oracle или выданные идентификаторы).
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any


# =============================================================================
# ENUMS
# =============================================================================


class LifeCycleStage(IntFlag):
    """Этапы pipeline (битовые флаги для lifecycle_path)."""

    VALIDATION = 1
    PRICING = 2
    PAYMENT = 4
    DELIVERY = 8
    NOTIFICATION = 16


ESTIMATE_PATH = LifeCycleStage.VALIDATION | LifeCycleStage.PRICING
PURCHASE_PATH = (
    LifeCycleStage.VALIDATION
    | LifeCycleStage.PRICING
    | LifeCycleStage.PAYMENT
    | LifeCycleStage.DELIVERY
    | LifeCycleStage.NOTIFICATION
)


# =============================================================================
# SETTLEMENT JOURNAL
# =============================================================================


@dataclass(frozen=True)
class Transfer:
    """Выполненное перемещение ценности (для отката при сбое запроса)."""

    token: str
    sender: str
    recipient: str
    amount: int


# =============================================================================
# PURCHASE RECORD
# =============================================================================


@dataclass
class Purchase:
    """Транзиентная запись одной покупки."""

    purchaser: str
    recipient: str
    token: str
    sku: bytes
    quantity: int
    user_data: bytes = b""

    # Прикреплённая нативная сумма (только для TOKEN_ETH)
    value: int = 0

    total_price: int = 0
    pricing_data: list[int] = field(default_factory=list)
    payment_data: list[int] = field(default_factory=list)
    delivery_data: list[int] = field(default_factory=list)

    lifecycle_path: LifeCycleStage = LifeCycleStage(0)

    # Журнал переводов текущего запроса, откатывается в обратном порядке
    settlements: list[Transfer] = field(default_factory=list, repr=False)

    def ext_data(self) -> list[int]:
        """pricing_data + payment_data + delivery_data одним списком."""
        return [*self.pricing_data, *self.payment_data, *self.delivery_data]


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class PurchaseEstimate:
    """Результат estimate_purchase (validation + pricing, без изменений состояния)."""

    total_price: int
    pricing_data: tuple[int, ...]
    lifecycle_path: LifeCycleStage


@dataclass(frozen=True)
class PurchaseReceipt:
    """Результат успешного purchase_for."""

    purchaser: str
    recipient: str
    token: str
    sku: bytes
    quantity: int
    user_data: bytes
    total_price: int
    pricing_data: tuple[int, ...]
    payment_data: tuple[int, ...]
    delivery_data: tuple[int, ...]
    lifecycle_path: LifeCycleStage

    @classmethod
    def from_purchase(cls, purchase: Purchase) -> "PurchaseReceipt":
        return cls(
            purchaser=purchase.purchaser,
            recipient=purchase.recipient,
            token=purchase.token,
            sku=purchase.sku,
            quantity=purchase.quantity,
            user_data=purchase.user_data,
            total_price=purchase.total_price,
            pricing_data=tuple(purchase.pricing_data),
            payment_data=tuple(purchase.payment_data),
            delivery_data=tuple(purchase.delivery_data),
            lifecycle_path=purchase.lifecycle_path,
        )

    @property
    def ext_data(self) -> tuple[int, ...]:
        return self.pricing_data + self.payment_data + self.delivery_data

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-совместимое представление (контракт purchase_receipt).

        bytes → hex-строки с префиксом 0x, uint256 → десятичные строки
        (JSON number не гарантирует точность выше 2**53).
        """
        return {
            "purchaser": self.purchaser,
            "recipient": self.recipient,
            "token": self.token,
            "sku": "0x" + self.sku.hex(),
            "quantity": str(self.quantity),
            "user_data": "0x" + self.user_data.hex(),
            "total_price": str(self.total_price),
            "ext_data": [str(value) for value in self.ext_data],
            "lifecycle_path": int(self.lifecycle_path),
        }
