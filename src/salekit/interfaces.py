"""
Interfaces — контракты внешних участников, которых использует движок продаж

- Currency: перевод ценности между счетами (нативная единица и токены)
- PriceOracle: курсы конверсии, оценка и исполнение свопа
- PurchaseNotificationsReceiver: уведомление о совершённой покупке

Движок доверенно перемещает ценность между счетами: Currency.transfer
принимает отправителя явно. Ложный результат означает отказ.
"""

from abc import ABC, abstractmethod

from salekit.core.domain.purchase import PurchaseReceipt


class Currency(ABC):
    """Валюта (нативная единица или токен)."""

    @abstractmethod
    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Перевод amount от sender к recipient. False — перевод не выполнен."""

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Баланс счёта."""


class PriceOracle(ABC):
    """
    Oracle курсов и свопов.

    Все курсы — fixed-point с 18 знаками. Ноль означает отсутствие котировки.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Счёт oracle, с которым происходит обмен при свопе."""

    @abstractmethod
    def conversion_rate(self, from_token: str, to_token: str, data: bytes) -> int:
        """Курс from_token → to_token (сколько to_token за одну единицу from_token * 10^18)."""

    @abstractmethod
    def estimate_swap(self, from_token: str, to_token: str, to_amount: int, data: bytes) -> int:
        """Сколько from_token нужно, чтобы получить ровно to_amount to_token."""

    @abstractmethod
    def swap(self, from_token: str, to_token: str, to_amount: int, data: bytes, account: str) -> int:
        """
        Своп для account: списывает from_token со счёта account на счёт oracle,
        зачисляет ровно to_amount to_token на счёт account.

        Returns:
            Фактически израсходованная сумма from_token
        """


class PurchaseNotificationsReceiver(ABC):
    """Получатель уведомлений о покупках SKU."""

    @abstractmethod
    def on_purchase(self, purchase: PurchaseReceipt) -> bool:
        """Уведомление о покупке (неизменяемый снимок). False — отказ, покупка отменяется."""
