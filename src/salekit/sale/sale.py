"""Sale — оркестратор жизненного цикла покупки.

Точки входа:
- estimate_purchase: VALIDATION + PRICING, только чтение (для котировок)
- purchase_for: все пять этапов как одна атомарная единица работы

Атомарность purchase_for:
- Завершённые этапы компенсируются в обратном порядке (внутренний учёт)
- Все переводы из журнала запроса возвращаются в обратном порядке
- Исходная ошибка всегда пробрасывается вызывающему; сбой компенсации
  логируется и не маскирует её

Повторный вход в estimate_purchase / purchase_for из кода участников
(валюты, oracle, получатель уведомлений) во время запроса отклоняется.
Внутренний учёт (остаток, курсор) изменяется до вызова участников на этапах
delivery и notification.

Административные операции доступны только владельцу.
"""

import itertools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

from salekit.catalog.ledger import InventoryLedger
from salekit.core.domain.constants import is_zero_address, sku_name
from salekit.core.domain.purchase import (
    Purchase,
    PurchaseEstimate,
    PurchaseReceipt,
    Transfer,
)
from salekit.core.domain.sku import FixedPrice, OracleConvertedPrice, OracleSwappedPrice, Sku
from salekit.core.errors import (
    AccessError,
    ConfigurationError,
    NotificationError,
    PaymentError,
    ReentrancyError,
    SaleError,
)
from salekit.interfaces import Currency, PurchaseNotificationsReceiver
from salekit.sale.stages import Stage, StagePipeline, default_pipeline
from salekit.sale.state import SaleStateMachine, SaleTransitionResult

logger = logging.getLogger(__name__)

_SALE_ADDRESSES = itertools.count(1)


def next_sale_address() -> str:
    """Уникальный собственный счёт для очередного экземпляра продажи."""
    return "0x5a1e" + format(next(_SALE_ADDRESSES), "036x")


@dataclass(frozen=True)
class SaleConfig:
    """
    Конфигурация продажи, фиксируется при создании.

    skus_capacity и tokens_per_sku_capacity ограничивают размеры контейнеров
    каталога.
    """

    payout_wallet: str
    reference_token: str
    skus_capacity: int = 1
    tokens_per_sku_capacity: int = 4


class Sale:
    """Продажа с фиксированными ценами (базовый вариант pipeline)."""

    def __init__(
        self,
        owner: str,
        config: SaleConfig,
        currencies: Mapping[str, Currency],
        receivers: Mapping[str, PurchaseNotificationsReceiver] | None = None,
        stages: StagePipeline | None = None,
        address: str | None = None,
    ):
        """
        Args:
            owner: владелец (административные операции)
            config: конфигурация продажи
            currencies: валюты по идентификатору (TOKEN_ETH — нативная единица)
            receivers: получатели уведомлений по адресу
            stages: набор этапов (default: этапы варианта продажи)
            address: собственный счёт продажи (default: уникальный для экземпляра)
        """
        if is_zero_address(owner):
            raise ConfigurationError("zero_address_owner", "zero address owner")
        if is_zero_address(config.payout_wallet):
            raise ConfigurationError("zero_address_payout_wallet", "zero address payout wallet")

        self.owner = owner
        self.config = config
        self.address = address or next_sale_address()
        self.payout_wallet = config.payout_wallet
        self.ledger = InventoryLedger(
            reference_token=config.reference_token,
            skus_capacity=config.skus_capacity,
            tokens_per_sku_capacity=config.tokens_per_sku_capacity,
        )
        self.state = SaleStateMachine()
        self.stages = stages or self.default_stages()

        self._currencies = dict(currencies)
        self._receivers = dict(receivers or {})
        self._entered = False

    def default_stages(self) -> StagePipeline:
        return default_pipeline()

    # =========================================================================
    # READ
    # =========================================================================

    @property
    def reference_token(self) -> str:
        return self.ledger.reference_token

    @property
    def paused(self) -> bool:
        return self.state.paused

    def get_sku_info(self, sku: bytes) -> Sku:
        return self.ledger.get_sku(sku)

    def get_skus(self) -> tuple[bytes, ...]:
        return self.ledger.sku_keys()

    def currency(self, token: str) -> Currency:
        """
        Raises:
            PaymentError: "unsupported token"
        """
        currency = self._currencies.get(token)
        if currency is None:
            raise PaymentError("unsupported_token", "unsupported token")
        return currency

    def notifications_receiver(self, address: str) -> PurchaseNotificationsReceiver:
        """
        Raises:
            NotificationError: "unknown receiver"
        """
        receiver = self._receivers.get(address)
        if receiver is None:
            raise NotificationError("unknown_receiver", "unknown receiver")
        return receiver

    # =========================================================================
    # ADMINISTRATION
    # =========================================================================

    def _require_owner(self, sender: str) -> None:
        if sender != self.owner:
            raise AccessError("not_the_owner", "not the owner")

    def transfer_ownership(self, new_owner: str, *, sender: str) -> None:
        self._require_owner(sender)
        if is_zero_address(new_owner):
            raise ConfigurationError("zero_address_owner", "zero address owner")
        logger.info("ownership transferred: %s → %s", self.owner, new_owner)
        self.owner = new_owner

    def set_payout_wallet(self, payout_wallet: str, *, sender: str) -> None:
        self._require_owner(sender)
        if is_zero_address(payout_wallet):
            raise ConfigurationError("zero_address_payout_wallet", "zero address payout wallet")
        logger.info("payout wallet set: %s", payout_wallet)
        self.payout_wallet = payout_wallet

    def register_notifications_receiver(
        self, address: str, receiver: PurchaseNotificationsReceiver, *, sender: str
    ) -> None:
        self._require_owner(sender)
        if is_zero_address(address):
            raise ConfigurationError("zero_address_receiver", "zero address receiver")
        self._receivers[address] = receiver

    def start(self, *, sender: str) -> SaleTransitionResult:
        self._require_owner(sender)
        return self.state.start()

    def pause(self, *, sender: str) -> SaleTransitionResult:
        self._require_owner(sender)
        return self.state.pause()

    def unpause(self, *, sender: str) -> SaleTransitionResult:
        self._require_owner(sender)
        return self.state.unpause()

    def create_sku(
        self,
        sku: bytes,
        total_supply: int,
        max_quantity_per_purchase: int,
        notifications_receiver: str | None = None,
        *,
        sender: str,
    ) -> Sku:
        self._require_owner(sender)
        return self.ledger.create_sku(sku, total_supply, max_quantity_per_purchase, notifications_receiver)

    def create_catalog_sku(
        self,
        sku: bytes,
        total_supply: int,
        max_quantity_per_purchase: int,
        notifications_receiver: str | None = None,
        *,
        sender: str,
    ) -> Sku:
        """Создание SKU из записи документа каталога (load_catalog)."""
        return self.create_sku(sku, total_supply, max_quantity_per_purchase, notifications_receiver, sender=sender)

    def update_sku_pricing(
        self,
        sku: bytes,
        tokens: Sequence[str],
        prices: Sequence[int | FixedPrice | OracleConvertedPrice | OracleSwappedPrice],
        *,
        sender: str,
    ) -> Sku:
        self._require_owner(sender)
        return self.ledger.set_token_prices(sku, tokens, prices)

    # =========================================================================
    # PURCHASE ENTRY POINTS
    # =========================================================================

    @contextmanager
    def _non_reentrant(self) -> Iterator[None]:
        if self._entered:
            raise ReentrancyError("reentrant_call", "reentrant call")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False

    def estimate_purchase(
        self,
        recipient: str,
        token: str,
        sku: bytes,
        quantity: int,
        user_data: bytes = b"",
        *,
        sender: str,
    ) -> PurchaseEstimate:
        """VALIDATION + PRICING без изменения состояния."""
        purchase = Purchase(
            purchaser=sender,
            recipient=recipient,
            token=token,
            sku=sku,
            quantity=quantity,
            user_data=user_data,
        )

        with self._non_reentrant():
            for stage in self.stages.estimate_stages():
                stage.run(self, purchase)

        return PurchaseEstimate(
            total_price=purchase.total_price,
            pricing_data=tuple(purchase.pricing_data),
            lifecycle_path=purchase.lifecycle_path,
        )

    def purchase_for(
        self,
        recipient: str,
        token: str,
        sku: bytes,
        quantity: int,
        user_data: bytes = b"",
        *,
        sender: str,
        value: int = 0,
    ) -> PurchaseReceipt:
        """
        Полный pipeline как одна атомарная единица работы.

        Args:
            recipient: получатель покупки
            token: валюта оплаты
            sku: ключ SKU
            quantity: количество
            user_data: непрозрачные данные вызывающего (передаются oracle)
            sender: покупатель
            value: прикреплённая нативная сумма (только для TOKEN_ETH)

        Returns:
            PurchaseReceipt

        Raises:
            SaleError: любой сбой этапа; состояние не изменено
        """
        purchase = Purchase(
            purchaser=sender,
            recipient=recipient,
            token=token,
            sku=sku,
            quantity=quantity,
            user_data=user_data,
            value=value,
        )

        with self._non_reentrant():
            completed: list[Stage] = []
            try:
                for stage in self.stages.purchase_stages():
                    stage.run(self, purchase)
                    completed.append(stage)
            except Exception as e:
                logger.warning("[sku=%s] purchase aborted: %s", sku_name(sku), e)
                self._rollback(purchase, completed)
                raise

        logger.info(
            "[sku=%s] purchased: purchaser=%s recipient=%s token=%s quantity=%d total_price=%d",
            sku_name(sku),
            sender,
            recipient,
            token,
            quantity,
            purchase.total_price,
        )
        return PurchaseReceipt.from_purchase(purchase)

    # =========================================================================
    # SETTLEMENT
    # =========================================================================

    def require_balance(self, token: str, account: str, amount: int) -> None:
        """
        Raises:
            PaymentError: "insufficient funds"
        """
        if self.currency(token).balance_of(account) < amount:
            raise PaymentError("insufficient_funds", "insufficient funds")

    def settle(self, purchase: Purchase, token: str, sender: str, recipient: str, amount: int) -> None:
        """
        Перевод в рамках запроса с записью в журнал.

        Raises:
            PaymentError: "transfer failed"
        """
        if amount == 0:
            return
        currency = self.currency(token)
        try:
            transferred = currency.transfer(sender, recipient, amount)
        except SaleError:
            raise
        except Exception as e:
            raise PaymentError("transfer_failed", f"transfer failed: {e}") from e
        if not transferred:
            raise PaymentError("transfer_failed", "transfer failed")
        purchase.settlements.append(Transfer(token=token, sender=sender, recipient=recipient, amount=amount))

    def record_external_transfer(
        self, purchase: Purchase, token: str, sender: str, recipient: str, amount: int
    ) -> None:
        """Запись в журнал перевода, выполненного участником (например, oracle при свопе)."""
        if amount == 0:
            return
        purchase.settlements.append(Transfer(token=token, sender=sender, recipient=recipient, amount=amount))

    def _rollback(self, purchase: Purchase, completed: list[Stage]) -> None:
        for stage in reversed(completed):
            try:
                stage.compensate(self, purchase)
            except Exception as comp_exc:
                logger.error(
                    "[sku=%s] COMPENSATION FAILED at %s: %s", sku_name(purchase.sku), stage.name(), comp_exc
                )

        while purchase.settlements:
            transfer = purchase.settlements.pop()
            try:
                reverted = self.currency(transfer.token).transfer(
                    transfer.recipient, transfer.sender, transfer.amount
                )
            except Exception as comp_exc:
                reverted = False
                logger.error("[sku=%s] transfer reversal raised: %s", sku_name(purchase.sku), comp_exc)
            if not reverted:
                logger.error(
                    "[sku=%s] COMPENSATION FAILED: transfer %s %s → %s amount=%d not reverted",
                    sku_name(purchase.sku),
                    transfer.token,
                    transfer.sender,
                    transfer.recipient,
                    transfer.amount,
                )
