"""
Inventory Ledger — каталог SKU, учёт предложения и прайс-листов

Ledger хранит только сконфигурированные значения, включая oracle-маркеры:
решение о цене для oracle-записей принимает этап pricing, поэтому логику
ценообразования можно заменить без миграции данных.

Инварианты:
- Ключ SKU уникален и неизменен; SKU не удаляются
- remaining_supply <= total_supply
- Непустой прайс-лист всегда содержит reference-валюту
- Число SKU и число валют на SKU ограничены ёмкостями, заданными при создании
"""

import logging
from typing import Dict, Sequence

from salekit.core.domain.constants import is_zero_address, sku_name
from salekit.core.domain.sku import (
    FixedPrice,
    OracleConvertedPrice,
    OracleSwappedPrice,
    Sku,
    TokenPrice,
    price_entry_from_value,
)
from salekit.core.errors import ConfigurationError, DeliveryError, PurchaseValidationError
from salekit.core.math.fixed_point import checked_add, is_uint256

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Каталог SKU с ограниченной ёмкостью."""

    def __init__(self, reference_token: str, skus_capacity: int, tokens_per_sku_capacity: int):
        """
        Args:
            reference_token: валюта, обязательная в каждом непустом прайс-листе
            skus_capacity: максимальное число SKU
            tokens_per_sku_capacity: максимальное число валют в прайс-листе SKU
        """
        if is_zero_address(reference_token):
            raise ConfigurationError("zero_address_reference_token", "zero address reference token")
        if skus_capacity <= 0:
            raise ConfigurationError("invalid_capacity", "skus capacity must be positive")
        if tokens_per_sku_capacity <= 0:
            raise ConfigurationError("invalid_capacity", "tokens per sku capacity must be positive")

        self.reference_token = reference_token
        self.skus_capacity = skus_capacity
        self.tokens_per_sku_capacity = tokens_per_sku_capacity

        # dict сохраняет порядок создания SKU
        self._skus: Dict[bytes, Sku] = {}

    # =========================================================================
    # READ
    # =========================================================================

    def contains(self, sku: bytes) -> bool:
        return sku in self._skus

    def get_sku(self, sku: bytes) -> Sku:
        """
        Raises:
            PurchaseValidationError: "non-existent sku"
        """
        record = self._skus.get(sku)
        if record is None:
            raise PurchaseValidationError("non_existent_sku", "non-existent sku")
        return record

    def sku_keys(self) -> tuple[bytes, ...]:
        return tuple(self._skus)

    def __len__(self) -> int:
        return len(self._skus)

    # =========================================================================
    # ADMINISTRATION
    # =========================================================================

    def create_sku(
        self,
        sku: bytes,
        total_supply: int,
        max_quantity_per_purchase: int,
        notifications_receiver: str | None = None,
    ) -> Sku:
        """
        Создание SKU с пустым прайс-листом и remaining_supply = total_supply.

        Raises:
            ConfigurationError: дубликат, превышение ёмкости, нулевое предложение,
                некорректный max_quantity_per_purchase
        """
        if not isinstance(sku, bytes) or not sku:
            raise ConfigurationError("invalid_sku", "invalid sku")
        if not is_uint256(total_supply) or total_supply == 0:
            raise ConfigurationError("zero_supply", "zero supply")
        if (
            not is_uint256(max_quantity_per_purchase)
            or max_quantity_per_purchase == 0
            or max_quantity_per_purchase > total_supply
        ):
            raise ConfigurationError("invalid_quantity", "invalid quantity")
        if sku in self._skus:
            raise ConfigurationError("sku_already_created", "sku already created")
        if len(self._skus) >= self.skus_capacity:
            raise ConfigurationError("too_many_skus", "too many skus")

        record = Sku(
            sku=sku,
            total_supply=total_supply,
            remaining_supply=total_supply,
            max_quantity_per_purchase=max_quantity_per_purchase,
            notifications_receiver=None if is_zero_address(notifications_receiver) else notifications_receiver,
        )
        self._skus[sku] = record

        logger.info(
            "sku created: %s total_supply=%d max_quantity_per_purchase=%d",
            sku_name(sku),
            total_supply,
            max_quantity_per_purchase,
        )
        return record

    def set_token_prices(
        self,
        sku: bytes,
        tokens: Sequence[str],
        prices: Sequence[int | FixedPrice | OracleConvertedPrice | OracleSwappedPrice],
    ) -> Sku:
        """
        Обновление прайс-листа SKU.

        Цена 0 удаляет запись валюты. Новые валюты добавляются в конец,
        существующие обновляются на месте (порядок сохраняется).

        Raises:
            PurchaseValidationError: "non-existent sku"
            ConfigurationError: несовпадение длин, нулевой адрес, ёмкость,
                отсутствие reference-валюты
        """
        record = self.get_sku(sku)

        if len(tokens) != len(prices):
            raise ConfigurationError("lengths_mismatch", "tokens/prices lengths mismatch")

        entries: Dict[str, FixedPrice | OracleConvertedPrice | OracleSwappedPrice] = {
            entry.token: entry.price for entry in record.prices
        }
        for token, price in zip(tokens, prices):
            if is_zero_address(token):
                raise ConfigurationError("zero_address_token", "zero address token")
            if isinstance(price, int):
                try:
                    entry = price_entry_from_value(price)
                except ValueError as e:
                    raise ConfigurationError("invalid_price", str(e)) from e
            else:
                entry = price

            if entry is None:
                entries.pop(token, None)
            else:
                entries[token] = entry

        if len(entries) > self.tokens_per_sku_capacity:
            raise ConfigurationError("too_many_tokens", "too many tokens")
        if entries and self.reference_token not in entries:
            raise ConfigurationError("no_reference_token", "no reference token")

        updated = record.model_copy(
            update={"prices": tuple(TokenPrice(token=t, price=p) for t, p in entries.items())}
        )
        self._skus[sku] = updated

        logger.info("sku prices updated: %s tokens=%d", sku_name(sku), len(entries))
        return updated

    # =========================================================================
    # SUPPLY BOOKKEEPING
    # =========================================================================

    def decrease_remaining_supply(self, sku: bytes, quantity: int) -> Sku:
        """
        Списание остатка этапом delivery. Для неограниченных SKU — no-op.

        Raises:
            DeliveryError: "insufficient supply"
        """
        record = self.get_sku(sku)
        if record.is_unlimited():
            return record
        if quantity > record.remaining_supply:
            raise DeliveryError("insufficient_supply", "insufficient supply")

        updated = record.model_copy(update={"remaining_supply": record.remaining_supply - quantity})
        self._skus[sku] = updated
        return updated

    def restore_remaining_supply(self, sku: bytes, quantity: int) -> Sku:
        """Возврат остатка при откате запроса."""
        record = self.get_sku(sku)
        if record.is_unlimited():
            return record

        restored = min(record.total_supply, record.remaining_supply + quantity)
        updated = record.model_copy(update={"remaining_supply": restored})
        self._skus[sku] = updated
        return updated

    def increase_supply(self, sku: bytes, quantity: int) -> Sku:
        """
        Пополнение предложения: total_supply и remaining_supply растут на quantity.

        Raises:
            ConfigurationError: для неограниченного SKU
            ArithmeticOverflow: при выходе за uint256
        """
        record = self.get_sku(sku)
        if record.is_unlimited():
            raise ConfigurationError("unlimited_supply", "cannot increase unlimited supply")

        updated = record.model_copy(
            update={
                "total_supply": checked_add(record.total_supply, quantity),
                "remaining_supply": checked_add(record.remaining_supply, quantity),
            }
        )
        self._skus[sku] = updated
        return updated
