"""Sequential Inventory — выдача идентификаторов в фиксированном порядке.

Продажа держит упорядоченный список идентификаторов (ненулевые uint256,
например 32-байтовые token id) и курсор: всё, что левее курсора, уже выдано
и неизменяемо; всё, что правее, можно перезаписать только на паузе.

Продажа обслуживает ровно один SKU, его остаток всегда равен числу
невыданных идентификаторов.
"""

import logging
from dataclasses import replace
from typing import List, Mapping, Sequence

from salekit.core.domain.purchase import Purchase
from salekit.core.domain.sku import Sku
from salekit.core.errors import ConfigurationError, DeliveryError
from salekit.core.math.fixed_point import is_uint256
from salekit.interfaces import Currency, PurchaseNotificationsReceiver
from salekit.sale.sale import Sale, SaleConfig
from salekit.sale.stages import DeliveryStage, StagePipeline, default_pipeline

logger = logging.getLogger(__name__)


class SequentialAllocator:
    """Упорядоченный список идентификаторов с курсором выдачи."""

    def __init__(self, items: Sequence[int] = ()):
        self._items: List[int] = []
        self._cursor = 0
        self.append(items)

    @property
    def items(self) -> tuple[int, ...]:
        return tuple(self._items)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def available(self) -> int:
        return len(self._items) - self._cursor

    def __len__(self) -> int:
        return len(self._items)

    def allocate(self, quantity: int) -> list[int]:
        """
        Выдача следующих quantity идентификаторов.

        Raises:
            DeliveryError: "insufficient supply"
        """
        if quantity > self.available:
            raise DeliveryError("insufficient_supply", "insufficient supply")
        allocated = self._items[self._cursor : self._cursor + quantity]
        self._cursor += quantity
        return allocated

    def release(self, quantity: int) -> None:
        """Возврат курсора при откате выдачи."""
        self._cursor = max(0, self._cursor - quantity)

    def append(self, items: Sequence[int]) -> None:
        """
        Raises:
            ConfigurationError: "zero item" / "invalid item"
        """
        self._require_items(items)
        self._items.extend(items)

    def overwrite(self, indexes: Sequence[int], items: Sequence[int]) -> None:
        """
        Перезапись невыданных позиций. Курсор и длина списка не меняются.

        Raises:
            ConfigurationError: "lengths mismatch" / "invalid index" / "zero item"
        """
        if len(indexes) != len(items):
            raise ConfigurationError("lengths_mismatch", "indexes/items lengths mismatch")
        for index in indexes:
            if not is_uint256(index) or index < self._cursor or index >= len(self._items):
                raise ConfigurationError("invalid_index", "invalid index")
        self._require_items(items)

        for index, item in zip(indexes, items):
            self._items[index] = item

    @staticmethod
    def _require_items(items: Sequence[int]) -> None:
        for item in items:
            if not is_uint256(item):
                raise ConfigurationError("invalid_item", "invalid item")
            if item == 0:
                raise ConfigurationError("zero_item", "zero item")


class SequentialDeliveryStage(DeliveryStage):
    """DELIVERY: списание остатка и выдача идентификаторов в delivery_data."""

    def execute(self, sale: "FixedOrderInventorySale", purchase: Purchase) -> None:
        super().execute(sale, purchase)
        try:
            allocated = sale.inventory.allocate(purchase.quantity)
        except DeliveryError:
            super().compensate(sale, purchase)
            raise
        purchase.delivery_data.extend(allocated)

    def compensate(self, sale: "FixedOrderInventorySale", purchase: Purchase) -> None:
        sale.inventory.release(purchase.quantity)
        super().compensate(sale, purchase)


class FixedOrderInventorySale(Sale):
    """Продажа одного SKU с выдачей идентификаторов по порядку."""

    def __init__(
        self,
        owner: str,
        config: SaleConfig,
        currencies: Mapping[str, Currency],
        receivers: Mapping[str, PurchaseNotificationsReceiver] | None = None,
        stages: StagePipeline | None = None,
        address: str | None = None,
    ):
        self.inventory = SequentialAllocator()
        super().__init__(
            owner,
            replace(config, skus_capacity=1),
            currencies,
            receivers=receivers,
            stages=stages,
            address=address,
        )

    def default_stages(self) -> StagePipeline:
        return replace(default_pipeline(), delivery=SequentialDeliveryStage())

    @property
    def inventory_items(self) -> tuple[int, ...]:
        return self.inventory.items

    @property
    def cursor(self) -> int:
        return self.inventory.cursor

    item_index = cursor

    def create_sku(
        self,
        sku: bytes,
        max_quantity_per_purchase: int,
        notifications_receiver: str | None = None,
        *,
        sender: str,
    ) -> Sku:
        """
        Создание единственного SKU; total_supply = число невыданных идентификаторов.

        Raises:
            ConfigurationError: "zero supply" при пустом инвентаре, "too many skus"
        """
        return super().create_sku(
            sku,
            self.inventory.available,
            max_quantity_per_purchase,
            notifications_receiver,
            sender=sender,
        )

    def create_catalog_sku(
        self,
        sku: bytes,
        total_supply: int,
        max_quantity_per_purchase: int,
        notifications_receiver: str | None = None,
        *,
        sender: str,
    ) -> Sku:
        """
        Запись каталога допустима, только если её total_supply совпадает
        с числом невыданных идентификаторов.

        Raises:
            ConfigurationError: "supply mismatch"
        """
        self._require_owner(sender)
        if total_supply != self.inventory.available:
            raise ConfigurationError(
                "supply_mismatch",
                f"supply mismatch: catalog {total_supply}, inventory {self.inventory.available}",
            )
        return self.create_sku(sku, max_quantity_per_purchase, notifications_receiver, sender=sender)

    def add_inventory_items(self, items: Sequence[int], *, sender: str) -> None:
        """Добавление идентификаторов в конец списка; предложение SKU растёт."""
        self._require_owner(sender)
        self.inventory.append(items)

        for sku in self.ledger.sku_keys():
            self.ledger.increase_supply(sku, len(items))

        logger.info("inventory items added: count=%d total=%d", len(items), len(self.inventory))

    def set_inventory_items(self, indexes: Sequence[int], items: Sequence[int], *, sender: str) -> None:
        """
        Перезапись невыданных идентификаторов.

        Raises:
            ConfigurationError: "not paused" / "invalid index" / "zero item"
        """
        self._require_owner(sender)
        if not self.paused:
            raise ConfigurationError("not_paused", "not paused")
        self.inventory.overwrite(indexes, items)

        logger.info("inventory items overwritten: indexes=%s", list(indexes))
