"""
Catalog Loader — создание SKU и прайс-листов из документа каталога

Документ проверяется контрактом catalog (JSON Schema) и затем целиком
разбирается до первого изменения продажи: ошибка формата не оставляет
частично загруженный каталог. Ошибки ledger (дубликат, ёмкость) при
применении прерывают загрузку на соответствующем SKU.

Формат:
    {"skus": [{"sku": "name", "total_supply": 10 | "unlimited",
               "max_quantity_per_purchase": 2,
               "notifications_receiver": "0x..." | null,
               "prices": {"<token>": 1000 | "oracle" | "swap"}}]}

Числа uint256 допускаются как JSON integer или десятичная строка.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from jsonschema import ValidationError

from salekit.core.contracts import validate_catalog
from salekit.core.domain.constants import (
    PRICE_CONVERT_VIA_ORACLE,
    PRICE_SWAP_VIA_ORACLE,
    SUPPLY_UNLIMITED,
    sku_key,
    sku_name,
)
from salekit.core.domain.sku import Sku
from salekit.core.errors import ConfigurationError
from salekit.core.math.fixed_point import is_uint256

if TYPE_CHECKING:
    from salekit.sale.sale import Sale

logger = logging.getLogger(__name__)

PRICE_KEYWORDS = {
    "oracle": PRICE_CONVERT_VIA_ORACLE,
    "swap": PRICE_SWAP_VIA_ORACLE,
}


@dataclass(frozen=True)
class CatalogEntry:
    """Разобранная запись каталога."""

    sku: bytes
    total_supply: int
    max_quantity_per_purchase: int
    notifications_receiver: str | None
    tokens: tuple[str, ...]
    prices: tuple[int, ...]


def _uint256(value: Any, field: str) -> int:
    number = int(value)
    if not is_uint256(number):
        raise ConfigurationError("invalid_catalog", f"invalid catalog: {field} out of uint256 range")
    return number


def parse_catalog(document: Mapping[str, Any]) -> list[CatalogEntry]:
    """
    Raises:
        ConfigurationError: "invalid catalog"
    """
    try:
        validate_catalog(document)
    except ValidationError as e:
        raise ConfigurationError("invalid_catalog", f"invalid catalog: {e.message}") from e

    entries = []
    for item in document["skus"]:
        try:
            key = sku_key(item["sku"])
        except ValueError as e:
            raise ConfigurationError("invalid_catalog", f"invalid catalog: {e}") from e

        total_supply = item["total_supply"]
        prices = item.get("prices", {})
        entries.append(
            CatalogEntry(
                sku=key,
                total_supply=SUPPLY_UNLIMITED
                if total_supply == "unlimited"
                else _uint256(total_supply, "total_supply"),
                max_quantity_per_purchase=_uint256(
                    item["max_quantity_per_purchase"], "max_quantity_per_purchase"
                ),
                notifications_receiver=item.get("notifications_receiver"),
                tokens=tuple(prices),
                prices=tuple(
                    PRICE_KEYWORDS[price] if price in PRICE_KEYWORDS else _uint256(price, "price")
                    for price in prices.values()
                ),
            )
        )
    return entries


def load_catalog(sale: "Sale", document: Mapping[str, Any], *, sender: str) -> list[Sku]:
    """
    Загрузка каталога в продажу от имени владельца.

    Returns:
        Созданные SKU (с прайс-листами) в порядке документа

    Raises:
        ConfigurationError: "invalid catalog" и ошибки ledger
        AccessError: "not the owner"
    """
    created = []
    for entry in parse_catalog(document):
        record = sale.create_catalog_sku(
            entry.sku,
            entry.total_supply,
            entry.max_quantity_per_purchase,
            entry.notifications_receiver,
            sender=sender,
        )
        if entry.tokens:
            record = sale.update_sku_pricing(entry.sku, entry.tokens, entry.prices, sender=sender)
        created.append(record)

    logger.info("catalog loaded: %s", ", ".join(sku_name(record.sku) for record in created))
    return created
