"""
Sku — Модель позиции каталога и её прайс-листа

Immutable Pydantic модели. Любое изменение SKU (остаток, прайс-лист)
создаёт новый экземпляр через model_copy.

Прайс-лист — упорядоченный кортеж пар (token, price) в порядке добавления,
не более одной записи на валюту. Запись цены — размеченное объединение:
- FixedPrice(amount): фиксированная цена за единицу
- OracleConvertedPrice: цена пересчитывается по курсу oracle из reference-цены
- OracleSwappedPrice: оплата свопом в reference-валюту через oracle
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from salekit.core.domain.constants import (
    PRICE_CONVERT_VIA_ORACLE,
    PRICE_SWAP_VIA_ORACLE,
    SKU_KEY_SIZE,
    SUPPLY_UNLIMITED,
    sku_name,
)
from salekit.core.math.fixed_point import UINT256_MAX, validate_uint256


# =============================================================================
# PRICE ENTRIES
# =============================================================================


class FixedPrice(BaseModel):
    """Фиксированная цена за единицу в валюте записи."""

    kind: Literal["fixed"] = "fixed"
    amount: int = Field(..., gt=0, le=UINT256_MAX, description="Цена за единицу")

    model_config = {"frozen": True}


class OracleConvertedPrice(BaseModel):
    """Цена определяется курсом oracle относительно reference-цены."""

    kind: Literal["oracle_converted"] = "oracle_converted"

    model_config = {"frozen": True}


class OracleSwappedPrice(BaseModel):
    """Оплата конвертируется свопом в reference-валюту."""

    kind: Literal["oracle_swapped"] = "oracle_swapped"

    model_config = {"frozen": True}


PriceEntry = Annotated[
    Union[FixedPrice, OracleConvertedPrice, OracleSwappedPrice],
    Field(discriminator="kind"),
]


def price_entry_from_value(value: int) -> FixedPrice | OracleConvertedPrice | OracleSwappedPrice | None:
    """
    Числовое значение цены → запись прайс-листа.

    - 0 → None (удаление записи)
    - PRICE_CONVERT_VIA_ORACLE → OracleConvertedPrice
    - PRICE_SWAP_VIA_ORACLE → OracleSwappedPrice
    - иначе → FixedPrice(value)

    Raises:
        ValueError: Если value не uint256
    """
    validate_uint256(value, "price")

    if value == 0:
        return None
    if value == PRICE_CONVERT_VIA_ORACLE:
        return OracleConvertedPrice()
    if value == PRICE_SWAP_VIA_ORACLE:
        return OracleSwappedPrice()
    return FixedPrice(amount=value)


def price_entry_to_value(entry: FixedPrice | OracleConvertedPrice | OracleSwappedPrice) -> int:
    """Обратное преобразование: запись → числовое значение (маркер для oracle)."""
    if isinstance(entry, OracleConvertedPrice):
        return PRICE_CONVERT_VIA_ORACLE
    if isinstance(entry, OracleSwappedPrice):
        return PRICE_SWAP_VIA_ORACLE
    return entry.amount


class TokenPrice(BaseModel):
    """Запись прайс-листа: валюта и цена за единицу."""

    token: str = Field(..., min_length=1, description="Идентификатор валюты")
    price: PriceEntry

    model_config = {"frozen": True}


# =============================================================================
# SKU MODEL
# =============================================================================


class Sku(BaseModel):
    """
    Модель позиции каталога.

    Ключ неизменен после создания. Остаток уменьшается только этапом delivery.
    SUPPLY_UNLIMITED в total_supply означает неограниченное предложение.
    """

    sku: bytes = Field(..., min_length=1, max_length=SKU_KEY_SIZE, description="Ключ SKU")
    total_supply: int = Field(..., gt=0, le=UINT256_MAX, description="Общее предложение")
    remaining_supply: int = Field(..., ge=0, le=UINT256_MAX, description="Остаток")
    max_quantity_per_purchase: int = Field(
        ..., gt=0, le=UINT256_MAX, description="Максимум единиц в одной покупке"
    )
    notifications_receiver: str | None = Field(
        None, description="Адрес получателя уведомлений (None — без уведомлений)"
    )
    prices: tuple[TokenPrice, ...] = Field(default=(), description="Прайс-лист")

    model_config = {"frozen": True}

    @field_validator("remaining_supply")
    @classmethod
    def validate_remaining_within_total(cls, v: int, info) -> int:
        """Проверка remaining_supply <= total_supply"""
        if "total_supply" in info.data:
            total = info.data["total_supply"]
            if v > total:
                raise ValueError(f"remaining_supply {v} exceeds total_supply {total}")
        return v

    @field_validator("prices")
    @classmethod
    def validate_unique_tokens(cls, v: tuple[TokenPrice, ...]) -> tuple[TokenPrice, ...]:
        """Не более одной записи на валюту"""
        tokens = [entry.token for entry in v]
        if len(tokens) != len(set(tokens)):
            raise ValueError("prices contain duplicate tokens")
        return v

    @property
    def name(self) -> str:
        return sku_name(self.sku)

    def is_unlimited(self) -> bool:
        return self.total_supply == SUPPLY_UNLIMITED

    def tokens(self) -> tuple[str, ...]:
        return tuple(entry.token for entry in self.prices)

    def price_for(self, token: str) -> FixedPrice | OracleConvertedPrice | OracleSwappedPrice | None:
        """Запись цены для валюты или None, если валюта не котируется."""
        for entry in self.prices:
            if entry.token == token:
                return entry.price
        return None
