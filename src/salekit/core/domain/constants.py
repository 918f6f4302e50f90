"""
Constants — идентификаторы и зарезервированные значения движка продаж

Адреса счетов, валют и получателей уведомлений — строки.
Ключ SKU — непрозрачные bytes длиной до 32 байт.
"""

from typing import Final

from salekit.core.math.fixed_point import UINT256_MAX

# =============================================================================
# IDENTITIES
# =============================================================================

# Нулевая (null) identity: недопустима как recipient, token, payout wallet
ZERO_ADDRESS: Final[str] = "0x0000000000000000000000000000000000000000"

# Нативная единица расчёта (оплата через прикреплённое value)
TOKEN_ETH: Final[str] = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

SKU_KEY_SIZE: Final[int] = 32


# =============================================================================
# RESERVED VALUES
# =============================================================================

# Неограниченное предложение SKU: остаток не проверяется и не уменьшается
SUPPLY_UNLIMITED: Final[int] = UINT256_MAX

# Маркер "цена определяется через oracle относительно reference-валюты"
PRICE_CONVERT_VIA_ORACLE: Final[int] = UINT256_MAX - 1

# Маркер "оплата свопом в reference-валюту через oracle" (на единицу меньше)
PRICE_SWAP_VIA_ORACLE: Final[int] = PRICE_CONVERT_VIA_ORACLE - 1


def sku_key(name: str) -> bytes:
    """
    Ключ SKU из строки: UTF-8, дополненный нулями справа до 32 байт.

    Raises:
        ValueError: Если строка пустая или длиннее 32 байт в UTF-8
    """
    raw = name.encode("utf-8")
    if not raw:
        raise ValueError("sku name must not be empty")
    if len(raw) > SKU_KEY_SIZE:
        raise ValueError(f"sku name exceeds {SKU_KEY_SIZE} bytes: {name!r}")
    return raw.ljust(SKU_KEY_SIZE, b"\x00")


def sku_name(key: bytes) -> str:
    """Обратное преобразование sku_key (нулевые байты справа отбрасываются)."""
    return key.rstrip(b"\x00").decode("utf-8", errors="replace")


def is_zero_address(address: str | None) -> bool:
    """True для None, пустой строки и ZERO_ADDRESS (без учёта регистра)."""
    return not address or address.lower() == ZERO_ADDRESS
