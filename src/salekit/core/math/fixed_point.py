"""
Fixed Point — безопасная целочисленная арифметика uint256

Модуль обеспечивает арифметику цен, количеств и курсов oracle:
- Все значения — неотрицательные целые в диапазоне [0, UINT256_MAX]
- Курсы oracle — fixed-point с 18 знаками (PRICE_SCALE = 10**18)
- Переполнение и уход в минус никогда не происходят молча (ArithmeticOverflow)
- mul_div считает произведение с полной точностью, ограничивается только результат

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Округление всегда вниз (floor), детерминировано и воспроизводимо
2. Деление на ноль невозможно: нулевой курс отклоняется до деления
3. float никогда не участвует в денежных вычислениях
"""

from typing import Final

from salekit.core.errors import ArithmeticOverflow

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

UINT256_MAX: Final[int] = 2**256 - 1

# Масштаб fixed-point курсов (18 знаков, как у oracle)
PRICE_DECIMALS: Final[int] = 18
PRICE_SCALE: Final[int] = 10**PRICE_DECIMALS


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_uint256(value: object) -> bool:
    """
    Проверка, что значение — целое в диапазоне uint256.

    bool отклоняется явно (bool — подкласс int).
    """
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= UINT256_MAX
    )


def validate_uint256(value: object, name: str) -> int:
    """
    Валидация аргумента uint256.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        value без изменений

    Raises:
        ValueError: Если value не int или вне [0, UINT256_MAX]
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")

    if value > UINT256_MAX:
        raise ValueError(f"{name} must be <= UINT256_MAX, got {value}")

    return value


def _bounded(result: int, operation: str) -> int:
    if result < 0:
        raise ArithmeticOverflow(f"{operation} underflow")
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"{operation} overflow")
    return result


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


def checked_add(a: int, b: int) -> int:
    """a + b с проверкой переполнения uint256."""
    return _bounded(a + b, "addition")


def checked_sub(a: int, b: int) -> int:
    """a - b с проверкой ухода ниже нуля."""
    return _bounded(a - b, "subtraction")


def checked_mul(a: int, b: int) -> int:
    """
    a * b с проверкой переполнения uint256.

    Examples:
        >>> checked_mul(2, 1000)
        2000
        >>> checked_mul(UINT256_MAX, 2)
        Traceback (most recent call last):
        ...
        salekit.core.errors.ArithmeticOverflow: Sale: multiplication overflow
    """
    return _bounded(a * b, "multiplication")


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) с полной точностью промежуточного произведения.

    Промежуточное произведение может превышать uint256; проверяется только
    итоговое значение.

    Args:
        a: Первый множитель
        b: Второй множитель
        denominator: Делитель (строго положительный)

    Returns:
        Округлённое вниз частное

    Raises:
        ValueError: Если denominator <= 0
        ArithmeticOverflow: Если результат не помещается в uint256
    """
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")

    return _bounded((a * b) // denominator, "mul_div")


# =============================================================================
# КОНВЕРСИЯ ПО КУРСУ ORACLE
# =============================================================================


def convert_from_reference(reference_amount: int, rate: int) -> int:
    """
    Сумма в reference-валюте → сумма в валюте оплаты.

    amount = reference_amount * 10^18 / rate

    Args:
        reference_amount: Сумма в reference-валюте
        rate: Курс валюты оплаты к reference-валюте (fixed-point 18)
    """
    return mul_div(reference_amount, PRICE_SCALE, rate)


def convert_to_reference(amount: int, rate: int) -> int:
    """
    Сумма в валюте оплаты → сумма в reference-валюте.

    reference_amount = rate * amount / 10^18
    """
    return mul_div(rate, amount, PRICE_SCALE)


def rate_from_amounts(reference_amount: int, from_amount: int) -> int:
    """
    Курс по паре сумм: сколько reference-единиц даёт одна единица валюты оплаты.

    rate = reference_amount * 10^18 / from_amount
    """
    return mul_div(reference_amount, PRICE_SCALE, from_amount)
