"""
Тесты для модуля Fixed Point

Проверяет:
1. Проверки диапазона uint256
2. Арифметику с контролем переполнения
3. mul_div с полной точностью промежуточного произведения
4. Конверсию по курсу oracle (18 знаков, округление вниз)
"""

import pytest

from salekit.core.errors import ArithmeticOverflow, SaleError
from salekit.core.math.fixed_point import (
    PRICE_SCALE,
    UINT256_MAX,
    checked_add,
    checked_mul,
    checked_sub,
    convert_from_reference,
    convert_to_reference,
    is_uint256,
    mul_div,
    rate_from_amounts,
    validate_uint256,
)

# =============================================================================
# ПРОВЕРКИ UINT256
# =============================================================================


class TestUint256Checks:
    def test_bounds(self) -> None:
        assert is_uint256(0)
        assert is_uint256(UINT256_MAX)
        assert not is_uint256(-1)
        assert not is_uint256(UINT256_MAX + 1)

    def test_bool_and_float_rejected(self) -> None:
        """bool — подкласс int, но не uint256"""
        assert not is_uint256(True)
        assert not is_uint256(1.0)
        assert not is_uint256("1")

    def test_validate_returns_value(self) -> None:
        assert validate_uint256(42, "quantity") == 42

    @pytest.mark.parametrize(
        "value, message",
        [
            (-1, "non-negative"),
            (UINT256_MAX + 1, "UINT256_MAX"),
            (1.5, "integer"),
            (False, "integer"),
        ],
    )
    def test_validate_rejects(self, value, message) -> None:
        with pytest.raises(ValueError, match=message):
            validate_uint256(value, "quantity")


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


class TestCheckedArithmetic:
    def test_add_at_limit(self) -> None:
        assert checked_add(UINT256_MAX - 1, 1) == UINT256_MAX

    def test_add_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflow, match="addition overflow"):
            checked_add(UINT256_MAX, 1)

    def test_sub_underflow(self) -> None:
        with pytest.raises(ArithmeticOverflow, match="subtraction underflow"):
            checked_sub(1, 2)

    def test_mul_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflow) as exc_info:
            checked_mul(UINT256_MAX, 2)

        assert exc_info.value.reason == "overflow"
        assert str(exc_info.value) == "Sale: multiplication overflow"

    def test_overflow_is_sale_error(self) -> None:
        """Переполнение прерывает запрос как любая ошибка продажи"""
        assert issubclass(ArithmeticOverflow, SaleError)


class TestMulDiv:
    def test_floor_rounding(self) -> None:
        assert mul_div(10, 1, 3) == 3
        assert mul_div(2, 1, 3) == 0

    def test_intermediate_product_may_exceed_uint256(self) -> None:
        assert mul_div(UINT256_MAX, PRICE_SCALE, PRICE_SCALE) == UINT256_MAX

    def test_result_overflow(self) -> None:
        with pytest.raises(ArithmeticOverflow, match="mul_div overflow"):
            mul_div(UINT256_MAX, 2, 1)

    @pytest.mark.parametrize("denominator", [0, -1])
    def test_invalid_denominator(self, denominator) -> None:
        with pytest.raises(ValueError, match="denominator must be positive"):
            mul_div(1, 1, denominator)


# =============================================================================
# КОНВЕРСИЯ ПО КУРСУ
# =============================================================================


class TestOracleConversion:
    def test_convert_from_reference(self) -> None:
        """1000 reference при курсе 2.0 → 500 единиц валюты оплаты"""
        assert convert_from_reference(1000, 2 * PRICE_SCALE) == 500

    def test_convert_from_reference_rounds_down(self) -> None:
        assert convert_from_reference(1000, 3 * PRICE_SCALE) == 333

    def test_convert_to_reference(self) -> None:
        assert convert_to_reference(500, 2 * PRICE_SCALE) == 1000

    def test_rate_from_amounts(self) -> None:
        assert rate_from_amounts(1000, 500) == 2 * PRICE_SCALE
        assert rate_from_amounts(1000, 1000) == PRICE_SCALE

    def test_zero_rate_rejected(self) -> None:
        with pytest.raises(ValueError):
            convert_from_reference(1000, 0)

    def test_round_trip_is_exact_for_divisible_amounts(self) -> None:
        rate = rate_from_amounts(1000, 400)

        assert rate == 2_500_000_000_000_000_000
        assert convert_to_reference(400, rate) == 1000
