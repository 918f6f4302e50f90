"""
Core math modules для salekit

Целочисленная fixed-point арифметика uint256 с гарантией отсутствия переполнений.
"""

from salekit.core.math.fixed_point import (
    # Constants
    PRICE_DECIMALS,
    PRICE_SCALE,
    UINT256_MAX,
    # Checks
    is_uint256,
    validate_uint256,
    # Checked arithmetic
    checked_add,
    checked_mul,
    checked_sub,
    mul_div,
    # Oracle conversion
    convert_from_reference,
    convert_to_reference,
    rate_from_amounts,
)

__all__ = [
    # Constants
    "PRICE_DECIMALS",
    "PRICE_SCALE",
    "UINT256_MAX",
    # Checks
    "is_uint256",
    "validate_uint256",
    # Checked arithmetic
    "checked_add",
    "checked_mul",
    "checked_sub",
    "mul_div",
    # Oracle conversion
    "convert_from_reference",
    "convert_to_reference",
    "rate_from_amounts",
]
