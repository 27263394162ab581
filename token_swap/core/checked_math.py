"""Checked unsigned integer arithmetic.

Python integers never wrap, so fixed widths are emulated with explicit
bounds. Every helper fails with ArithmeticOverflow or DivideByZero instead of
producing a value outside its unsigned range:

- Token amounts are u64 (``U64_MAX``).
- Products of two amounts are bounded by ``U128_MAX`` (the default limit).
- Multiply-then-divide uses a ``U256_MAX`` intermediate, so the product of
  two u128 values never overflows before the division.
"""

import math
from typing import Final

from token_swap.core.errors import ArithmeticOverflow, DivideByZero

U64_MAX: Final[int] = 2**64 - 1
U128_MAX: Final[int] = 2**128 - 1
U256_MAX: Final[int] = 2**256 - 1


# =============================================================================
# Range guards
# =============================================================================


def _require_unsigned(*values: int) -> None:
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        if value < 0:
            raise ArithmeticOverflow(f"negative operand: {value}")


def _bounded(value: int, limit: int) -> int:
    if value > limit:
        raise ArithmeticOverflow(f"{value} exceeds limit {limit}")
    return value


def require_u64(*values: int) -> None:
    """Validate that every value is a token amount (0 <= value <= U64_MAX)."""
    _require_unsigned(*values)
    for value in values:
        _bounded(value, U64_MAX)


def to_u64(value: int) -> int:
    """Narrow a wide intermediate back to a token amount."""
    _require_unsigned(value)
    return _bounded(value, U64_MAX)


# =============================================================================
# Primitive operations
# =============================================================================


def checked_add(a: int, b: int, limit: int = U128_MAX) -> int:
    _require_unsigned(a, b)
    return _bounded(a + b, limit)


def checked_sub(a: int, b: int) -> int:
    _require_unsigned(a, b)
    if b > a:
        raise ArithmeticOverflow(f"subtraction underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int, limit: int = U128_MAX) -> int:
    _require_unsigned(a, b)
    return _bounded(a * b, limit)


def checked_div(a: int, b: int) -> int:
    """Floor division that refuses a zero divisor."""
    _require_unsigned(a, b)
    if b == 0:
        raise DivideByZero(f"division of {a} by zero")
    return a // b


def checked_ceil_div(a: int, b: int) -> int:
    """Ceiling division that refuses a zero divisor."""
    _require_unsigned(a, b)
    if b == 0:
        raise DivideByZero(f"division of {a} by zero")
    return -(-a // b)


def checked_pow(base: int, exponent: int, limit: int = U256_MAX) -> int:
    _require_unsigned(base, exponent)
    result = 1
    for _ in range(exponent):
        result = _bounded(result * base, limit)
    return result


def checked_sqrt(value: int) -> int:
    """Integer square root, rounded down."""
    _require_unsigned(value)
    return math.isqrt(value)


# =============================================================================
# Fractional arithmetic
# =============================================================================


def fraction_floor(value: int, numerator: int, denominator: int, limit: int = U128_MAX) -> int:
    """Compute floor(value * numerator / denominator).

    The product is held in a double-width (u256) intermediate, so only the
    final quotient is checked against ``limit``.

    Raises:
        DivideByZero: If denominator is zero.
        ArithmeticOverflow: If the product or the quotient is out of range.
    """
    product = checked_mul(value, numerator, limit=U256_MAX)
    return _bounded(checked_div(product, denominator), limit)


def fraction_ceil(value: int, numerator: int, denominator: int, limit: int = U128_MAX) -> int:
    """Compute ceil(value * numerator / denominator); see fraction_floor."""
    product = checked_mul(value, numerator, limit=U256_MAX)
    return _bounded(checked_ceil_div(product, denominator), limit)
