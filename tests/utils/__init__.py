"""Test utilities for swap core verification."""

from tests.utils.invariant_checks import (
    curve_value,
    verify_fee_decomposition,
    verify_invariant_not_decreased,
    verify_pool_token_value_not_diluted,
    verify_swap_conservation,
)

__all__ = [
    "curve_value",
    "verify_fee_decomposition",
    "verify_invariant_not_decreased",
    "verify_pool_token_value_not_diluted",
    "verify_swap_conservation",
]
