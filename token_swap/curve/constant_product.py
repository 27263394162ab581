"""Constant product curve: reserve_a * reserve_b = k."""

from dataclasses import dataclass
from typing import Final

from token_swap.core.checked_math import (
    U256_MAX,
    checked_add,
    checked_ceil_div,
    checked_mul,
    checked_sqrt,
    checked_sub,
)
from token_swap.core.errors import EmptySupply, ZeroTradingTokens
from token_swap.core.trade import RoundDirection, SwapWithoutFeesResult, TradeDirection
from token_swap.curve.calculator import CurveCalculator, round_fraction, side_amounts

# Fixed-point scale applied before integer square roots
SQRT_PRECISION: Final[int] = 10**12


def swap(
    source_amount: int, source_reserve: int, destination_reserve: int
) -> SwapWithoutFeesResult:
    """Constant product swap without fees.

    new_destination = ceil(k / (source_reserve + source_amount))
    destination_out = destination_reserve - new_destination

    The ceiling keeps the product of the new reserves >= k.
    """
    if source_reserve == 0 or destination_reserve == 0:
        raise EmptySupply("constant product swap needs two non-empty reserves")
    invariant = checked_mul(source_reserve, destination_reserve)
    new_source_reserve = checked_add(source_reserve, source_amount)
    new_destination_reserve = checked_ceil_div(invariant, new_source_reserve)
    destination_amount = checked_sub(destination_reserve, new_destination_reserve)
    if destination_amount == 0:
        raise ZeroTradingTokens(
            f"swap of {source_amount} against ({source_reserve}, {destination_reserve}) "
            "yields nothing"
        )
    return SwapWithoutFeesResult(
        source_amount_swapped=source_amount,
        destination_amount_swapped=destination_amount,
    )


def _sqrt(value: int, round_direction: RoundDirection) -> int:
    root = checked_sqrt(value)
    if round_direction is RoundDirection.CEILING and root * root < value:
        root += 1
    return root


def _opposite(round_direction: RoundDirection) -> RoundDirection:
    if round_direction is RoundDirection.CEILING:
        return RoundDirection.FLOOR
    return RoundDirection.CEILING


def deposit_pool_tokens(
    source_amount: int,
    swap_source_amount: int,
    pool_supply: int,
    round_direction: RoundDirection,
) -> int:
    """Pool tokens for a single-sided deposit: supply * (sqrt(1 + S/R) - 1).

    Computed as supply * (sqrt((R + S) * R) - R) / R with both sides scaled
    by SQRT_PRECISION so the integer root keeps twelve extra digits.
    """
    if swap_source_amount == 0:
        raise EmptySupply("cannot value a deposit against an empty reserve")
    scaled_reserve = checked_mul(swap_source_amount, SQRT_PRECISION)
    radicand = checked_mul(
        checked_mul(
            checked_add(swap_source_amount, source_amount), swap_source_amount, limit=U256_MAX
        ),
        SQRT_PRECISION * SQRT_PRECISION,
        limit=U256_MAX,
    )
    root = _sqrt(radicand, round_direction)
    growth = checked_sub(root, scaled_reserve)
    return round_fraction(pool_supply, growth, scaled_reserve, round_direction)


def withdraw_pool_tokens(
    destination_amount: int,
    swap_destination_amount: int,
    pool_supply: int,
    round_direction: RoundDirection,
) -> int:
    """Pool tokens for a single-sided exact-out withdrawal: supply * (1 - sqrt(1 - S/R)).

    The root is rounded against ``round_direction`` so that rounding the
    burned amount up also rounds the remaining root down.
    """
    if swap_destination_amount == 0:
        raise EmptySupply("cannot withdraw from an empty reserve")
    scaled_reserve = checked_mul(swap_destination_amount, SQRT_PRECISION)
    remaining = checked_sub(swap_destination_amount, destination_amount)
    radicand = checked_mul(
        checked_mul(remaining, swap_destination_amount, limit=U256_MAX),
        SQRT_PRECISION * SQRT_PRECISION,
        limit=U256_MAX,
    )
    root = _sqrt(radicand, _opposite(round_direction))
    shrink = checked_sub(scaled_reserve, min(root, scaled_reserve))
    return round_fraction(pool_supply, shrink, scaled_reserve, round_direction)


@dataclass(frozen=True)
class ConstantProductCurve(CurveCalculator):
    """Classic x * y = k curve."""

    def swap_output(
        self,
        source_amount: int,
        source_reserve: int,
        destination_reserve: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        return swap(source_amount, source_reserve, destination_reserve)

    def deposit_single_token_type(
        self,
        source_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        swap_source_amount, _ = side_amounts(reserve_a, reserve_b, trade_direction)
        return deposit_pool_tokens(source_amount, swap_source_amount, pool_supply, round_direction)

    def withdraw_single_token_type_exact_out(
        self,
        destination_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        swap_destination_amount, _ = side_amounts(reserve_a, reserve_b, trade_direction)
        return withdraw_pool_tokens(
            destination_amount, swap_destination_amount, pool_supply, round_direction
        )

    def normalized_value(self, reserve_a: int, reserve_b: int) -> int:
        return checked_sqrt(checked_mul(reserve_a, reserve_b))
