"""Constant price curve: reserve_a + price * reserve_b = k.

Token B is always worth ``token_b_price`` units of token A, so trade size has
no price impact. Selling A only consumes whole multiples of the price.
"""

from dataclasses import dataclass

from token_swap.core.checked_math import (
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    require_u64,
)
from token_swap.core.errors import InvalidCurve, ZeroTradingTokens
from token_swap.core.trade import RoundDirection, SwapWithoutFeesResult, TradeDirection
from token_swap.curve.calculator import CurveCalculator, round_fraction, side_amounts


@dataclass(frozen=True)
class ConstantPriceCurve(CurveCalculator):
    """Fixed exchange rate curve."""
    token_b_price: int

    def swap_output(
        self,
        source_amount: int,
        source_reserve: int,
        destination_reserve: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        if trade_direction is TradeDirection.B_TO_A:
            source_amount_swapped = source_amount
            destination_amount = checked_mul(source_amount, self.token_b_price)
        else:
            destination_amount = checked_div(source_amount, self.token_b_price)
            # The remainder below one unit of B stays with the trader
            source_amount_swapped = checked_mul(destination_amount, self.token_b_price)

        if source_amount_swapped == 0 or destination_amount == 0:
            raise ZeroTradingTokens(
                f"{source_amount} is below the price of one token B ({self.token_b_price})"
            )
        return SwapWithoutFeesResult(
            source_amount_swapped=source_amount_swapped,
            destination_amount_swapped=destination_amount,
        )

    def _token_value(self, amount: int, trade_direction: TradeDirection) -> int:
        """Value of a single-token amount, in token A units."""
        if trade_direction is TradeDirection.A_TO_B:
            return amount
        return checked_mul(amount, self.token_b_price)

    def total_value(self, reserve_a: int, reserve_b: int) -> int:
        return checked_add(reserve_a, checked_mul(reserve_b, self.token_b_price))

    def deposit_single_token_type(
        self,
        source_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        given_value = self._token_value(source_amount, trade_direction)
        return round_fraction(
            pool_supply, given_value, self.total_value(reserve_a, reserve_b), round_direction
        )

    def withdraw_single_token_type_exact_out(
        self,
        destination_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        reserve, _ = side_amounts(reserve_a, reserve_b, trade_direction)
        checked_sub(reserve, destination_amount)  # never more than the reserve holds
        given_value = self._token_value(destination_amount, trade_direction)
        return round_fraction(
            pool_supply, given_value, self.total_value(reserve_a, reserve_b), round_direction
        )

    def normalized_value(self, reserve_a: int, reserve_b: int) -> int:
        return self.total_value(reserve_a, reserve_b) // 2

    def validate(self) -> None:
        try:
            require_u64(self.token_b_price)
        except ArithmeticError as exc:
            raise InvalidCurve(f"token B price must be a u64 integer: {exc}") from exc
        if self.token_b_price == 0:
            raise InvalidCurve("token B price must be non-zero")
