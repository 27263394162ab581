"""Offset curve: (reserve_a + offset) * reserve_b = k.

A virtual, non-withdrawable amount of token A is added to the real A reserve
so a pool can be seeded with token B only and still quote a price. Deposits
are not supported: the virtual reserve would be given away to depositors.
"""

from dataclasses import dataclass

from token_swap.core.checked_math import (
    checked_add,
    checked_mul,
    checked_sqrt,
    checked_sub,
    require_u64,
)
from token_swap.core.errors import EmptySupply, InvalidCurve
from token_swap.core.trade import RoundDirection, SwapWithoutFeesResult, TradeDirection
from token_swap.curve.calculator import CurveCalculator
from token_swap.curve.constant_product import deposit_pool_tokens, swap, withdraw_pool_tokens


@dataclass(frozen=True)
class OffsetCurve(CurveCalculator):
    """Constant product curve over a virtually offset token A reserve."""
    token_a_offset: int

    def _virtual_a(self, reserve_a: int) -> int:
        return checked_add(reserve_a, self.token_a_offset)

    def swap_output(
        self,
        source_amount: int,
        source_reserve: int,
        destination_reserve: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        if trade_direction is TradeDirection.A_TO_B:
            source_reserve = self._virtual_a(source_reserve)
        else:
            destination_reserve = self._virtual_a(destination_reserve)
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
        if trade_direction is TradeDirection.A_TO_B:
            swap_source_amount = self._virtual_a(reserve_a)
        else:
            swap_source_amount = reserve_b
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
        if trade_direction is TradeDirection.A_TO_B:
            checked_sub(reserve_a, destination_amount)  # the offset itself is never paid out
            swap_destination_amount = self._virtual_a(reserve_a)
        else:
            swap_destination_amount = reserve_b
        return withdraw_pool_tokens(
            destination_amount, swap_destination_amount, pool_supply, round_direction
        )

    def normalized_value(self, reserve_a: int, reserve_b: int) -> int:
        return checked_sqrt(checked_mul(self._virtual_a(reserve_a), reserve_b))

    def validate_supply(self, reserve_a: int, reserve_b: int) -> None:
        # Token A may be entirely virtual
        if reserve_b == 0:
            raise EmptySupply("token B reserve is empty")

    def validate(self) -> None:
        try:
            require_u64(self.token_a_offset)
        except ArithmeticError as exc:
            raise InvalidCurve(f"token A offset must be a u64 integer: {exc}") from exc
        if self.token_a_offset == 0:
            raise InvalidCurve("token A offset must be non-zero")

    def allows_deposits(self) -> bool:
        return False
