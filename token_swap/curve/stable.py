"""StableSwap curve for two tokens.

Invariant (n = 2 coins, leverage L = amp * n):

    L * (x + y) + D = L * D + D**3 / (4 * x * y)

D is solved with Newton's method starting from x + y, and the destination
reserve after a trade is solved from

    y**2 + (b - D) * y = c,  b = x' + D / L,  c = D**3 / (4 * x' * L)

Both solvers stop once successive iterates differ by at most 1 and give up
after STABLE_MAX_ITERATIONS rounds with CalculationFailure.
"""

import logging
from dataclasses import dataclass
from typing import Final

from token_swap.core.checked_math import (
    U256_MAX,
    checked_add,
    checked_div,
    checked_mul,
    checked_pow,
    checked_sub,
    require_u64,
)
from token_swap.core.errors import CalculationFailure, InvalidCurve, ZeroTradingTokens
from token_swap.core.trade import RoundDirection, SwapWithoutFeesResult, TradeDirection
from token_swap.curve.calculator import CurveCalculator, round_fraction

logger = logging.getLogger(__name__)

N_COINS: Final[int] = 2
N_COINS_SQUARED: Final[int] = 4
MIN_AMP: Final[int] = 1
MAX_AMP: Final[int] = 1_000_000
STABLE_MAX_ITERATIONS: Final[int] = 32


def _converged(current: int, previous: int) -> bool:
    return abs(current - previous) <= 1


def compute_d(leverage: int, amount_a: int, amount_b: int) -> int:
    """Solve the StableSwap invariant D for the given reserves.

    Raises:
        CalculationFailure: If Newton's method does not converge
    """
    amount_sum = checked_add(amount_a, amount_b)
    if amount_sum == 0:
        return 0

    d = amount_sum
    for _ in range(STABLE_MAX_ITERATIONS):
        d_product = checked_div(
            checked_mul(d, d, limit=U256_MAX), checked_mul(amount_a, N_COINS)
        )
        d_product = checked_div(
            checked_mul(d_product, d, limit=U256_MAX), checked_mul(amount_b, N_COINS)
        )
        d_previous = d
        numerator = checked_mul(
            checked_add(
                checked_mul(leverage, amount_sum, limit=U256_MAX),
                checked_mul(d_product, N_COINS, limit=U256_MAX),
                limit=U256_MAX,
            ),
            d,
            limit=U256_MAX,
        )
        denominator = checked_add(
            checked_mul(leverage - 1, d, limit=U256_MAX),
            checked_mul(d_product, N_COINS + 1, limit=U256_MAX),
            limit=U256_MAX,
        )
        d = checked_div(numerator, denominator)
        if _converged(d, d_previous):
            return d

    logger.warning(
        "invariant solver did not converge: leverage=%d reserves=(%d, %d) last_d=%d",
        leverage, amount_a, amount_b, d,
    )
    raise CalculationFailure(
        f"D did not converge within {STABLE_MAX_ITERATIONS} iterations"
    )


def compute_new_destination_amount(leverage: int, new_source_amount: int, d: int) -> int:
    """Solve the destination reserve that keeps D constant after a trade.

    Raises:
        CalculationFailure: If Newton's method does not converge
    """
    c = checked_div(
        checked_pow(d, N_COINS + 1),
        checked_mul(checked_mul(new_source_amount, N_COINS_SQUARED), leverage, limit=U256_MAX),
    )
    b = checked_add(new_source_amount, checked_div(d, leverage), limit=U256_MAX)

    y = d
    for _ in range(STABLE_MAX_ITERATIONS):
        y_previous = y
        numerator = checked_add(checked_mul(y, y, limit=U256_MAX), c, limit=U256_MAX)
        denominator = checked_sub(
            checked_add(checked_mul(y, 2, limit=U256_MAX), b, limit=U256_MAX), d
        )
        y = checked_div(numerator, denominator)
        if _converged(y, y_previous):
            return y

    logger.warning(
        "destination solver did not converge: leverage=%d new_source=%d d=%d last_y=%d",
        leverage, new_source_amount, d, y,
    )
    raise CalculationFailure(
        f"destination reserve did not converge within {STABLE_MAX_ITERATIONS} iterations"
    )


@dataclass(frozen=True)
class StableCurve(CurveCalculator):
    """Amplified constant-sum/constant-product hybrid."""
    amp: int

    @property
    def leverage(self) -> int:
        return self.amp * N_COINS

    def swap_output(
        self,
        source_amount: int,
        source_reserve: int,
        destination_reserve: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        new_source_reserve = checked_add(source_reserve, source_amount)
        d = compute_d(self.leverage, source_reserve, destination_reserve)
        # Round the solved reserve up by one so the trader never gains from truncation
        new_destination_reserve = checked_add(
            compute_new_destination_amount(self.leverage, new_source_reserve, d), 1
        )
        if new_destination_reserve >= destination_reserve:
            raise ZeroTradingTokens(
                f"swap of {source_amount} against ({source_reserve}, {destination_reserve}) "
                "yields nothing"
            )
        return SwapWithoutFeesResult(
            source_amount_swapped=source_amount,
            destination_amount_swapped=destination_reserve - new_destination_reserve,
        )

    def _invariant_change(
        self,
        amount: int,
        reserve_a: int,
        reserve_b: int,
        trade_direction: TradeDirection,
        deposit: bool,
    ) -> tuple[int, int]:
        """Return (|D1 - D0|, D0) for adding or removing ``amount`` on one side."""
        d0 = compute_d(self.leverage, reserve_a, reserve_b)
        adjust = checked_add if deposit else checked_sub
        if trade_direction is TradeDirection.A_TO_B:
            d1 = compute_d(self.leverage, adjust(reserve_a, amount), reserve_b)
        else:
            d1 = compute_d(self.leverage, reserve_a, adjust(reserve_b, amount))
        if deposit:
            return checked_sub(d1, d0), d0
        return checked_sub(d0, d1), d0

    def deposit_single_token_type(
        self,
        source_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        diff, d0 = self._invariant_change(
            source_amount, reserve_a, reserve_b, trade_direction, deposit=True
        )
        return round_fraction(pool_supply, diff, d0, round_direction)

    def withdraw_single_token_type_exact_out(
        self,
        destination_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        diff, d0 = self._invariant_change(
            destination_amount, reserve_a, reserve_b, trade_direction, deposit=False
        )
        return round_fraction(pool_supply, diff, d0, round_direction)

    def normalized_value(self, reserve_a: int, reserve_b: int) -> int:
        return compute_d(self.leverage, reserve_a, reserve_b) // 2

    def validate(self) -> None:
        try:
            require_u64(self.amp)
        except ArithmeticError as exc:
            raise InvalidCurve(f"amplification must be a u64 integer: {exc}") from exc
        if not MIN_AMP <= self.amp <= MAX_AMP:
            raise InvalidCurve(f"amplification must be in [{MIN_AMP}, {MAX_AMP}], got {self.amp}")
