"""Curve calculator interface that every pricing curve implements."""

from abc import ABC, abstractmethod

from token_swap.core.checked_math import (
    checked_add,
    checked_sub,
    fraction_ceil,
    fraction_floor,
)
from token_swap.core.errors import EmptySupply
from token_swap.core.fees import Fees
from token_swap.core.trade import (
    FeeResult,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)


def round_fraction(
    value: int, numerator: int, denominator: int, round_direction: RoundDirection
) -> int:
    """value * numerator / denominator, rounded in the requested direction."""
    if round_direction is RoundDirection.CEILING:
        return fraction_ceil(value, numerator, denominator)
    return fraction_floor(value, numerator, denominator)


def side_amounts(
    reserve_a: int, reserve_b: int, trade_direction: TradeDirection
) -> tuple[int, int]:
    """Return (reserve on the traded side, reserve on the other side).

    For single-sided operations A_TO_B means token A is deposited or
    withdrawn, B_TO_A means token B is.
    """
    if trade_direction is TradeDirection.A_TO_B:
        return reserve_a, reserve_b
    return reserve_b, reserve_a


class CurveCalculator(ABC):
    """Abstract base class for swap curves.

    A calculator is a pure function set over reserve snapshots: it never
    holds balances and never mutates its inputs. Implementations must be
    conservative, i.e. every rounding decision favors the pool.
    """

    @abstractmethod
    def swap_output(
        self,
        source_amount: int,
        source_reserve: int,
        destination_reserve: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        """Price a fee-free swap of ``source_amount`` into the pool.

        Args:
            source_amount: Net amount of source token offered (fees removed)
            source_reserve: Pool balance of the source token
            destination_reserve: Pool balance of the destination token
            trade_direction: Which token is the source

        Returns:
            The source amount actually swapped and the destination amount out

        Raises:
            ZeroTradingTokens: If the swap would deliver nothing
            CalculationFailure: On overflow or solver failure
        """

    @abstractmethod
    def deposit_single_token_type(
        self,
        source_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        """Pool tokens equivalent to depositing ``source_amount`` of one token."""

    @abstractmethod
    def withdraw_single_token_type_exact_out(
        self,
        destination_amount: int,
        reserve_a: int,
        reserve_b: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        round_direction: RoundDirection,
    ) -> int:
        """Pool tokens equivalent to withdrawing exactly ``destination_amount`` of one token."""

    @abstractmethod
    def normalized_value(self, reserve_a: int, reserve_b: int) -> int:
        """Liquidity measure of a reserve pair, in pool token units."""

    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        reserve_a: int,
        reserve_b: int,
        round_direction: RoundDirection,
    ) -> TradingTokenResult:
        """Convert pool tokens to their proportional share of both reserves.

        Withdrawals pass FLOOR so the pool keeps the remainder; deposits pass
        CEILING so existing holders are never diluted.
        """
        return TradingTokenResult(
            token_a_amount=round_fraction(
                pool_tokens, reserve_a, pool_token_supply, round_direction
            ),
            token_b_amount=round_fraction(
                pool_tokens, reserve_b, pool_token_supply, round_direction
            ),
        )

    def deposit_trade_fee_adjustment(self, source_amount: int, fees: Fees) -> FeeResult:
        """Charge the trade fee on the half of a single-sided deposit that is implicitly swapped."""
        half_source_amount = max(1, source_amount // 2)
        trade_fee = fees.trading_fee(half_source_amount)
        return FeeResult(
            gross_amount=source_amount,
            fee_amount=trade_fee,
            net_amount=checked_sub(source_amount, trade_fee),
        )

    def withdraw_trade_fee_adjustment(self, destination_amount: int, fees: Fees) -> FeeResult:
        """Gross up a single-sided exact-out withdrawal by the implicit trade fee.

        ``gross_amount`` is the amount to value in pool tokens and
        ``net_amount`` is what actually leaves the pool.
        """
        half_destination_amount = max(1, destination_amount // 2)
        trade_fee = fees.trading_fee(half_destination_amount)
        return FeeResult(
            gross_amount=checked_add(destination_amount, trade_fee),
            fee_amount=trade_fee,
            net_amount=destination_amount,
        )

    def new_pool_supply(self, reserve_a: int, reserve_b: int) -> int:
        """Pool tokens minted for the first liquidity in the pool."""
        return self.normalized_value(reserve_a, reserve_b)

    def validate_supply(self, reserve_a: int, reserve_b: int) -> None:
        if reserve_a == 0:
            raise EmptySupply("token A reserve is empty")
        if reserve_b == 0:
            raise EmptySupply("token B reserve is empty")

    def validate(self) -> None:
        """Check the curve parameters; the default curve has none."""

    def allows_deposits(self) -> bool:
        return True
