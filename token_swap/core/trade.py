"""Trade data classes."""

from dataclasses import dataclass
from enum import Enum

from token_swap.core.checked_math import require_u64


class TradeDirection(Enum):
    """Which reserve is being sold into the pool."""
    A_TO_B = "a_to_b"  # Trader sells A, receives B
    B_TO_A = "b_to_a"  # Trader sells B, receives A


class RoundDirection(Enum):
    """Rounding applied when converting between pool and trading tokens."""
    FLOOR = "floor"      # Withdrawals: protects the pool
    CEILING = "ceiling"  # Deposits: protects existing holders


@dataclass(frozen=True)
class PoolReserves:
    """Token balances held by the pool, as read by the collaborator."""
    token_a: int
    token_b: int

    def __post_init__(self) -> None:
        require_u64(self.token_a, self.token_b)

    def source_destination(self, direction: TradeDirection) -> tuple[int, int]:
        """Return (source reserve, destination reserve) for a trade direction."""
        if direction is TradeDirection.A_TO_B:
            return self.token_a, self.token_b
        return self.token_b, self.token_a

    @classmethod
    def from_source_destination(
        cls, direction: TradeDirection, source: int, destination: int
    ) -> "PoolReserves":
        if direction is TradeDirection.A_TO_B:
            return cls(token_a=source, token_b=destination)
        return cls(token_a=destination, token_b=source)


@dataclass(frozen=True)
class FeeResult:
    """A fee carved out of a gross amount.

    The split is exact: gross_amount == fee_amount + net_amount.
    """
    gross_amount: int
    fee_amount: int
    net_amount: int

    def __post_init__(self) -> None:
        if self.fee_amount < 0 or self.net_amount < 0:
            raise ValueError(f"fee and net must be >= 0, got {self.fee_amount}, {self.net_amount}")
        if self.fee_amount + self.net_amount != self.gross_amount:
            raise ValueError(
                f"fee ({self.fee_amount}) + net ({self.net_amount}) "
                f"!= gross ({self.gross_amount})"
            )


@dataclass(frozen=True)
class SwapWithoutFeesResult:
    """Raw curve output for a fee-free swap."""
    source_amount_swapped: int
    destination_amount_swapped: int


@dataclass(frozen=True)
class SwapResult:
    """Full breakdown of a swap decided by the engine.

    All fee amounts are denominated in the source token and remain in the
    pool's source reserve. The trade fee is the total; the owner and host
    portions are carved out of it.
    """
    source_amount_swapped: int       # Total source consumed, fees included
    destination_amount_swapped: int  # Amount delivered to the trader
    trade_fee: int
    owner_fee: int
    host_fee: int
    new_source_reserve: int
    new_destination_reserve: int

    @property
    def liquidity_provider_fee(self) -> int:
        """Portion of the trade fee that accrues to liquidity providers."""
        return self.trade_fee - self.owner_fee - self.host_fee


@dataclass(frozen=True)
class TradingTokenResult:
    """Token amounts equivalent to some amount of pool tokens."""
    token_a_amount: int
    token_b_amount: int
