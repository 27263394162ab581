"""Core swap components: checked arithmetic, fees, trade records and errors."""

from token_swap.core.fees import Fees
from token_swap.core.trade import (
    FeeResult,
    PoolReserves,
    RoundDirection,
    SwapResult,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)

__all__ = [
    "Fees",
    "FeeResult",
    "PoolReserves",
    "RoundDirection",
    "SwapResult",
    "SwapWithoutFeesResult",
    "TradeDirection",
    "TradingTokenResult",
]
