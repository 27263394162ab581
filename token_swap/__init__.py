"""Token swap core: curve math, fee engine and pool state machine.

Pure integer arithmetic over unsigned token amounts. Callers own balances and
token transfers; this package only decides amounts.
"""

from token_swap.core import (
    FeeResult,
    Fees,
    PoolReserves,
    RoundDirection,
    SwapResult,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)
from token_swap.core.errors import (
    AlreadyInUse,
    ArithmeticOverflow,
    CalculationFailure,
    DivideByZero,
    EmptySupply,
    InvalidCurve,
    InvalidFee,
    InvalidState,
    InvalidTokenIdentity,
    SlippageExceeded,
    SwapError,
    UnsupportedCurveOperation,
    UnsupportedCurveType,
    ZeroTradingTokens,
)
from token_swap.curve import (
    ConstantPriceCurve,
    ConstantProductCurve,
    CurveCalculator,
    CurveType,
    OffsetCurve,
    StableCurve,
    SwapCurve,
)
from token_swap.pool import (
    PoolConfig,
    SwapConstraints,
    SwapPool,
    execute_swap,
)

__version__ = "0.1.0"

__all__ = [
    "AlreadyInUse",
    "ArithmeticOverflow",
    "CalculationFailure",
    "ConstantPriceCurve",
    "ConstantProductCurve",
    "CurveCalculator",
    "CurveType",
    "DivideByZero",
    "EmptySupply",
    "FeeResult",
    "Fees",
    "InvalidCurve",
    "InvalidFee",
    "InvalidState",
    "InvalidTokenIdentity",
    "OffsetCurve",
    "PoolConfig",
    "PoolReserves",
    "RoundDirection",
    "SlippageExceeded",
    "StableCurve",
    "SwapConstraints",
    "SwapCurve",
    "SwapError",
    "SwapPool",
    "SwapResult",
    "SwapWithoutFeesResult",
    "TradeDirection",
    "TradingTokenResult",
    "UnsupportedCurveOperation",
    "UnsupportedCurveType",
    "ZeroTradingTokens",
    "execute_swap",
]
