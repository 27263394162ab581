"""Pool configuration, swap engine and lifecycle state machine."""

from token_swap.pool.config import (
    PRODUCTION_CONSTRAINTS,
    PoolConfig,
    SwapConstraints,
    resolve_swap_constraints,
)
from token_swap.pool.engine import execute_swap
from token_swap.pool.state import (
    DepositAllRequest,
    DepositOutcome,
    DepositSingleRequest,
    InitializeOutcome,
    PoolStatus,
    SwapOutcome,
    SwapPool,
    SwapRequest,
    WithdrawAllRequest,
    WithdrawOutcome,
    WithdrawSingleRequest,
)

__all__ = [
    "PRODUCTION_CONSTRAINTS",
    "DepositAllRequest",
    "DepositOutcome",
    "DepositSingleRequest",
    "InitializeOutcome",
    "PoolConfig",
    "PoolStatus",
    "SwapConstraints",
    "SwapOutcome",
    "SwapPool",
    "SwapRequest",
    "WithdrawAllRequest",
    "WithdrawOutcome",
    "WithdrawSingleRequest",
    "execute_swap",
    "resolve_swap_constraints",
]
