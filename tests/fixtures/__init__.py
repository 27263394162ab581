"""Test fixtures for swap core testing."""

from tests.fixtures.pool_fixtures import (
    POOL_MINT,
    TOKEN_A,
    TOKEN_B,
    PoolBalanceProfile,
    PoolLedger,
    PoolSnapshot,
    create_config,
    create_curve_set,
    create_ledger,
    get_fee_profile,
    get_pool_balance,
    random_amount,
    snapshot_ledger,
)

__all__ = [
    "POOL_MINT",
    "TOKEN_A",
    "TOKEN_B",
    "PoolBalanceProfile",
    "PoolLedger",
    "PoolSnapshot",
    "create_config",
    "create_curve_set",
    "create_ledger",
    "get_fee_profile",
    "get_pool_balance",
    "random_amount",
    "snapshot_ledger",
]
