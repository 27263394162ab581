"""Pytest configuration and shared fixtures for swap core tests.

This module provides:
- Pytest markers for test categorization
- Shared fixtures for curves, fee schedules and ledgers
- Seeded random generators for property tests
- Isolation from the production-constraints environment switch
"""

from typing import Callable

import numpy as np
import pytest

from token_swap.core.fees import Fees
from token_swap.curve.base import SwapCurve
from tests.fixtures.pool_fixtures import (
    PoolBalanceProfile,
    PoolLedger,
    create_curve_set,
    create_ledger,
    get_fee_profile,
    get_pool_balance,
)


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "invariant: Curve invariant and conservation property tests"
    )
    config.addinivalue_line(
        "markers", "edge_case: Edge case and stress tests with extreme inputs"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests spanning the pool state machine"
    )
    config.addinivalue_line(
        "markers", "slow: Tests taking more than 5 seconds to run"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location and name."""
    for item in items:
        if "edge_case" in item.nodeid or "edge_case" in item.name:
            item.add_marker(pytest.mark.edge_case)

        if any(keyword in item.nodeid for keyword in ["invariant", "determinism"]):
            item.add_marker(pytest.mark.invariant)

        if "pool_state" in item.nodeid or "constraints" in item.nodeid:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def no_production_constraints(monkeypatch):
    """Keep SwapPool() defaults independent of the caller's environment."""
    monkeypatch.delenv("TOKEN_SWAP_PRODUCTION", raising=False)


# ============================================================================
# Curve and Fee Fixtures
# ============================================================================


@pytest.fixture
def constant_product_curve() -> SwapCurve:
    return SwapCurve.constant_product()


@pytest.fixture
def curve_set() -> list[SwapCurve]:
    """One curve of each type.

    Returns:
        Constant product, constant price (1), stable (amp 100), offset (1_000_000)
    """
    return create_curve_set()


@pytest.fixture
def zero_fees() -> Fees:
    return get_fee_profile("zero")


@pytest.fixture
def standard_fees() -> Fees:
    """25 bps trade, 5 bps owner, 1% owner withdraw, 10% host."""
    return get_fee_profile("standard")


# ============================================================================
# Ledger Fixtures
# ============================================================================


@pytest.fixture
def balanced_ledger(constant_product_curve, standard_fees) -> PoolLedger:
    """Constant product pool with (1_000_000, 1_000_000) reserves and standard fees."""
    reserve_a, reserve_b = get_pool_balance(PoolBalanceProfile.BALANCED)
    return create_ledger(constant_product_curve, reserve_a, reserve_b, standard_fees)


@pytest.fixture
def ledger_factory() -> Callable[..., PoolLedger]:
    """Factory for ledgers with arbitrary curves, reserves and fees.

    Example:
        >>> def test_swap(ledger_factory):
        ...     ledger = ledger_factory(SwapCurve.stable(amp=10), 5000, 5000)
    """
    return create_ledger


# ============================================================================
# Seed Fixtures
# ============================================================================


@pytest.fixture
def fixed_seed() -> int:
    """Fixed random seed for deterministic tests.

    Returns:
        42
    """
    return 42


@pytest.fixture
def random_seeds() -> list[int]:
    """Multiple random seeds for testing consistency across seeds.

    Returns:
        List of 5 seeds: [42, 123, 456, 789, 1337]
    """
    return [42, 123, 456, 789, 1337]


@pytest.fixture
def rng(fixed_seed) -> np.random.Generator:
    return np.random.default_rng(fixed_seed)
