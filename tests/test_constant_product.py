"""Tests for the constant product curve."""

import pytest

from token_swap.core.checked_math import U64_MAX
from token_swap.core.errors import ArithmeticOverflow, EmptySupply, ZeroTradingTokens
from token_swap.core.trade import RoundDirection, TradeDirection, TradingTokenResult
from token_swap.curve.constant_product import (
    ConstantProductCurve,
    deposit_pool_tokens,
    swap,
    withdraw_pool_tokens,
)


class TestSwap:

    def test_balanced_pool(self):
        result = swap(100, 1000, 1000)
        assert result.source_amount_swapped == 100
        # ceil(1_000_000 / 1100) = 910
        assert result.destination_amount_swapped == 90

    def test_direction_does_not_change_math(self):
        curve = ConstantProductCurve()
        a_to_b = curve.swap_output(5000, 200_000, 800_000, TradeDirection.A_TO_B)
        b_to_a = curve.swap_output(5000, 200_000, 800_000, TradeDirection.B_TO_A)
        assert a_to_b == b_to_a

    @pytest.mark.parametrize("amount", [2, 10, 333, 5000, 999_999, 10**9])
    def test_invariant_never_decreases(self, amount):
        source_reserve, destination_reserve = 1_000_000, 3_000_000
        result = swap(amount, source_reserve, destination_reserve)
        new_product = (source_reserve + amount) * (
            destination_reserve - result.destination_amount_swapped
        )
        assert new_product >= source_reserve * destination_reserve
        assert result.destination_amount_swapped < destination_reserve

    def test_tiny_swap_yields_nothing(self):
        # ceil(1_000_000 / 1001) == 1000, so nothing leaves the pool
        with pytest.raises(ZeroTradingTokens):
            swap(1, 1000, 1000)

    @pytest.mark.parametrize("reserves", [(0, 1000), (1000, 0)])
    def test_empty_reserve(self, reserves):
        with pytest.raises(EmptySupply):
            swap(100, *reserves)

    def test_price_impact_grows_with_size(self):
        previous_output = 0
        previous_rate = None
        for amount in [1_000, 2_000, 4_000, 8_000, 16_000]:
            output = swap(amount, 1_000_000, 1_000_000).destination_amount_swapped
            rate = output / amount
            assert output > previous_output
            if previous_rate is not None:
                assert rate <= previous_rate
            previous_output, previous_rate = output, rate

    @pytest.mark.parametrize(
        "source_reserve, destination_reserve",
        [
            (1_000, 1_000),
            (10**6, 10**12),
            (10**12, 10**6),
            (U64_MAX // 2, U64_MAX // 2),
        ],
    )
    def test_output_monotonic_up_to_u64(self, rng, source_reserve, destination_reserve):
        """Larger inputs never deliver less, and never the whole destination reserve.

        Two inputs must deliver different amounts once k / (s + in) moves by
        at least one whole unit; below that, ceiling division may tie them.
        """
        largest = U64_MAX - source_reserve
        exponents = rng.uniform(0.0, 64.0, size=300)
        amounts = {min(int(2.0 ** float(exponent)), largest) for exponent in exponents}
        amounts.update({1, largest - 1_000, largest - 1, largest})
        invariant = source_reserve * destination_reserve

        previous_amount, previous_output = None, 0
        for amount in sorted(amounts):
            try:
                result = swap(amount, source_reserve, destination_reserve)
                output = result.destination_amount_swapped
            except ZeroTradingTokens:
                output = 0
            assert output < destination_reserve
            assert output >= previous_output
            if previous_amount is not None:
                gap = invariant * (amount - previous_amount)
                if gap >= (source_reserve + previous_amount) * (source_reserve + amount):
                    assert output > previous_output
            previous_amount, previous_output = amount, output


class TestSingleSidedValuation:

    def test_deposit_exact_root(self):
        # sqrt(1 + 3000 / 1000) - 1 == 1, so the whole supply is minted
        assert deposit_pool_tokens(3000, 1000, 500, RoundDirection.FLOOR) == 500
        assert deposit_pool_tokens(3000, 1000, 500, RoundDirection.CEILING) == 500

    def test_deposit_rounding(self):
        # 1000 * (sqrt(1.021) - 1) ~= 10.445
        assert deposit_pool_tokens(21, 1000, 1000, RoundDirection.FLOOR) == 10
        assert deposit_pool_tokens(21, 1000, 1000, RoundDirection.CEILING) == 11

    def test_withdraw_exact_root(self):
        # 1 - sqrt(1 - 750 / 1000) == 0.5
        assert withdraw_pool_tokens(750, 1000, 500, RoundDirection.FLOOR) == 250
        assert withdraw_pool_tokens(750, 1000, 500, RoundDirection.CEILING) == 250

    def test_withdraw_whole_reserve_costs_whole_supply(self):
        assert withdraw_pool_tokens(1000, 1000, 500, RoundDirection.CEILING) == 500

    def test_withdraw_more_than_reserve(self):
        with pytest.raises(ArithmeticOverflow):
            withdraw_pool_tokens(1001, 1000, 500, RoundDirection.CEILING)

    def test_empty_side_rejected(self):
        with pytest.raises(EmptySupply):
            deposit_pool_tokens(10, 0, 500, RoundDirection.FLOOR)

    @pytest.mark.parametrize("amount", [1, 17, 4_321, 250_000])
    def test_ceiling_never_below_floor(self, amount):
        curve = ConstantProductCurve()
        for direction in TradeDirection:
            deposit_floor = curve.deposit_single_token_type(
                amount, 1_000_000, 2_000_000, 1_414_213, direction, RoundDirection.FLOOR
            )
            deposit_ceiling = curve.deposit_single_token_type(
                amount, 1_000_000, 2_000_000, 1_414_213, direction, RoundDirection.CEILING
            )
            withdraw_floor = curve.withdraw_single_token_type_exact_out(
                amount, 1_000_000, 2_000_000, 1_414_213, direction, RoundDirection.FLOOR
            )
            withdraw_ceiling = curve.withdraw_single_token_type_exact_out(
                amount, 1_000_000, 2_000_000, 1_414_213, direction, RoundDirection.CEILING
            )
            assert deposit_ceiling >= deposit_floor
            assert withdraw_ceiling >= withdraw_floor
            # Withdrawing exactly what a deposit adds costs at least what it minted
            assert withdraw_ceiling >= deposit_floor


class TestProportionalConversion:

    def test_pool_tokens_to_trading_tokens(self):
        curve = ConstantProductCurve()
        assert curve.pool_tokens_to_trading_tokens(
            10, 1000, 1234, 567, RoundDirection.FLOOR
        ) == TradingTokenResult(token_a_amount=12, token_b_amount=5)
        assert curve.pool_tokens_to_trading_tokens(
            10, 1000, 1234, 567, RoundDirection.CEILING
        ) == TradingTokenResult(token_a_amount=13, token_b_amount=6)

    def test_normalized_value(self):
        curve = ConstantProductCurve()
        assert curve.normalized_value(1000, 1000) == 1000
        assert curve.normalized_value(4, 9) == 6
        assert curve.normalized_value(2, 3) == 2

    def test_supply_validation(self):
        curve = ConstantProductCurve()
        curve.validate_supply(1, 1)
        with pytest.raises(EmptySupply):
            curve.validate_supply(0, 1)
