"""Swap engine: fees, curve pricing and slippage checks for a single swap."""

from token_swap.core.checked_math import checked_add, checked_sub, require_u64, to_u64
from token_swap.core.errors import CalculationFailure, SlippageExceeded, ZeroTradingTokens
from token_swap.core.fees import Fees
from token_swap.core.trade import SwapResult, TradeDirection
from token_swap.curve.base import SwapCurve


def execute_swap(
    input_amount: int,
    source_reserve: int,
    destination_reserve: int,
    fees: Fees,
    curve: SwapCurve,
    minimum_output: int = 0,
    trade_direction: TradeDirection = TradeDirection.A_TO_B,
    with_host: bool = False,
) -> SwapResult:
    """Decide a swap of ``input_amount`` source tokens.

    Uses a fee-on-input model: the trade fee is taken from the input, the
    remainder is priced by the curve, and the whole consumed amount (fees
    included) lands in the source reserve, so fees grow the invariant.

    Args:
        input_amount: Source tokens offered by the trader
        source_reserve: Pool balance of the source token
        destination_reserve: Pool balance of the destination token
        fees: Fee schedule of the pool
        curve: Pricing curve of the pool
        minimum_output: Smallest destination amount the trader accepts
        trade_direction: Which token is the source
        with_host: Whether a host account takes a share of the fee

    Returns:
        SwapResult with consumed/delivered amounts, fee split and new reserves

    Raises:
        ZeroTradingTokens: If the input, the net input or the output is zero
        SlippageExceeded: If the output is below ``minimum_output``
        CalculationFailure: On overflow or solver failure, or when the output
            exceeds the destination reserve
    """
    require_u64(input_amount, source_reserve, destination_reserve, minimum_output)
    if input_amount == 0:
        raise ZeroTradingTokens("swap input must be non-zero")

    trade_fee, owner_fee, host_fee = fees.split_trading_fee(input_amount, with_host)
    net_input = checked_sub(input_amount, trade_fee)
    if net_input == 0:
        raise ZeroTradingTokens(f"input {input_amount} is consumed entirely by the trade fee")

    swapped = curve.calculator.swap_output(
        net_input, source_reserve, destination_reserve, trade_direction
    )
    source_amount_swapped = checked_add(swapped.source_amount_swapped, trade_fee)
    destination_amount_swapped = swapped.destination_amount_swapped

    new_source_reserve = to_u64(checked_add(source_reserve, source_amount_swapped))
    # Offset and constant price curves can price more than the pool actually holds
    if destination_amount_swapped > destination_reserve:
        raise CalculationFailure(
            f"swap output {destination_amount_swapped} exceeds destination reserve "
            f"{destination_reserve}"
        )
    new_destination_reserve = destination_reserve - destination_amount_swapped

    if destination_amount_swapped < minimum_output:
        raise SlippageExceeded(
            f"output {destination_amount_swapped} is below minimum {minimum_output}"
        )

    return SwapResult(
        source_amount_swapped=source_amount_swapped,
        destination_amount_swapped=destination_amount_swapped,
        trade_fee=trade_fee,
        owner_fee=owner_fee,
        host_fee=host_fee,
        new_source_reserve=new_source_reserve,
        new_destination_reserve=new_destination_reserve,
    )
