"""Fee schedule and fee calculations."""

from dataclasses import dataclass

from token_swap.core.checked_math import checked_sub, fraction_ceil, require_u64
from token_swap.core.errors import InvalidFee
from token_swap.core.trade import FeeResult


def calculate_fee(amount: int, numerator: int, denominator: int) -> int:
    """Compute ceil(amount * numerator / denominator).

    Rounds in favor of the pool. A zero numerator or zero amount yields
    zero fee without dividing, so the "no fee" fraction 0/0 is safe.
    """
    if numerator == 0 or amount == 0:
        return 0
    return fraction_ceil(amount, numerator, denominator)


def validate_fraction(numerator: int, denominator: int, name: str) -> None:
    if denominator == 0 and numerator == 0:
        return
    if denominator == 0:
        raise InvalidFee(f"{name} denominator must be non-zero, got {numerator}/0")
    if numerator > denominator:
        raise InvalidFee(f"{name} must be <= 100%, got {numerator}/{denominator}")


def _as_ratio(numerator: int, denominator: int) -> tuple[int, int]:
    if denominator == 0:
        return 0, 1
    return numerator, denominator


@dataclass(frozen=True)
class Fees:
    """Fee schedule of a pool.

    Each fee is a numerator/denominator fraction:
    - trade fee: charged on swap input, stays in the pool
    - owner trade fee: carved out of the trade fee for the pool owner
    - owner withdraw fee: charged in pool tokens on withdrawal
    - host fee: fraction of the trade fee routed to an optional host
    """
    trade_fee_numerator: int = 0
    trade_fee_denominator: int = 0
    owner_trade_fee_numerator: int = 0
    owner_trade_fee_denominator: int = 0
    owner_withdraw_fee_numerator: int = 0
    owner_withdraw_fee_denominator: int = 0
    host_fee_numerator: int = 0
    host_fee_denominator: int = 0

    def __post_init__(self) -> None:
        try:
            require_u64(
                self.trade_fee_numerator,
                self.trade_fee_denominator,
                self.owner_trade_fee_numerator,
                self.owner_trade_fee_denominator,
                self.owner_withdraw_fee_numerator,
                self.owner_withdraw_fee_denominator,
                self.host_fee_numerator,
                self.host_fee_denominator,
            )
        except ArithmeticError as exc:
            raise InvalidFee(f"fee values must be u64 integers: {exc}") from exc

    def validate(self) -> None:
        """Raise InvalidFee if any fraction is malformed or exceeds 100%."""
        validate_fraction(self.trade_fee_numerator, self.trade_fee_denominator, "trade fee")
        validate_fraction(
            self.owner_trade_fee_numerator, self.owner_trade_fee_denominator, "owner trade fee"
        )
        validate_fraction(
            self.owner_withdraw_fee_numerator,
            self.owner_withdraw_fee_denominator,
            "owner withdraw fee",
        )
        validate_fraction(self.host_fee_numerator, self.host_fee_denominator, "host fee")

        # owner + trade * host <= trade, with 0/0 read as 0/1
        trade_n, trade_d = _as_ratio(self.trade_fee_numerator, self.trade_fee_denominator)
        owner_n, owner_d = _as_ratio(
            self.owner_trade_fee_numerator, self.owner_trade_fee_denominator
        )
        host_n, host_d = _as_ratio(self.host_fee_numerator, self.host_fee_denominator)
        if owner_n * trade_d * host_d + trade_n * owner_d * host_n > trade_n * owner_d * host_d:
            raise InvalidFee(
                f"owner trade fee {self.owner_trade_fee_numerator}/"
                f"{self.owner_trade_fee_denominator} plus the host share does not fit in "
                f"trade fee {self.trade_fee_numerator}/{self.trade_fee_denominator}"
            )

    def trading_fee(self, amount: int) -> int:
        return calculate_fee(amount, self.trade_fee_numerator, self.trade_fee_denominator)

    def owner_trading_fee(self, amount: int) -> int:
        return calculate_fee(
            amount, self.owner_trade_fee_numerator, self.owner_trade_fee_denominator
        )

    def owner_withdraw_fee(self, amount: int) -> int:
        return calculate_fee(
            amount, self.owner_withdraw_fee_numerator, self.owner_withdraw_fee_denominator
        )

    def host_fee(self, trading_fee_amount: int) -> int:
        """Host share, computed on the trading fee rather than the gross amount."""
        return calculate_fee(trading_fee_amount, self.host_fee_numerator, self.host_fee_denominator)

    def trading_fee_result(self, amount: int) -> FeeResult:
        fee = self.trading_fee(amount)
        return FeeResult(gross_amount=amount, fee_amount=fee, net_amount=checked_sub(amount, fee))

    def owner_withdraw_fee_result(self, pool_token_amount: int) -> FeeResult:
        fee = self.owner_withdraw_fee(pool_token_amount)
        return FeeResult(
            gross_amount=pool_token_amount,
            fee_amount=fee,
            net_amount=checked_sub(pool_token_amount, fee),
        )

    def split_trading_fee(self, amount: int, with_host: bool = False) -> tuple[int, int, int]:
        """Split the trading fee on ``amount`` into (trade fee, owner fee, host fee).

        The host takes ``host_fee(trade_fee)`` and the owner takes its fee from
        what is left, so trade_fee >= owner_fee + host_fee always holds. The
        owner fee is only clamped by rounding on schedules that pass
        ``validate``.
        """
        trade_fee = self.trading_fee(amount)
        host_fee = self.host_fee(trade_fee) if with_host else 0
        owner_fee = min(self.owner_trading_fee(amount), checked_sub(trade_fee, host_fee))
        return trade_fee, owner_fee, host_fee

    @classmethod
    def zero(cls) -> "Fees":
        """Create a fee schedule that charges nothing."""
        return cls()
