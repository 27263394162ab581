"""Pool configuration and deployment-wide swap constraints."""

import os
from dataclasses import dataclass
from typing import Optional

from token_swap.core.errors import InvalidFee, InvalidTokenIdentity, UnsupportedCurveType
from token_swap.core.fees import Fees
from token_swap.curve.base import CurveType, SwapCurve


@dataclass(frozen=True)
class PoolConfig:
    """Immutable configuration of one pool.

    Identifiers are opaque strings chosen by the collaborator (mint
    addresses, symbols, ...); the core only compares them.
    """
    curve: SwapCurve
    fees: Fees
    token_a_mint: str
    token_b_mint: str
    pool_mint: str

    def __post_init__(self) -> None:
        mints = {self.token_a_mint, self.token_b_mint, self.pool_mint}
        if len(mints) != 3:
            raise InvalidTokenIdentity(
                "token A, token B and pool token identifiers must be distinct, got "
                f"({self.token_a_mint!r}, {self.token_b_mint!r}, {self.pool_mint!r})"
            )

    @property
    def curve_type(self) -> CurveType:
        return self.curve.curve_type

    def validate(self) -> None:
        """Raise InvalidFee or InvalidCurve if the configuration is unusable."""
        self.fees.validate()
        self.curve.validate()


@dataclass(frozen=True)
class SwapConstraints:
    """Restrictions a deployment places on the pools it accepts.

    Fee denominators must match exactly; trade and owner fee numerators may
    be higher than the minimum, and the host fee must match exactly. The
    schedule must also be valid on its own, so the owner and host shares fit
    inside the trade fee.
    """
    valid_curve_types: tuple[CurveType, ...]
    fees: Fees

    def validate_curve(self, curve: SwapCurve) -> None:
        if curve.curve_type not in self.valid_curve_types:
            allowed = ", ".join(curve_type.name for curve_type in self.valid_curve_types)
            raise UnsupportedCurveType(
                f"{curve.curve_type.name} is not allowed; expected one of: {allowed}"
            )

    def validate_fees(self, fees: Fees) -> None:
        fees.validate()
        minimum = self.fees
        checks = [
            ("trade fee", fees.trade_fee_numerator, fees.trade_fee_denominator,
             minimum.trade_fee_numerator, minimum.trade_fee_denominator),
            ("owner trade fee", fees.owner_trade_fee_numerator, fees.owner_trade_fee_denominator,
             minimum.owner_trade_fee_numerator, minimum.owner_trade_fee_denominator),
            ("owner withdraw fee", fees.owner_withdraw_fee_numerator,
             fees.owner_withdraw_fee_denominator,
             minimum.owner_withdraw_fee_numerator, minimum.owner_withdraw_fee_denominator),
        ]
        for name, numerator, denominator, minimum_numerator, minimum_denominator in checks:
            if denominator != minimum_denominator or numerator < minimum_numerator:
                raise InvalidFee(
                    f"{name} {numerator}/{denominator} is below the required "
                    f"{minimum_numerator}/{minimum_denominator}"
                )
        if (fees.host_fee_numerator, fees.host_fee_denominator) != (
            minimum.host_fee_numerator, minimum.host_fee_denominator
        ):
            raise InvalidFee(
                f"host fee must be {minimum.host_fee_numerator}/{minimum.host_fee_denominator}, "
                f"got {fees.host_fee_numerator}/{fees.host_fee_denominator}"
            )


PRODUCTION_CONSTRAINTS = SwapConstraints(
    valid_curve_types=(CurveType.CONSTANT_PRICE, CurveType.CONSTANT_PRODUCT),
    fees=Fees(
        trade_fee_numerator=10,
        trade_fee_denominator=10000,
        owner_trade_fee_numerator=5,
        owner_trade_fee_denominator=10000,
        owner_withdraw_fee_numerator=0,
        owner_withdraw_fee_denominator=0,
        host_fee_numerator=20,
        host_fee_denominator=100,
    ),
)


def resolve_swap_constraints() -> Optional[SwapConstraints]:
    """Resolve constraints from the TOKEN_SWAP_PRODUCTION environment variable."""
    flag = os.environ.get("TOKEN_SWAP_PRODUCTION", "").strip().lower()
    if flag in ("1", "true", "yes", "on"):
        return PRODUCTION_CONSTRAINTS
    return None
