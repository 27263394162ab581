"""Curve type discriminant and the tagged curve held by a pool configuration."""

from dataclasses import dataclass
from enum import Enum

from token_swap.core.errors import InvalidCurve
from token_swap.curve.calculator import CurveCalculator
from token_swap.curve.constant_price import ConstantPriceCurve
from token_swap.curve.constant_product import ConstantProductCurve
from token_swap.curve.offset import OffsetCurve
from token_swap.curve.stable import StableCurve


class CurveType(Enum):
    """Closed set of supported curves."""
    CONSTANT_PRODUCT = 0
    CONSTANT_PRICE = 1
    STABLE = 2
    OFFSET = 3


CURVE_CALCULATORS: dict[CurveType, type[CurveCalculator]] = {
    CurveType.CONSTANT_PRODUCT: ConstantProductCurve,
    CurveType.CONSTANT_PRICE: ConstantPriceCurve,
    CurveType.STABLE: StableCurve,
    CurveType.OFFSET: OffsetCurve,
}


@dataclass(frozen=True)
class SwapCurve:
    """A curve type tag together with the calculator implementing it.

    The tag is what a collaborator persists; the calculator carries the
    variant's parameters (price, amplification, offset).
    """
    curve_type: CurveType
    calculator: CurveCalculator

    def __post_init__(self) -> None:
        expected = CURVE_CALCULATORS[self.curve_type]
        if type(self.calculator) is not expected:
            raise InvalidCurve(
                f"{self.curve_type.name} requires {expected.__name__}, "
                f"got {type(self.calculator).__name__}"
            )

    @classmethod
    def from_parameters(cls, curve_type: CurveType, **parameters: int) -> "SwapCurve":
        """Build a curve from its type tag and keyword parameters.

        Example:
            >>> SwapCurve.from_parameters(CurveType.STABLE, amp=100)
        """
        try:
            calculator = CURVE_CALCULATORS[curve_type](**parameters)
        except TypeError as exc:
            raise InvalidCurve(f"bad parameters for {curve_type.name}: {exc}") from exc
        return cls(curve_type=curve_type, calculator=calculator)

    @classmethod
    def constant_product(cls) -> "SwapCurve":
        return cls(CurveType.CONSTANT_PRODUCT, ConstantProductCurve())

    @classmethod
    def constant_price(cls, token_b_price: int) -> "SwapCurve":
        return cls(CurveType.CONSTANT_PRICE, ConstantPriceCurve(token_b_price=token_b_price))

    @classmethod
    def stable(cls, amp: int) -> "SwapCurve":
        return cls(CurveType.STABLE, StableCurve(amp=amp))

    @classmethod
    def offset(cls, token_a_offset: int) -> "SwapCurve":
        return cls(CurveType.OFFSET, OffsetCurve(token_a_offset=token_a_offset))

    def validate(self) -> None:
        self.calculator.validate()
