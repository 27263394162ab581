"""Swap curves."""

from token_swap.curve.base import CURVE_CALCULATORS, CurveType, SwapCurve
from token_swap.curve.calculator import CurveCalculator
from token_swap.curve.constant_price import ConstantPriceCurve
from token_swap.curve.constant_product import ConstantProductCurve
from token_swap.curve.offset import OffsetCurve
from token_swap.curve.stable import StableCurve

__all__ = [
    "CURVE_CALCULATORS",
    "ConstantPriceCurve",
    "ConstantProductCurve",
    "CurveCalculator",
    "CurveType",
    "OffsetCurve",
    "StableCurve",
    "SwapCurve",
]
