"""Typed failures raised by the swap core.

Every operation either returns a decision or raises one of these. Nothing is
recovered or retried locally; the caller maps them to its own error surface.
"""


class SwapError(Exception):
    """Base class for all swap core failures."""


class CalculationFailure(SwapError):
    """A computation could not produce a result (e.g. solver did not converge)."""


class ArithmeticOverflow(CalculationFailure, ArithmeticError):
    """A checked arithmetic result fell outside its unsigned range."""


class DivideByZero(CalculationFailure, ZeroDivisionError):
    """A checked division was attempted with a zero divisor."""


class InvalidFee(SwapError, ValueError):
    """A fee fraction has a zero denominator or exceeds 100%."""


class InvalidCurve(SwapError, ValueError):
    """Curve parameters are not applicable to the pool."""


class EmptySupply(InvalidCurve):
    """A reserve required by the curve is zero."""


class UnsupportedCurveType(InvalidCurve):
    """The curve type is not allowed by the active swap constraints."""


class ZeroTradingTokens(SwapError):
    """A non-zero request would move zero tokens."""


class SlippageExceeded(SwapError):
    """The resulting amount violates the caller's declared bound."""


class AlreadyInUse(SwapError):
    """The pool has already been initialized."""


class InvalidState(SwapError):
    """The operation is not legal in the pool's current lifecycle state."""


class InvalidTokenIdentity(SwapError):
    """The supplied token identifiers do not match the pool's tokens."""


class UnsupportedCurveOperation(SwapError):
    """The curve does not support the requested operation."""
