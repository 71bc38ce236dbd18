"""
Representation layer for bounded values.

A Representation describes the range of values a scalar type can hold
and provides the saturating arithmetic that stays inside that range.
Fixed-width integers saturate at their limits instead of wrapping, so a
container never sees a wrapped intermediate before it applies its own
min/max clamp.

Python ints never overflow, which makes saturation exact: compute the
raw result with arbitrary precision, then clamp it to [lo, hi].
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from fractions import Fraction
from numbers import Integral, Real
from typing import Any

import numpy as np

from errors import DivisionByZeroError, IncomparableValueError, NotRepresentableError

logger = logging.getLogger(__name__)


class NumericKind(Enum):
    """How a representation performs division and accepts inputs."""

    INTEGER = auto()     # Truncating division, integral inputs only
    FLOAT = auto()       # IEEE 754 semantics
    FRACTION = auto()    # Exact rational true division
    DECIMAL = auto()     # Decimal arithmetic in the current context


def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity.  Fixed-width integer
    types in C, Java and Rust truncate toward zero instead.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the result is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def is_unordered(value: Any) -> bool:
    """True for NaN-like values, which compare unequal to themselves."""
    return value != value


@dataclass(frozen=True)
class Representation:
    """
    The range [lo, hi] of a scalar type, with saturating arithmetic.

    ``None`` on either side means the type is unbounded there.
    """

    name: str
    lo: Any = None
    hi: Any = None
    kind: NumericKind = NumericKind.INTEGER

    def __post_init__(self):
        if self.lo is not None and self.hi is not None and self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    # -- construction -----------------------------------------------------

    @classmethod
    def from_dtype(cls, dtype: Any) -> Representation:
        """Build the representation of a numpy integer or floating dtype."""
        dtype = np.dtype(dtype)
        if np.issubdtype(dtype, np.integer):
            info = np.iinfo(dtype)
            return cls(dtype.name, int(info.min), int(info.max), NumericKind.INTEGER)
        if np.issubdtype(dtype, np.floating):
            return cls(dtype.name, -math.inf, math.inf, NumericKind.FLOAT)
        raise TypeError(f"no bounded-value representation for dtype {dtype}")

    @classmethod
    def infer(cls, *values: Any) -> Representation:
        """
        Pick the representation shared by ``values``.

        numpy scalars map through their dtype.  Python ints mixed with
        floats, Fractions or Decimals widen to that type; any other mix
        is rejected.
        """
        found = {_infer_one(v) for v in values}
        if len(found) == 1:
            return found.pop()
        if len(found) == 2 and INTEGER in found:
            (other,) = found - {INTEGER}
            if other in (FLOAT64, FRACTION, DECIMAL):
                return other
        names = ", ".join(sorted(r.name for r in found))
        raise TypeError(f"cannot mix numeric types in one bounded value: {names}")

    # -- queries ----------------------------------------------------------

    @property
    def bounded(self) -> bool:
        return self.lo is not None and self.hi is not None

    @property
    def width(self) -> int:
        """Number of representable values (finite integer kinds only)."""
        if self.kind is not NumericKind.INTEGER or not self.bounded:
            raise ValueError(f"{self.name} has no finite width")
        return self.hi - self.lo + 1

    def all_values(self) -> range:
        return range(self.lo, self.lo + self.width)

    def contains(self, value: Any) -> bool:
        if self.lo is not None and value < self.lo:
            return False
        if self.hi is not None and value > self.hi:
            return False
        return True

    def normalize(self, value: Any) -> Any:
        """
        Convert ``value`` to the plain Python scalar this representation
        stores, or raise if it does not belong to the type.
        """
        if isinstance(value, np.generic):
            value = value.item()
        if isinstance(value, bool):
            raise NotRepresentableError(value, self.name)

        if self.kind is NumericKind.INTEGER:
            if not isinstance(value, Integral):
                raise NotRepresentableError(value, self.name)
            value = int(value)
        elif self.kind is NumericKind.FLOAT:
            if not isinstance(value, Real):
                raise NotRepresentableError(value, self.name)
            value = float(value)
        elif self.kind is NumericKind.FRACTION:
            if not isinstance(value, (Integral, Fraction)):
                raise NotRepresentableError(value, self.name)
            value = Fraction(value)
        else:
            if not isinstance(value, (Integral, Decimal)):
                raise NotRepresentableError(value, self.name)
            value = value if isinstance(value, Decimal) else Decimal(int(value))
            # sNaN traps on comparison and inf - inf traps in arithmetic
            if value.is_nan():
                raise IncomparableValueError(value)
            if not value.is_finite():
                raise NotRepresentableError(value, self.name)

        if is_unordered(value):
            raise IncomparableValueError(value)
        if not self.contains(value):
            raise NotRepresentableError(value, self.name)
        return value

    # -- saturating arithmetic --------------------------------------------

    def saturate(self, raw: Any) -> Any:
        """Clamp a raw result to the representable range."""
        if self.lo is not None and raw < self.lo:
            logger.debug("%s: %r saturated to %r", self.name, raw, self.lo)
            return self.lo
        if self.hi is not None and raw > self.hi:
            logger.debug("%s: %r saturated to %r", self.name, raw, self.hi)
            return self.hi
        return raw

    def saturating_add(self, a: Any, b: Any) -> Any:
        return self.saturate(a + b)

    def saturating_sub(self, a: Any, b: Any) -> Any:
        return self.saturate(a - b)

    def saturating_mul(self, a: Any, b: Any) -> Any:
        return self.saturate(a * b)

    def divide(self, a: Any, b: Any) -> Any:
        """
        Divide with the semantics of the underlying type.

        Integers truncate toward zero; the one overflowing quotient of a
        signed type (``lo / -1``) saturates.  Floats follow IEEE 754, so a
        non-zero numerator over zero gives a signed infinity.  Zero over
        zero has no defined result for any kind.
        """
        if b == 0:
            if self.kind is NumericKind.FLOAT and a != 0:
                return math.copysign(math.inf, a) * math.copysign(1.0, b)
            raise DivisionByZeroError(a, b)

        if self.kind is NumericKind.INTEGER:
            return self.saturate(truncdiv(a, b))
        return self.saturate(a / b)


def _infer_one(value: Any) -> Representation:
    if isinstance(value, np.generic):
        return Representation.from_dtype(value.dtype)
    if isinstance(value, bool):
        raise TypeError("bool is not a bounded-value scalar")
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, float):
        return FLOAT64
    if isinstance(value, Fraction):
        return FRACTION
    if isinstance(value, Decimal):
        return DECIMAL
    raise TypeError(f"no bounded-value representation for {type(value).__name__}")


# ---------------------------------------------------------------------------
# Common representations
# ---------------------------------------------------------------------------

INT8 = Representation("int8", -128, 127)
INT16 = Representation("int16", -32_768, 32_767)
INT32 = Representation("int32", -(2**31), 2**31 - 1)
INT64 = Representation("int64", -(2**63), 2**63 - 1)
UINT8 = Representation("uint8", 0, 255)
UINT16 = Representation("uint16", 0, 65_535)
UINT32 = Representation("uint32", 0, 2**32 - 1)
UINT64 = Representation("uint64", 0, 2**64 - 1)

INTEGER = Representation("int")
FLOAT64 = Representation("float64", -math.inf, math.inf, NumericKind.FLOAT)
FRACTION = Representation("fraction", kind=NumericKind.FRACTION)
DECIMAL = Representation("decimal", kind=NumericKind.DECIMAL)

# Small signed type useful for exhaustive verification
INT4 = Representation("int4", -8, 7)
