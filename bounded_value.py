"""
Bounded value container.

A BoundedValue holds a current value together with a minimum and a
maximum and keeps ``min <= value <= max`` across every mutation:

  * the constructor and the bound setters reject requests that would
    break the invariant, leaving the container untouched;
  * ``set`` and the arithmetic operations never reject a value, they
    clamp it back into ``[min, max]``.

Arithmetic runs in two stages.  The representation's saturating
primitive first keeps the raw result inside the numeric type's own
range, then the container clamps it to its logical range.  Neither
stage alone is enough: saturation knows nothing of min/max, and the
clamp cannot undo a wrapped fixed-width intermediate.
"""

from __future__ import annotations

import logging
import math
from enum import Enum, auto
from typing import Generic, Optional, TypeVar

import numpy as np

from errors import (
    BoundViolatesValueError,
    IncomparableValueError,
    InvalidRangeError,
    ValueOutOfBoundsError,
    ZeroWidthRangeError,
)
from representation import NumericKind, Representation, is_unordered
from snapshot import BoundedValueSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ZeroWidthPolicy(Enum):
    """What ``percent()`` returns when ``min == max``."""

    ZERO = auto()        # 0.0, the position of min
    NAN = auto()         # nan, the IEEE result of 0 / 0
    ERROR = auto()       # Raise ZeroWidthRangeError


class BoundedValue(Generic[T]):
    """A value that always lies within ``[min, max]``."""

    def __init__(
        self,
        min_val: T,
        value: T,
        max_val: T,
        *,
        representation: Optional[Representation] = None,
        zero_width: ZeroWidthPolicy = ZeroWidthPolicy.ZERO,
    ) -> None:
        if representation is None:
            representation = Representation.infer(min_val, value, max_val)

        lo = representation.normalize(min_val)
        hi = representation.normalize(max_val)
        value = representation.normalize(value)

        if lo > hi:
            raise InvalidRangeError(lo, hi)
        if value < lo or value > hi:
            raise ValueOutOfBoundsError(value, lo, hi)

        self._min: T = lo
        self._value: T = value
        self._max: T = hi
        self._representation = representation
        self._zero_width = zero_width

    @classmethod
    def from_snapshot(
        cls,
        snapshot: BoundedValueSnapshot,
        *,
        representation: Optional[Representation] = None,
        zero_width: ZeroWidthPolicy = ZeroWidthPolicy.ZERO,
    ) -> BoundedValue:
        return cls(
            snapshot.min,
            snapshot.value,
            snapshot.max,
            representation=representation,
            zero_width=zero_width,
        )

    # -- accessors --------------------------------------------------------

    @property
    def value(self) -> T:
        return self._value

    @property
    def min(self) -> T:
        return self._min

    @property
    def max(self) -> T:
        return self._max

    @property
    def representation(self) -> Representation:
        return self._representation

    @property
    def zero_width(self) -> ZeroWidthPolicy:
        return self._zero_width

    def snapshot(self) -> BoundedValueSnapshot:
        """Return a frozen copy of the current bounds and value."""
        return BoundedValueSnapshot(min=self._min, value=self._value, max=self._max)

    # -- bound mutation ---------------------------------------------------

    def set_min(self, new_min: T) -> None:
        """Set the minimum to ``new_min``.

        Raises InvalidRangeError if ``new_min`` is larger than the maximum
        and BoundViolatesValueError if it is larger than the current value.
        The value is never moved to make room for a new bound.
        """
        new_min = self._representation.normalize(new_min)
        if new_min > self._max:
            logger.debug("rejected set_min(%r): above max %r", new_min, self._max)
            raise InvalidRangeError(new_min, self._max)
        if new_min > self._value:
            logger.debug("rejected set_min(%r): above value %r", new_min, self._value)
            raise BoundViolatesValueError("min", new_min, self._value)
        self._min = new_min

    def set_max(self, new_max: T) -> None:
        """Set the maximum to ``new_max``.

        Raises InvalidRangeError if ``new_max`` is smaller than the minimum
        and BoundViolatesValueError if it is smaller than the current value.
        """
        new_max = self._representation.normalize(new_max)
        if new_max < self._min:
            logger.debug("rejected set_max(%r): below min %r", new_max, self._min)
            raise InvalidRangeError(self._min, new_max)
        if new_max < self._value:
            logger.debug("rejected set_max(%r): below value %r", new_max, self._value)
            raise BoundViolatesValueError("max", new_max, self._value)
        self._max = new_max

    # -- value mutation ---------------------------------------------------

    def set(self, new_value: T) -> None:
        """Set the value, saturating at min or max when out of bounds."""
        self._assign(self._representation.normalize(new_value))

    def add(self, delta: T) -> BoundedValue:
        """Add ``delta`` to the value, saturating at min or max."""
        delta = self._representation.normalize(delta)
        self._assign(self._representation.saturating_add(self._value, delta))
        return self

    def subtract(self, delta: T) -> BoundedValue:
        """Subtract ``delta`` from the value, saturating at min or max."""
        delta = self._representation.normalize(delta)
        self._assign(self._representation.saturating_sub(self._value, delta))
        return self

    def multiply(self, factor: T) -> BoundedValue:
        """Multiply the value by ``factor``, saturating at min or max."""
        factor = self._representation.normalize(factor)
        self._assign(self._representation.saturating_mul(self._value, factor))
        return self

    def divide(self, divisor: T) -> BoundedValue:
        """Divide the value by ``divisor``, saturating at min or max.

        Raises DivisionByZeroError when the type gives no defined result.
        """
        divisor = self._representation.normalize(divisor)
        self._assign(self._representation.divide(self._value, divisor))
        return self

    def __iadd__(self, delta: T) -> BoundedValue:
        return self.add(delta)

    def __isub__(self, delta: T) -> BoundedValue:
        return self.subtract(delta)

    def __imul__(self, factor: T) -> BoundedValue:
        return self.multiply(factor)

    def __itruediv__(self, divisor: T) -> BoundedValue:
        return self.divide(divisor)

    def _assign(self, raw: T) -> None:
        # inf - inf and friends; nothing to clamp against
        if is_unordered(raw):
            raise IncomparableValueError(raw)
        self._value = self._clamp(raw)

    def _clamp(self, raw: T) -> T:
        if raw < self._min:
            logger.debug("value %r clamped to min %r", raw, self._min)
            return self._min
        if raw > self._max:
            logger.debug("value %r clamped to max %r", raw, self._max)
            return self._max
        return raw

    # -- normalized position ----------------------------------------------

    def percent(self) -> float:
        """
        Position of the value within the range, from 0.0 at the minimum
        to 1.0 at the maximum.

        The invariant keeps both differences non-negative, so neither can
        underflow.  A zero-width range is resolved by the zero-width policy.
        """
        span = self._max - self._min
        if span == 0:
            return self._zero_width_result()
        offset = self._value - self._min
        if self._representation.kind is NumericKind.INTEGER:
            # int / int is correctly rounded even past the float range
            return offset / span
        if self._representation.kind is NumericKind.FLOAT and math.isinf(span):
            # bounds more than the float range apart; halve first
            lo, hi = self._min / 2, self._max / 2
            return (self._value / 2 - lo) / (hi - lo)
        return float(offset) / float(span)

    percent_f64 = percent

    def percent_f32(self) -> np.float32:
        """
        Single-precision variant of ``percent()``.

        Rounded from the double-precision result, so ranges wider than
        float32 still map into [0, 1].
        """
        return np.float32(self.percent())

    def _zero_width_result(self) -> float:
        if self._zero_width is ZeroWidthPolicy.ERROR:
            raise ZeroWidthRangeError(self._min)
        if self._zero_width is ZeroWidthPolicy.NAN:
            return math.nan
        return 0.0

    # -- dunder -----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundedValue):
            return NotImplemented
        return (
            self._min == other._min
            and self._value == other._value
            and self._max == other._max
            and self._representation == other._representation
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"BoundedValue(min={self._min!r}, value={self._value!r}, "
            f"max={self._max!r})"
        )
