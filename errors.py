"""Exceptions raised by bounded values.

Every error carries the values that caused it so callers can report or
recover without parsing the message.  A failed operation never leaves a
container partially mutated.
"""

from __future__ import annotations

from typing import Any


class BoundedValueError(ValueError):
    """Base class for every rejected bounded-value operation."""


class InvalidRangeError(BoundedValueError):
    """Raised when an operation would leave ``min > max``."""

    def __init__(self, lo: Any, hi: Any) -> None:
        self.lo = lo
        self.hi = hi
        super().__init__(f"min ({lo!r}) must be <= max ({hi!r})")


class ValueOutOfBoundsError(BoundedValueError):
    """Raised when a value is constructed outside ``[min, max]``."""

    def __init__(self, value: Any, lo: Any, hi: Any) -> None:
        self.value = value
        self.lo = lo
        self.hi = hi
        super().__init__(f"value {value!r} is outside bounds [{lo!r}, {hi!r}]")


class BoundViolatesValueError(BoundedValueError):
    """Raised when a new bound would exclude the current value."""

    def __init__(self, bound: str, new_bound: Any, value: Any) -> None:
        self.bound = bound
        self.new_bound = new_bound
        self.value = value
        relation = "larger" if bound == "min" else "smaller"
        super().__init__(
            f"cannot set {bound} to {new_bound!r}: "
            f"it is {relation} than the current value {value!r}"
        )


class DivisionByZeroError(BoundedValueError, ZeroDivisionError):
    """Raised when dividing by a zero that has no defined result."""

    def __init__(self, value: Any, divisor: Any) -> None:
        self.value = value
        self.divisor = divisor
        super().__init__(f"cannot divide {value!r} by {divisor!r}")


class NotRepresentableError(BoundedValueError):
    """Raised when an input does not fit the container's numeric type."""

    def __init__(self, value: Any, representation: str) -> None:
        self.value = value
        self.representation = representation
        super().__init__(f"{value!r} is not representable as {representation}")


class IncomparableValueError(BoundedValueError):
    """Raised for inputs with no ordering against other values (NaN)."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"{value!r} cannot be ordered against other values")


class ZeroWidthRangeError(BoundedValueError):
    """Raised by ``percent()`` on a zero-width range when asked to."""

    def __init__(self, bound: Any) -> None:
        self.bound = bound
        super().__init__(
            f"percent is undefined for the zero-width range [{bound!r}, {bound!r}]"
        )
