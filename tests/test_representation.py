"""
Tests for the Representation layer.

These verify that the numeric types themselves behave - saturation,
division semantics, input normalization and inference from Python and
numpy scalars.
"""

import math
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest
from hypothesis import given
from hypothesis.strategies import integers

from errors import DivisionByZeroError, IncomparableValueError, NotRepresentableError
from representation import (
    DECIMAL,
    FLOAT64,
    FRACTION,
    INT4,
    INT8,
    INT64,
    INTEGER,
    UINT8,
    UINT16,
    NumericKind,
    Representation,
    truncdiv,
)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestRepresentationConstruction:
    def test_presets(self):
        assert INT8.lo == -128
        assert INT8.hi == 127
        assert INT8.width == 256
        assert UINT8.lo == 0
        assert UINT8.hi == 255
        assert INT4.width == 16

    def test_invalid_range_raises(self):
        with pytest.raises(ValueError, match="lo.*must be <= hi"):
            Representation("broken", 10, -10)

    def test_unbounded_has_no_width(self):
        assert not INTEGER.bounded
        with pytest.raises(ValueError):
            INTEGER.width
        with pytest.raises(ValueError):
            FLOAT64.width

    def test_all_values(self):
        assert list(INT4.all_values()) == list(range(-8, 8))


# ---------------------------------------------------------------------------
# numpy dtypes
# ---------------------------------------------------------------------------

class TestFromDtype:
    @pytest.mark.parametrize("dtype, preset", [
        (np.int8, INT8),
        (np.uint8, UINT8),
        (np.uint16, UINT16),
        (np.int64, INT64),
        (np.float64, FLOAT64),
    ])
    def test_matches_preset(self, dtype, preset):
        assert Representation.from_dtype(dtype) == preset

    def test_float32(self):
        rep = Representation.from_dtype(np.float32)
        assert rep.kind is NumericKind.FLOAT
        assert rep.name == "float32"

    def test_bool_dtype_rejected(self):
        with pytest.raises(TypeError):
            Representation.from_dtype(np.bool_)


class TestInfer:
    def test_python_scalars(self):
        assert Representation.infer(1) == INTEGER
        assert Representation.infer(1.5) == FLOAT64
        assert Representation.infer(Fraction(1, 3)) == FRACTION
        assert Representation.infer(Decimal("0.1")) == DECIMAL

    def test_numpy_scalars(self):
        assert Representation.infer(np.int8(3)) == INT8
        assert Representation.infer(np.uint8(3), np.uint8(5)) == UINT8

    def test_int_and_float_widen(self):
        assert Representation.infer(0, 5, 10.0) == FLOAT64

    def test_int_widens_to_exact_types(self):
        assert Representation.infer(0, Fraction(1, 2), 1) == FRACTION
        assert Representation.infer(0, Decimal("0.5"), 1) == DECIMAL

    def test_fraction_and_decimal_rejected(self):
        with pytest.raises(TypeError, match="cannot mix"):
            Representation.infer(Fraction(0), Decimal("0.5"))
        with pytest.raises(TypeError, match="cannot mix"):
            Representation.infer(0, Fraction(0), Decimal("0.5"))

    def test_mixed_types_rejected(self):
        with pytest.raises(TypeError, match="cannot mix"):
            Representation.infer(np.int8(1), np.uint8(2))

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            Representation.infer(True)

    def test_unknown_type_rejected(self):
        with pytest.raises(TypeError):
            Representation.infer("5")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

class TestNormalize:
    def test_numpy_scalar_becomes_python(self):
        value = INT8.normalize(np.int8(-5))
        assert value == -5
        assert type(value) is int

    def test_out_of_range_rejected(self):
        with pytest.raises(NotRepresentableError) as exc_info:
            INT8.normalize(128)
        assert exc_info.value.representation == "int8"
        assert exc_info.value.value == 128

    def test_float_not_an_integer(self):
        with pytest.raises(NotRepresentableError):
            INTEGER.normalize(1.5)

    def test_int_widened_to_float(self):
        value = FLOAT64.normalize(3)
        assert value == 3.0
        assert type(value) is float

    def test_nan_rejected(self):
        with pytest.raises(IncomparableValueError):
            FLOAT64.normalize(math.nan)

    def test_decimal_nan_rejected(self):
        with pytest.raises(IncomparableValueError):
            DECIMAL.normalize(Decimal("NaN"))

    def test_infinity_is_a_float(self):
        assert FLOAT64.normalize(math.inf) == math.inf

    def test_bool_rejected(self):
        with pytest.raises(NotRepresentableError):
            INTEGER.normalize(True)

    def test_string_rejected_by_fraction(self):
        with pytest.raises(NotRepresentableError):
            FRACTION.normalize("1/3")

    def test_int_converted_to_fraction(self):
        value = FRACTION.normalize(np.int16(3))
        assert value == Fraction(3)
        assert type(value) is Fraction

    def test_int_converted_to_decimal(self):
        value = DECIMAL.normalize(3)
        assert value == Decimal(3)
        assert type(value) is Decimal

    def test_exact_types_do_not_cross(self):
        with pytest.raises(NotRepresentableError):
            FRACTION.normalize(Decimal("0.1"))
        with pytest.raises(NotRepresentableError):
            DECIMAL.normalize(Fraction(1, 10))

    def test_float_rejected_by_exact_types(self):
        with pytest.raises(NotRepresentableError):
            FRACTION.normalize(0.5)
        with pytest.raises(NotRepresentableError):
            DECIMAL.normalize(0.5)

    def test_decimal_signalling_nan_rejected(self):
        with pytest.raises(IncomparableValueError):
            DECIMAL.normalize(Decimal("sNaN"))

    def test_decimal_infinity_rejected(self):
        with pytest.raises(NotRepresentableError):
            DECIMAL.normalize(Decimal("Infinity"))


# ---------------------------------------------------------------------------
# Saturating arithmetic
# ---------------------------------------------------------------------------

class TestSaturation:
    def test_within_range_unchanged(self):
        for v in [-128, -1, 0, 1, 127]:
            assert INT8.saturate(v) == v

    def test_add_saturates_high(self):
        assert INT8.saturating_add(100, 100) == 127

    def test_sub_saturates_low(self):
        assert INT8.saturating_sub(-100, 100) == -128
        assert UINT8.saturating_sub(5, 10) == 0

    def test_mul_saturates(self):
        assert INT8.saturating_mul(64, 4) == 127
        assert INT8.saturating_mul(64, -4) == -128

    def test_unbounded_never_saturates(self):
        assert INTEGER.saturating_mul(2**70, 2**70) == 2**140

    def test_float_overflow_is_infinite(self):
        assert FLOAT64.saturating_mul(1e308, 10.0) == math.inf

    @given(a=integers(-128, 127), b=integers(-128, 127))
    def test_add_always_in_range(self, a, b):
        assert INT8.contains(INT8.saturating_add(a, b))

    @given(a=integers(-128, 127), b=integers(-128, 127))
    def test_mul_always_in_range(self, a, b):
        assert INT8.contains(INT8.saturating_mul(a, b))


# ---------------------------------------------------------------------------
# Division
# ---------------------------------------------------------------------------

class TestDivision:
    def test_truncates_toward_zero(self):
        assert truncdiv(7, 2) == 3
        assert truncdiv(-7, 2) == -3
        assert truncdiv(7, -2) == -3
        assert truncdiv(-7, -2) == 3

    def test_integer_division_truncates(self):
        assert INT8.divide(-7, 2) == -3

    def test_signed_minimum_over_minus_one_saturates(self):
        assert INT8.divide(-128, -1) == 127

    def test_integer_zero_divisor(self):
        with pytest.raises(DivisionByZeroError):
            INT8.divide(5, 0)

    def test_zero_divisor_is_also_zero_division_error(self):
        with pytest.raises(ZeroDivisionError):
            INTEGER.divide(5, 0)

    def test_float_over_zero_is_signed_infinity(self):
        assert FLOAT64.divide(2.0, 0.0) == math.inf
        assert FLOAT64.divide(-2.0, 0.0) == -math.inf
        assert FLOAT64.divide(2.0, -0.0) == -math.inf

    def test_float_zero_over_zero(self):
        with pytest.raises(DivisionByZeroError):
            FLOAT64.divide(0.0, 0.0)

    def test_exact_division(self):
        assert FRACTION.divide(Fraction(1), Fraction(3)) == Fraction(1, 3)
        with pytest.raises(DivisionByZeroError):
            DECIMAL.divide(Decimal(1), Decimal(0))

    @given(a=integers(-128, 127), b=integers(-128, 127))
    def test_division_always_in_range(self, a, b):
        if b == 0:
            return
        assert INT8.contains(INT8.divide(a, b))
