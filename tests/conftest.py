"""Shared fixtures for bounded value tests."""

from __future__ import annotations

import pytest

from bounded_value import BoundedValue
from representation import INT4, INT8


@pytest.fixture
def percent_scale() -> BoundedValue:
    """Plain Python ints, range [0, 100]."""
    return BoundedValue(0, 50, 100)


@pytest.fixture
def tiny() -> BoundedValue:
    """[-4, 4] inside the 4-bit signed type [-8, 7]."""
    return BoundedValue(-4, 0, 4, representation=INT4)


@pytest.fixture
def full_int8() -> BoundedValue:
    """Bounds equal to the whole int8 range, so only saturation applies."""
    return BoundedValue(-128, 0, 127, representation=INT8)
