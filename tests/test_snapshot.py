"""Tests for read-only snapshots."""

from __future__ import annotations

from fractions import Fraction

import pytest
from pydantic import ValidationError

from bounded_value import BoundedValue
from snapshot import BoundedValueSnapshot


class TestSnapshotValidation:
    def test_valid(self):
        snap = BoundedValueSnapshot(min=0, value=5, max=10)
        assert snap.as_tuple() == (0, 5, 10)

    def test_min_above_max(self):
        with pytest.raises(ValidationError, match="must be <= max"):
            BoundedValueSnapshot(min=10, value=5, max=0)

    def test_value_outside(self):
        with pytest.raises(ValidationError, match="outside bounds"):
            BoundedValueSnapshot(min=0, value=11, max=10)

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            BoundedValueSnapshot(min=0, max=10)

    def test_values_kept_as_given(self):
        snap = BoundedValueSnapshot(min=Fraction(0), value=Fraction(1, 3), max=Fraction(1))
        assert snap.value == Fraction(1, 3)


class TestSnapshotImmutability:
    def test_frozen(self):
        snap = BoundedValueSnapshot(min=0, value=5, max=10)
        with pytest.raises(ValidationError):
            snap.value = 6

    def test_equality(self):
        assert BoundedValueSnapshot(min=0, value=5, max=10) == BoundedValueSnapshot(
            min=0, value=5, max=10
        )

    def test_detached_from_container(self):
        bv = BoundedValue(0, 5, 10)
        snap = bv.snapshot()
        bv.add(3)
        bv.set_max(20)
        assert snap.as_tuple() == (0, 5, 10)
        assert bv.snapshot().as_tuple() == (0, 8, 20)


class TestRoundTrip:
    def test_dump_and_restore(self):
        bv = BoundedValue(-40, -10, 40)
        data = bv.snapshot().model_dump()
        assert data == {"min": -40, "value": -10, "max": 40}

        restored = BoundedValue.from_snapshot(BoundedValueSnapshot(**data))
        assert restored == bv
        assert restored.percent() == 0.375

    def test_restore_rejects_invalid_mapping(self):
        with pytest.raises(ValidationError):
            BoundedValueSnapshot.model_validate({"min": 30, "value": 10, "max": 20})
