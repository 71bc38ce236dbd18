"""Read-only snapshots of bounded values.

A snapshot is a frozen copy of a container's three fields.  It is
validated on creation, so holding one is proof that the triple satisfied
``min <= value <= max`` when it was taken or built.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BoundedValueSnapshot(BaseModel):
    """Immutable view of a bounded value's bounds and current value."""

    model_config = ConfigDict(frozen=True)

    min: Any = Field(..., description="Lower bound, inclusive")
    value: Any = Field(..., description="Current value")
    max: Any = Field(..., description="Upper bound, inclusive")

    @model_validator(mode="after")
    def value_within_bounds(self) -> BoundedValueSnapshot:
        if self.min > self.max:
            raise ValueError(f"min ({self.min!r}) must be <= max ({self.max!r})")
        if self.value < self.min or self.value > self.max:
            raise ValueError(
                f"value {self.value!r} is outside bounds "
                f"[{self.min!r}, {self.max!r}]"
            )
        return self

    def as_tuple(self) -> tuple[Any, Any, Any]:
        return (self.min, self.value, self.max)
