"""Formal contract for the bounded value container.

Each operation is described as a collection of:
- error conditions: which inputs must raise, and with what exception
- postconditions: what the container must look like after success
and the container as a whole carries invariants that hold after every
call, successful or not.

The contract is machine-readable.  Conformance tests and the
counterexample search iterate over it instead of restating the rules.

States are passed around as ``BoundedValueSnapshot`` objects, so a
predicate can compare the container before and after an operation.

Layers
------
ErrorCondition      an input that must be rejected
Postcondition       a relation between before, argument and after
Invariant           a predicate every reachable state satisfies
ClampBranch         a decision point white-box tests must cover
OperationContract   per-operation contract
ContainerContract   the full contract for one representation
build_contract()    constructs a ContainerContract for a representation
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from errors import (
    BoundViolatesValueError,
    DivisionByZeroError,
    InvalidRangeError,
    NotRepresentableError,
    ValueOutOfBoundsError,
)
from representation import NumericKind, Representation, truncdiv
from snapshot import BoundedValueSnapshot


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Invariant:
    name: str
    description: str
    check: Callable[[BoundedValueSnapshot], bool]


@dataclass(frozen=True)
class ClampBranch:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class OperationContract:
    name: str
    error_conditions: list[ErrorCondition] = field(default_factory=list)
    postconditions: list[Postcondition] = field(default_factory=list)

    def expected_error(self, *args: Any) -> type | None:
        """First exception the inputs must raise, or None if they succeed."""
        for ec in self.error_conditions:
            if ec.trigger(*args):
                return ec.exception
        return None


@dataclass(frozen=True)
class ContainerContract:
    """Complete contract for containers of one representation."""

    representation: Representation
    construction: OperationContract
    operations: dict[str, OperationContract]
    percent: OperationContract
    invariants: list[Invariant]
    branches: list[ClampBranch]

    @property
    def mutators(self) -> list[str]:
        return list(self.operations)

    def check_invariants(self, state: BoundedValueSnapshot) -> list[str]:
        """Names of the invariants ``state`` violates."""
        return [inv.name for inv in self.invariants if not inv.check(state)]


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def clamp_to(state: BoundedValueSnapshot, raw: Any) -> Any:
    """Expected value after clamping ``raw`` into the state's bounds."""
    if raw < state.min:
        return state.min
    if raw > state.max:
        return state.max
    return raw


def _unchanged_bounds(before: BoundedValueSnapshot, after: BoundedValueSnapshot) -> bool:
    return before.min == after.min and before.max == after.max


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract(representation: Representation) -> ContainerContract:
    """Construct the full container contract for a representation."""

    def not_representable(_state: Any, arg: Any) -> bool:
        return not representation.contains(arg)

    representable = ErrorCondition(
        "not_representable",
        "Argument outside the representation's range",
        not_representable,
        NotRepresentableError,
    )

    def quotient(value: Any, divisor: Any) -> Any:
        if representation.kind is NumericKind.INTEGER:
            return truncdiv(value, divisor)
        return value / divisor

    # ---------------------------------------------------------- construction
    construction = OperationContract(
        name="new",
        error_conditions=[
            ErrorCondition(
                "not_representable",
                "Any of min, value, max outside the representation's range",
                lambda lo, v, hi: not all(
                    representation.contains(x) for x in (lo, v, hi)
                ),
                NotRepresentableError,
            ),
            ErrorCondition(
                "invalid_range",
                "InvalidRangeError when min > max",
                lambda lo, v, hi: lo > hi,
                InvalidRangeError,
            ),
            ErrorCondition(
                "value_out_of_bounds",
                "ValueOutOfBoundsError when value outside [min, max]",
                lambda lo, v, hi: v < lo or v > hi,
                ValueOutOfBoundsError,
            ),
        ],
        postconditions=[
            Postcondition(
                "fields_stored",
                "min, value, max are stored as given",
                lambda lo, v, hi, after: after.as_tuple() == (lo, v, hi),
            ),
        ],
    )

    # --------------------------------------------------------------- set_min
    set_min = OperationContract(
        name="set_min",
        error_conditions=[
            representable,
            ErrorCondition(
                "invalid_range",
                "InvalidRangeError when new_min > max",
                lambda state, m: m > state.max,
                InvalidRangeError,
            ),
            ErrorCondition(
                "bound_violates_value",
                "BoundViolatesValueError when new_min > value",
                lambda state, m: m > state.value,
                BoundViolatesValueError,
            ),
        ],
        postconditions=[
            Postcondition(
                "min_replaced",
                "min == new_min; value and max unchanged",
                lambda before, m, after: (
                    after.min == m
                    and after.value == before.value
                    and after.max == before.max
                ),
            ),
        ],
    )

    # --------------------------------------------------------------- set_max
    set_max = OperationContract(
        name="set_max",
        error_conditions=[
            representable,
            ErrorCondition(
                "invalid_range",
                "InvalidRangeError when new_max < min",
                lambda state, m: m < state.min,
                InvalidRangeError,
            ),
            ErrorCondition(
                "bound_violates_value",
                "BoundViolatesValueError when new_max < value",
                lambda state, m: m < state.value,
                BoundViolatesValueError,
            ),
        ],
        postconditions=[
            Postcondition(
                "max_replaced",
                "max == new_max; min and value unchanged",
                lambda before, m, after: (
                    after.max == m
                    and after.value == before.value
                    and after.min == before.min
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------- set
    set_ = OperationContract(
        name="set",
        error_conditions=[representable],
        postconditions=[
            Postcondition(
                "value_clamped",
                "value == clamp(new_value)",
                lambda before, x, after: after.value == clamp_to(before, x),
            ),
            Postcondition(
                "bounds_unchanged",
                "min and max unchanged",
                lambda before, x, after: _unchanged_bounds(before, after),
            ),
        ],
    )

    # ---------------------------------------------------- saturating arithmetic
    # Saturating at the type's range then clamping to [min, max] equals
    # clamping the exact result, since [min, max] lies inside the type.
    def arithmetic(name: str, symbol: str, exact: Callable[[Any, Any], Any]) -> OperationContract:
        return OperationContract(
            name=name,
            error_conditions=[representable],
            postconditions=[
                Postcondition(
                    "value_clamped",
                    f"value == clamp(value {symbol} arg)",
                    lambda before, x, after: (
                        after.value == clamp_to(before, exact(before.value, x))
                    ),
                ),
                Postcondition(
                    "bounds_unchanged",
                    "min and max unchanged",
                    lambda before, x, after: _unchanged_bounds(before, after),
                ),
            ],
        )

    add = arithmetic("add", "+", lambda a, b: a + b)
    subtract = arithmetic("subtract", "-", lambda a, b: a - b)
    multiply = arithmetic("multiply", "*", lambda a, b: a * b)

    # ---------------------------------------------------------------- divide
    divide = OperationContract(
        name="divide",
        error_conditions=[
            representable,
            ErrorCondition(
                "division_by_zero",
                "DivisionByZeroError when the quotient is undefined",
                lambda state, d: d == 0 and (
                    representation.kind is not NumericKind.FLOAT
                    or state.value == 0
                ),
                DivisionByZeroError,
            ),
        ],
        postconditions=[
            Postcondition(
                "value_clamped",
                "value == clamp(value / divisor), truncating for integers",
                lambda before, d, after: (
                    d == 0
                    or after.value == clamp_to(before, quotient(before.value, d))
                ),
            ),
            Postcondition(
                "bounds_unchanged",
                "min and max unchanged",
                lambda before, d, after: _unchanged_bounds(before, after),
            ),
        ],
    )

    # --------------------------------------------------------------- percent
    percent = OperationContract(
        name="percent",
        postconditions=[
            Postcondition(
                "unit_interval",
                "0.0 <= percent <= 1.0 for a non-degenerate range",
                lambda state, p: state.min == state.max or 0.0 <= p <= 1.0,
            ),
            Postcondition(
                "min_is_zero",
                "percent == 0.0 when value == min",
                lambda state, p: state.value != state.min or p == 0.0,
            ),
            Postcondition(
                "max_is_one",
                "percent == 1.0 when value == max and min != max",
                lambda state, p: (
                    state.value != state.max or state.min == state.max or p == 1.0
                ),
            ),
        ],
    )

    invariants = [
        Invariant(
            "ordered_bounds",
            "min <= max",
            lambda s: s.min <= s.max,
        ),
        Invariant(
            "value_within_bounds",
            "min <= value <= max",
            lambda s: s.min <= s.value <= s.max,
        ),
        Invariant(
            "representable",
            "min, value and max fit the representation",
            lambda s: all(representation.contains(x) for x in s.as_tuple()),
        ),
    ]

    branches = [
        # Container clamp (_clamp)
        ClampBranch(
            "CLAMP-IN-RANGE",
            "Raw value within [min, max], stored unchanged",
            "min <= raw <= max",
            "clamp",
        ),
        ClampBranch(
            "CLAMP-LO",
            "Raw value below min, clamped to min",
            "raw < min",
            "clamp",
        ),
        ClampBranch(
            "CLAMP-HI",
            "Raw value above max, clamped to max",
            "raw > max",
            "clamp",
        ),
        # Representation saturation (saturate)
        ClampBranch(
            "SAT-LO",
            "Raw result below the type's range, saturated to lo",
            "raw < representation.lo",
            "saturate",
        ),
        ClampBranch(
            "SAT-HI",
            "Raw result above the type's range, saturated to hi",
            "raw > representation.hi",
            "saturate",
        ),
        # Division specifics
        ClampBranch(
            "DIV-ZERO",
            "DivisionByZeroError on an undefined quotient",
            "divisor == 0 and (kind != FLOAT or value == 0)",
            "divide",
        ),
        ClampBranch(
            "DIV-INF",
            "Float non-zero over zero gives a signed infinity, then clamps",
            "divisor == 0 and kind == FLOAT and value != 0",
            "divide",
        ),
        ClampBranch(
            "DIV-TRUNCATE",
            "Truncation toward zero differs from floor division",
            "value % divisor != 0 and signs differ",
            "divide",
        ),
        # Normalized position
        ClampBranch(
            "PERCENT-ZERO-WIDTH",
            "min == max, resolved by ZeroWidthPolicy",
            "max - min == 0",
            "percent",
        ),
    ]

    return ContainerContract(
        representation=representation,
        construction=construction,
        operations={
            "set_min": set_min,
            "set_max": set_max,
            "set": set_,
            "add": add,
            "subtract": subtract,
            "multiply": multiply,
            "divide": divide,
        },
        percent=percent,
        invariants=invariants,
        branches=branches,
    )
