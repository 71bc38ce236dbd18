"""Counterexample search - discovers gaps in implementation or tests.

This module runs independently of the test suite.  Over a small integer
representation it systematically visits every container state and every
argument, searching for:

1. Construction violations: triples that should be rejected but are not,
   or are rejected with the wrong exception.
2. Mutation violations: operations that break a postcondition or an
   invariant, raise when they should succeed (or the reverse), or change
   state while failing.
3. Percent violations: positions outside [0, 1] or wrong at the bounds.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import itertools
import sys
from dataclasses import dataclass, field

from bounded_value import BoundedValue
from contract import ContainerContract, build_contract
from representation import INT4, Representation


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    representation: str
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            f"Counterexample Search Report ({self.representation})",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found - all checks passed.")
        return "\n".join(lines)


def _valid_states(representation: Representation):
    """Every (min, value, max) with min <= value <= max."""
    values = list(representation.all_values())
    for lo, hi in itertools.combinations_with_replacement(values, 2):
        for v in range(lo, hi + 1):
            yield lo, v, hi


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_construction(
    contract: ContainerContract,
) -> tuple[list[Counterexample], int]:
    """Try every (min, value, max) triple against the constructor."""
    cxs: list[Counterexample] = []
    checks = 0
    representation = contract.representation
    values = representation.all_values()

    for lo, v, hi in itertools.product(values, repeat=3):
        checks += 1
        inputs = (lo, v, hi)
        expected = contract.construction.expected_error(*inputs)
        try:
            bv = BoundedValue(lo, v, hi, representation=representation)
        except Exception as e:
            if expected is None or not isinstance(e, expected):
                cxs.append(Counterexample(
                    category="unexpected_error" if expected is None else "wrong_error",
                    operation="new",
                    inputs=inputs,
                    expected="no error" if expected is None else expected.__name__,
                    actual=f"{type(e).__name__}: {e}",
                    description="Constructor raised the wrong exception",
                ))
            continue

        if expected is not None:
            cxs.append(Counterexample(
                category="missing_error",
                operation="new",
                inputs=inputs,
                expected=expected.__name__,
                actual=repr(bv),
                description="Constructor accepted an invalid triple",
            ))
            continue

        after = bv.snapshot()
        for post in contract.construction.postconditions:
            if not post.check(lo, v, hi, after):
                cxs.append(Counterexample(
                    category="postcondition_violation",
                    operation="new",
                    inputs=inputs,
                    expected=post.description,
                    actual=repr(bv),
                    description=f"Postcondition '{post.name}' violated",
                ))

    return cxs, checks


def search_mutations(
    contract: ContainerContract,
) -> tuple[list[Counterexample], int]:
    """Apply every mutator with every argument to every valid state."""
    cxs: list[Counterexample] = []
    checks = 0
    representation = contract.representation

    for (lo, v, hi), (op_name, op_contract), arg in itertools.product(
        _valid_states(representation),
        contract.operations.items(),
        representation.all_values(),
    ):
        checks += 1
        inputs = (lo, v, hi, arg)
        bv = BoundedValue(lo, v, hi, representation=representation)
        before = bv.snapshot()
        expected = op_contract.expected_error(before, arg)

        try:
            getattr(bv, op_name)(arg)
        except Exception as e:
            after = bv.snapshot()
            if expected is None or not isinstance(e, expected):
                cxs.append(Counterexample(
                    category="unexpected_error" if expected is None else "wrong_error",
                    operation=op_name,
                    inputs=inputs,
                    expected="no error" if expected is None else expected.__name__,
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised the wrong exception",
                ))
            elif after != before:
                cxs.append(Counterexample(
                    category="partial_mutation",
                    operation=op_name,
                    inputs=inputs,
                    expected=repr(before.as_tuple()),
                    actual=repr(after.as_tuple()),
                    description="Failed operation changed the container",
                ))
            continue

        after = bv.snapshot()
        if expected is not None:
            cxs.append(Counterexample(
                category="missing_error",
                operation=op_name,
                inputs=inputs,
                expected=expected.__name__,
                actual=repr(after.as_tuple()),
                description="Operation should have been rejected",
            ))
            continue

        for post in op_contract.postconditions:
            if not post.check(before, arg, after):
                cxs.append(Counterexample(
                    category="postcondition_violation",
                    operation=op_name,
                    inputs=inputs,
                    expected=post.description,
                    actual=repr(after.as_tuple()),
                    description=f"Postcondition '{post.name}' violated",
                ))
        for name in contract.check_invariants(after):
            cxs.append(Counterexample(
                category="invariant_violation",
                operation=op_name,
                inputs=inputs,
                expected=name,
                actual=repr(after.as_tuple()),
                description=f"Invariant '{name}' broken",
            ))

    return cxs, checks


def search_percent(
    contract: ContainerContract,
) -> tuple[list[Counterexample], int]:
    """Check the normalized position of every valid state."""
    cxs: list[Counterexample] = []
    checks = 0

    for lo, v, hi in _valid_states(contract.representation):
        checks += 1
        bv = BoundedValue(lo, v, hi, representation=contract.representation)
        state = bv.snapshot()
        p = bv.percent()
        for post in contract.percent.postconditions:
            if not post.check(state, p):
                cxs.append(Counterexample(
                    category="postcondition_violation",
                    operation="percent",
                    inputs=(lo, v, hi),
                    expected=post.description,
                    actual=f"percent={p}",
                    description=f"Postcondition '{post.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(representation: Representation) -> SearchReport:
    """Run the complete counterexample search for one representation."""
    contract = build_contract(representation)
    report = SearchReport(representation=representation.name)

    for search_fn in (search_construction, search_mutations, search_percent):
        cxs, checks = search_fn(contract)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run the counterexample search over small integer representations."""
    representations = [
        INT4,
        Representation("uint4", 0, 15),
    ]

    all_passed = True
    for representation in representations:
        print(f"\n--- Representation: {representation.name} ---")
        report = run_search(representation)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL REPRESENTATIONS PASSED")
    else:
        print("SOME REPRESENTATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
