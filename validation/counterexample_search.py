"""Counterexample search: discovers gaps between predictions and the truth.

This module runs independently of the test suite.  For small
representations it walks every operand pair and compares the engine
against exact integer arithmetic:

1. Postcondition violations: a successful result that is wrong or out
   of range.
2. Error condition violations: a refusal that should have happened but
   didn't, a refusal of the wrong kind, or a refusal the contract does
   not call for.
3. Property violations: algebraic relationships that fail for some
   input combination.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field

sys.path.insert(0, ".")

from bounded import BoundedArithmetic
from errors import SnugIntError
from representation import INT8, TINY, UINT8, Representation
from spec import ArithmeticSpec, build_spec


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
    representation: str = ""
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
            lines.append("\nNo counterexamples found, all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_operation_outcomes(
    calc: BoundedArithmetic,
    spec: ArithmeticSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively compare every operand pair against the contract."""
    cxs: list[Counterexample] = []
    checks = 0
    values = spec.representation.all_values()

    for op_name, op_spec in spec.operations.items():
        op = getattr(calc, op_name)
        for a in values:
            for b in values:
                checks += 1
                expected = op_spec.expected_error(a, b)
                try:
                    result = op(a, b)
                except SnugIntError as e:
                    if expected is None:
                        cxs.append(Counterexample(
                            category="spurious_error",
                            operation=op_name,
                            inputs=(a, b),
                            expected=f"result={op_spec.exact(a, b)}",
                            actual=f"{type(e).__name__}: {e}",
                            description="Operation refused an in-range result",
                        ))
                    elif type(e) is not expected:
                        cxs.append(Counterexample(
                            category="wrong_error",
                            operation=op_name,
                            inputs=(a, b),
                            expected=expected.__name__,
                            actual=type(e).__name__,
                            description="Refusal has the wrong failure kind",
                        ))
                    continue

                if expected is not None:
                    cxs.append(Counterexample(
                        category="missing_error",
                        operation=op_name,
                        inputs=(a, b),
                        expected=expected.__name__,
                        actual=f"result={result}",
                        description="Out-of-range result was not predicted",
                    ))
                    continue

                for post in op_spec.postconditions:
                    if not post.check(a, b, result):
                        cxs.append(Counterexample(
                            category="postcondition_violation",
                            operation=op_name,
                            inputs=(a, b),
                            expected=post.description,
                            actual=f"result={result}",
                            description=f"Postcondition '{post.name}' violated",
                        ))

    return cxs, checks


def search_property_violations(
    calc: BoundedArithmetic,
    spec: ArithmeticSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property."""
    cxs: list[Counterexample] = []
    checks = 0
    values = spec.representation.all_values()

    for op_name, prop in spec.all_properties:
        if prop.arity == 2:
            combos = [(a, b) for a in values for b in values]
        else:
            combos = [(a,) for a in values]
        for combo in combos:
            checks += 1
            try:
                holds = prop.check(calc, *combo)
            except SnugIntError as e:
                cxs.append(Counterexample(
                    category="property_error",
                    operation=op_name,
                    inputs=combo,
                    expected=prop.description,
                    actual=f"{type(e).__name__}: {e}",
                    description=f"Property '{prop.name}' raised",
                ))
                continue
            if not holds:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=combo,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(rep: Representation) -> SearchReport:
    """Run complete counterexample search for one representation."""
    calc = BoundedArithmetic(rep)
    spec = build_spec(rep)
    report = SearchReport(representation=str(rep))

    for search_fn in (
        search_operation_outcomes,
        search_property_violations,
    ):
        cxs, checks = search_fn(calc, spec)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


CONFIGURATIONS = [
    TINY,
    INT8,
    UINT8,
    Representation("skewed_low", -20, 5),
    Representation("skewed_high", -5, 20),
]


def main() -> None:
    """Run counterexample search across several representations."""
    all_passed = True
    for rep in CONFIGURATIONS:
        print(f"\n--- Representation: {rep} [{rep.lo}, {rep.hi}] ---")
        report = run_search(rep)
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
