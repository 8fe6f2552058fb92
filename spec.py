"""Formal contract for bounded integer arithmetic.

Each operation is described as a collection of:
- postconditions: what the result must satisfy when the operation succeeds
- error conditions: which inputs must be refused, and with which failure
- algebraic properties: mathematical relationships that must hold

The error conditions are stated on exact (unbounded) integer arithmetic.
The engine never computes the out-of-range result; the contract does, so
that tests can check every prediction against the truth.

The contract is machine-readable.  Conformance tests and the
counterexample search iterate over it instead of restating it.

Layers
------
Postcondition / ErrorCondition / AlgebraicProperty   building blocks
OperationSpec     per-operation contract
BranchSpec        every decision point that white-box tests must cover
ArithmeticSpec    the full contract for one representation
build_spec()      constructs an ArithmeticSpec for a representation
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from engine import truncdiv
from errors import (
    AdditionOverflow,
    AdditionUnderflow,
    DivisionByZero,
    DivisionOverflow,
    DivisionUnderflow,
    MultiplicationOverflow,
    MultiplicationUnderflow,
    SnugIntError,
    SubtractionOverflow,
    SubtractionUnderflow,
)
from representation import Representation


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type[SnugIntError]


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    exact: Callable[[int, int], int]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]

    def expected_error(self, a: int, b: int) -> type[SnugIntError] | None:
        """The failure the contract demands for (a, b), if any."""
        for ec in self.error_conditions:
            if ec.trigger(a, b):
                return ec.exception
        return None


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the engine that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class ArithmeticSpec:
    """Complete contract for one representation."""

    representation: Representation
    operations: dict[str, OperationSpec]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    def branch_ids(self, operation: str | None = None) -> list[str]:
        return [
            b.id for b in self.branches
            if operation is None or b.operation == operation
        ]


def _refused(fn: Callable[[], object]) -> object:
    """Run ``fn``; return the raised failure class instead of raising."""
    try:
        return fn()
    except SnugIntError as exc:
        return type(exc)


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def build_spec(rep: Representation) -> ArithmeticSpec:
    """Construct the full arithmetic contract for a representation."""

    lo, hi = rep.lo, rep.hi

    def _postconditions(exact: Callable[[int, int], int], what: str) -> list[Postcondition]:
        return [
            Postcondition(
                "result_in_bounds",
                "Result is within bounds",
                lambda a, b, result: rep.contains(result),
            ),
            Postcondition(
                "result_exact",
                f"Result equals the exact {what}",
                lambda a, b, result: result == exact(a, b),
            ),
        ]

    # ------------------------------------------------------------------ add
    add_spec = OperationSpec(
        name="add",
        exact=lambda a, b: a + b,
        postconditions=_postconditions(lambda a, b: a + b, "sum"),
        error_conditions=[
            ErrorCondition(
                "addition_overflow",
                "AdditionOverflow when a + b > hi",
                lambda a, b: a + b > hi,
                AdditionOverflow,
            ),
            ErrorCondition(
                "addition_underflow",
                "AdditionUnderflow when a + b < lo",
                lambda a, b: a + b < lo,
                AdditionUnderflow,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a), refusals included", 2,
                lambda calc, a, b: (
                    _refused(lambda: calc.add(a, b))
                    == _refused(lambda: calc.add(b, a))
                ),
            ),
            AlgebraicProperty(
                "identity", "add(a, 0) == a", 1,
                lambda calc, a: calc.add(a, 0) == a,
            ),
        ],
    )

    # ------------------------------------------------------------------ sub
    sub_spec = OperationSpec(
        name="sub",
        exact=lambda a, b: a - b,
        postconditions=_postconditions(lambda a, b: a - b, "difference"),
        error_conditions=[
            ErrorCondition(
                "subtraction_overflow",
                "SubtractionOverflow when a - b > hi",
                lambda a, b: a - b > hi,
                SubtractionOverflow,
            ),
            ErrorCondition(
                "subtraction_underflow",
                "SubtractionUnderflow when a - b < lo",
                lambda a, b: a - b < lo,
                SubtractionUnderflow,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "identity", "sub(a, 0) == a", 1,
                lambda calc, a: calc.sub(a, 0) == a,
            ),
            AlgebraicProperty(
                "self_inverse", "sub(a, a) == 0", 1,
                lambda calc, a: calc.sub(a, a) == 0,
            ),
            AlgebraicProperty(
                "add_inverse", "sub(add(a, b), b) == a whenever add succeeds", 2,
                lambda calc, a, b: (
                    not rep.contains(a + b) or calc.sub(calc.add(a, b), b) == a
                ),
            ),
        ],
    )

    # ------------------------------------------------------------------ mul
    mul_spec = OperationSpec(
        name="mul",
        exact=lambda a, b: a * b,
        postconditions=_postconditions(lambda a, b: a * b, "product"),
        error_conditions=[
            ErrorCondition(
                "multiplication_overflow",
                "MultiplicationOverflow when a * b > hi",
                lambda a, b: a * b > hi,
                MultiplicationOverflow,
            ),
            ErrorCondition(
                "multiplication_underflow",
                "MultiplicationUnderflow when a * b < lo",
                lambda a, b: a * b < lo,
                MultiplicationUnderflow,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "mul(a, b) == mul(b, a), refusals included", 2,
                lambda calc, a, b: (
                    _refused(lambda: calc.mul(a, b))
                    == _refused(lambda: calc.mul(b, a))
                ),
            ),
            AlgebraicProperty(
                "identity", "mul(a, 1) == a when 1 in bounds", 1,
                lambda calc, a: (
                    calc.mul(a, 1) == a if rep.contains(1) else True
                ),
            ),
            AlgebraicProperty(
                "zero", "mul(a, 0) == 0", 1,
                lambda calc, a: calc.mul(a, 0) == 0,
            ),
        ],
    )

    # ------------------------------------------------------------------ div
    div_spec = OperationSpec(
        name="div",
        exact=truncdiv,
        postconditions=_postconditions(truncdiv, "truncating quotient"),
        error_conditions=[
            ErrorCondition(
                "division_by_zero",
                "DivisionByZero when b == 0",
                lambda a, b: b == 0,
                DivisionByZero,
            ),
            ErrorCondition(
                "division_overflow",
                "DivisionOverflow when trunc(a / b) > hi",
                lambda a, b: b != 0 and truncdiv(a, b) > hi,
                DivisionOverflow,
            ),
            ErrorCondition(
                "division_underflow",
                "DivisionUnderflow when trunc(a / b) < lo",
                lambda a, b: b != 0 and truncdiv(a, b) < lo,
                DivisionUnderflow,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "identity", "div(a, 1) == a when 1 in bounds", 1,
                lambda calc, a: (
                    calc.div(a, 1) == a if rep.contains(1) else True
                ),
            ),
            AlgebraicProperty(
                "self", "div(a, a) == 1 for a != 0 when 1 in bounds", 1,
                lambda calc, a: (
                    a == 0 or calc.div(a, a) == 1
                    if rep.contains(1) else True
                ),
            ),
            AlgebraicProperty(
                "zero_numerator", "div(0, b) == 0 for b != 0", 1,
                lambda calc, b: b == 0 or calc.div(0, b) == 0,
            ),
            AlgebraicProperty(
                "no_remainder_growth",
                "|div(a, b) * b| <= |a| whenever div succeeds", 2,
                lambda calc, a, b: (
                    b == 0 or not rep.contains(truncdiv(a, b))
                    or abs(calc.div(a, b) * b) <= abs(a)
                ),
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Addition (predict_add)
        BranchSpec("ADD-POS-OVERFLOW", "Both positive, sum above hi",
                   "a > 0 and b > 0 and hi - a < b", "add"),
        BranchSpec("ADD-POS-OK", "Both positive, sum fits",
                   "a > 0 and b > 0 and hi - a >= b", "add"),
        BranchSpec("ADD-NEG-UNDERFLOW", "Both negative, sum below lo",
                   "a < 0 and b < 0 and lo - a > b", "add"),
        BranchSpec("ADD-NEG-OK", "Both negative, sum fits",
                   "a < 0 and b < 0 and lo - a <= b", "add"),
        BranchSpec("ADD-MIXED", "Mixed signs or a zero, no check needed",
                   "not (a > 0 and b > 0) and not (a < 0 and b < 0)", "add"),
        # Subtraction (predict_sub)
        BranchSpec("SUB-OVERFLOW", "Non-negative minus negative, above hi",
                   "a >= 0 and b < 0 and hi - a < |b|", "sub"),
        BranchSpec("SUB-UNDERFLOW", "Negative minus positive, below lo",
                   "a < 0 and b > 0 and |lo - a| < b", "sub"),
        BranchSpec("SUB-SAME-SIGN-UNDERFLOW",
                   "Non-negative minus positive, below lo (unsigned ranges)",
                   "a >= 0 and b > 0 and a - lo < b", "sub"),
        BranchSpec("SUB-SAME-SIGN-OVERFLOW",
                   "Negative minus negative, above hi (ranges with |lo| > hi + 1)",
                   "a < 0 and b < 0 and hi - a < |b|", "sub"),
        BranchSpec("SUB-SAFE", "Difference fits", "lo <= a - b <= hi", "sub"),
        # Multiplication (predict_mul)
        BranchSpec("MUL-ZERO", "A zero operand, always safe",
                   "a == 0 or b == 0", "mul"),
        BranchSpec("MUL-PP-OVERFLOW", "Positive times positive above hi",
                   "a > 0 and b > 0 and a > hi / b", "mul"),
        BranchSpec("MUL-PN-UNDERFLOW", "Positive times negative below lo",
                   "a > 0 and b < 0 and b < lo / a", "mul"),
        BranchSpec("MUL-NP-UNDERFLOW", "Negative times positive below lo",
                   "a < 0 and b > 0 and a < lo / b", "mul"),
        BranchSpec("MUL-NN-OVERFLOW", "Negative times negative above hi",
                   "a < 0 and b < 0 and b < hi / a", "mul"),
        BranchSpec("MUL-SAFE", "Product fits", "lo <= a * b <= hi", "mul"),
        # Division (predict_div, truncdiv)
        BranchSpec("DIV-ZERO", "Divisor is zero", "b == 0", "div"),
        BranchSpec("DIV-OVERFLOW", "Negative by negative above hi (lo / -1)",
                   "a < 0 and b < 0 and |a| >= (hi + 1) * |b|", "div"),
        BranchSpec("DIV-UNDERFLOW", "Positive by negative below lo",
                   "a > 0 and b < 0 and a >= (1 - lo) * |b|", "div"),
        BranchSpec("DIV-NORMAL", "Quotient fits", "b != 0", "div"),
        BranchSpec("DIV-TRUNCATE",
                   "Truncation toward zero differs from floor division",
                   "a % b != 0 and signs differ", "div"),
        # Value ingestion (BoundedValue construction / assignment)
        BranchSpec("INPUT-VALID", "Raw value within bounds",
                   "lo <= raw <= hi", "validation"),
        BranchSpec("INPUT-SIZE-MISMATCH", "Raw value outside bounds",
                   "raw < lo or raw > hi", "validation"),
        BranchSpec("INPUT-TYPE-MISMATCH", "Raw value is not integral",
                   "not hasattr(raw, '__index__')", "validation"),
        BranchSpec("REP-DEGENERATE", "Representation range is a single value",
                   "lo == hi", "validation"),
    ]

    return ArithmeticSpec(
        representation=rep,
        operations={
            "add": add_spec,
            "sub": sub_spec,
            "mul": mul_spec,
            "div": div_spec,
        },
        branches=branches,
    )
