"""Safe arithmetic engine.

Each operator has a prediction function that decides, from the operands
and the representation's bounds alone, whether the mathematically exact
result would leave the range.  The checks are arranged the way they must
be for a fixed-width type, where computing the overflowing result first
is not an option: limits are compared against differences and quotients
of the operands, never against the raw sum or product.

Only when a prediction passes is the native operation executed.  Decision
branches are annotated with their branch-IDs (see spec.py BranchSpec) so
white-box tests can trace coverage back to the contract.
"""
from __future__ import annotations

import logging
import operator
from typing import Callable, Optional

from errors import FailureKind, error_for
from representation import Representation

logger = logging.getLogger(__name__)


def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity.  Fixed-width integral
    division (C, Java, Rust) truncates toward zero instead, and the
    multiplication checks below depend on that rounding.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the result is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


# ---------------------------------------------------------------------------
# Prediction checks
# ---------------------------------------------------------------------------

def predict_add(left: int, right: int, rep: Representation) -> FailureKind | None:
    """Branches: ADD-POS-OVERFLOW, ADD-POS-OK, ADD-NEG-UNDERFLOW,
    ADD-NEG-OK, ADD-MIXED
    """
    if left > 0 and right > 0:
        if rep.hi - left < right:                                 # ADD-POS-OVERFLOW
            return FailureKind.ADDITION_OVERFLOW
        return None                                               # ADD-POS-OK

    if left < 0 and right < 0:
        if rep.lo - left > right:                                 # ADD-NEG-UNDERFLOW
            return FailureKind.ADDITION_UNDERFLOW
        return None                                               # ADD-NEG-OK

    # Mixed signs or a zero: the sum lies between the operands.  ADD-MIXED
    return None


def predict_sub(left: int, right: int, rep: Representation) -> FailureKind | None:
    """Branches: SUB-OVERFLOW, SUB-UNDERFLOW, SUB-SAME-SIGN-UNDERFLOW,
    SUB-SAME-SIGN-OVERFLOW, SUB-SAFE
    """
    if left >= 0 and right < 0:
        if rep.hi - left < abs(right):                            # SUB-OVERFLOW
            return FailureKind.SUBTRACTION_OVERFLOW
        return None

    if left < 0 and right > 0:
        if abs(rep.lo - left) < right:                            # SUB-UNDERFLOW
            return FailureKind.SUBTRACTION_UNDERFLOW
        return None

    # Same signs never leave a two's-complement range, but they do leave
    # ranges that are not mirrored around zero (unsigned types).
    if right > 0 and left - rep.lo < right:                       # SUB-SAME-SIGN-UNDERFLOW
        return FailureKind.SUBTRACTION_UNDERFLOW
    if right < 0 and rep.hi - left < abs(right):                  # SUB-SAME-SIGN-OVERFLOW
        return FailureKind.SUBTRACTION_OVERFLOW

    return None                                                   # SUB-SAFE


def predict_mul(left: int, right: int, rep: Representation) -> FailureKind | None:
    """Branches: MUL-PP-OVERFLOW, MUL-PN-UNDERFLOW, MUL-NP-UNDERFLOW,
    MUL-NN-OVERFLOW, MUL-ZERO, MUL-SAFE

    Each sign case divides a bound by one operand and compares the other
    operand against the quotient.  The divisor is never zero: a zero
    operand skips every case.
    """
    if left == 0 or right == 0:                                   # MUL-ZERO
        return None

    if left > 0 and right > 0:
        if left > truncdiv(rep.hi, right):                        # MUL-PP-OVERFLOW
            return FailureKind.MULTIPLICATION_OVERFLOW
    elif left > 0 and right < 0:
        if right < truncdiv(rep.lo, left):                        # MUL-PN-UNDERFLOW
            return FailureKind.MULTIPLICATION_UNDERFLOW
    elif left < 0 and right > 0:
        if left < truncdiv(rep.lo, right):                        # MUL-NP-UNDERFLOW
            return FailureKind.MULTIPLICATION_UNDERFLOW
    else:
        if right < truncdiv(rep.hi, left):                        # MUL-NN-OVERFLOW
            return FailureKind.MULTIPLICATION_OVERFLOW

    return None                                                   # MUL-SAFE


def predict_div(left: int, right: int, rep: Representation) -> FailureKind | None:
    """Branches: DIV-ZERO, DIV-OVERFLOW, DIV-UNDERFLOW, DIV-NORMAL

    A positive divisor only shrinks the magnitude, so only a negative
    divisor can push the quotient out of range.  ``|q| >= k`` is tested as
    ``|left| >= k * |right|``.
    """
    if right == 0:                                                # DIV-ZERO
        return FailureKind.DIVISION_BY_ZERO

    if right < 0:
        if left < 0 and -left >= (rep.hi + 1) * -right:           # DIV-OVERFLOW
            return FailureKind.DIVISION_OVERFLOW
        if left > 0 and left >= (1 - rep.lo) * -right:            # DIV-UNDERFLOW
            return FailureKind.DIVISION_UNDERFLOW

    return None                                                   # DIV-NORMAL


# ---------------------------------------------------------------------------
# Operation table
# ---------------------------------------------------------------------------

Predictor = Callable[[int, int, Representation], Optional[FailureKind]]

OPERATIONS: dict[str, tuple[str, Predictor, Callable[[int, int], int]]] = {
    "add": ("+", predict_add, operator.add),
    "sub": ("-", predict_sub, operator.sub),
    "mul": ("*", predict_mul, operator.mul),
    "div": ("/", predict_div, truncdiv),
}


def predict(op: str, left: int, right: int, rep: Representation) -> FailureKind | None:
    """Run the prediction check for ``op`` without computing anything."""
    _, check, _ = OPERATIONS[op]
    return check(left, right, rep)


def checked(op: str, left: int, right: int, rep: Representation) -> int:
    """Predict, then execute ``op`` natively.

    Raises the ``SnugIntError`` subclass matching the predicted failure;
    nothing is computed in that case.
    """
    symbol, check, native = OPERATIONS[op]
    kind = check(left, right, rep)
    if kind is not None:
        logger.debug(
            "refused %d %s %d in %s: %s", left, symbol, right, rep, kind.value
        )
        raise error_for(
            kind, f"{left} {symbol} {right} outside {rep} [{rep.lo}, {rep.hi}]"
        )
    return native(left, right)
