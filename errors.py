"""
Failure taxonomy for bounded integer operations.

Every rejected operation raises a distinct exception class so callers can
tell, for example, an addition overflow from a multiplication underflow.
Each class also records its ``FailureKind``, which is what the engine's
prediction functions and ``Outcome`` report when no exception is wanted.

Exceptions are created per failure; they carry the offending operands in
their message and nothing else.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(Enum):
    """Why an operation on a bounded value was refused."""

    ADDITION_OVERFLOW = "addition overflow"
    ADDITION_UNDERFLOW = "addition underflow"
    SUBTRACTION_OVERFLOW = "subtraction overflow"
    SUBTRACTION_UNDERFLOW = "subtraction underflow"
    MULTIPLICATION_OVERFLOW = "multiplication overflow"
    MULTIPLICATION_UNDERFLOW = "multiplication underflow"
    DIVISION_OVERFLOW = "division overflow"
    DIVISION_UNDERFLOW = "division underflow"
    DIVISION_BY_ZERO = "division by zero"
    SIZE_MISMATCH = "size mismatch"
    TYPE_MISMATCH = "type mismatch"


class SnugIntError(ArithmeticError):
    """Base class for every refused bounded integer operation."""

    kind: FailureKind

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        message = f"{self.kind.value.capitalize()}, operation prevented"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class AdditionOverflow(SnugIntError, OverflowError):
    kind = FailureKind.ADDITION_OVERFLOW


class AdditionUnderflow(SnugIntError):
    kind = FailureKind.ADDITION_UNDERFLOW


class SubtractionOverflow(SnugIntError, OverflowError):
    kind = FailureKind.SUBTRACTION_OVERFLOW


class SubtractionUnderflow(SnugIntError):
    kind = FailureKind.SUBTRACTION_UNDERFLOW


class MultiplicationOverflow(SnugIntError, OverflowError):
    kind = FailureKind.MULTIPLICATION_OVERFLOW


class MultiplicationUnderflow(SnugIntError):
    kind = FailureKind.MULTIPLICATION_UNDERFLOW


class DivisionOverflow(SnugIntError, OverflowError):
    """Quotient above the range, e.g. ``lo / -1`` on a signed type."""

    kind = FailureKind.DIVISION_OVERFLOW


class DivisionUnderflow(SnugIntError):
    """Quotient below the range; only ranges with ``hi > |lo|`` hit this."""

    kind = FailureKind.DIVISION_UNDERFLOW


class DivisionByZero(SnugIntError, ZeroDivisionError):
    kind = FailureKind.DIVISION_BY_ZERO


class SizeMismatch(SnugIntError, ValueError):
    """A value does not fit the representation's range."""

    kind = FailureKind.SIZE_MISMATCH


class TypeMismatch(SnugIntError, TypeError):
    """Unusable representation or a source that is not integral."""

    kind = FailureKind.TYPE_MISMATCH


ERRORS: dict[FailureKind, type[SnugIntError]] = {
    cls.kind: cls
    for cls in (
        AdditionOverflow,
        AdditionUnderflow,
        SubtractionOverflow,
        SubtractionUnderflow,
        MultiplicationOverflow,
        MultiplicationUnderflow,
        DivisionOverflow,
        DivisionUnderflow,
        DivisionByZero,
        SizeMismatch,
        TypeMismatch,
    )
}


def error_for(kind: FailureKind, detail: str = "") -> SnugIntError:
    """Build the exception matching a failure kind."""
    return ERRORS[kind](detail)
