"""Bounded integer value type.

A ``BoundedValue`` stores an integer together with the representation
whose range it must respect.  Every way a value gets in (construction,
assignment, parsing, arithmetic) is validated, and every arithmetic
operator goes through the engine's prediction checks before anything is
computed.  Failed operations leave both operands untouched.

Raw operands (``int``, ``bool``, anything with ``__index__``) are accepted
on either side of an operator and are converted into the bounded
operand's representation first.
"""
from __future__ import annotations

import numbers
import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Union

import engine
from errors import FailureKind, SizeMismatch, SnugIntError, TypeMismatch, error_for
from representation import INT32, Representation

DEFAULT_REPRESENTATION = INT32


def _usable(rep: Representation) -> Representation:
    if not isinstance(rep, Representation):
        raise TypeMismatch(f"{type(rep).__name__} is not a Representation")
    if rep.degenerate:
        raise TypeMismatch(f"{rep} has a degenerate range [{rep.lo}, {rep.hi}]")
    return rep


def _is_integral(raw: Any) -> bool:
    return isinstance(raw, BoundedValue) or hasattr(type(raw), "__index__")


def _ingest(raw: Any, rep: Representation) -> int:
    """Validate a raw value against ``rep`` and return it as an int."""
    if isinstance(raw, BoundedValue):
        value = raw.value
    else:
        try:
            value = operator.index(raw)
        except TypeError:
            raise TypeMismatch(f"{type(raw).__name__} is not integral") from None
    if not rep.contains(value):
        raise SizeMismatch(f"{value} outside {rep} [{rep.lo}, {rep.hi}]")
    return value


class BoundedValue:
    """An integer that refuses to leave its representation's range."""

    __slots__ = ("_value", "_representation")

    # mutable through assign/increment/in-place operators
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, raw: Any = 0, representation: Representation | None = None) -> None:
        if isinstance(raw, BoundedValue) and representation in (None, raw.representation):
            self._representation = _usable(raw.representation)
            self._value = raw.value
            return
        rep = _usable(DEFAULT_REPRESENTATION if representation is None else representation)
        self._representation = rep
        self._value = _ingest(raw, rep)

    @classmethod
    def parse(cls, text: str, representation: Representation | None = None) -> BoundedValue:
        """Read a decimal integer, validated like any other raw value."""
        if not isinstance(text, str):
            raise TypeMismatch(f"{type(text).__name__} is not text")
        try:
            raw = int(text)
        except (TypeError, ValueError):
            raise TypeMismatch(f"{text!r} is not an integer literal") from None
        return cls(raw, representation)

    # -- accessors ----------------------------------------------------------

    @property
    def value(self) -> int:
        return self._value

    @property
    def representation(self) -> Representation:
        return self._representation

    @property
    def lower_bound(self) -> int:
        return self._representation.lo

    @property
    def upper_bound(self) -> int:
        return self._representation.hi

    # -- mutation -----------------------------------------------------------

    def assign(self, raw: Any) -> BoundedValue:
        """Replace the stored value; the bounds never change."""
        self._value = _ingest(raw, self._representation)
        return self

    def increment(self) -> BoundedValue:
        """Prefix increment: add one in place and return self."""
        self._value = engine.checked("add", self._value, 1, self._representation)
        return self

    def decrement(self) -> BoundedValue:
        """Prefix decrement: subtract one in place and return self."""
        self._value = engine.checked("sub", self._value, 1, self._representation)
        return self

    def post_increment(self) -> BoundedValue:
        """Postfix increment: add one in place, return the previous value."""
        previous = BoundedValue(self)
        self.increment()
        return previous

    def post_decrement(self) -> BoundedValue:
        """Postfix decrement: subtract one in place, return the previous value."""
        previous = BoundedValue(self)
        self.decrement()
        return previous

    def _update(self, op: str, other: Any) -> BoundedValue:
        if not _is_integral(other):
            return NotImplemented
        self._value = _apply(op, self, other).value
        return self

    # -- arithmetic ---------------------------------------------------------

    def __add__(self, other):
        return _apply("add", self, other) if _is_integral(other) else NotImplemented

    def __radd__(self, other):
        return _apply("add", other, self) if _is_integral(other) else NotImplemented

    def __iadd__(self, other):
        return self._update("add", other)

    def __sub__(self, other):
        return _apply("sub", self, other) if _is_integral(other) else NotImplemented

    def __rsub__(self, other):
        return _apply("sub", other, self) if _is_integral(other) else NotImplemented

    def __isub__(self, other):
        return self._update("sub", other)

    def __mul__(self, other):
        return _apply("mul", self, other) if _is_integral(other) else NotImplemented

    def __rmul__(self, other):
        return _apply("mul", other, self) if _is_integral(other) else NotImplemented

    def __imul__(self, other):
        return self._update("mul", other)

    # Integral division truncates toward zero; ``/`` and ``//`` agree.
    def __truediv__(self, other):
        return _apply("div", self, other) if _is_integral(other) else NotImplemented

    def __rtruediv__(self, other):
        return _apply("div", other, self) if _is_integral(other) else NotImplemented

    def __itruediv__(self, other):
        return self._update("div", other)

    __floordiv__ = __truediv__
    __rfloordiv__ = __rtruediv__
    __ifloordiv__ = __itruediv__

    # -- comparison ---------------------------------------------------------

    def _other_value(self, other: Any):
        if isinstance(other, BoundedValue):
            return other.value
        if hasattr(type(other), "__index__"):
            return operator.index(other)
        if isinstance(other, (numbers.Real, Decimal)):
            return other
        return NotImplemented

    def __eq__(self, other):
        v = self._other_value(other)
        return NotImplemented if v is NotImplemented else self._value == v

    def __ne__(self, other):
        v = self._other_value(other)
        return NotImplemented if v is NotImplemented else self._value != v

    def __lt__(self, other):
        v = self._other_value(other)
        return NotImplemented if v is NotImplemented else self._value < v

    def __le__(self, other):
        v = self._other_value(other)
        return NotImplemented if v is NotImplemented else self._value <= v

    def __gt__(self, other):
        v = self._other_value(other)
        return NotImplemented if v is NotImplemented else self._value > v

    def __ge__(self, other):
        v = self._other_value(other)
        return NotImplemented if v is NotImplemented else self._value >= v

    # -- conversion ---------------------------------------------------------

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __str__(self) -> str:
        return str(self._value)

    def __format__(self, format_spec: str) -> str:
        return format(self._value, format_spec)

    def __repr__(self) -> str:
        return f"BoundedValue({self._value}, {self._representation})"


# ---------------------------------------------------------------------------
# Operations on any operand combination
# ---------------------------------------------------------------------------

Operand = Union[BoundedValue, int]


def _operands(left: Any, right: Any) -> tuple[Representation, int, int]:
    """Resolve the shared representation and both raw values."""
    if isinstance(left, BoundedValue) and isinstance(right, BoundedValue):
        if left.representation.bounds != right.representation.bounds:
            raise TypeMismatch(
                f"cannot combine {left.representation} with {right.representation}"
            )
        return left.representation, left.value, right.value
    if isinstance(left, BoundedValue):
        return left.representation, left.value, _ingest(right, left.representation)
    if isinstance(right, BoundedValue):
        return right.representation, _ingest(left, right.representation), right.value
    raise TypeMismatch("at least one operand must be a BoundedValue")


def _apply(op: str, left: Any, right: Any) -> BoundedValue:
    rep, a, b = _operands(left, right)
    return BoundedValue(engine.checked(op, a, b, rep), rep)


def add(left: Operand, right: Operand) -> BoundedValue:
    return _apply("add", left, right)


def subtract(left: Operand, right: Operand) -> BoundedValue:
    return _apply("sub", left, right)


def multiply(left: Operand, right: Operand) -> BoundedValue:
    return _apply("mul", left, right)


def divide(left: Operand, right: Operand) -> BoundedValue:
    """Division truncating toward zero."""
    return _apply("div", left, right)


@dataclass(frozen=True)
class Outcome:
    """Result of an operation, with the failure as a value instead of raised."""

    value: BoundedValue | None = None
    failure: FailureKind | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> BoundedValue:
        if self.failure is not None:
            raise error_for(self.failure)
        return self.value


def attempt(
    operation: Callable[[Operand, Operand], BoundedValue],
    left: Operand,
    right: Operand,
) -> Outcome:
    """Run ``operation`` and capture a refusal as an ``Outcome``."""
    try:
        return Outcome(value=operation(left, right))
    except SnugIntError as exc:
        return Outcome(failure=exc.kind)


@dataclass(frozen=True)
class BoundedArithmetic:
    """
    Plain-int front end for one representation.

    Callers holding ints get ints back; every operand is validated and
    every operation is checked exactly as for ``BoundedValue``.
    """

    representation: Representation

    def _run(self, op: str, a: int, b: int) -> int:
        rep = _usable(self.representation)
        return engine.checked(op, _ingest(a, rep), _ingest(b, rep), rep)

    def add(self, a: int, b: int) -> int:
        return self._run("add", a, b)

    def sub(self, a: int, b: int) -> int:
        return self._run("sub", a, b)

    def mul(self, a: int, b: int) -> int:
        return self._run("mul", a, b)

    def div(self, a: int, b: int) -> int:
        return self._run("div", a, b)
