"""
Property-based tests using Hypothesis.

The prediction laws: whenever the exact result fits, the operation
returns it; whenever it does not, the operation is refused with the
failure kind matching the direction.  These cover ranges far too wide
for the exhaustive checks.
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis.strategies import integers, sampled_from

from bounded import BoundedValue, add, divide, multiply, subtract
from engine import truncdiv
from errors import (
    AdditionOverflow,
    AdditionUnderflow,
    DivisionByZero,
    DivisionOverflow,
    DivisionUnderflow,
    MultiplicationOverflow,
    MultiplicationUnderflow,
    SizeMismatch,
    SubtractionOverflow,
    SubtractionUnderflow,
)
from representation import INT8, INT16, INT64, UINT8, UINT32, Representation


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def bounded_ints(rep: Representation):
    """Hypothesis strategy that generates ints within a representation."""
    return integers(min_value=rep.lo, max_value=rep.hi)


def near_bounds(rep: Representation):
    """Values clustered around both bounds and zero, where overflow lives."""
    edges = [rep.lo, rep.lo + 1, -1, 0, 1, rep.hi - 1, rep.hi]
    return sampled_from([v for v in edges if rep.contains(v)]) | bounded_ints(rep)


def check_law(operation, exact, rep, a, b, overflow, underflow):
    left, right = BoundedValue(a, rep), BoundedValue(b, rep)
    expected = exact(a, b)
    if expected > rep.hi:
        with pytest.raises(overflow):
            operation(left, right)
    elif expected < rep.lo:
        with pytest.raises(underflow):
            operation(left, right)
    else:
        result = operation(left, right)
        assert result.value == expected
        assert result.representation == rep
    assert (left.value, right.value) == (a, b)


# ---------------------------------------------------------------------------
# Prediction laws
# ---------------------------------------------------------------------------

class TestAdditionLaw:
    @given(a=near_bounds(INT8), b=near_bounds(INT8))
    def test_int8(self, a, b):
        check_law(add, lambda x, y: x + y, INT8, a, b,
                  AdditionOverflow, AdditionUnderflow)

    @given(a=near_bounds(INT64), b=near_bounds(INT64))
    @settings(max_examples=500)
    def test_int64(self, a, b):
        check_law(add, lambda x, y: x + y, INT64, a, b,
                  AdditionOverflow, AdditionUnderflow)

    @given(a=near_bounds(UINT32), b=near_bounds(UINT32))
    def test_uint32(self, a, b):
        check_law(add, lambda x, y: x + y, UINT32, a, b,
                  AdditionOverflow, AdditionUnderflow)

    @given(a=bounded_ints(INT16), b=bounded_ints(INT16))
    def test_commutativity(self, a, b):
        assume(INT16.contains(a + b))
        assert add(BoundedValue(a, INT16), b) == add(a, BoundedValue(b, INT16))


class TestSubtractionLaw:
    @given(a=near_bounds(INT8), b=near_bounds(INT8))
    def test_int8(self, a, b):
        check_law(subtract, lambda x, y: x - y, INT8, a, b,
                  SubtractionOverflow, SubtractionUnderflow)

    @given(a=near_bounds(INT64), b=near_bounds(INT64))
    @settings(max_examples=500)
    def test_int64(self, a, b):
        check_law(subtract, lambda x, y: x - y, INT64, a, b,
                  SubtractionOverflow, SubtractionUnderflow)

    @given(a=near_bounds(UINT8), b=near_bounds(UINT8))
    def test_uint8(self, a, b):
        check_law(subtract, lambda x, y: x - y, UINT8, a, b,
                  SubtractionOverflow, SubtractionUnderflow)

    @given(a=bounded_ints(INT16), b=bounded_ints(INT16))
    def test_add_sub_inverse(self, a, b):
        """(a + b) - b == a whenever the sum fits."""
        assume(INT16.contains(a + b))
        total = BoundedValue(a, INT16) + b
        assert (total - b).value == a


class TestMultiplicationLaw:
    @given(a=near_bounds(INT8), b=near_bounds(INT8))
    def test_int8(self, a, b):
        check_law(multiply, lambda x, y: x * y, INT8, a, b,
                  MultiplicationOverflow, MultiplicationUnderflow)

    @given(a=near_bounds(INT64), b=near_bounds(INT64))
    @settings(max_examples=500)
    def test_int64(self, a, b):
        check_law(multiply, lambda x, y: x * y, INT64, a, b,
                  MultiplicationOverflow, MultiplicationUnderflow)

    @given(a=integers(min_value=-(2**32), max_value=2**32),
           b=integers(min_value=-(2**32), max_value=2**32))
    @settings(max_examples=500)
    def test_int64_around_square_root(self, a, b):
        """Products near 2**63 exercise every sign case of the check."""
        check_law(multiply, lambda x, y: x * y, INT64, a, b,
                  MultiplicationOverflow, MultiplicationUnderflow)

    @given(a=near_bounds(UINT8), b=near_bounds(UINT8))
    def test_uint8(self, a, b):
        check_law(multiply, lambda x, y: x * y, UINT8, a, b,
                  MultiplicationOverflow, MultiplicationUnderflow)


class TestDivisionLaw:
    @given(a=near_bounds(INT8), b=near_bounds(INT8))
    def test_int8(self, a, b):
        assume(b != 0)
        check_law(divide, truncdiv, INT8, a, b,
                  DivisionOverflow, DivisionUnderflow)

    @given(a=near_bounds(INT64))
    def test_division_by_zero(self, a):
        with pytest.raises(DivisionByZero):
            divide(BoundedValue(a, INT64), 0)

    @given(a=bounded_ints(INT16), b=bounded_ints(INT16))
    def test_quotient_magnitude(self, a, b):
        assume(b != 0)
        assume(INT16.contains(truncdiv(a, b)))
        q = divide(BoundedValue(a, INT16), b).value
        assert abs(q * b) <= abs(a)


# ---------------------------------------------------------------------------
# Construction, increment, ordering
# ---------------------------------------------------------------------------

class TestValueProperties:
    @given(raw=bounded_ints(INT16))
    def test_round_trip(self, raw):
        assert BoundedValue(raw, INT16).value == raw
        assert BoundedValue.parse(str(raw), INT16).value == raw

    @given(raw=integers(min_value=INT16.hi + 1) | integers(max_value=INT16.lo - 1))
    def test_out_of_range_rejected(self, raw):
        with pytest.raises(SizeMismatch):
            BoundedValue(raw, INT16)

    @given(a=bounded_ints(INT8))
    def test_increment_then_decrement(self, a):
        assume(a < INT8.hi)
        v = BoundedValue(a, INT8)
        v.increment()
        assert v.value == a + 1
        v.decrement()
        assert v.value == a

    @given(a=bounded_ints(INT16), b=bounded_ints(INT16))
    def test_ordering_matches_values(self, a, b):
        x, y = BoundedValue(a, INT16), BoundedValue(b, INT16)
        assert (x < y) == (a < b)
        assert (x <= y) == (a <= b)
        assert (x > y) == (a > b)
        assert (x >= y) == (a >= b)
        assert (x == y) == (a == b)
        assert (x != y) == (a != b)
        assert (x < b) == (a < b)
        assert (a < y) == (a < b)
