"""Contract conformance tests.

These tests are *driven by* the contract: they iterate over every
postcondition, error condition, and algebraic property defined in
``spec.build_spec`` and verify the engine satisfies them.

If the contract changes (e.g. a new error condition is added), these
tests automatically cover it.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis.strategies import integers

from bounded import BoundedArithmetic
from errors import SnugIntError
from representation import INT8, TINY, UINT8, Representation
from spec import build_spec

# ---------------------------------------------------------------------------
# Configuration: small range so exhaustive checks are fast
# ---------------------------------------------------------------------------

REP = TINY
SPEC = build_spec(REP)
CALC = BoundedArithmetic(REP)
bounded = integers(min_value=REP.lo, max_value=REP.hi)


def _outcome(op_name: str, a: int, b: int):
    try:
        return getattr(CALC, op_name)(a, b)
    except SnugIntError as exc:
        return type(exc)


# ===================================================================
# POSTCONDITIONS AND ERROR CONDITIONS: property-based
# ===================================================================

class TestOperationContracts:
    """Every operation either satisfies its postconditions or is refused
    with exactly the failure the contract names."""

    @pytest.mark.parametrize("op_name", ["add", "sub", "mul", "div"])
    @given(a=bounded, b=bounded)
    @settings(max_examples=300)
    def test_contract(self, op_name, a, b):
        op_spec = SPEC.operations[op_name]
        expected_error = op_spec.expected_error(a, b)
        outcome = _outcome(op_name, a, b)
        if expected_error is not None:
            assert outcome is expected_error, (
                f"{op_name}({a}, {b}) should raise {expected_error.__name__}, "
                f"got {outcome!r}"
            )
            return
        for post in op_spec.postconditions:
            assert post.check(a, b, outcome), (
                f"Postcondition '{post.name}' failed: {op_name}({a}, {b}) = {outcome!r}"
            )


# ===================================================================
# ERROR CONDITIONS
# ===================================================================

class TestErrorConditions:
    """Every error condition in the contract triggers correctly."""

    def test_div_by_zero_triggers(self):
        for a in REP.all_values():
            with pytest.raises(SPEC.operations["div"].expected_error(a, 0)):
                CALC.div(a, 0)

    @pytest.mark.parametrize("op_name", ["add", "sub", "mul", "div"])
    def test_every_trigger_raises(self, op_name):
        for a in REP.all_values():
            for b in REP.all_values():
                for ec in SPEC.operations[op_name].error_conditions:
                    if ec.trigger(a, b):
                        with pytest.raises(ec.exception):
                            getattr(CALC, op_name)(a, b)

    def test_error_conditions_are_exclusive(self):
        for op_spec in SPEC.operations.values():
            for a in REP.all_values():
                for b in REP.all_values():
                    fired = [ec for ec in op_spec.error_conditions if ec.trigger(a, b)]
                    assert len(fired) <= 1


# ===================================================================
# ALGEBRAIC PROPERTIES: property-based
# ===================================================================

class TestAlgebraicProperties:
    """Every algebraic property in the contract holds for random inputs."""

    @given(a=bounded, b=bounded)
    @settings(max_examples=300)
    def test_binary_properties(self, a, b):
        for op_name, prop in SPEC.all_properties:
            if prop.arity != 2:
                continue
            assert prop.check(CALC, a, b), (
                f"Property '{prop.name}' failed for {op_name}({a}, {b})"
            )

    @given(a=bounded)
    @settings(max_examples=300)
    def test_unary_properties(self, a):
        for op_name, prop in SPEC.all_properties:
            if prop.arity != 1:
                continue
            assert prop.check(CALC, a), (
                f"Property '{prop.name}' failed for {op_name}({a})"
            )


# ===================================================================
# EXHAUSTIVE VERIFICATION: small ranges
# ===================================================================

@pytest.mark.parametrize(
    "rep",
    [TINY, UINT8, INT8, Representation("skewed_low", -20, 5),
     Representation("skewed_high", -5, 20)],
    ids=str,
)
class TestExhaustive:
    """Check *every* operand pair against the exact result."""

    @pytest.mark.parametrize("op_name", ["add", "sub", "mul", "div"])
    def test_all_pairs(self, rep, op_name):
        spec = build_spec(rep)
        calc = BoundedArithmetic(rep)
        op_spec = spec.operations[op_name]
        op = getattr(calc, op_name)
        checked = 0
        for a in rep.all_values():
            for b in rep.all_values():
                expected_error = op_spec.expected_error(a, b)
                if expected_error is not None:
                    with pytest.raises(expected_error):
                        op(a, b)
                else:
                    result = op(a, b)
                    assert result == op_spec.exact(a, b)
                    assert rep.contains(result)
                checked += 1
        assert checked == rep.width ** 2


def test_exhaustive_pair_count():
    """Sanity: confirm the expected number of pairs."""
    assert REP.width == 16
    assert REP.width ** 2 == 256


def test_contract_lists_every_operation():
    assert set(SPEC.operations) == {"add", "sub", "mul", "div"}
    assert all(op.error_conditions for op in SPEC.operations.values())
