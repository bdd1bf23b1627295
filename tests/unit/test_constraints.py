"""
Unit tests for the constraint system and comparison gadgets.
"""

import pytest

from govproof.circuits.constraints import ConstraintSystem, LinearCombination, SignalKind
from govproof.circuits.field import FIELD_ORDER, MAX_SAFE_BITS, parse_field_element
from govproof.circuits.gadgets import MAX_DECOMPOSITION_BITS, greater_eq_than, less_than, num2bits
from govproof.errors import ConstraintUnsatisfiable, WitnessInputError


def _bits_system(n: int) -> tuple[ConstraintSystem, list]:
    cs = ConstraintSystem("bits")
    x = cs.private_input("x")
    bits = num2bits(cs, x, n)
    return cs, bits


def _comparison_system(gadget, n: int):
    cs = ConstraintSystem("cmp")
    a = cs.private_input("a")
    b = cs.public_input("b")
    out = gadget(cs, a, b, n)
    return cs, out


class TestFieldElements:
    """Tests for field element parsing."""

    def test_parse_int_and_decimal_string(self) -> None:
        assert parse_field_element(42) == 42
        assert parse_field_element("10000000000000000000000000") == 10**25

    def test_negative_values_wrap(self) -> None:
        assert parse_field_element(-1) == FIELD_ORDER - 1

    def test_rejects_bool(self) -> None:
        with pytest.raises(TypeError):
            parse_field_element(True)

    @pytest.mark.parametrize("value", ["", "1.5", "0x10", "ten"])
    def test_rejects_non_decimal_strings(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_field_element(value)


class TestLinearCombination:
    """Tests for linear combination arithmetic."""

    def test_signal_arithmetic(self) -> None:
        cs = ConstraintSystem("lc")
        x = cs.private_input("x")
        y = cs.private_input("y")

        lc = 3 * x + y - 2

        assert lc.terms == {x.index: 3, y.index: 1, 0: FIELD_ORDER - 2}

    def test_cancelling_terms_are_dropped(self) -> None:
        cs = ConstraintSystem("lc")
        x = cs.private_input("x")

        assert (x - x).terms == {}

    def test_evaluate(self) -> None:
        lc = LinearCombination({0: 5, 1: 2})
        assert lc.evaluate([1, 10]) == 25

    def test_evaluate_unassigned_signal(self) -> None:
        with pytest.raises(RuntimeError):
            LinearCombination({1: 1}).evaluate([1, None])


class TestConstraintSystem:
    """Tests for signal allocation and witness computation."""

    def test_duplicate_signal_name(self) -> None:
        cs = ConstraintSystem("dup")
        cs.private_input("x")
        with pytest.raises(ValueError, match="already defined"):
            cs.private_input("x")

    def test_scoped_names(self) -> None:
        cs = ConstraintSystem("scoped")
        with cs.scope("outer"), cs.scope("inner"):
            signal = cs.intermediate("s", hint=lambda read: 0)

        assert signal.name == "outer.inner.s"

    def test_public_signal_order(self) -> None:
        """Outputs come before public inputs, regardless of declaration order."""
        cs = ConstraintSystem("order")
        b = cs.public_input("b")
        cs.private_input("a")
        out = cs.output("out")

        assert cs.public_signals == [out, b]
        assert cs.public_input_names == ["b"]

    def test_assign_only_outputs(self) -> None:
        cs = ConstraintSystem("assign")
        x = cs.private_input("x")
        with pytest.raises(ValueError):
            cs.assign(x, lambda read: 1)

    def test_compute_witness(self) -> None:
        cs = ConstraintSystem("double")
        x = cs.private_input("x")
        out = cs.output("out")
        cs.assign(out, lambda read: read(x) * 2)
        cs.enforce_equal(out, x * 2, "double")

        witness = cs.compute_witness({"x": 21})

        assert witness.value_of(out) == 42
        assert witness.public_signals() == ["42"]

    def test_violated_constraint_is_named(self) -> None:
        cs = ConstraintSystem("fixed")
        x = cs.private_input("x")
        cs.enforce_equal(x, 7, "x is seven")

        with pytest.raises(ConstraintUnsatisfiable) as exc_info:
            cs.compute_witness({"x": 8})

        assert exc_info.value.circuit == "fixed"
        assert exc_info.value.constraint == "x is seven"

    def test_missing_input(self) -> None:
        cs = ConstraintSystem("inputs")
        cs.private_input("x")
        with pytest.raises(WitnessInputError, match="missing"):
            cs.compute_witness({})

    def test_unknown_input(self) -> None:
        cs = ConstraintSystem("inputs")
        cs.private_input("x")
        with pytest.raises(WitnessInputError, match="not an input"):
            cs.compute_witness({"x": 1, "y": 2})

    def test_array_input_shape(self) -> None:
        cs = ConstraintSystem("arrays")
        cs.private_input_array("flags", 3)
        with pytest.raises(WitnessInputError, match="list of 3"):
            cs.compute_witness({"flags": [1, 1]})

    def test_malformed_value_does_not_leak(self) -> None:
        cs = ConstraintSystem("secret")
        cs.private_input("x")
        with pytest.raises(WitnessInputError) as exc_info:
            cs.compute_witness({"x": "12.5secret"})

        assert "12.5secret" not in str(exc_info.value)
        assert exc_info.value.signal == "x"

    def test_witness_repr_hides_values(self) -> None:
        cs = ConstraintSystem("repr")
        cs.private_input("x")
        witness = cs.compute_witness({"x": 123456789})

        assert "123456789" not in repr(witness)

    def test_signal_kinds(self) -> None:
        cs = ConstraintSystem("kinds")
        flags = cs.private_input_array("flags", 2)

        assert [f.name for f in flags] == ["flags[0]", "flags[1]"]
        assert all(f.kind is SignalKind.PRIVATE_INPUT for f in flags)
        assert not flags[0].is_public


class TestNum2Bits:
    """Tests for bit decomposition."""

    def test_decomposes_little_endian(self) -> None:
        cs, bits = _bits_system(4)
        witness = cs.compute_witness({"x": 0b1011})

        assert [witness.value_of(b) for b in bits] == [1, 1, 0, 1]

    def test_constraint_count(self) -> None:
        """One boolean constraint per bit plus the reconstruction."""
        cs, _ = _bits_system(8)
        assert cs.constraint_count == 9

    def test_value_too_wide(self) -> None:
        cs, _ = _bits_system(4)
        with pytest.raises(ConstraintUnsatisfiable, match="bits reconstruct input"):
            cs.compute_witness({"x": 16})

    def test_largest_value(self) -> None:
        cs, _ = _bits_system(4)
        cs.compute_witness({"x": 15})

    @pytest.mark.parametrize("n", [0, MAX_DECOMPOSITION_BITS + 1])
    def test_width_out_of_range(self, n: int) -> None:
        cs = ConstraintSystem("bits")
        x = cs.private_input("x")
        with pytest.raises(ValueError):
            num2bits(cs, x, n)


class TestComparators:
    """Tests for less_than and greater_eq_than."""

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [(3, 5, 1), (5, 5, 0), (6, 5, 0), (0, 1, 1), (0, 0, 0)],
    )
    def test_less_than(self, a: int, b: int, expected: int) -> None:
        cs, out = _comparison_system(less_than, 8)
        witness = cs.compute_witness({"a": a, "b": b})

        assert witness.value_of(out) == expected

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [(3, 5, 0), (5, 5, 1), (6, 5, 1), (255, 0, 1)],
    )
    def test_greater_eq_than(self, a: int, b: int, expected: int) -> None:
        cs, out = _comparison_system(greater_eq_than, 8)
        witness = cs.compute_witness({"a": a, "b": b})

        assert witness.value_of(out) == expected

    def test_full_width_comparison(self) -> None:
        cs, out = _comparison_system(less_than, MAX_SAFE_BITS)
        big = 2**251

        assert cs.compute_witness({"a": big - 1, "b": big}).value_of(out) == 1
        assert cs.compute_witness({"a": big, "b": big}).value_of(out) == 0

    def test_operand_wider_than_comparator(self) -> None:
        """b - a beyond 2**n leaves no valid decomposition."""
        cs, _ = _comparison_system(less_than, 8)
        with pytest.raises(ConstraintUnsatisfiable):
            cs.compute_witness({"a": 0, "b": 300})

    def test_width_above_safe_bound(self) -> None:
        cs = ConstraintSystem("cmp")
        a = cs.private_input("a")
        b = cs.public_input("b")
        with pytest.raises(ValueError):
            less_than(cs, a, b, MAX_SAFE_BITS + 1)
