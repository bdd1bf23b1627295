"""
Comparison Gadgets
==================

Bit decomposition and strict comparison over the BN254 field.

A value is range-checked by decomposing it into boolean-constrained bits
whose weighted sum must reconstruct it exactly. Values needing more bits
than allotted have no satisfying assignment, so out-of-range inputs are
rejected while the witness is built, never at verification time.

Version: 0.1.0
"""

from govproof.circuits.constraints import (
    ConstraintSystem,
    LinearCombination,
    Operand,
    Signal,
)
from govproof.circuits.field import MAX_SAFE_BITS


# The comparator decomposes into n + 1 bits; 2**253 is still below the field order
MAX_DECOMPOSITION_BITS = MAX_SAFE_BITS + 1


def num2bits(cs: ConstraintSystem, x: Operand, n: int, name: str = "num2bits") -> list[Signal]:
    """
    Decompose ``x`` into ``n`` little-endian bits.

    Adds ``b * (b - 1) == 0`` per bit and ``sum(b_i * 2**i) == x``.

    Args:
        cs: Constraint system to extend
        x: Value to decompose
        n: Bit width (1..253)
        name: Component scope for signal names and constraint labels

    Returns:
        The bit signals, least significant first.
    """
    if not 1 <= n <= MAX_DECOMPOSITION_BITS:
        raise ValueError(f"bit width must be in [1, {MAX_DECOMPOSITION_BITS}], got {n}")

    value = LinearCombination.of(x)
    bits: list[Signal] = []
    with cs.scope(name):
        for i in range(n):
            bit = cs.intermediate(f"out[{i}]", hint=lambda read, i=i: (read(value) >> i) & 1)
            cs.enforce_boolean(bit, f"out[{i}] is boolean")
            bits.append(bit)

        recomposed = sum((bit * (1 << i) for i, bit in enumerate(bits)), LinearCombination())
        cs.enforce_equal(recomposed, value, "bits reconstruct input")
    return bits


def less_than(cs: ConstraintSystem, a: Operand, b: Operand, n: int, name: str = "lt") -> Signal:
    """
    Strict comparison ``a < b`` for operands bounded to ``n`` bits.

    Decomposes ``a + 2**n - b`` into ``n + 1`` bits; the top bit is clear
    exactly when ``a < b``. Equal operands give 0.

    Returns:
        Signal that is 1 when ``a < b`` and 0 otherwise.
    """
    if not 1 <= n <= MAX_SAFE_BITS:
        raise ValueError(f"comparator width must be in [1, {MAX_SAFE_BITS}], got {n}")

    with cs.scope(name):
        shifted = LinearCombination.of(a) + (1 << n) - LinearCombination.of(b)
        bits = num2bits(cs, shifted, n + 1)
        top = bits[n]
        out = cs.intermediate("out", hint=lambda read: 1 - read(top))
        cs.enforce_equal(out, 1 - top, "out <== 1 - top bit")
    return out


def greater_eq_than(cs: ConstraintSystem, a: Operand, b: Operand, n: int, name: str = "gte") -> Signal:
    """``a >= b``, derived as ``1 - less_than(a, b)``."""
    with cs.scope(name):
        lt = less_than(cs, a, b, n)
        out = cs.intermediate("out", hint=lambda read: 1 - read(lt))
        cs.enforce_equal(out, 1 - lt, "out <== 1 - lt.out")
    return out
