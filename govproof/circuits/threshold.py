"""
Threshold Predicate Circuit
===========================

Proves a private value is strictly below a public bound.

Signals:
    private  <value_input>   the measured quantity (e.g. training FLOPs)
    public   <bound_input>   the regulatory bound
    output   valid           hard-constrained to 1

Because ``valid`` is fixed to 1 rather than exposed, a value at or above
the bound has no satisfying witness at all: proof generation fails and
nothing is produced. A verifier can only ever see "a proof exists".

Version: 0.1.0
"""

from collections.abc import Mapping
from typing import Any

from govproof.circuits.base import CircuitDefinition, PredicateKind
from govproof.circuits.constraints import ConstraintSystem, Witness
from govproof.circuits.field import MAX_SAFE_BITS
from govproof.circuits.gadgets import less_than
from govproof.errors import WitnessInputError


class ThresholdCircuit(CircuitDefinition):
    """``value < bound`` with the comparator at full safe width."""

    predicate = PredicateKind.BELOW_THRESHOLD

    def __init__(
        self,
        name: str = "compute_threshold",
        value_input: str = "privateCompute",
        bound_input: str = "threshold",
        bits: int = MAX_SAFE_BITS,
    ) -> None:
        self.name = name
        self.value_input = value_input
        self.bound_input = bound_input
        self.bits = bits

    def define(self, cs: ConstraintSystem) -> None:
        value = cs.private_input(self.value_input)
        bound = cs.public_input(self.bound_input)
        valid = cs.output("valid")

        lt = less_than(cs, value, bound, self.bits)
        cs.assign(valid, lambda read: read(lt))
        cs.enforce_equal(valid, lt, "valid <== lt.out")
        cs.enforce_equal(valid, 1, "valid === 1")

    def compute_witness(self, inputs: Mapping[str, Any]) -> Witness:
        """
        Solve the witness after checking both operands lie in [0, 2**bits).

        The comparator assumes that range; a negative value would wrap in
        the field and compare as small. Malformed values are left to the
        solver, which reports them.
        """
        for name in (self.value_input, self.bound_input):
            value = inputs.get(name)
            if isinstance(value, bool):
                continue
            if isinstance(value, str) and value.strip().removeprefix("-").isdigit():
                value = int(value.strip())
            if isinstance(value, int) and not 0 <= value < 1 << self.bits:
                raise WitnessInputError(self.name, name, f"outside [0, 2**{self.bits})")
        return super().compute_witness(inputs)

    def describe_claim(self, public_signals: list[str]) -> str:
        bound = public_signals[1] if len(public_signals) > 1 else "?"
        return f"{self.value_input} < {self.bound_input} ({bound})"
