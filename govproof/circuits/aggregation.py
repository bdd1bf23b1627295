"""
Flag-Aggregation Predicate Circuit
==================================

Proves that at least ``k`` of ``N`` private boolean requirements are met.

Signals:
    private  <flags_input>[N]   one flag per requirement, each in {0, 1}
    public   <minimum_input>    k, the number of requirements that must hold
    output   valid              hard-constrained to 1

Flags are summed through a chain of prefix sums and compared to ``k``
with an 8-bit comparator, so N and k must stay below 256. Widening the
comparator is a circuit change (new keys), not a configuration change.

Version: 0.1.0
"""

from govproof.circuits.base import CircuitDefinition, PredicateKind
from govproof.circuits.constraints import ConstraintSystem, LinearCombination, Signal
from govproof.circuits.gadgets import greater_eq_than


AGGREGATION_BITS = 8


class FlagAggregationCircuit(CircuitDefinition):
    """``sum(flags) >= minimum`` over a fixed number of flags."""

    predicate = PredicateKind.K_OF_N

    def __init__(
        self,
        name: str,
        n_flags: int,
        flags_input: str,
        minimum_input: str,
        bits: int = AGGREGATION_BITS,
    ) -> None:
        if not 1 <= n_flags < (1 << bits):
            raise ValueError(f"flag count must be in [1, {(1 << bits) - 1}] for a {bits}-bit comparator")
        self.name = name
        self.n_flags = n_flags
        self.flags_input = flags_input
        self.minimum_input = minimum_input
        self.bits = bits

    def define(self, cs: ConstraintSystem) -> None:
        flags = cs.private_input_array(self.flags_input, self.n_flags)
        minimum = cs.public_input(self.minimum_input)
        valid = cs.output("valid")

        sums: list[Signal] = []
        for i, flag in enumerate(flags):
            cs.enforce_boolean(flag, f"{self.flags_input}[{i}] is boolean")
            running = LinearCombination.of(flag) if i == 0 else sums[-1] + flag
            partial = cs.intermediate(f"sum[{i}]", hint=lambda read, running=running: read(running))
            cs.enforce_equal(partial, running, f"sum[{i}]")
            sums.append(partial)

        gte = greater_eq_than(cs, sums[-1], minimum, self.bits)
        cs.assign(valid, lambda read: read(gte))
        cs.enforce_equal(valid, gte, "valid <== gte.out")
        cs.enforce_equal(valid, 1, "valid === 1")

    def describe_claim(self, public_signals: list[str]) -> str:
        minimum = public_signals[1] if len(public_signals) > 1 else "?"
        return f"sum({self.flags_input}) >= {self.minimum_input} ({minimum})"
