"""
Circuit Registry
================

The fixed circuit instances keys are generated for.

Version: 0.1.0
"""

from types import MappingProxyType

from govproof.circuits.aggregation import FlagAggregationCircuit
from govproof.circuits.base import CircuitDefinition
from govproof.circuits.threshold import ThresholdCircuit


COMPUTE_THRESHOLD = ThresholdCircuit(
    name="compute_threshold",
    value_input="privateCompute",
    bound_input="threshold",
)

EVALUATION_ATTESTATION = FlagAggregationCircuit(
    name="evaluation_attestation",
    n_flags=5,
    flags_input="evaluationFlags",
    minimum_input="requiredCount",
)

POLICY_COMPLIANCE = FlagAggregationCircuit(
    name="policy_compliance",
    n_flags=8,
    flags_input="policyItems",
    minimum_input="minRequired",
)

CIRCUITS: MappingProxyType[str, CircuitDefinition] = MappingProxyType(
    {
        circuit.name: circuit
        for circuit in (COMPUTE_THRESHOLD, EVALUATION_ATTESTATION, POLICY_COMPLIANCE)
    }
)


def get_circuit(name: str) -> CircuitDefinition:
    """Look up a registered circuit by name."""
    try:
        return CIRCUITS[name]
    except KeyError:
        raise KeyError(f"Unknown circuit '{name}', expected one of {sorted(CIRCUITS)}") from None


def aggregation_circuit_for(n_flags: int) -> FlagAggregationCircuit | None:
    """Find the registered aggregation circuit with the given arity."""
    for circuit in CIRCUITS.values():
        if isinstance(circuit, FlagAggregationCircuit) and circuit.n_flags == n_flags:
            return circuit
    return None
