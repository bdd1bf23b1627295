"""
Predicate Circuits
==================

Arithmetic constraint design for compliance predicates.

Two predicate families are supported, each sound by construction (the
validity output is hard-constrained to 1, so false predicates admit no
witness and therefore no proof):

- ThresholdCircuit: private value < public bound
- FlagAggregationCircuit: at least k of N private boolean flags are set

Usage:
    from govproof.circuits import COMPUTE_THRESHOLD

    witness = COMPUTE_THRESHOLD.compute_witness({
        "privateCompute": 5 * 10**24,
        "threshold": 10**25,
    })
    witness.public_signals()  # ["1", "10000000000000000000000000"]

Version: 0.1.0
"""

from govproof.circuits.aggregation import FlagAggregationCircuit
from govproof.circuits.base import CircuitDefinition, PredicateKind
from govproof.circuits.circom import render_circom
from govproof.circuits.constraints import (
    Constraint,
    ConstraintSystem,
    LinearCombination,
    Signal,
    SignalKind,
    Witness,
)
from govproof.circuits.field import FIELD_ORDER, MAX_SAFE_BITS
from govproof.circuits.gadgets import greater_eq_than, less_than, num2bits
from govproof.circuits.registry import (
    CIRCUITS,
    COMPUTE_THRESHOLD,
    EVALUATION_ATTESTATION,
    POLICY_COMPLIANCE,
    aggregation_circuit_for,
    get_circuit,
)
from govproof.circuits.threshold import ThresholdCircuit


__all__ = [
    # Constraint system
    "ConstraintSystem",
    "Constraint",
    "LinearCombination",
    "Signal",
    "SignalKind",
    "Witness",
    "FIELD_ORDER",
    "MAX_SAFE_BITS",
    # Gadgets
    "num2bits",
    "less_than",
    "greater_eq_than",
    # Circuits
    "CircuitDefinition",
    "PredicateKind",
    "ThresholdCircuit",
    "FlagAggregationCircuit",
    "render_circom",
    # Registry
    "CIRCUITS",
    "COMPUTE_THRESHOLD",
    "EVALUATION_ATTESTATION",
    "POLICY_COMPLIANCE",
    "get_circuit",
    "aggregation_circuit_for",
]
