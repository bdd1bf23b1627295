"""
Policy Pack Mapper
==================

Binds a policy pack to the registered circuits.

Forward direction: pack parameters plus private values become positional
circuit inputs (one ProofRequest per claim). Reverse direction: the
public signals of a proof become a human-readable claim statement.

Claim ids are the circuit names, so each circuit is proven at most once
per pack.

Version: 0.1.0
"""

from govproof.circuits.aggregation import FlagAggregationCircuit
from govproof.circuits.base import CircuitDefinition
from govproof.circuits.field import MAX_SAFE_BITS
from govproof.circuits.registry import COMPUTE_THRESHOLD, aggregation_circuit_for, get_circuit
from govproof.composite.models import ClaimDescriptor
from govproof.errors import MalformedArtifact
from govproof.policy.models import PolicyPack, PrivateInputs
from govproof.zk.models import ProofRequest


CLAIM_LABELS: dict[str, str] = {
    "compute_threshold": "Training compute below regulatory threshold",
    "evaluation_attestation": "All required safety evaluations completed",
    "policy_compliance": "Responsible Scaling Policy requirements met",
}


class PolicyPackMapper:
    """
    Maps one policy pack onto circuit inputs and back onto claim labels.

    Usage:
        mapper = PolicyPackMapper(PolicyPack.from_file("policies/policy_pack_example.json"))
        requests = mapper.claim_requests()
        outcome = await prover.prove_many(requests)

    Raises:
        MalformedArtifact: If the pack cannot be bound to the registered circuits.
    """

    def __init__(self, pack: PolicyPack) -> None:
        self.pack = pack
        self._evaluation_circuit: FlagAggregationCircuit | None = None
        self._checklist_circuit: FlagAggregationCircuit | None = None
        self._validate()

    def _fail(self, reason: str) -> MalformedArtifact:
        return MalformedArtifact(f"Policy pack '{self.pack.id}': {reason}")

    def _bind_aggregation(self, section: str, n: int, names: list[str], minimum: int) -> FlagAggregationCircuit:
        circuit = aggregation_circuit_for(n)
        if circuit is None:
            raise self._fail(f"{section}: no circuit is built for N={n}")
        if names and len(names) != n:
            raise self._fail(f"{section}: lists {len(names)} entries but N={n}")
        if minimum > n:
            raise self._fail(f"{section}: requires {minimum} of only {n}")
        return circuit

    def _validate(self) -> None:
        pack = self.pack
        if not (pack.compute_threshold or pack.required_evaluations or pack.policy_checklist):
            raise self._fail("declares no claims")

        if pack.compute_threshold and pack.compute_threshold.public_threshold >= 1 << MAX_SAFE_BITS:
            raise self._fail(f"compute_threshold: bound exceeds {MAX_SAFE_BITS} bits")

        if pack.required_evaluations:
            section = pack.required_evaluations
            self._evaluation_circuit = self._bind_aggregation(
                "required_evaluations", section.n, section.names, section.required_count
            )
        if pack.policy_checklist:
            section = pack.policy_checklist
            self._checklist_circuit = self._bind_aggregation(
                "policy_checklist", section.n, section.items, section.min_required
            )
        if self._evaluation_circuit is not None and self._evaluation_circuit is self._checklist_circuit:
            raise self._fail("required_evaluations and policy_checklist map to the same circuit")

    @property
    def circuits(self) -> list[CircuitDefinition]:
        """Circuits this pack is proven with, in claim order."""
        circuits: list[CircuitDefinition] = []
        if self.pack.compute_threshold:
            circuits.append(COMPUTE_THRESHOLD)
        if self._evaluation_circuit is not None:
            circuits.append(self._evaluation_circuit)
        if self._checklist_circuit is not None:
            circuits.append(self._checklist_circuit)
        return circuits

    @property
    def claim_ids(self) -> list[str]:
        return [circuit.name for circuit in self.circuits]

    def claim_requests(self, private_inputs: PrivateInputs | None = None) -> list[ProofRequest]:
        """
        Build one proof request per claim.

        Private values that are absent are left out of the inputs; the
        witness solver then rejects that claim alone.

        Args:
            private_inputs: Claimant's values. Defaults to the pack's example inputs.

        Raises:
            ValueError: If no private inputs are given and the pack has none.
        """
        private = private_inputs or self.pack.private_inputs
        if private is None:
            raise ValueError(f"Policy pack '{self.pack.id}' carries no private inputs")

        requests: list[ProofRequest] = []
        if self.pack.compute_threshold:
            inputs = {COMPUTE_THRESHOLD.bound_input: self.pack.compute_threshold.public_threshold}
            if private.private_compute is not None:
                inputs[COMPUTE_THRESHOLD.value_input] = private.private_compute
            requests.append(self._request(COMPUTE_THRESHOLD, inputs))

        if self._evaluation_circuit is not None:
            circuit = self._evaluation_circuit
            inputs = {circuit.minimum_input: self.pack.required_evaluations.required_count}
            if private.evaluation_flags is not None:
                inputs[circuit.flags_input] = list(private.evaluation_flags)
            requests.append(self._request(circuit, inputs))

        if self._checklist_circuit is not None:
            circuit = self._checklist_circuit
            inputs = {circuit.minimum_input: self.pack.policy_checklist.min_required}
            if private.policy_flags is not None:
                inputs[circuit.flags_input] = list(private.policy_flags)
            requests.append(self._request(circuit, inputs))

        return requests

    def _request(self, circuit: CircuitDefinition, inputs: dict) -> ProofRequest:
        return ProofRequest(
            claim_id=circuit.name,
            circuit_name=circuit.name,
            inputs=inputs,
            label=CLAIM_LABELS.get(circuit.name, circuit.name),
        )

    def public_statement(self, circuit: CircuitDefinition) -> list[str]:
        """The public signals a valid proof of this claim must carry."""
        if circuit is COMPUTE_THRESHOLD:
            bound = self.pack.compute_threshold.public_threshold
        elif circuit is self._evaluation_circuit:
            bound = self.pack.required_evaluations.required_count
        else:
            bound = self.pack.policy_checklist.min_required
        return ["1", str(bound)]

    def descriptors(self) -> dict[str, ClaimDescriptor]:
        """Claim descriptors keyed by claim id, in claim order."""
        return {
            circuit.name: ClaimDescriptor(
                claim_id=circuit.name,
                circuit=circuit.name,
                predicate=circuit.predicate,
                label=CLAIM_LABELS.get(circuit.name, circuit.name),
                statement=circuit.describe_claim(self.public_statement(circuit)),
            )
            for circuit in self.circuits
        }

    def label_for(self, claim_id: str, public_signals: list[str]) -> str:
        """
        Human-readable reading of a proof's public signals.

        Example:
            "Training compute below regulatory threshold: privateCompute < threshold (10000000000000000000000000)"
        """
        circuit = get_circuit(claim_id)
        label = CLAIM_LABELS.get(claim_id, claim_id)
        return f"{label}: {circuit.describe_claim(public_signals)}"

    def human_names(self, claim_id: str) -> list[str]:
        """Evaluation names or checklist items behind an aggregation claim."""
        if self._evaluation_circuit is not None and claim_id == self._evaluation_circuit.name:
            return list(self.pack.required_evaluations.names)
        if self._checklist_circuit is not None and claim_id == self._checklist_circuit.name:
            return list(self.pack.policy_checklist.items)
        return []
