"""
ZK-SNARK Proof Generation
=========================

Drives proof generation for the predicate circuits.

Every request is first solved locally against the Python circuit
definition. Inputs that cannot satisfy the hard constraints fail here
with ConstraintUnsatisfiable, before the external engine is invoked,
and no artifact is produced. The engine's public signals are then
checked against the locally derived ones, which catches build artifacts
compiled from a different circuit.

Version: 0.1.0
"""

import asyncio
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from govproof.circuits.base import CircuitDefinition
from govproof.circuits.registry import (
    COMPUTE_THRESHOLD,
    EVALUATION_ATTESTATION,
    POLICY_COMPLIANCE,
    get_circuit,
)
from govproof.config import settings
from govproof.errors import ConstraintUnsatisfiable, KeyMismatch
from govproof.logging import get_logger
from govproof.zk.backend import ProvingBackend
from govproof.zk.models import GeneratedProof, ProofMetadata, ProofRequest


logger = get_logger(__name__)


def normalize_inputs(inputs: Mapping[str, Any]) -> dict[str, Any]:
    """
    Render inputs as decimal strings.

    Field elements routinely exceed 2**53, which the JavaScript witness
    calculator cannot read back from JSON numbers.
    """
    normalized: dict[str, Any] = {}
    for name, value in inputs.items():
        if isinstance(value, (list, tuple)):
            normalized[name] = [str(v) for v in value]
        else:
            normalized[name] = str(value)
    return normalized


@dataclass
class BatchOutcome:
    """Result of proving several independent claims."""

    proofs: dict[str, GeneratedProof] = field(default_factory=dict)
    failures: dict[str, ConstraintUnsatisfiable] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        """True when every requested claim produced a proof."""
        return not self.failures


class ComplianceProver:
    """
    ZK-SNARK proof generator for compliance claims.

    Usage:
        prover = ComplianceProver(SnarkjsBackend())

        proof = await prover.prove_compute_threshold(
            private_compute=5 * 10**24,
            threshold=10**25,
        )
    """

    def __init__(
        self,
        backend: ProvingBackend,
        max_concurrent_proofs: int | None = None,
    ) -> None:
        """
        Initialize the prover.

        Args:
            backend: External proving engine
            max_concurrent_proofs: Upper bound on simultaneous engine runs.
                Defaults to settings.zk.max_concurrent_proofs
        """
        self.backend = backend
        self._slots = asyncio.Semaphore(max_concurrent_proofs or settings.zk.max_concurrent_proofs)

    async def prove(
        self,
        circuit: str | CircuitDefinition,
        inputs: Mapping[str, Any],
    ) -> GeneratedProof:
        """
        Generate a proof that ``inputs`` satisfy ``circuit``.

        Args:
            circuit: Circuit definition or registered circuit name
            inputs: Private and public inputs keyed by signal name

        Returns:
            GeneratedProof with proof, public signals and metadata

        Raises:
            ConstraintUnsatisfiable: If the predicate is false for these inputs
            KeyMismatch: If the engine's artifacts disagree with the circuit definition
            ProvingBackendError: If the engine cannot run
        """
        if isinstance(circuit, str):
            circuit = get_circuit(circuit)

        try:
            expected_signals = circuit.compute_witness(inputs).public_signals()
        except ConstraintUnsatisfiable as e:
            logger.info(
                "zk_witness_rejected",
                circuit=circuit.name,
                constraint=e.constraint,
            )
            raise

        async with self._slots:
            start_time = time.time()
            proof, public_signals = await self.backend.prove(circuit.name, normalize_inputs(inputs))
            proving_time_ms = int((time.time() - start_time) * 1000)

        if public_signals.signals != expected_signals:
            logger.error(
                "zk_public_signals_mismatch",
                circuit=circuit.name,
                backend=self.backend.name,
                expected_count=len(expected_signals),
                actual_count=len(public_signals.signals),
            )
            raise KeyMismatch(
                f"Engine artifacts for '{circuit.name}' do not match the circuit definition"
            )

        logger.info(
            "zk_proof_generated",
            circuit=circuit.name,
            backend=self.backend.name,
            proving_time_ms=proving_time_ms,
        )

        return GeneratedProof(
            proof=proof,
            public_signals=public_signals,
            metadata=ProofMetadata(
                circuit_name=circuit.name,
                predicate=circuit.predicate,
                proving_time_ms=proving_time_ms,
            ),
        )

    async def prove_compute_threshold(self, private_compute: int, threshold: int) -> GeneratedProof:
        """Prove ``private_compute < threshold`` without revealing the compute figure."""
        return await self.prove(
            COMPUTE_THRESHOLD,
            {
                COMPUTE_THRESHOLD.value_input: private_compute,
                COMPUTE_THRESHOLD.bound_input: threshold,
            },
        )

    async def prove_evaluations(self, evaluation_flags: Sequence[int], required_count: int) -> GeneratedProof:
        """Prove at least ``required_count`` of the five safety evaluations were completed."""
        return await self.prove(
            EVALUATION_ATTESTATION,
            {
                EVALUATION_ATTESTATION.flags_input: list(evaluation_flags),
                EVALUATION_ATTESTATION.minimum_input: required_count,
            },
        )

    async def prove_policy(self, policy_items: Sequence[int], min_required: int) -> GeneratedProof:
        """Prove at least ``min_required`` of the eight policy checklist items are met."""
        return await self.prove(
            POLICY_COMPLIANCE,
            {
                POLICY_COMPLIANCE.flags_input: list(policy_items),
                POLICY_COMPLIANCE.minimum_input: min_required,
            },
        )

    async def prove_many(self, requests: Iterable[ProofRequest]) -> BatchOutcome:
        """
        Prove independent claims concurrently.

        A claim whose inputs are unsatisfiable is recorded in
        ``BatchOutcome.failures`` and does not affect the others; whether
        to submit a partial set is the caller's decision. Any other error
        propagates.
        """
        requests = list(requests)
        claim_ids = [r.claim_id for r in requests]
        if len(set(claim_ids)) != len(claim_ids):
            raise ValueError("claim ids must be unique within a batch")

        results = await asyncio.gather(
            *(self.prove(r.circuit_name, r.inputs) for r in requests),
            return_exceptions=True,
        )

        outcome = BatchOutcome()
        for request, result in zip(requests, results):
            if isinstance(result, ConstraintUnsatisfiable):
                outcome.failures[request.claim_id] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                outcome.proofs[request.claim_id] = result

        logger.info(
            "zk_batch_completed",
            proved=sorted(outcome.proofs),
            failed=sorted(outcome.failures),
        )
        return outcome
