"""
ZK-SNARK Proof Verification
===========================

Verify compliance proofs against injected verification keys.

``ComplianceVerifier.verify`` is the pure check: it returns a boolean and
never raises for a bad proof. The claim-level helpers first check that
the key structurally belongs to the circuit (KeyMismatch otherwise) and
wrap the outcome in a VerificationResult.

Version: 0.1.0
"""

import asyncio
import time
from collections.abc import Iterable
from pathlib import Path

from govproof.circuits.registry import get_circuit
from govproof.errors import (
    GovProofError,
    KeyMismatch,
    VerificationRejected,
)
from govproof.logging import get_logger
from govproof.zk.backend import ProvingBackend
from govproof.zk.keys import KeyRing
from govproof.zk.models import (
    GeneratedProof,
    PublicSignals,
    VerificationKey,
    VerificationResult,
    ZKProof,
)
from govproof.zk.store import ProofStore


logger = get_logger(__name__)


def check_key(circuit_name: str, verification_key: VerificationKey, proof: ZKProof | None = None) -> None:
    """
    Check that a verification key can belong to a circuit.

    Raises:
        KeyMismatch: On unknown circuit, public arity, protocol or curve mismatch.
    """
    try:
        circuit = get_circuit(circuit_name)
    except KeyError as e:
        raise KeyMismatch(str(e)) from None

    if verification_key.n_public != circuit.n_public:
        raise KeyMismatch(
            f"Key declares {verification_key.n_public} public inputs, "
            f"circuit '{circuit_name}' has {circuit.n_public}"
        )
    if proof is not None and (
        proof.protocol != verification_key.protocol or proof.curve != verification_key.curve
    ):
        raise KeyMismatch(
            f"Proof is {proof.protocol}/{proof.curve}, key is "
            f"{verification_key.protocol}/{verification_key.curve}"
        )


class ComplianceVerifier:
    """
    ZK-SNARK proof verifier.

    Keys are loaded once (``KeyRing.load``) and shared read-only; the
    verifier holds no other state, so concurrent verifications are safe.
    """

    def __init__(self, backend: ProvingBackend, keyring: KeyRing) -> None:
        """
        Initialize the verifier.

        Args:
            backend: External verification engine
            keyring: Verification keys by circuit name
        """
        self.backend = backend
        self.keyring = keyring

    async def verify(
        self,
        verification_key: VerificationKey,
        public_signals: PublicSignals,
        proof: ZKProof,
    ) -> bool:
        """
        Check a proof against a key and public signals.

        Returns False for a tampered proof, mismatched public signals or a
        wrong key. Engine failures are logged and also yield False: a proof
        that cannot be checked is not accepted.
        """
        if len(public_signals.signals) != verification_key.n_public:
            return False
        if proof.protocol != verification_key.protocol or proof.curve != verification_key.curve:
            return False
        try:
            return await self.backend.verify(verification_key, public_signals, proof)
        except GovProofError as e:
            logger.error("zk_verification_backend_failed", backend=self.backend.name, error=str(e))
            return False

    async def verify_claim(
        self,
        circuit_name: str,
        proof: ZKProof,
        public_signals: PublicSignals,
        claim_id: str | None = None,
    ) -> VerificationResult:
        """
        Verify a proof for a named circuit using the key ring.

        Raises:
            KeyMismatch: If no suitable key exists for the circuit.
        """
        verification_key = self.keyring[circuit_name]
        check_key(circuit_name, verification_key, proof)

        start_time = time.time()
        is_valid = await self.verify(verification_key, public_signals, proof)
        verification_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            "zk_proof_verified",
            circuit=circuit_name,
            claim_id=claim_id,
            valid=is_valid,
            verification_time_ms=verification_time_ms,
        )

        return VerificationResult(
            valid=is_valid,
            circuit=circuit_name,
            claim_id=claim_id,
            key_fingerprint=verification_key.fingerprint,
            verification_time_ms=verification_time_ms,
            error=None if is_valid else "Proof verification failed",
        )

    async def verify_proof(self, proof: GeneratedProof, claim_id: str | None = None) -> VerificationResult:
        """Verify a freshly generated proof."""
        return await self.verify_claim(
            proof.circuit_name,
            proof.proof,
            proof.public_signals,
            claim_id=claim_id,
        )

    async def ensure_valid(self, proof: GeneratedProof, claim_id: str | None = None) -> VerificationResult:
        """
        Verify a proof and raise if it is rejected.

        Raises:
            VerificationRejected: If the proof does not verify.
            KeyMismatch: If no suitable key exists for the circuit.
        """
        result = await self.verify_proof(proof, claim_id=claim_id)
        if not result.valid:
            raise VerificationRejected(proof.circuit_name, claim_id)
        return result

    async def verify_many(self, proofs: Iterable[GeneratedProof]) -> list[VerificationResult]:
        """Verify independent proofs concurrently, preserving order."""
        return list(await asyncio.gather(*(self.verify_proof(p) for p in proofs)))


# Convenience functions

async def verify_saved_proof(
    circuit_name: str,
    backend: ProvingBackend,
    keyring: KeyRing,
    data_dir: str | Path,
) -> VerificationResult:
    """
    Verify a proof persisted by ``ProofStore``.

    Raises:
        MalformedArtifact: If the stored proof or public signals are invalid.
        KeyMismatch: If no suitable key exists for the circuit.
    """
    proof, public_signals = ProofStore(data_dir).load(circuit_name)
    verifier = ComplianceVerifier(backend, keyring)
    return await verifier.verify_claim(circuit_name, proof, public_signals)

