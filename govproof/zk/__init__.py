"""
ZK-SNARK Integration Module
===========================

Proof lifecycle for compliance predicates: generation against an
external Groth16 engine, verification against injected keys, and
write-once persistence.

Usage:
    from govproof.zk import ComplianceProver, ComplianceVerifier, KeyRing, SnarkjsBackend

    backend = SnarkjsBackend()
    prover = ComplianceProver(backend)
    proof = await prover.prove_compute_threshold(
        private_compute=5 * 10**24,
        threshold=10**25,
    )

    verifier = ComplianceVerifier(backend, KeyRing.load("build"))
    result = await verifier.verify_proof(proof)

Version: 0.1.0
"""

from govproof.zk.backend import ProvingBackend, SnarkjsBackend
from govproof.zk.keys import CircuitArtifacts, KeyRing, load_verification_key
from govproof.zk.models import (
    GeneratedProof,
    ProofMetadata,
    ProofRequest,
    PublicSignals,
    VerificationKey,
    VerificationResult,
    ZKProof,
)
from govproof.zk.prover import BatchOutcome, ComplianceProver, normalize_inputs
from govproof.zk.store import ProofStore
from govproof.zk.verifier import ComplianceVerifier, check_key, verify_saved_proof


__all__ = [
    # Backends
    "ProvingBackend",
    "SnarkjsBackend",
    # Keys
    "CircuitArtifacts",
    "KeyRing",
    "load_verification_key",
    # Prover
    "ComplianceProver",
    "BatchOutcome",
    "normalize_inputs",
    # Verifier
    "ComplianceVerifier",
    "check_key",
    "verify_saved_proof",
    # Store
    "ProofStore",
    # Models
    "ZKProof",
    "PublicSignals",
    "VerificationKey",
    "ProofMetadata",
    "GeneratedProof",
    "ProofRequest",
    "VerificationResult",
]
