"""
Composite Proofs
================

Bundle independently generated proofs into one submission artifact.

Usage:
    from govproof.composite import build_composite, verify_composite

    artifact = build_composite(
        [(compute_descriptor, compute_proof), (evals_descriptor, evals_proof)],
        submitter="AI Lab Example Inc.",
        framework="EU AI Act + RSP",
    )
    result = await verify_composite(artifact, verifier)
"""

from govproof.composite.bundler import (
    build_composite,
    load_composite,
    save_composite,
    verify_composite,
)
from govproof.composite.models import (
    COMPOSITE_VERSION,
    COMPOSITION_METHOD,
    ClaimDescriptor,
    CompositeArtifact,
    CompositeClaim,
    CompositeVerificationResult,
)


__all__ = [
    "build_composite",
    "verify_composite",
    "save_composite",
    "load_composite",
    "ClaimDescriptor",
    "CompositeArtifact",
    "CompositeClaim",
    "CompositeVerificationResult",
    "COMPOSITE_VERSION",
    "COMPOSITION_METHOD",
]
