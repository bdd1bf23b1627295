"""
Composite Proof Bundler
=======================

Packages independently generated proofs into one submission artifact
and verifies it member by member.

Verification is the logical AND of independent per-member checks and
costs one verification per claim. Nothing here aggregates proofs
cryptographically; a succinct aggregate would need its own soundness
and zero-knowledge argument.

Atomicity is a convention, not a guarantee: a submitter can always
build a composite that leaves out a claim they could not prove.

Version: 0.1.0
"""

import asyncio
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from govproof.config import settings
from govproof.errors import KeyMismatch, MalformedArtifact
from govproof.logging import get_logger
from govproof.composite.models import (
    ClaimDescriptor,
    CompositeArtifact,
    CompositeClaim,
    CompositeVerificationResult,
)
from govproof.zk.models import GeneratedProof, VerificationResult
from govproof.zk.store import read_json
from govproof.zk.verifier import ComplianceVerifier


logger = get_logger(__name__)


def build_composite(
    members: Iterable[tuple[ClaimDescriptor, GeneratedProof]],
    submitter: str | None = None,
    framework: str | None = None,
    timestamp: datetime | None = None,
) -> CompositeArtifact:
    """
    Assemble a composite artifact from generated proofs.

    Args:
        members: (descriptor, proof) pairs, in submission order
        submitter: Submitting organisation. Defaults to settings.submission.submitter
        framework: Regulatory framework id. Defaults to settings.submission.framework
        timestamp: Submission time. Defaults to now (UTC)

    Returns:
        Immutable CompositeArtifact

    Raises:
        ValueError: On duplicate claim ids, a descriptor naming a different
            circuit than its proof, or an empty member list.
    """
    claims: dict[str, CompositeClaim] = {}
    for descriptor, generated in members:
        if descriptor.claim_id in claims:
            raise ValueError(f"Duplicate claim id '{descriptor.claim_id}'")
        if descriptor.circuit != generated.circuit_name:
            raise ValueError(
                f"Claim '{descriptor.claim_id}' describes circuit '{descriptor.circuit}' "
                f"but its proof is for '{generated.circuit_name}'"
            )
        claims[descriptor.claim_id] = CompositeClaim(
            proof=generated.proof,
            public_input_vector=list(generated.public_signals.signals),
            label=descriptor.label,
            circuit=descriptor.circuit,
            predicate=descriptor.predicate,
            statement=descriptor.statement,
        )

    extra = {"timestamp": timestamp} if timestamp is not None else {}
    try:
        artifact = CompositeArtifact(
            submitter=submitter or settings.submission.submitter,
            framework=framework or settings.submission.framework,
            claims=claims,
            **extra,
        )
    except ValidationError as e:
        raise ValueError(f"Cannot build composite: {e.errors()[0]['msg']}") from None

    logger.info(
        "composite_built",
        claims=artifact.claim_ids,
        submitter=artifact.submitter,
        framework=artifact.framework,
    )
    return artifact


async def _verify_member(
    verifier: ComplianceVerifier,
    claim_id: str,
    claim: CompositeClaim,
) -> VerificationResult:
    try:
        return await verifier.verify_claim(
            claim.circuit,
            claim.proof,
            claim.public_signals,
            claim_id=claim_id,
        )
    except (KeyMismatch, ValidationError) as e:
        logger.warning("composite_member_rejected", claim_id=claim_id, circuit=claim.circuit)
        return VerificationResult(
            valid=False,
            circuit=claim.circuit,
            claim_id=claim_id,
            verification_time_ms=0,
            error=str(e),
        )


async def verify_composite(
    artifact: CompositeArtifact,
    verifier: ComplianceVerifier,
) -> CompositeVerificationResult:
    """
    Verify every member independently and AND the results.

    Members are checked concurrently and all of them are reported, even
    after one has failed.
    """
    claim_ids = artifact.claim_ids
    results = await asyncio.gather(
        *(_verify_member(verifier, claim_id, artifact.claims[claim_id]) for claim_id in claim_ids)
    )
    by_claim = dict(zip(claim_ids, results))
    valid = bool(by_claim) and all(r.valid for r in results)

    logger.info(
        "composite_verified",
        valid=valid,
        claims=len(by_claim),
        failed=[claim_id for claim_id, r in by_claim.items() if not r.valid],
    )
    return CompositeVerificationResult(valid=valid, results=by_claim)


def save_composite(artifact: CompositeArtifact, path: str | Path) -> Path:
    """
    Write a composite artifact; never overwrites.

    Raises:
        FileExistsError: If ``path`` already exists.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "x", encoding="utf-8") as f:
        f.write(artifact.to_json())
    logger.info("composite_saved", path=str(path), claims=len(artifact.claims))
    return path


def load_composite(path: str | Path) -> CompositeArtifact:
    """
    Load and validate a composite artifact.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        MalformedArtifact: If the file violates the composite schema.
    """
    data = read_json(Path(path))
    try:
        return CompositeArtifact.model_validate(data)
    except ValidationError as e:
        raise MalformedArtifact(f"Invalid composite artifact {path}: {e}") from e
