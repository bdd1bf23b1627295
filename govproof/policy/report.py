"""
Policy Pack Reports
===================

Markdown rendering of what a policy pack run proved, and plain-text
summaries of composite verification.

Reports contain public parameters, public signals and human labels
only. Private inputs never reach this module.

Version: 0.1.0
"""

import json
from collections.abc import Mapping
from datetime import datetime

from govproof.composite.models import CompositeArtifact, CompositeVerificationResult
from govproof.errors import ConstraintUnsatisfiable
from govproof.policy.mapper import CLAIM_LABELS, PolicyPackMapper


INPUT_HONESTY_CAVEAT = (
    "This run demonstrates ZK verification of an explicit predicate over structured inputs. "
    "It does **not** prove that the private inputs are truthful measurements of reality "
    "or that no other unreported runs exist."
)


def render_report(
    mapper: PolicyPackMapper,
    artifact: CompositeArtifact | None,
    generated_at: datetime,
    failures: Mapping[str, ConstraintUnsatisfiable] | None = None,
) -> str:
    """
    Render the human-readable report of a policy pack run.

    Args:
        mapper: Mapper of the pack that was run
        artifact: Composite of the proven claims, or None if nothing was proven
        generated_at: Time of the run
        failures: Claims that could not be proven, by claim id

    Returns:
        Markdown document ending with a newline
    """
    pack = mapper.pack
    failures = failures or {}
    claims = artifact.claims if artifact is not None else {}

    lines = [
        "# ZK-GovProof Policy Pack Run",
        "",
        f"- Pack: **{pack.title}** (`{pack.id}`)",
        f"- Generated at: `{generated_at.isoformat()}`",
    ]
    if pack.frameworks:
        lines.append(f"- Frameworks: {', '.join(pack.frameworks)}")
    if pack.source_note:
        lines.append(f"- Source note: {pack.source_note}")
    lines += ["", "## What was proven (cryptographically)", ""]

    for number, claim_id in enumerate(mapper.claim_ids, start=1):
        lines.append(f"### {number}) {CLAIM_LABELS.get(claim_id, claim_id)}")
        if claim_id in claims:
            claim = claims[claim_id]
            lines.append(f"- Claim: {claim.statement}")
        else:
            lines.append("- Claim: **not proven**")
            if claim_id in failures:
                lines.append(f"- Reason: {failures[claim_id]}")

        names = mapper.human_names(claim_id)
        if names:
            lines.append("- Requirements (human-readable):")
            lines += [f"  - {name}" for name in names]

        if claim_id in claims:
            lines.append(f"- Public signals: `{json.dumps(claims[claim_id].public_input_vector)}`")
        lines.append("")

    lines += ["## Important caveat", INPUT_HONESTY_CAVEAT]
    return "\n".join(lines) + "\n"


def render_verification_summary(
    artifact: CompositeArtifact,
    result: CompositeVerificationResult,
) -> str:
    """Per-claim verification status with the claim each proof stands for."""
    lines = [
        f"Composite from {artifact.submitter} ({artifact.framework}), "
        f"submitted {artifact.timestamp.isoformat()}",
        "",
    ]
    for claim_id, claim in artifact.claims.items():
        member = result.results.get(claim_id)
        status = "VALID" if member is not None and member.valid else "INVALID"
        lines.append(f"[{status}] {claim_id}: {claim.label}")
        if claim.statement:
            lines.append(f"    {claim.statement}")
        if member is not None and member.error:
            lines.append(f"    error: {member.error}")

    lines.append("")
    if result.valid:
        lines.append(f"All {len(artifact.claims)} claims verified.")
    else:
        lines.append(f"Composite rejected: {', '.join(result.failed_claims)} failed verification.")
    return "\n".join(lines) + "\n"
