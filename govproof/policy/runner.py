"""
Policy Pack Runner
==================

Runs a policy pack end to end: map the pack onto circuit inputs, prove
every claim, bundle the proofs into a composite, and write the run
directory:

    <data_dir>/policy_packs/<pack id>_<timestamp>/
        artifacts.json    proofs, public signals and claim statements
        composite.json    the composite submission artifact
        report.md         human-readable account of what was proven

Version: 0.1.0
"""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from govproof.composite.bundler import build_composite, save_composite
from govproof.composite.models import CompositeArtifact
from govproof.config import settings
from govproof.errors import ConstraintUnsatisfiable
from govproof.logging import get_logger
from govproof.policy.mapper import PolicyPackMapper
from govproof.policy.models import PolicyPack, PrivateInputs
from govproof.policy.report import render_report
from govproof.zk.prover import ComplianceProver
from govproof.zk.store import write_json_once


logger = get_logger(__name__)


@dataclass
class PolicyPackRun:
    """Outcome of one policy pack run."""

    output_dir: Path
    generated_at: datetime
    artifact: CompositeArtifact | None
    failures: dict[str, ConstraintUnsatisfiable] = field(default_factory=dict)

    @property
    def artifacts_path(self) -> Path:
        return self.output_dir / "artifacts.json"

    @property
    def composite_path(self) -> Path:
        return self.output_dir / "composite.json"

    @property
    def report_path(self) -> Path:
        return self.output_dir / "report.md"

    @property
    def complete(self) -> bool:
        return not self.failures


def run_stamp(moment: datetime) -> str:
    """Filesystem-safe timestamp, e.g. 2026-01-31T12-00-00-000000+00-00."""
    return re.sub(r"[:.]", "-", moment.isoformat())


async def run_policy_pack(
    pack: PolicyPack,
    prover: ComplianceProver,
    private_inputs: PrivateInputs | None = None,
    output_root: str | Path | None = None,
    require_all: bool = True,
    submitter: str | None = None,
    framework: str | None = None,
    source_path: str | Path | None = None,
) -> PolicyPackRun:
    """
    Prove every claim of a policy pack and write the run directory.

    Args:
        pack: Policy pack to run
        prover: Prover bound to a proving backend
        private_inputs: Claimant's values. Defaults to the pack's example inputs
        output_root: Parent of the run directory. Defaults to <data_dir>/policy_packs
        require_all: Abort without writing anything if any claim cannot be proven
        submitter: Composite submitter. Defaults to settings
        framework: Composite framework. Defaults to the pack's frameworks, joined
        source_path: Where the pack was loaded from, recorded in artifacts.json

    Returns:
        PolicyPackRun describing what was written

    Raises:
        ConstraintUnsatisfiable: If ``require_all`` and a claim cannot be proven
        MalformedArtifact: If the pack cannot be bound to the registered circuits
    """
    mapper = PolicyPackMapper(pack)
    requests = mapper.claim_requests(private_inputs)

    logger.info("policy_pack_started", pack_id=pack.id, claims=mapper.claim_ids)
    outcome = await prover.prove_many(requests)

    if not outcome.complete and require_all:
        logger.warning("policy_pack_incomplete", pack_id=pack.id, failed=sorted(outcome.failures))
        raise next(iter(outcome.failures.values()))

    generated_at = datetime.now(UTC)
    descriptors = mapper.descriptors()
    members = [
        (descriptors[claim_id], outcome.proofs[claim_id])
        for claim_id in mapper.claim_ids
        if claim_id in outcome.proofs
    ]
    artifact = None
    if members:
        artifact = build_composite(
            members,
            submitter=submitter,
            framework=framework or (" + ".join(pack.frameworks) if pack.frameworks else None),
            timestamp=generated_at,
        )

    root = Path(output_root) if output_root is not None else settings.zk.data_dir / "policy_packs"
    run = PolicyPackRun(
        output_dir=root / f"{pack.id}_{run_stamp(generated_at)}",
        generated_at=generated_at,
        artifact=artifact,
        failures=dict(outcome.failures),
    )
    run.output_dir.mkdir(parents=True, exist_ok=False)

    policy_pack = pack.summary()
    if source_path is not None:
        policy_pack["input_pack_path"] = str(source_path)
    write_json_once(
        run.artifacts_path,
        {
            "policy_pack": policy_pack,
            "generated_at": generated_at.isoformat(),
            "proofs": {
                claim_id: {
                    "proof": claim.proof.model_dump(),
                    "publicSignals": claim.public_input_vector,
                    "claim": claim.statement,
                }
                for claim_id, claim in (artifact.claims.items() if artifact else [])
            },
            "unproven": {claim_id: str(error) for claim_id, error in run.failures.items()},
        },
    )
    if artifact is not None:
        save_composite(artifact, run.composite_path)
    with open(run.report_path, "x", encoding="utf-8") as f:
        f.write(render_report(mapper, artifact, generated_at, run.failures))

    logger.info(
        "policy_pack_completed",
        pack_id=pack.id,
        output_dir=str(run.output_dir),
        proved=artifact.claim_ids if artifact else [],
        failed=sorted(run.failures),
    )
    return run
