"""
Policy Packs
============

Bridge between a written compliance framework and the predicates the
circuits can prove.

Usage:
    from govproof.policy import PolicyPack, run_policy_pack

    pack = PolicyPack.from_file("policies/policy_pack_example.json")
    run = await run_policy_pack(pack, prover)
    print(run.report_path)
"""

from govproof.policy.mapper import CLAIM_LABELS, PolicyPackMapper
from govproof.policy.models import (
    ComputeThreshold,
    PolicyChecklist,
    PolicyPack,
    PrivateInputs,
    RequiredEvaluations,
)
from govproof.policy.report import (
    INPUT_HONESTY_CAVEAT,
    render_report,
    render_verification_summary,
)
from govproof.policy.runner import PolicyPackRun, run_policy_pack


__all__ = [
    "PolicyPack",
    "ComputeThreshold",
    "RequiredEvaluations",
    "PolicyChecklist",
    "PrivateInputs",
    "PolicyPackMapper",
    "CLAIM_LABELS",
    "render_report",
    "render_verification_summary",
    "INPUT_HONESTY_CAVEAT",
    "run_policy_pack",
    "PolicyPackRun",
]
