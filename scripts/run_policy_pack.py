#!/usr/bin/env python3
"""
Policy Pack Runner
==================

Proves every claim of a policy pack, bundles the proofs into a composite
and writes artifacts.json, composite.json and report.md under
data/policy_packs/<id>_<timestamp>/.

Usage:
    python scripts/run_policy_pack.py policies/policy_pack_example.json
    python scripts/run_policy_pack.py PACK --private-inputs private.json --allow-partial

Requirements:
    - Node.js 18+ with snarkjs
    - Circuits compiled and keys generated under build/
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from govproof.config import settings
from govproof.errors import ConstraintUnsatisfiable, GovProofError
from govproof.logging import log_context, setup_logging
from govproof.policy import PolicyPack, PrivateInputs, run_policy_pack
from govproof.zk import ComplianceProver, SnarkjsBackend
from govproof.zk.store import read_json


def resolve(path: str) -> Path:
    """Resolve a path relative to the project root."""
    candidate = Path(path)
    return candidate if candidate.is_absolute() else settings.project_root / candidate


async def main() -> int:
    parser = argparse.ArgumentParser(description="Run a policy pack and write its proofs and report")
    parser.add_argument("pack", type=str, help="Policy pack JSON file")
    parser.add_argument("--private-inputs", "-p", type=str,
                        help="JSON file with private inputs (default: the pack's example inputs)")
    parser.add_argument("--output", "-o", type=str,
                        help="Parent directory for the run (default: data/policy_packs)")
    parser.add_argument("--allow-partial", action="store_true",
                        help="Write a run even if some claims cannot be proven")

    args = parser.parse_args()
    setup_logging()

    pack_path = resolve(args.pack)
    if not pack_path.exists():
        print(f"❌ Policy pack not found: {pack_path}")
        return 1

    try:
        pack = PolicyPack.from_file(pack_path)
        private_inputs = None
        if args.private_inputs:
            private_inputs = PrivateInputs.model_validate(read_json(resolve(args.private_inputs)))

        with log_context(pack_id=pack.id):
            run = await run_policy_pack(
                pack,
                ComplianceProver(SnarkjsBackend()),
                private_inputs=private_inputs,
                output_root=args.output,
                require_all=not args.allow_partial,
                source_path=pack_path.relative_to(settings.project_root)
                if pack_path.is_relative_to(settings.project_root)
                else pack_path,
            )
    except ConstraintUnsatisfiable as e:
        print(f"❌ Claim cannot be proven: {e}")
        return 1
    except GovProofError as e:
        print(f"❌ Failed: {e}")
        return 1

    print("✅ Policy pack executed.")
    print(f"📦 Wrote: {run.artifacts_path}")
    if run.artifact is not None:
        print(f"🔗 Wrote: {run.composite_path}")
    print(f"📝 Wrote: {run.report_path}")
    for claim_id, error in run.failures.items():
        print(f"⚠️  Not proven: {claim_id} ({error})")

    return 0 if run.complete else 2


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
