#!/usr/bin/env python3
"""
Composite Verification Script
=============================

Verifies every member of a composite submission against the
verification keys under build/ and prints a per-claim summary.

Usage:
    python scripts/verify_composite.py data/policy_packs/<run>/composite.json
    python scripts/verify_composite.py COMPOSITE --build-dir /path/to/build

Exit code is 0 only if every claim verifies.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from govproof.composite import load_composite, verify_composite
from govproof.config import settings
from govproof.errors import GovProofError
from govproof.logging import setup_logging
from govproof.policy import render_verification_summary
from govproof.zk import ComplianceVerifier, KeyRing, SnarkjsBackend


async def main() -> int:
    parser = argparse.ArgumentParser(description="Verify a composite compliance submission")
    parser.add_argument("composite", type=str, help="Composite artifact JSON file")
    parser.add_argument("--build-dir", "-b", type=str,
                        help=f"Directory with verification keys (default: {settings.zk.build_dir})")

    args = parser.parse_args()
    setup_logging()

    build_dir = Path(args.build_dir) if args.build_dir else settings.zk.build_dir

    try:
        artifact = load_composite(args.composite)
        keyring = KeyRing.load(build_dir)
    except FileNotFoundError as e:
        print(f"❌ Not found: {e.filename}")
        return 1
    except GovProofError as e:
        print(f"❌ Invalid input: {e}")
        return 1

    backend = SnarkjsBackend(build_dir=build_dir)
    result = await verify_composite(artifact, ComplianceVerifier(backend, keyring))

    print(render_verification_summary(artifact, result), end="")
    return 0 if result.valid else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
