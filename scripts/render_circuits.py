#!/usr/bin/env python3
"""
Circuit Rendering Script
========================

Writes circom source for the registered circuits so they can be compiled
and put through the trusted setup:

    circom circuits/<name>.circom --r1cs --wasm -o build/<name>

Usage:
    python scripts/render_circuits.py [--output DIR] [--circuit NAME] [--force]
"""

import argparse
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from govproof.circuits import CIRCUITS, render_circom
from govproof.config import settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Render circom source for the compliance circuits")
    parser.add_argument("--output", "-o", type=str,
                        help="Output directory (default: circuits/ under the project root)")
    parser.add_argument("--circuit", "-c", type=str, choices=sorted(CIRCUITS),
                        help="Render one circuit only")
    parser.add_argument("--force", "-f", action="store_true",
                        help="Overwrite existing .circom files")

    args = parser.parse_args()

    output_dir = Path(args.output) if args.output else settings.project_root / "circuits"
    output_dir.mkdir(parents=True, exist_ok=True)

    names = [args.circuit] if args.circuit else list(CIRCUITS)

    print(f"\n{'Circuit':<25} | {'Constraints':>11} | {'Public':>6} | File")
    print("-" * 70)

    for name in names:
        circuit = CIRCUITS[name]
        path = output_dir / f"{name}.circom"
        if path.exists() and not args.force:
            print(f"{name:<25} | {'-':>11} | {'-':>6} | exists, skipped (use --force)")
            continue

        path.write_text(render_circom(circuit), encoding="utf-8")
        print(f"{name:<25} | {circuit.system.constraint_count:>11} | {circuit.n_public:>6} | {path}")

    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
