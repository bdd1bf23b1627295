"""
ZK-GovProof
===========

Zero-knowledge compliance proofs for AI governance: a claimant proves a
private figure satisfies a public predicate (below a threshold, or at
least k of N requirements met) and a regulator verifies the proof
without learning the figure.

Modules:
    - circuits: Constraint system, gadgets and the predicate circuits
    - zk: Proof generation, verification and persistence (snarkjs Groth16)
    - composite: Bundling of per-claim proofs into one submission
    - policy: Policy packs mapped onto circuit inputs and reports
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "ZK-GovProof Team"

from govproof.config import settings
from govproof.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
