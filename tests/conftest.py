"""
Test Configuration
==================

Pytest fixtures for govproof tests.

Proofs are produced by ``FakeGroth16Backend``: it runs the real witness
solver and binds its proof points to the circuit, the public signals and
a per-proof random value with HMAC. That keeps the properties the tests
care about (false claims cannot be proven, any change to a proof or its
public signals is rejected, proofs of one statement differ) without
node or snarkjs.
"""

import hashlib
import hmac
import os
import secrets
from typing import Any

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "testing"

from govproof.circuits.field import FIELD_ORDER
from govproof.circuits.registry import CIRCUITS, get_circuit
from govproof.zk.backend import ProvingBackend
from govproof.zk.keys import KeyRing
from govproof.zk.models import PublicSignals, VerificationKey, ZKProof
from govproof.zk.prover import ComplianceProver
from govproof.zk.verifier import ComplianceVerifier


SETUP_SECRET = b"govproof-test-setup"


def _mac_word(*parts: Any) -> int:
    message = "|".join(str(p) for p in parts).encode()
    digest = hmac.new(SETUP_SECRET, message, hashlib.sha256).digest()
    return int.from_bytes(digest, "big") % FIELD_ORDER


def circuit_tag(circuit_name: str) -> str:
    """Key identity produced by the simulated setup for one circuit."""
    return str(_mac_word("setup", circuit_name))


def fake_verification_key(circuit_name: str, n_public: int | None = None) -> VerificationKey:
    """Verification key in snarkjs shape for the simulated setup."""
    if n_public is None:
        n_public = get_circuit(circuit_name).n_public
    return VerificationKey(
        protocol="groth16",
        curve="bn128",
        nPublic=n_public,
        vk_alpha_1=[circuit_tag(circuit_name), "2", "1"],
        vk_beta_2=[["1", "2"], ["3", "4"], ["1", "0"]],
        vk_gamma_2=[["5", "6"], ["7", "8"], ["1", "0"]],
        vk_delta_2=[["9", "10"], ["11", "12"], ["1", "0"]],
        IC=[["1", "2", "1"] for _ in range(n_public + 1)],
    )


class FakeGroth16Backend(ProvingBackend):
    """HMAC stand-in for snarkjs Groth16."""

    def __init__(self) -> None:
        self.prove_calls: list[str] = []
        self.verify_calls = 0

    @property
    def name(self) -> str:
        return "fake-groth16"

    @staticmethod
    def _words(tag: str, r: int, signals: list[str]) -> list[int]:
        return [_mac_word(tag, r, *signals, i) for i in range(7)]

    async def prove(self, circuit_name: str, inputs: dict[str, Any]) -> tuple[ZKProof, PublicSignals]:
        self.prove_calls.append(circuit_name)
        witness = get_circuit(circuit_name).compute_witness(inputs)
        public_signals = PublicSignals(signals=witness.public_signals())

        r = secrets.randbelow(FIELD_ORDER)
        w = [str(x) for x in self._words(circuit_tag(circuit_name), r, public_signals.signals)]
        proof = ZKProof(
            pi_a=[str(r), w[0], "1"],
            pi_b=[[w[1], w[2]], [w[3], w[4]], ["1", "0"]],
            pi_c=[w[5], w[6], "1"],
        )
        return proof, public_signals

    async def verify(
        self,
        verification_key: VerificationKey,
        public_signals: PublicSignals,
        proof: ZKProof,
    ) -> bool:
        self.verify_calls += 1
        calldata = proof.to_calldata()
        expected = self._words(verification_key.vk_alpha_1[0], calldata[0], public_signals.signals)
        return calldata[1:] == expected


@pytest.fixture
def fake_backend() -> FakeGroth16Backend:
    """Groth16 stand-in backed by the real witness solver."""
    return FakeGroth16Backend()


@pytest.fixture
def verification_keys() -> dict[str, VerificationKey]:
    """One key per registered circuit."""
    return {name: fake_verification_key(name) for name in CIRCUITS}


@pytest.fixture
def keyring(verification_keys: dict[str, VerificationKey]) -> KeyRing:
    return KeyRing(verification_keys)


@pytest.fixture
def prover(fake_backend: FakeGroth16Backend) -> ComplianceProver:
    return ComplianceProver(fake_backend, max_concurrent_proofs=2)


@pytest.fixture
def verifier(fake_backend: FakeGroth16Backend, keyring: KeyRing) -> ComplianceVerifier:
    return ComplianceVerifier(fake_backend, keyring)


@pytest.fixture
def sample_policy_pack_data() -> dict[str, Any]:
    """Policy pack in the long-form JSON layout."""
    return {
        "id": "test_pack",
        "title": "Test Framework",
        "frameworks": ["EU AI Act", "RSP"],
        "source_note": "Test fixture",
        "compute_threshold": {"public_threshold_flops": "10000000000000000000000000"},
        "required_evaluations": {
            "N": 5,
            "required_count_public": 5,
            "evaluation_names": ["CBRN", "Cyber", "Autonomy", "Red team", "Docs"],
        },
        "policy_checklist": {
            "N": 8,
            "min_required_public": 6,
            "items": [f"Item {i}" for i in range(1, 9)],
        },
        "example_private_inputs": {
            "private_compute_flops": "5000000000000000000000000",
            "evaluation_flags": [1, 1, 1, 1, 1],
            "policy_flags": [1, 1, 1, 1, 1, 1, 0, 0],
        },
    }
