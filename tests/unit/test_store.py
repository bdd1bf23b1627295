"""
Unit tests for proof persistence and key loading.
"""

import json
from pathlib import Path

import pytest

from govproof.errors import MalformedArtifact
from govproof.zk.keys import CircuitArtifacts, KeyRing, load_verification_key
from govproof.zk.models import GeneratedProof
from govproof.zk.prover import ComplianceProver
from govproof.zk.store import ProofStore, read_json, write_json_once
from govproof.zk.verifier import verify_saved_proof

from tests.conftest import FakeGroth16Backend, fake_verification_key


class TestProofStore:
    """Tests for write-once proof storage."""

    @pytest.mark.asyncio
    async def test_save_and_load(self, tmp_path: Path, prover: ComplianceProver) -> None:
        generated = await prover.prove_compute_threshold(private_compute=5 * 10**24, threshold=10**25)
        store = ProofStore(tmp_path)

        proof_path, public_path = store.save(generated)
        proof, signals = store.load("compute_threshold")

        assert proof_path.name == "compute_threshold_proof.json"
        assert public_path.name == "compute_threshold_public.json"
        assert json.loads(public_path.read_text()) == ["1", "10000000000000000000000000"]
        assert proof == generated.proof
        assert signals == generated.public_signals

    @pytest.mark.asyncio
    async def test_never_overwrites(self, tmp_path: Path, prover: ComplianceProver) -> None:
        store = ProofStore(tmp_path)
        store.save(await prover.prove_evaluations([1] * 5, required_count=5))
        original = store.proof_path("evaluation_attestation").read_text()

        with pytest.raises(FileExistsError):
            store.save(await prover.prove_evaluations([1] * 5, required_count=4))

        assert store.proof_path("evaluation_attestation").read_text() == original

    @pytest.mark.asyncio
    async def test_private_inputs_not_persisted(self, tmp_path: Path, prover: ComplianceProver) -> None:
        private_compute = 5 * 10**24 + 31337
        generated = await prover.prove_compute_threshold(private_compute=private_compute, threshold=10**25)

        ProofStore(tmp_path).save(generated)

        for path in tmp_path.iterdir():
            assert str(private_compute) not in path.read_text()

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ProofStore(tmp_path).load("compute_threshold")

    def test_load_malformed_proof(self, tmp_path: Path) -> None:
        store = ProofStore(tmp_path)
        store.proof_path("compute_threshold").write_text(json.dumps({"pi_a": ["x"]}))
        store.public_path("compute_threshold").write_text(json.dumps(["1", "5"]))

        with pytest.raises(MalformedArtifact):
            store.load("compute_threshold")

    def test_load_invalid_json(self, tmp_path: Path) -> None:
        store = ProofStore(tmp_path)
        store.proof_path("compute_threshold").write_text("{")

        with pytest.raises(MalformedArtifact, match="not valid JSON"):
            store.load("compute_threshold")

    @pytest.mark.asyncio
    async def test_stored_circuits(self, tmp_path: Path, prover: ComplianceProver) -> None:
        store = ProofStore(tmp_path)
        store.save(await prover.prove_policy([1] * 8, min_required=8))
        store.save(await prover.prove_evaluations([1] * 5, required_count=5))

        assert store.stored_circuits() == ["evaluation_attestation", "policy_compliance"]

    @pytest.mark.asyncio
    async def test_verify_saved_proof(
        self,
        tmp_path: Path,
        prover: ComplianceProver,
        fake_backend: FakeGroth16Backend,
        keyring: KeyRing,
    ) -> None:
        generated: GeneratedProof = await prover.prove_policy([1] * 8, min_required=8)
        ProofStore(tmp_path).save(generated)

        result = await verify_saved_proof("policy_compliance", fake_backend, keyring, tmp_path)

        assert result.valid


class TestJsonFiles:
    """Tests for the JSON helpers."""

    def test_write_once(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "artifact.json"
        write_json_once(path, {"a": 1})

        assert read_json(path) == {"a": 1}
        with pytest.raises(FileExistsError):
            write_json_once(path, {"a": 2})


class TestKeyLoading:
    """Tests for loading verification keys from a build directory."""

    def _write_key(self, build_dir: Path, circuit_name: str) -> Path:
        path = CircuitArtifacts(build_dir, circuit_name).vkey_path
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps(fake_verification_key(circuit_name).to_snarkjs()))
        return path

    def test_artifact_layout(self, tmp_path: Path) -> None:
        artifacts = CircuitArtifacts(tmp_path, "compute_threshold")

        assert artifacts.wasm_path == tmp_path / "compute_threshold" / "compute_threshold_js" / "compute_threshold.wasm"
        assert artifacts.zkey_path == tmp_path / "compute_threshold" / "compute_threshold_final.zkey"
        assert artifacts.vkey_path == tmp_path / "compute_threshold" / "verification_key.json"
        assert artifacts.missing() == [artifacts.wasm_path, artifacts.zkey_path]

    def test_keyring_load(self, tmp_path: Path) -> None:
        self._write_key(tmp_path, "compute_threshold")
        self._write_key(tmp_path, "policy_compliance")

        keyring = KeyRing.load(tmp_path)

        assert sorted(keyring) == ["compute_threshold", "policy_compliance"]
        assert keyring["compute_threshold"] == fake_verification_key("compute_threshold")

    def test_keyring_load_selected(self, tmp_path: Path) -> None:
        self._write_key(tmp_path, "compute_threshold")
        self._write_key(tmp_path, "policy_compliance")

        keyring = KeyRing.load(tmp_path, circuits=["policy_compliance"])

        assert list(keyring) == ["policy_compliance"]

    def test_malformed_key(self, tmp_path: Path) -> None:
        path = self._write_key(tmp_path, "compute_threshold")
        path.write_text(json.dumps({"protocol": "groth16"}))

        with pytest.raises(MalformedArtifact):
            load_verification_key(path)
