"""
Unit tests for composite bundling and verification.
"""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from govproof.circuits.base import PredicateKind
from govproof.circuits.field import FIELD_ORDER
from govproof.composite import (
    COMPOSITION_METHOD,
    ClaimDescriptor,
    CompositeArtifact,
    build_composite,
    load_composite,
    save_composite,
    verify_composite,
)
from govproof.errors import ConstraintUnsatisfiable, MalformedArtifact
from govproof.zk.keys import KeyRing
from govproof.zk.models import GeneratedProof, ProofRequest, ZKProof
from govproof.zk.prover import ComplianceProver
from govproof.zk.verifier import ComplianceVerifier

from tests.conftest import FakeGroth16Backend


COMPUTE = ClaimDescriptor(
    claim_id="compute_threshold",
    circuit="compute_threshold",
    predicate=PredicateKind.BELOW_THRESHOLD,
    label="Training compute below regulatory threshold",
    statement="privateCompute < threshold (10000000000000000000000000)",
)
EVALUATIONS = ClaimDescriptor(
    claim_id="evaluation_attestation",
    circuit="evaluation_attestation",
    predicate=PredicateKind.K_OF_N,
    label="All required safety evaluations completed",
)
POLICY = ClaimDescriptor(
    claim_id="policy_compliance",
    circuit="policy_compliance",
    predicate=PredicateKind.K_OF_N,
    label="Responsible Scaling Policy requirements met",
)


@pytest.fixture
def members(prover: ComplianceProver):
    """Proofs for compute, all five evaluations and all eight policy items."""

    async def generate() -> list[tuple[ClaimDescriptor, GeneratedProof]]:
        return [
            (COMPUTE, await prover.prove_compute_threshold(private_compute=5 * 10**24, threshold=10**25)),
            (EVALUATIONS, await prover.prove_evaluations([1] * 5, required_count=5)),
            (POLICY, await prover.prove_policy([1] * 8, min_required=8)),
        ]

    return generate


def _tamper(artifact: CompositeArtifact, claim_id: str) -> CompositeArtifact:
    claim = artifact.claims[claim_id]
    data = bytearray(claim.proof.to_bytes())
    data[63] ^= 0xFF
    claims = dict(artifact.claims)
    claims[claim_id] = claim.model_copy(update={"proof": ZKProof.from_bytes(bytes(data))})
    return artifact.model_copy(update={"claims": claims})


class TestBuildComposite:
    """Tests for assembling composites."""

    @pytest.mark.asyncio
    async def test_build(self, members) -> None:
        timestamp = datetime(2026, 1, 31, 12, 0, tzinfo=UTC)
        artifact = build_composite(
            await members(),
            submitter="AI Lab Example Inc.",
            framework="EU AI Act + RSP",
            timestamp=timestamp,
        )

        assert artifact.claim_ids == ["compute_threshold", "evaluation_attestation", "policy_compliance"]
        assert artifact.version == "1.0"
        assert artifact.timestamp == timestamp
        assert artifact.composition_method == COMPOSITION_METHOD == "bundled_verification"
        assert artifact.claims["compute_threshold"].public_input_vector == ["1", "10000000000000000000000000"]
        assert artifact.claims["compute_threshold"].statement == COMPUTE.statement

    @pytest.mark.asyncio
    async def test_defaults_from_settings(self, members) -> None:
        artifact = build_composite(await members())

        assert artifact.submitter == "AI Lab Example Inc."
        assert artifact.framework == "EU AI Act + RSP"

    def test_empty_composite(self) -> None:
        with pytest.raises(ValueError, match="at least one claim"):
            build_composite([])

    @pytest.mark.asyncio
    async def test_duplicate_claim_id(self, prover: ComplianceProver) -> None:
        proof = await prover.prove_evaluations([1] * 5, required_count=5)
        with pytest.raises(ValueError, match="Duplicate"):
            build_composite([(EVALUATIONS, proof), (EVALUATIONS, proof)])

    @pytest.mark.asyncio
    async def test_descriptor_circuit_mismatch(self, prover: ComplianceProver) -> None:
        proof = await prover.prove_policy([1] * 8, min_required=8)
        with pytest.raises(ValueError, match="describes circuit"):
            build_composite([(EVALUATIONS, proof)])

    @pytest.mark.asyncio
    async def test_immutable(self, members) -> None:
        artifact = build_composite(await members())
        with pytest.raises(ValueError):
            artifact.submitter = "Someone Else"  # type: ignore[misc]

    @pytest.mark.asyncio
    async def test_unprovable_claim_is_simply_absent(
        self, prover: ComplianceProver, verifier: ComplianceVerifier
    ) -> None:
        """A claim that fails generation leaves no artifact, so the composite omits it."""
        outcome = await prover.prove_many([
            ProofRequest("compute_threshold", "compute_threshold",
                         {"privateCompute": 5 * 10**24, "threshold": 10**25}),
            ProofRequest("evaluation_attestation", "evaluation_attestation",
                         {"evaluationFlags": [1, 1, 1, 0, 1], "requiredCount": 5}),
            ProofRequest("policy_compliance", "policy_compliance",
                         {"policyItems": [1] * 8, "minRequired": 8}),
        ])
        descriptors = {d.claim_id: d for d in (COMPUTE, EVALUATIONS, POLICY)}

        artifact = build_composite(
            (descriptors[claim_id], proof) for claim_id, proof in outcome.proofs.items()
        )

        assert isinstance(outcome.failures["evaluation_attestation"], ConstraintUnsatisfiable)
        assert artifact.claim_ids == ["compute_threshold", "policy_compliance"]
        assert (await verify_composite(artifact, verifier)).valid


class TestVerifyComposite:
    """Tests for composite verification."""

    @pytest.mark.asyncio
    async def test_all_members_valid(self, members, verifier: ComplianceVerifier) -> None:
        artifact = build_composite(await members())

        result = await verify_composite(artifact, verifier)

        assert result.valid
        assert sorted(result.results) == sorted(artifact.claim_ids)
        assert result.failed_claims == []

    @pytest.mark.asyncio
    async def test_one_tampered_member(self, members, verifier: ComplianceVerifier) -> None:
        artifact = _tamper(build_composite(await members()), "evaluation_attestation")

        result = await verify_composite(artifact, verifier)

        assert not result.valid
        assert result.failed_claims == ["evaluation_attestation"]
        assert result.results["compute_threshold"].valid
        assert result.results["policy_compliance"].valid

    @pytest.mark.asyncio
    async def test_substituted_public_inputs(self, members, verifier: ComplianceVerifier) -> None:
        artifact = build_composite(await members())
        claims = dict(artifact.claims)
        claims["compute_threshold"] = claims["compute_threshold"].model_copy(
            update={"public_input_vector": ["1", "20000000000000000000000000"]}
        )

        result = await verify_composite(artifact.model_copy(update={"claims": claims}), verifier)

        assert result.failed_claims == ["compute_threshold"]

    @pytest.mark.asyncio
    async def test_missing_key_fails_member(
        self, members, fake_backend: FakeGroth16Backend, keyring: KeyRing
    ) -> None:
        partial = KeyRing({name: keyring[name] for name in ("compute_threshold", "evaluation_attestation")})
        artifact = build_composite(await members())

        result = await verify_composite(artifact, ComplianceVerifier(fake_backend, partial))

        assert not result.valid
        assert result.failed_claims == ["policy_compliance"]
        assert "No verification key" in result.results["policy_compliance"].error

    @pytest.mark.asyncio
    async def test_unparseable_public_inputs_fail_member(self, members, verifier: ComplianceVerifier) -> None:
        artifact = build_composite(await members())
        claims = dict(artifact.claims)
        claims["policy_compliance"] = claims["policy_compliance"].model_copy(
            update={"public_input_vector": ["1", "not-a-number"]}
        )

        result = await verify_composite(artifact.model_copy(update={"claims": claims}), verifier)

        assert not result.valid
        assert result.failed_claims == ["policy_compliance"]
        assert result.results["compute_threshold"].valid

    @pytest.mark.asyncio
    async def test_single_member(self, prover: ComplianceProver, verifier: ComplianceVerifier) -> None:
        artifact = build_composite([(POLICY, await prover.prove_policy([1] * 8, min_required=8))])

        assert (await verify_composite(artifact, verifier)).valid


class TestCompositePersistence:
    """Tests for saving and loading composites."""

    @pytest.mark.asyncio
    async def test_roundtrip(self, tmp_path: Path, members, verifier: ComplianceVerifier) -> None:
        artifact = build_composite(await members())
        path = save_composite(artifact, tmp_path / "composite.json")

        loaded = load_composite(path)

        assert loaded == artifact
        assert (await verify_composite(loaded, verifier)).valid

    @pytest.mark.asyncio
    async def test_json_layout(self, tmp_path: Path, members) -> None:
        path = save_composite(build_composite(await members()), tmp_path / "composite.json")
        text = path.read_text()

        assert '"publicInputVector"' in text
        assert '"composition_method": "bundled_verification"' in text

    @pytest.mark.asyncio
    async def test_never_overwrites(self, tmp_path: Path, members) -> None:
        artifact = build_composite(await members())
        path = save_composite(artifact, tmp_path / "composite.json")

        with pytest.raises(FileExistsError):
            save_composite(artifact, path)

    def test_load_malformed(self, tmp_path: Path) -> None:
        path = tmp_path / "composite.json"
        path.write_text('{"version": "1.0", "claims": {}}')

        with pytest.raises(MalformedArtifact):
            load_composite(path)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "public_input_vector",
        [["1", "not-a-number"], ["1", "-5"], ["1", str(FIELD_ORDER)]],
    )
    async def test_load_rejects_invalid_public_inputs(
        self, tmp_path: Path, members, public_input_vector: list[str]
    ) -> None:
        path = save_composite(build_composite(await members()), tmp_path / "composite.json")
        data = json.loads(path.read_text())
        data["claims"]["evaluation_attestation"]["publicInputVector"] = public_input_vector
        path.write_text(json.dumps(data))

        with pytest.raises(MalformedArtifact, match="field elements"):
            load_composite(path)

    @pytest.mark.asyncio
    async def test_load_rejects_invalid_proof_coordinates(self, tmp_path: Path, members) -> None:
        path = save_composite(build_composite(await members()), tmp_path / "composite.json")
        data = json.loads(path.read_text())
        data["claims"]["compute_threshold"]["proof"]["pi_a"][0] = "0xdeadbeef"
        path.write_text(json.dumps(data))

        with pytest.raises(MalformedArtifact):
            load_composite(path)
