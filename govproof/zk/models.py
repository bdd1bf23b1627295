"""
ZK-SNARK Data Models
====================

Pydantic models for ZK proof data.

Version: 0.1.0
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from govproof.circuits.base import PredicateKind
from govproof.circuits.field import FIELD_ORDER


COORDINATE_BYTES = 32
PROOF_BYTES = 8 * COORDINATE_BYTES


def _check_decimal(values: list[str]) -> list[str]:
    for value in values:
        if not isinstance(value, str) or not value.isdigit():
            raise ValueError("coordinates must be non-negative decimal strings")
    return values


def check_field_elements(values: list[str]) -> list[str]:
    """Require decimal strings that are elements of the BN254 scalar field."""
    for value in values:
        if not isinstance(value, str) or not value.isdigit() or int(value) >= FIELD_ORDER:
            raise ValueError("public signals must be decimal field elements")
    return values


class ZKProof(BaseModel):
    """
    A zero-knowledge proof.

    Compatible with snarkjs Groth16 proof format. Points are in projective
    form as snarkjs writes them (a trailing "1" / ["1", "0"] coordinate).
    """

    model_config = ConfigDict(frozen=True)

    # Proof points (G1 and G2 elements)
    pi_a: list[str] = Field(..., min_length=2, max_length=3, description="Proof point A (G1)")
    pi_b: list[list[str]] = Field(..., min_length=2, max_length=3, description="Proof point B (G2)")
    pi_c: list[str] = Field(..., min_length=2, max_length=3, description="Proof point C (G1)")

    # Protocol info
    protocol: str = Field(default="groth16")
    curve: str = Field(default="bn128")

    @field_validator("pi_a", "pi_c")
    @classmethod
    def g1_coordinates(cls, v: list[str]) -> list[str]:
        return _check_decimal(v)

    @field_validator("pi_b")
    @classmethod
    def g2_coordinates(cls, v: list[list[str]]) -> list[list[str]]:
        for pair in v:
            if len(pair) != 2:
                raise ValueError("G2 coordinates are pairs")
            _check_decimal(pair)
        return v

    def to_calldata(self) -> list[int]:
        """Convert to Solidity calldata format (8 uint256)."""
        return [
            int(self.pi_a[0]),
            int(self.pi_a[1]),
            int(self.pi_b[0][0]),
            int(self.pi_b[0][1]),
            int(self.pi_b[1][0]),
            int(self.pi_b[1][1]),
            int(self.pi_c[0]),
            int(self.pi_c[1]),
        ]

    def to_bytes(self) -> bytes:
        """Fixed-size binary form: the eight affine coordinates, 32 bytes each, big-endian."""
        try:
            return b"".join(word.to_bytes(COORDINATE_BYTES, "big") for word in self.to_calldata())
        except OverflowError:
            raise ValueError("proof coordinate does not fit in 32 bytes") from None

    @classmethod
    def from_bytes(cls, data: bytes, protocol: str = "groth16", curve: str = "bn128") -> "ZKProof":
        """Inverse of ``to_bytes``."""
        if len(data) != PROOF_BYTES:
            raise ValueError(f"expected {PROOF_BYTES} bytes, got {len(data)}")
        words = [
            str(int.from_bytes(data[i : i + COORDINATE_BYTES], "big"))
            for i in range(0, PROOF_BYTES, COORDINATE_BYTES)
        ]
        return cls(
            pi_a=[words[0], words[1], "1"],
            pi_b=[[words[2], words[3]], [words[4], words[5]], ["1", "0"]],
            pi_c=[words[6], words[7], "1"],
            protocol=protocol,
            curve=curve,
        )


class PublicSignals(BaseModel):
    """
    Public signals bound to a proof (the public input vector).

    Order follows the circuit declaration: outputs, then public inputs.
    """

    model_config = ConfigDict(frozen=True)

    signals: list[str] = Field(..., description="Public signals as decimal strings")

    @field_validator("signals")
    @classmethod
    def decimal_field_elements(cls, v: list[str]) -> list[str]:
        return check_field_elements(v)

    @property
    def validity(self) -> str:
        """The hard-constrained validity output (first signal)."""
        return self.signals[0] if self.signals else ""


class VerificationKey(BaseModel):
    """
    A Groth16 verification key as exported by ``snarkjs zkey export verificationkey``.

    Loaded once and shared read-only between concurrent verifications.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    protocol: str = "groth16"
    curve: str = "bn128"
    n_public: int = Field(..., alias="nPublic", ge=0)
    vk_alpha_1: list[str]
    vk_beta_2: list[list[str]]
    vk_gamma_2: list[list[str]]
    vk_delta_2: list[list[str]]
    ic: list[list[str]] = Field(..., alias="IC")

    def to_snarkjs(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    @property
    def fingerprint(self) -> str:
        """SHA-256 over the canonical JSON form."""
        canonical = json.dumps(self.to_snarkjs(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()


class ProofMetadata(BaseModel):
    """Metadata about a generated proof."""

    circuit_name: str
    predicate: PredicateKind
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    proving_time_ms: int = Field(..., ge=0)


class GeneratedProof(BaseModel):
    """A proof with its public signals and metadata."""

    model_config = ConfigDict(frozen=True)

    proof: ZKProof
    public_signals: PublicSignals
    metadata: ProofMetadata

    @property
    def circuit_name(self) -> str:
        return self.metadata.circuit_name


class VerificationResult(BaseModel):
    """Result of proof verification."""

    valid: bool
    circuit: str
    claim_id: str | None = None
    key_fingerprint: str | None = None
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    verification_time_ms: int = Field(..., ge=0)

    # Error info
    error: str | None = None


@dataclass
class ProofRequest:
    """A claim to prove: circuit plus its private and public inputs."""

    claim_id: str
    circuit_name: str
    inputs: dict[str, Any] = field(repr=False)
    label: str = ""
