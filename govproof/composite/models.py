"""
Composite Artifact Models
=========================

A composite artifact bundles independently generated proofs for one
submission cycle. It is a tagged collection, not a cryptographic
aggregate: each member is verified on its own and the composite is
valid only if every member is.

Version: 0.1.0
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from govproof.circuits.base import PredicateKind
from govproof.zk.models import PublicSignals, VerificationResult, ZKProof, check_field_elements


COMPOSITE_VERSION = "1.0"
COMPOSITION_METHOD = "bundled_verification"


class ClaimDescriptor(BaseModel):
    """Human label and predicate for one proven claim."""

    model_config = ConfigDict(frozen=True)

    claim_id: str = Field(..., min_length=1)
    circuit: str
    predicate: PredicateKind
    label: str = Field(..., description="Human-readable claim, e.g. 'Training compute below threshold'")
    statement: str = Field(default="", description="The predicate as proven, e.g. 'privateCompute < threshold (1e25)'")


class CompositeClaim(BaseModel):
    """One member of a composite: proof, public input vector and descriptor fields."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    proof: ZKProof
    public_input_vector: list[str] = Field(..., alias="publicInputVector")
    label: str
    circuit: str
    predicate: PredicateKind
    statement: str = ""

    @field_validator("public_input_vector")
    @classmethod
    def field_elements(cls, v: list[str]) -> list[str]:
        return check_field_elements(v)

    @property
    def public_signals(self) -> PublicSignals:
        return PublicSignals(signals=self.public_input_vector)


class CompositeArtifact(BaseModel):
    """
    One submission: ordered claims plus submission metadata.

    Immutable once built; it can only be re-verified.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = COMPOSITE_VERSION
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    submitter: str
    framework: str
    composition_method: str = COMPOSITION_METHOD
    claims: dict[str, CompositeClaim]

    @field_validator("claims")
    @classmethod
    def at_least_one_claim(cls, v: dict[str, CompositeClaim]) -> dict[str, CompositeClaim]:
        if not v:
            raise ValueError("a composite needs at least one claim")
        return v

    @property
    def claim_ids(self) -> list[str]:
        return list(self.claims)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class CompositeVerificationResult(BaseModel):
    """Outcome of verifying every member of a composite."""

    valid: bool
    results: dict[str, VerificationResult]
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def failed_claims(self) -> list[str]:
        return [claim_id for claim_id, result in self.results.items() if not result.valid]
