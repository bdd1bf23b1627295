"""
Policy Pack Models
==================

A policy pack is the declarative, human-readable description of a
compliance framework: which thresholds apply, which evaluations must be
completed and which checklist items must hold. It carries public
parameters only, plus optional example private inputs for demo runs.

Field names accept both the short form and the long form used by the
JSON packs shipped under ``policies/`` (``public_threshold`` or
``public_threshold_flops``, ``names`` or ``evaluation_names``, ...).

Version: 0.1.0
"""

from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from govproof.errors import MalformedArtifact
from govproof.zk.store import read_json


class ComputeThreshold(BaseModel):
    """Public bound for the training compute claim."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    public_threshold: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices("public_threshold", "public_threshold_flops"),
    )
    description: str = ""


class RequiredEvaluations(BaseModel):
    """Safety evaluations of which at least ``required_count`` must be completed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    declared_n: int | None = Field(default=None, ge=1, validation_alias=AliasChoices("N", "n"))
    required_count: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("required_count", "required_count_public"),
    )
    names: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("names", "evaluation_names"),
    )

    @property
    def n(self) -> int:
        """Number of evaluations; defaults to the number of names listed."""
        return self.declared_n if self.declared_n is not None else len(self.names)


class PolicyChecklist(BaseModel):
    """Checklist items of which at least ``min_required`` must hold."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    declared_n: int | None = Field(default=None, ge=1, validation_alias=AliasChoices("N", "n"))
    min_required: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("min_required", "min_required_public"),
    )
    items: list[str] = Field(default_factory=list)

    @property
    def n(self) -> int:
        return self.declared_n if self.declared_n is not None else len(self.items)


class PrivateInputs(BaseModel):
    """
    The claimant's private values.

    Never written to artifacts or reports; excluded from dumps of the
    enclosing pack.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    private_compute: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("private_compute", "private_compute_flops"),
    )
    evaluation_flags: list[int] | None = None
    policy_flags: list[int] | None = None

    def __repr__(self) -> str:
        return "PrivateInputs(<redacted>)"

    __str__ = __repr__


class PolicyPack(BaseModel):
    """A compliance framework expressed as public predicate parameters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    title: str
    frameworks: list[str] = Field(default_factory=list)
    source_note: str = ""

    compute_threshold: ComputeThreshold | None = None
    required_evaluations: RequiredEvaluations | None = None
    policy_checklist: PolicyChecklist | None = None

    private_inputs: PrivateInputs | None = Field(
        default=None,
        repr=False,
        exclude=True,
        validation_alias=AliasChoices("private_inputs", "example_private_inputs"),
    )

    @classmethod
    def from_file(cls, path: str | Path) -> "PolicyPack":
        """
        Load a policy pack JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            MalformedArtifact: If the file is not a valid policy pack.
        """
        data = read_json(Path(path))
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise MalformedArtifact(f"Invalid policy pack {path}: {problems}") from None

    def summary(self) -> dict[str, object]:
        """Public description of the pack for artifacts and reports."""
        return {
            "id": self.id,
            "title": self.title,
            "frameworks": list(self.frameworks),
            "source_note": self.source_note,
        }
