"""
ZK Error Taxonomy
=================

Exceptions raised by circuits, the proof lifecycle and artifact loading.

Messages name circuits, signals and constraints, never private values.
None of these errors are retried: re-running a failed proof with the
same inputs cannot turn a false claim into a true one.

Version: 0.1.0
"""


class GovProofError(Exception):
    """Base class for all govproof errors."""


class ConstraintUnsatisfiable(GovProofError):
    """
    Inputs admit no witness for the circuit's hard constraints.

    This is how a non-compliant claim becomes observable: proof
    generation fails and no artifact is produced.
    """

    def __init__(self, circuit: str, constraint: str | None = None) -> None:
        self.circuit = circuit
        self.constraint = constraint
        detail = f" (constraint '{constraint}')" if constraint else ""
        super().__init__(f"No satisfying witness for circuit '{circuit}'{detail}")


class WitnessInputError(ConstraintUnsatisfiable):
    """An input signal is missing, has the wrong shape, or is not an integer."""

    def __init__(self, circuit: str, signal: str, reason: str) -> None:
        super().__init__(circuit)
        self.signal = signal
        self.reason = reason

    def __str__(self) -> str:
        return f"Invalid input '{self.signal}' for circuit '{self.circuit}': {self.reason}"


class VerificationRejected(GovProofError):
    """A well-formed proof failed verification against its key and public inputs."""

    def __init__(self, circuit: str, claim_id: str | None = None) -> None:
        self.circuit = circuit
        self.claim_id = claim_id
        subject = f"claim '{claim_id}'" if claim_id else f"circuit '{circuit}'"
        super().__init__(f"Proof rejected for {subject}")


class MalformedArtifact(GovProofError):
    """A persisted proof, public signal vector, composite or policy pack is invalid."""


class KeyMismatch(GovProofError):
    """A verification key does not belong to the circuit that produced the proof."""


class ProvingBackendError(GovProofError):
    """The external proving engine failed for a reason other than an unsatisfiable witness."""
