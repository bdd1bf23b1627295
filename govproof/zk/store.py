"""
Proof Store
===========

Write-once persistence of proofs and their public signals.

Layout, matching what verifiers expect next to the build directory:

    <data_dir>/<circuit>_proof.json
    <data_dir>/<circuit>_public.json

Files are created exclusively; an existing artifact is never
overwritten, so concurrent writers to one location fail fast instead of
interleaving. Witnesses and private inputs are never written.

Version: 0.1.0
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from govproof.errors import MalformedArtifact
from govproof.logging import get_logger
from govproof.zk.models import GeneratedProof, PublicSignals, ZKProof


logger = get_logger(__name__)


def write_json_once(path: Path, data: Any) -> None:
    """
    Create ``path`` with JSON content.

    Raises:
        FileExistsError: If the file already exists.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "x", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def read_json(path: Path) -> Any:
    """
    Read a JSON artifact.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedArtifact: If the file is not valid JSON.
    """
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MalformedArtifact(f"{path} is not valid JSON: {e}") from e


class ProofStore:
    """Directory of persisted proofs, one pair of files per circuit."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def proof_path(self, circuit_name: str) -> Path:
        return self.data_dir / f"{circuit_name}_proof.json"

    def public_path(self, circuit_name: str) -> Path:
        return self.data_dir / f"{circuit_name}_public.json"

    def save(self, generated: GeneratedProof) -> tuple[Path, Path]:
        """
        Persist a proof and its public signals.

        Raises:
            FileExistsError: If a proof for this circuit is already stored.
        """
        circuit_name = generated.circuit_name
        proof_path = self.proof_path(circuit_name)
        public_path = self.public_path(circuit_name)
        if proof_path.exists() or public_path.exists():
            raise FileExistsError(f"Proof for '{circuit_name}' already stored in {self.data_dir}")

        write_json_once(proof_path, generated.proof.model_dump())
        write_json_once(public_path, generated.public_signals.signals)

        logger.info("zk_proof_saved", circuit=circuit_name, path=str(proof_path))
        return proof_path, public_path

    def load(self, circuit_name: str) -> tuple[ZKProof, PublicSignals]:
        """
        Load a stored proof and its public signals.

        Raises:
            FileNotFoundError: If nothing is stored for the circuit.
            MalformedArtifact: If either file violates its schema.
        """
        proof_data = read_json(self.proof_path(circuit_name))
        public_data = read_json(self.public_path(circuit_name))
        try:
            return ZKProof.model_validate(proof_data), PublicSignals(signals=public_data)
        except ValidationError as e:
            raise MalformedArtifact(f"Stored proof for '{circuit_name}' is invalid: {e}") from e

    def stored_circuits(self) -> list[str]:
        """Circuits with a stored proof."""
        suffix = "_proof.json"
        return sorted(p.name[: -len(suffix)] for p in self.data_dir.glob(f"*{suffix}"))
