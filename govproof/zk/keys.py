"""
Circuit Artifacts and Keys
==========================

Locates compiled circuit artifacts and loads verification keys.

Build layout (produced by the external compiler and trusted setup):

    build/<circuit>/<circuit>_js/<circuit>.wasm     witness calculator
    build/<circuit>/<circuit>_final.zkey            proving key
    build/<circuit>/verification_key.json           verification key

Version: 0.1.0
"""

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from pydantic import ValidationError

from govproof.circuits.registry import CIRCUITS
from govproof.errors import KeyMismatch, MalformedArtifact
from govproof.logging import get_logger
from govproof.zk.models import VerificationKey


logger = get_logger(__name__)


@dataclass(frozen=True)
class CircuitArtifacts:
    """Paths of one circuit's compiled artifacts."""

    build_dir: Path
    circuit_name: str

    @property
    def circuit_dir(self) -> Path:
        return self.build_dir / self.circuit_name

    @property
    def wasm_path(self) -> Path:
        return self.circuit_dir / f"{self.circuit_name}_js" / f"{self.circuit_name}.wasm"

    @property
    def zkey_path(self) -> Path:
        return self.circuit_dir / f"{self.circuit_name}_final.zkey"

    @property
    def vkey_path(self) -> Path:
        return self.circuit_dir / "verification_key.json"

    def missing(self) -> list[Path]:
        """Proving artifacts that do not exist on disk."""
        return [p for p in (self.wasm_path, self.zkey_path) if not p.exists()]


def load_verification_key(path: Path) -> VerificationKey:
    """
    Load a snarkjs verification key file.

    Raises:
        FileNotFoundError: If the file does not exist.
        MalformedArtifact: If the file is not a valid verification key.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return VerificationKey.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise MalformedArtifact(f"Invalid verification key {path}: {e}") from e


class KeyRing(Mapping[str, VerificationKey]):
    """
    Read-only mapping of circuit name to verification key.

    Loaded once per process and injected into verifiers; never mutated.
    """

    def __init__(self, keys: Mapping[str, VerificationKey]) -> None:
        self._keys = MappingProxyType(dict(keys))

    @classmethod
    def load(cls, build_dir: str | Path, circuits: Iterable[str] | None = None) -> "KeyRing":
        """
        Load verification keys for circuits found under ``build_dir``.

        Circuits without a key file are skipped (and logged); asking the
        key ring for them later raises KeyMismatch.
        """
        build_dir = Path(build_dir)
        keys: dict[str, VerificationKey] = {}
        for name in circuits if circuits is not None else CIRCUITS:
            path = CircuitArtifacts(build_dir, name).vkey_path
            if not path.exists():
                logger.warning("zk_verification_key_not_found", circuit=name, path=str(path))
                continue
            keys[name] = load_verification_key(path)

        logger.info("zk_keyring_loaded", circuits=sorted(keys), build_dir=str(build_dir))
        return cls(keys)

    def __getitem__(self, name: str) -> VerificationKey:
        try:
            return self._keys[name]
        except KeyError:
            raise KeyMismatch(f"No verification key loaded for circuit '{name}'") from None

    def get(self, name: str, default: VerificationKey | None = None) -> VerificationKey | None:  # type: ignore[override]
        return self._keys.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, name: object) -> bool:
        return name in self._keys
