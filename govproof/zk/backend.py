"""
Proving Backends
================

Adapters to the external proving/verification engine.

The core only depends on two operations:

    prove(circuit, inputs)               -> (ZKProof, PublicSignals)
    verify(verification_key, signals, proof) -> bool

``SnarkjsBackend`` runs ``snarkjs groth16 fullprove`` / ``verify`` in a
subprocess. Each invocation works in its own temporary directory, so
concurrent proofs never share files; the blocking call is pushed to a
worker thread with ``asyncio.to_thread``.

Version: 0.1.0
"""

import asyncio
import json
import subprocess
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from govproof.config import settings
from govproof.errors import ConstraintUnsatisfiable, MalformedArtifact, ProvingBackendError
from govproof.logging import get_logger
from govproof.zk.keys import CircuitArtifacts
from govproof.zk.models import PublicSignals, VerificationKey, ZKProof


logger = get_logger(__name__)

# Witness calculator messages that mean "these inputs admit no witness"
WITNESS_FAILURE_MARKERS = (
    "Assert Failed",
    "Error in template",
    "Not all inputs have been set",
    "Too many values for input signal",
    "Signal not found",
)

MAX_STDERR_CHARS = 2000


class ProvingBackend(ABC):
    """
    Abstract base class for proving engines.

    Implements the Strategy pattern for swappable proof systems.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name."""
        ...

    @abstractmethod
    async def prove(
        self,
        circuit_name: str,
        inputs: dict[str, Any],
    ) -> tuple[ZKProof, PublicSignals]:
        """
        Compute a witness and a proof for the given inputs.

        Raises:
            ConstraintUnsatisfiable: If the engine's witness calculator rejects the inputs.
            ProvingBackendError: If the engine cannot run.
        """
        ...

    @abstractmethod
    async def verify(
        self,
        verification_key: VerificationKey,
        public_signals: PublicSignals,
        proof: ZKProof,
    ) -> bool:
        """Check a proof; pure, with no side effects beyond scratch files."""
        ...


class SnarkjsBackend(ProvingBackend):
    """
    snarkjs Groth16 backend.

    Usage:
        backend = SnarkjsBackend()
        proof, signals = await backend.prove(
            "compute_threshold",
            {"privateCompute": "5000000000000000000000000", "threshold": "10000000000000000000000000"},
        )
    """

    def __init__(
        self,
        build_dir: str | Path | None = None,
        command: list[str] | None = None,
        timeout_seconds: int | None = None,
    ) -> None:
        """
        Initialize the backend.

        Args:
            build_dir: Path to circuit build directory. Defaults to settings.zk.build_dir
            command: snarkjs invocation. Defaults to settings.zk.snarkjs_command
            timeout_seconds: Subprocess timeout. Defaults to settings.zk.timeout_seconds
        """
        self.build_dir = Path(build_dir) if build_dir else settings.zk.build_dir
        self.command = command or settings.zk.snarkjs_argv
        self.timeout_seconds = timeout_seconds or settings.zk.timeout_seconds
        self._validate_setup()

    @property
    def name(self) -> str:
        return "snarkjs"

    def _validate_setup(self) -> None:
        """Warn early when the build directory is missing."""
        if not self.build_dir.exists():
            logger.warning(
                "zk_circuit_build_dir_not_found",
                path=str(self.build_dir),
            )

    async def _run(self, args: list[str], cwd: Path) -> subprocess.CompletedProcess:
        try:
            return await asyncio.to_thread(
                subprocess.run,
                [*self.command, *args],
                capture_output=True,
                text=True,
                cwd=cwd,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            raise ProvingBackendError(
                f"snarkjs {args[0]} {args[1]} timed out after {self.timeout_seconds}s"
            ) from None
        except FileNotFoundError as e:
            raise ProvingBackendError(f"snarkjs not available: {e}") from e

    async def prove(
        self,
        circuit_name: str,
        inputs: dict[str, Any],
    ) -> tuple[ZKProof, PublicSignals]:
        artifacts = CircuitArtifacts(self.build_dir, circuit_name)
        missing = artifacts.missing()
        if missing:
            raise ProvingBackendError(f"Circuit artifacts not found: {', '.join(map(str, missing))}")

        with tempfile.TemporaryDirectory(prefix=f"{circuit_name}_") as tmp:
            workdir = Path(tmp)
            input_file = workdir / "input.json"
            proof_file = workdir / "proof.json"
            public_file = workdir / "public.json"
            input_file.write_text(json.dumps(inputs), encoding="utf-8")

            start_time = time.time()
            result = await self._run(
                [
                    "groth16",
                    "fullprove",
                    str(input_file),
                    str(artifacts.wasm_path),
                    str(artifacts.zkey_path),
                    str(proof_file),
                    str(public_file),
                ],
                cwd=workdir,
            )
            proving_time_ms = int((time.time() - start_time) * 1000)

            if result.returncode != 0:
                output = f"{result.stdout}\n{result.stderr}"
                if any(marker in output for marker in WITNESS_FAILURE_MARKERS):
                    # Witness calculator output can echo signal values: not logged
                    raise ConstraintUnsatisfiable(circuit_name)
                logger.error(
                    "snarkjs_proof_generation_failed",
                    circuit=circuit_name,
                    returncode=result.returncode,
                    stderr=result.stderr[-MAX_STDERR_CHARS:],
                )
                raise ProvingBackendError(f"Proof generation failed for circuit '{circuit_name}'")

            try:
                proof = ZKProof.model_validate(json.loads(proof_file.read_text(encoding="utf-8")))
                signals = PublicSignals(signals=json.loads(public_file.read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                raise MalformedArtifact(f"snarkjs produced an unreadable proof for '{circuit_name}'") from e

        logger.debug("snarkjs_fullprove_completed", circuit=circuit_name, proving_time_ms=proving_time_ms)
        return proof, signals

    async def verify(
        self,
        verification_key: VerificationKey,
        public_signals: PublicSignals,
        proof: ZKProof,
    ) -> bool:
        with tempfile.TemporaryDirectory(prefix="verify_") as tmp:
            workdir = Path(tmp)
            vkey_file = workdir / "verification_key.json"
            public_file = workdir / "public.json"
            proof_file = workdir / "proof.json"
            vkey_file.write_text(json.dumps(verification_key.to_snarkjs()), encoding="utf-8")
            public_file.write_text(json.dumps(public_signals.signals), encoding="utf-8")
            proof_file.write_text(json.dumps(proof.model_dump()), encoding="utf-8")

            result = await self._run(
                ["groth16", "verify", str(vkey_file), str(public_file), str(proof_file)],
                cwd=workdir,
            )

        # snarkjs prints "OK!" on success and "Invalid proof" otherwise
        return result.returncode == 0 and "OK" in result.stdout
