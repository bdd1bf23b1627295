"""
Circuit Definitions
===================

Base class for statically parameterized predicate circuits.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from functools import cached_property
from typing import Any

from govproof.circuits.constraints import ConstraintSystem, Witness


class PredicateKind(str, Enum):
    """Predicate families a circuit can encode."""

    BELOW_THRESHOLD = "below_threshold"
    K_OF_N = "k_of_n"


class CircuitDefinition(ABC):
    """
    A predicate circuit with its arity baked in.

    Subclasses declare signals and constraints in ``define``. The
    constraint system is built once on first use and only read afterwards.
    """

    name: str
    predicate: PredicateKind

    @abstractmethod
    def define(self, cs: ConstraintSystem) -> None:
        """Declare signals and constraints."""
        ...

    @abstractmethod
    def describe_claim(self, public_signals: list[str]) -> str:
        """Render the proven predicate from the public signals."""
        ...

    @cached_property
    def system(self) -> ConstraintSystem:
        cs = ConstraintSystem(self.name)
        self.define(cs)
        return cs

    @property
    def n_public(self) -> int:
        """Number of public signals a verification key must declare."""
        return len(self.system.public_signals)

    @property
    def input_names(self) -> list[str]:
        return self.system.input_names

    def compute_witness(self, inputs: Mapping[str, Any]) -> Witness:
        return self.system.compute_witness(inputs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
