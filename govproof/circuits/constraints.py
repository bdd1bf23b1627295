"""
Constraint System
=================

A small rank-1 constraint system (R1CS) builder and witness solver.

Circuits allocate signals, attach witness hints to the signals they
compute, and emit quadratic constraints ``A * B = C`` over linear
combinations of signals. Witness construction runs the hints in
allocation order and then checks every constraint; the first violated
constraint aborts with ``ConstraintUnsatisfiable``. The solver never
reports signal values, only the circuit and constraint labels.

Usage:
    cs = ConstraintSystem("example")
    x = cs.private_input("x")
    y = cs.intermediate("y", hint=lambda read: read(x) * 2)
    cs.enforce_equal(y, x * 2, "double")
    witness = cs.compute_witness({"x": 21})

Version: 0.1.0
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from govproof.circuits.field import FIELD_ORDER, field_to_str, parse_field_element, to_field
from govproof.errors import ConstraintUnsatisfiable, WitnessInputError
from govproof.logging import get_logger


logger = get_logger(__name__)


class SignalKind(str, Enum):
    """Role of a signal inside a circuit."""

    CONSTANT = "constant"
    OUTPUT = "output"
    PUBLIC_INPUT = "public_input"
    PRIVATE_INPUT = "private_input"
    INTERMEDIATE = "intermediate"


@dataclass(frozen=True)
class Signal:
    """A field-element wire of one circuit instance."""

    index: int
    name: str
    kind: SignalKind

    @property
    def is_public(self) -> bool:
        return self.kind in (SignalKind.OUTPUT, SignalKind.PUBLIC_INPUT)

    def __add__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(self) + other

    def __radd__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(other) + self

    def __sub__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(self) - other

    def __rsub__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(other) - self

    def __neg__(self) -> LinearCombination:
        return -LinearCombination.of(self)

    def __mul__(self, scalar: int) -> LinearCombination:
        return LinearCombination.of(self) * scalar

    __rmul__ = __mul__


class LinearCombination:
    """Sum of ``coefficient * signal`` terms; index 0 is the constant one."""

    __slots__ = ("terms",)

    def __init__(self, terms: Mapping[int, int] | None = None) -> None:
        self.terms: dict[int, int] = {}
        for index, coeff in (terms or {}).items():
            coeff = to_field(coeff)
            if coeff:
                self.terms[index] = coeff

    @classmethod
    def constant(cls, value: int) -> LinearCombination:
        return cls({0: value})

    @classmethod
    def of(cls, operand: Operand) -> LinearCombination:
        if isinstance(operand, LinearCombination):
            return operand
        if isinstance(operand, Signal):
            return cls({operand.index: 1})
        if isinstance(operand, int) and not isinstance(operand, bool):
            return cls.constant(operand)
        raise TypeError(f"cannot build a linear combination from {type(operand).__name__}")

    def __add__(self, other: Operand) -> LinearCombination:
        merged = dict(self.terms)
        for index, coeff in LinearCombination.of(other).terms.items():
            merged[index] = merged.get(index, 0) + coeff
        return LinearCombination(merged)

    __radd__ = __add__

    def __neg__(self) -> LinearCombination:
        return LinearCombination({index: -coeff for index, coeff in self.terms.items()})

    def __sub__(self, other: Operand) -> LinearCombination:
        return self + (-LinearCombination.of(other))

    def __rsub__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(other) - self

    def __mul__(self, scalar: int) -> LinearCombination:
        if not isinstance(scalar, int) or isinstance(scalar, bool):
            raise TypeError("linear combinations only scale by integer constants")
        return LinearCombination({index: coeff * scalar for index, coeff in self.terms.items()})

    __rmul__ = __mul__

    def evaluate(self, values: list[int | None]) -> int:
        total = 0
        for index, coeff in self.terms.items():
            value = values[index]
            if value is None:
                raise RuntimeError(f"signal #{index} read before assignment")
            total += coeff * value
        return total % FIELD_ORDER

    def __repr__(self) -> str:
        return f"LinearCombination({self.terms!r})"


Operand = Union[Signal, LinearCombination, int]

# A hint receives a reader that evaluates operands against the partial witness
Hint = Callable[[Callable[[Operand], int]], int]


@dataclass(frozen=True)
class Constraint:
    """Quadratic constraint ``a * b == c``."""

    a: LinearCombination
    b: LinearCombination
    c: LinearCombination
    label: str

    def is_satisfied(self, values: list[int | None]) -> bool:
        return (self.a.evaluate(values) * self.b.evaluate(values) - self.c.evaluate(values)) % FIELD_ORDER == 0


@dataclass(frozen=True)
class Witness:
    """
    A complete satisfying assignment for one circuit instance.

    Ephemeral: never persisted, and its repr does not expose values.
    """

    circuit: str
    values: tuple[int, ...] = field(repr=False)
    public_indices: tuple[int, ...] = field(repr=False)

    def value_of(self, signal: Signal) -> int:
        return self.values[signal.index]

    def public_signals(self) -> list[str]:
        """Public signals as decimal strings: outputs, then public inputs."""
        return [field_to_str(self.values[i]) for i in self.public_indices]


class ConstraintSystem:
    """
    Signals, witness hints and constraints of one circuit.

    Built once per circuit definition and then only read; witness
    computation does not mutate the system, so one instance can serve
    concurrent proof requests.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.signals: list[Signal] = [Signal(0, "one", SignalKind.CONSTANT)]
        self.constraints: list[Constraint] = []
        self._hints: list[tuple[Signal, Hint]] = []
        self._inputs: dict[str, Signal | list[Signal]] = {}
        self._names: set[str] = {"one"}
        self._scope: list[str] = []

    # =========================================================================
    # Allocation
    # =========================================================================

    @contextmanager
    def scope(self, name: str) -> Iterator[None]:
        """Prefix signal names and constraint labels, like a circom component."""
        self._scope.append(name)
        try:
            yield
        finally:
            self._scope.pop()

    def _qualify(self, name: str) -> str:
        return ".".join([*self._scope, name])

    def _allocate(self, name: str, kind: SignalKind) -> Signal:
        qualified = self._qualify(name)
        if qualified in self._names:
            raise ValueError(f"signal '{qualified}' already defined in circuit '{self.name}'")
        signal = Signal(len(self.signals), qualified, kind)
        self.signals.append(signal)
        self._names.add(qualified)
        return signal

    def private_input(self, name: str) -> Signal:
        signal = self._allocate(name, SignalKind.PRIVATE_INPUT)
        self._inputs[name] = signal
        return signal

    def public_input(self, name: str) -> Signal:
        signal = self._allocate(name, SignalKind.PUBLIC_INPUT)
        self._inputs[name] = signal
        return signal

    def private_input_array(self, name: str, size: int) -> list[Signal]:
        if size < 1:
            raise ValueError("input arrays need at least one element")
        signals = [self._allocate(f"{name}[{i}]", SignalKind.PRIVATE_INPUT) for i in range(size)]
        self._inputs[name] = signals
        return signals

    def output(self, name: str) -> Signal:
        return self._allocate(name, SignalKind.OUTPUT)

    def intermediate(self, name: str, hint: Hint) -> Signal:
        signal = self._allocate(name, SignalKind.INTERMEDIATE)
        self._hints.append((signal, hint))
        return signal

    def assign(self, signal: Signal, hint: Hint) -> None:
        """Attach the witness hint for an already allocated output."""
        if signal.kind is not SignalKind.OUTPUT:
            raise ValueError("only outputs are assigned after allocation")
        self._hints.append((signal, hint))

    # =========================================================================
    # Constraints
    # =========================================================================

    def enforce(self, a: Operand, b: Operand, c: Operand, label: str) -> None:
        self.constraints.append(
            Constraint(
                LinearCombination.of(a),
                LinearCombination.of(b),
                LinearCombination.of(c),
                self._qualify(label),
            )
        )

    def enforce_equal(self, lhs: Operand, rhs: Operand, label: str) -> None:
        self.enforce(lhs, 1, rhs, label)

    def enforce_boolean(self, signal: Signal, label: str) -> None:
        """``signal * (signal - 1) == 0``."""
        self.enforce(signal, signal - 1, 0, label)

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def public_signals(self) -> list[Signal]:
        """Declared public signals in snarkjs order: outputs, then public inputs."""
        outputs = [s for s in self.signals if s.kind is SignalKind.OUTPUT]
        inputs = [s for s in self.signals if s.kind is SignalKind.PUBLIC_INPUT]
        return outputs + inputs

    @property
    def input_names(self) -> list[str]:
        return list(self._inputs)

    @property
    def public_input_names(self) -> list[str]:
        return [
            name
            for name, signal in self._inputs.items()
            if isinstance(signal, Signal) and signal.kind is SignalKind.PUBLIC_INPUT
        ]

    @property
    def constraint_count(self) -> int:
        return len(self.constraints)

    # =========================================================================
    # Witness
    # =========================================================================

    def _assign_inputs(self, inputs: Mapping[str, Any], values: list[int | None]) -> None:
        unknown = set(inputs) - set(self._inputs)
        if unknown:
            raise WitnessInputError(self.name, sorted(unknown)[0], "not an input of this circuit")

        for name, declared in self._inputs.items():
            if name not in inputs:
                raise WitnessInputError(self.name, name, "missing")
            raw = inputs[name]

            if isinstance(declared, list):
                if not isinstance(raw, (list, tuple)) or len(raw) != len(declared):
                    raise WitnessInputError(self.name, name, f"expected a list of {len(declared)} values")
                pairs = list(zip(declared, raw))
            else:
                if isinstance(raw, (list, tuple)):
                    raise WitnessInputError(self.name, name, "expected a single value")
                pairs = [(declared, raw)]

            for signal, item in pairs:
                try:
                    values[signal.index] = parse_field_element(item)
                except (TypeError, ValueError) as e:
                    raise WitnessInputError(self.name, signal.name, str(e)) from None

    def compute_witness(self, inputs: Mapping[str, Any]) -> Witness:
        """
        Compute and check a full witness for the given inputs.

        Args:
            inputs: Input name -> int/decimal string, or a list for array inputs.

        Returns:
            Witness satisfying every constraint.

        Raises:
            WitnessInputError: If an input is missing, unknown or malformed.
            ConstraintUnsatisfiable: If the inputs admit no satisfying witness.
        """
        values: list[int | None] = [None] * len(self.signals)
        values[0] = 1
        self._assign_inputs(inputs, values)

        def read(operand: Operand) -> int:
            return LinearCombination.of(operand).evaluate(values)

        for signal, hint in self._hints:
            values[signal.index] = to_field(hint(read))

        for constraint in self.constraints:
            if not constraint.is_satisfied(values):
                logger.debug(
                    "witness_constraint_violated",
                    circuit=self.name,
                    constraint=constraint.label,
                )
                raise ConstraintUnsatisfiable(self.name, constraint.label)

        public_indices = tuple(s.index for s in self.public_signals)
        return Witness(
            circuit=self.name,
            values=tuple(values),
            public_indices=public_indices,
        )
