"""Single-qubit Pauli labels and the multi-qubit objects built from them.

Phases are never tracked here: a :class:`QuantumError` describes *which*
Pauli acts on each qubit, which is all the syndrome calculus needs.  The
identity is represented by absence (``None``) rather than a fourth label.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Optional, Sequence, Tuple

import torch

__all__ = [
    "PauliOperator",
    "OperatorType",
    "commutes",
    "multiply",
    "Stabilizer",
    "LogicalOperator",
    "QuantumError",
    "RecoveryOperation",
]


_MATRICES = {
    "X": ((0, 1), (1, 0)),
    "Y": ((0, -1j), (1j, 0)),
    "Z": ((1, 0), (0, -1)),
}


class PauliOperator(enum.Enum):
    X = "X"
    Y = "Y"
    Z = "Z"

    def __str__(self) -> str:
        return self.value

    def matrix(self, dtype: torch.dtype = torch.complex128, device=None) -> torch.Tensor:
        return torch.tensor(_MATRICES[self.value], dtype=dtype, device=device)

    @classmethod
    def from_label(cls, label: str) -> Optional["PauliOperator"]:
        """Parse ``"X"``, ``"Y"``, ``"Z"``; ``"I"`` and ``"_"`` give ``None``."""
        label = label.upper()
        if label in ("I", "_"):
            return None
        try:
            return cls(label)
        except ValueError:
            raise ValueError(f"Unknown Pauli label {label!r}") from None


class OperatorType(enum.Enum):
    X = "X"
    Z = "Z"


def commutes(a: Optional[PauliOperator], b: Optional[PauliOperator]) -> bool:
    """Two single-qubit Paulis commute iff they are equal or one is the identity."""
    if a is None or b is None:
        return True
    return a is b


# Products of distinct non-identity Paulis, up to phase.
_PRODUCTS = {
    frozenset((PauliOperator.X, PauliOperator.Y)): PauliOperator.Z,
    frozenset((PauliOperator.Y, PauliOperator.Z)): PauliOperator.X,
    frozenset((PauliOperator.X, PauliOperator.Z)): PauliOperator.Y,
}


def multiply(a: Optional[PauliOperator], b: Optional[PauliOperator]) -> Optional[PauliOperator]:
    if a is None:
        return b
    if b is None:
        return a
    if a is b:
        return None
    return _PRODUCTS[frozenset((a, b))]


def _parse_label(label: str) -> Iterator[Tuple[int, PauliOperator]]:
    for qubit, char in enumerate(label):
        pauli = PauliOperator.from_label(char)
        if pauli is not None:
            yield qubit, pauli


@dataclass(frozen=True, init=False)
class Stabilizer:
    """Ordered ``(qubit, Pauli)`` pairs forming one multi-qubit check."""

    operators: Tuple[Tuple[int, PauliOperator], ...]

    def __init__(self, operators: Iterable[Tuple[int, PauliOperator]]):
        ops = tuple((int(q), PauliOperator(p)) for q, p in operators)
        qubits = [q for q, _ in ops]
        if len(set(qubits)) != len(qubits):
            raise ValueError(f"qubits must be unique; got {qubits}")
        if any(q < 0 for q in qubits):
            raise ValueError(f"qubit indices must be non-negative; got {qubits}")
        object.__setattr__(self, "operators", ops)

    @classmethod
    def from_label(cls, label: str):
        return cls(_parse_label(label))

    def __iter__(self) -> Iterator[Tuple[int, PauliOperator]]:
        return iter(self.operators)

    def __len__(self) -> int:
        return len(self.operators)

    @property
    def qubits(self) -> Tuple[int, ...]:
        return tuple(q for q, _ in self.operators)

    @property
    def weight(self) -> int:
        return len(self.operators)

    def to_label(self, num_qubits: int) -> str:
        chars = ["I"] * num_qubits
        for qubit, pauli in self.operators:
            chars[qubit] = pauli.value
        return "".join(chars)

    def __str__(self) -> str:
        return " ".join(f"{p}{q}" for q, p in self.operators)


@dataclass(frozen=True, init=False)
class LogicalOperator(Stabilizer):
    """Encoded-qubit operator; part of a code's description, not of decoding."""

    kind: OperatorType

    def __init__(self, operators: Iterable[Tuple[int, PauliOperator]], kind: OperatorType):
        super().__init__(operators)
        object.__setattr__(self, "kind", OperatorType(kind))

    @classmethod
    def from_label(cls, label: str, kind: OperatorType = OperatorType.X):
        return cls(_parse_label(label), kind)


class QuantumError(Mapping[int, PauliOperator]):
    """A hypothesised physical error: qubit index to the Pauli applied there.

    Qubits that are not present carry the identity.  Instances are immutable
    and hash by content, so they can be stored in sets and used as keys.
    """

    __slots__ = ("_paulis",)

    def __init__(self, paulis: Mapping[int, PauliOperator] | Iterable[Tuple[int, PauliOperator]] = ()):
        items = paulis.items() if isinstance(paulis, Mapping) else paulis
        data: dict[int, PauliOperator] = {}
        for qubit, pauli in items:
            if pauli is None:
                continue
            qubit = int(qubit)
            if qubit < 0:
                raise ValueError(f"qubit indices must be non-negative; got {qubit}")
            data[qubit] = PauliOperator(pauli)
        self._paulis = dict(sorted(data.items()))

    @classmethod
    def from_label(cls, label: str):
        """``QuantumError.from_label("XIIZ")`` puts X on qubit 0 and Z on qubit 3."""
        return cls(_parse_label(label))

    def __getitem__(self, qubit: int) -> PauliOperator:
        return self._paulis[qubit]

    def __iter__(self) -> Iterator[int]:
        return iter(self._paulis)

    def __len__(self) -> int:
        return len(self._paulis)

    def __hash__(self) -> int:
        return hash(tuple(self._paulis.items()))

    def __eq__(self, other) -> bool:
        if isinstance(other, QuantumError):
            return self._paulis == other._paulis
        return NotImplemented

    def __repr__(self) -> str:
        body = ", ".join(f"{q}: {p}" for q, p in self._paulis.items())
        return f"{type(self).__name__}({{{body}}})"

    def get_pauli(self, qubit: int) -> Optional[PauliOperator]:
        return self._paulis.get(qubit)

    @property
    def weight(self) -> int:
        return len(self._paulis)

    @property
    def is_identity(self) -> bool:
        return not self._paulis

    def compose(self, other: "QuantumError") -> "QuantumError":
        """Qubit-wise product with ``other``, ignoring global phase."""
        qubits: Sequence[int] = sorted(set(self._paulis) | set(other._paulis))
        return QuantumError(
            (q, multiply(self.get_pauli(q), other.get_pauli(q))) for q in qubits
        )

    def to_label(self, num_qubits: int) -> str:
        chars = ["I"] * num_qubits
        for qubit, pauli in self._paulis.items():
            chars[qubit] = pauli.value
        return "".join(chars)


class RecoveryOperation(QuantumError):
    """The correction applied for one syndrome."""

    __slots__ = ()

    @classmethod
    def from_error(cls, error: QuantumError) -> "RecoveryOperation":
        return cls(error.items())

    @classmethod
    def identity(cls) -> "RecoveryOperation":
        return cls()
