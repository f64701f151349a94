"""Stabilizer codes with a precomputed minimum-weight lookup decoder.

A :class:`StabilizerCode` is immutable.  On construction it enumerates every
Pauli error of weight ``0 .. distance - 1`` and records, for every syndrome it
meets, the first error that produced it.  Enumeration order is fixed:

1. by weight, ascending;
2. within a weight, by qubit positions in :func:`itertools.combinations`
   (lexicographic) order over ``0 .. num_qubits - 1``;
3. within a set of positions, by Pauli types in :func:`itertools.product`
   order over ``(X, Y, Z)``.

So the recovery stored for a syndrome is a lowest-weight error producing it,
ties broken by that order.  Syndromes never met during enumeration are not
guessed at: :meth:`StabilizerCode.decode` raises
:class:`~qcorrect.errors.UnknownSyndrome`.

Example
-------

>>> from qcorrect.codes import steane_code
>>> from qcorrect.pauli import QuantumError
>>> code = steane_code()
>>> syndrome = code.syndrome_of(QuantumError.from_label("XIIIIII"))
>>> str(syndrome)
'0010'
>>> code.decode(syndrome).to_label(code.num_qubits)
'XIIIIII'
"""

from __future__ import annotations

import itertools
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Sequence, Tuple

from ..errors import UnknownSyndrome
from ..pauli import (
    LogicalOperator,
    OperatorType,
    PauliOperator,
    QuantumError,
    RecoveryOperation,
    Stabilizer,
    commutes,
)
from .syndrome import ErrorSyndrome

__all__ = ["StabilizerCode", "steane_code"]


_ENUMERATION_PAULIS = (PauliOperator.X, PauliOperator.Y, PauliOperator.Z)


class StabilizerCode:
    """Stabilizer generators, logical operators, distance and recovery table."""

    def __init__(
        self,
        stabilizers: Sequence[Stabilizer],
        logical_operators: Sequence[LogicalOperator],
        distance: int,
        num_qubits: int | None = None,
        name: str = "",
    ):
        if distance < 1:
            raise ValueError(f"distance must be at least 1; got {distance}")
        if not stabilizers:
            raise ValueError("at least one stabilizer required")

        touched = [q for s in stabilizers for q in s.qubits]
        touched += [q for op in logical_operators for q in op.qubits]
        needed = max(touched, default=-1) + 1
        if num_qubits is None:
            num_qubits = needed
        elif num_qubits < needed:
            raise ValueError(
                f"operators act on qubit {needed - 1} but the code has {num_qubits} qubits"
            )

        self._stabilizers = tuple(stabilizers)
        self._logical_operators = tuple(logical_operators)
        self._distance = int(distance)
        self._num_qubits = int(num_qubits)
        self.name = name
        self._recovery_table = MappingProxyType(self._precompute_recovery_operations())

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return (
            f"StabilizerCode({label}n={self._num_qubits}, d={self._distance}, "
            f"stabilizers={len(self._stabilizers)})"
        )

    # Description -------------------------------------------------------
    @property
    def stabilizers(self) -> Tuple[Stabilizer, ...]:
        return self._stabilizers

    @property
    def logical_operators(self) -> Tuple[LogicalOperator, ...]:
        return self._logical_operators

    @property
    def distance(self) -> int:
        return self._distance

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def correctable_weight(self) -> int:
        """Number of arbitrary simultaneous errors the distance guarantees to correct."""
        return (self._distance - 1) // 2

    @property
    def recovery_table(self) -> Mapping[ErrorSyndrome, RecoveryOperation]:
        return self._recovery_table

    # Syndrome calculus --------------------------------------------------
    def enumerate_errors(self, max_weight: int | None = None) -> Iterator[QuantumError]:
        """Yield every error of weight ``0 .. max_weight`` in decoding order."""
        if max_weight is None:
            max_weight = self._distance - 1
        for weight in range(max_weight + 1):
            for positions in itertools.combinations(range(self._num_qubits), weight):
                for paulis in itertools.product(_ENUMERATION_PAULIS, repeat=weight):
                    yield QuantumError(zip(positions, paulis))

    def syndrome_of(self, error: QuantumError) -> ErrorSyndrome:
        """Syndrome ``error`` would produce on a code state.

        Bit ``i`` is the parity of the number of qubits on which stabilizer
        ``i`` and ``error`` carry anticommuting Paulis.
        """
        return ErrorSyndrome(self._parity(stabilizer, error) for stabilizer in self._stabilizers)

    @staticmethod
    def _parity(stabilizer: Stabilizer, error: QuantumError) -> bool:
        parity = False
        for qubit, pauli in stabilizer:
            parity ^= not commutes(pauli, error.get_pauli(qubit))
        return parity

    def _precompute_recovery_operations(self) -> Dict[ErrorSyndrome, RecoveryOperation]:
        table: Dict[ErrorSyndrome, RecoveryOperation] = {}
        for error in self.enumerate_errors():
            syndrome = self.syndrome_of(error)
            if syndrome not in table:
                table[syndrome] = RecoveryOperation.from_error(error)
        return table

    # Decoding -----------------------------------------------------------
    def _coerce(self, syndrome: ErrorSyndrome | Iterable[bool]) -> ErrorSyndrome:
        if not isinstance(syndrome, ErrorSyndrome):
            syndrome = ErrorSyndrome.from_bits(syndrome)
        if len(syndrome) != len(self._stabilizers):
            raise ValueError(
                f"syndrome has {len(syndrome)} bits but the code has {len(self._stabilizers)} stabilizers"
            )
        return syndrome

    def __contains__(self, syndrome) -> bool:
        try:
            syndrome = self._coerce(syndrome)
        except (TypeError, ValueError):
            return False
        return syndrome in self._recovery_table

    def decode(self, syndrome: ErrorSyndrome | Iterable[bool]) -> RecoveryOperation:
        """Return the recovery operation for ``syndrome``."""
        syndrome = self._coerce(syndrome)
        try:
            return self._recovery_table[syndrome]
        except KeyError:
            raise UnknownSyndrome(syndrome) from None


def _paulis(kind: PauliOperator, qubits: Iterable[int]) -> list[tuple[int, PauliOperator]]:
    return [(q, kind) for q in qubits]


def steane_code() -> StabilizerCode:
    """The 7-qubit, distance-3 Steane-style code with four generators."""

    x, z = PauliOperator.X, PauliOperator.Z
    stabilizers = [
        Stabilizer(_paulis(x, (0, 2, 4, 6))),
        Stabilizer(_paulis(x, (1, 3, 5, 6))),
        Stabilizer(_paulis(z, (0, 2, 4, 6))),
        Stabilizer(_paulis(z, (1, 3, 5, 6))),
    ]
    logical_operators = [
        LogicalOperator(_paulis(x, (0, 1, 2, 3)), OperatorType.X),
        LogicalOperator(_paulis(z, (0, 1, 2, 3)), OperatorType.Z),
    ]
    return StabilizerCode(stabilizers, logical_operators, distance=3, num_qubits=7, name="steane")
