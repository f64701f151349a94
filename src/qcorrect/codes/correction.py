"""Syndrome extraction and recovery on an amplitude state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .stabilizer_code import StabilizerCode
from .syndrome import ErrorSyndrome

if TYPE_CHECKING:  # pragma: no cover - circular import guard for typing only
    from ..pauli import RecoveryOperation
    from ..state import QuantumState

__all__ = ["measure_syndrome", "correct", "verify_syndrome"]


def measure_syndrome(state: "QuantumState", code: StabilizerCode) -> ErrorSyndrome:
    """Probe every stabilizer of ``code`` on ``state`` without disturbing it."""
    return ErrorSyndrome(state.measure_stabilizer(s) for s in code.stabilizers)


def correct(state: "QuantumState", code: StabilizerCode) -> "RecoveryOperation":
    """Measure the syndrome, decode it and apply the recovery to ``state`` in place.

    Raises :class:`~qcorrect.errors.UnknownSyndrome` (leaving ``state``
    untouched) when the syndrome is not in the code's table.  On success the
    syndrome is stored on ``state.error_syndrome`` and the applied recovery is
    returned.
    """

    syndrome = measure_syndrome(state, code)
    recovery = code.decode(syndrome)
    state.apply_error(recovery)
    state.error_syndrome = syndrome
    return recovery


def verify_syndrome(state: "QuantumState", syndrome: ErrorSyndrome, code: StabilizerCode) -> bool:
    """Check that ``state`` is consistent with ``syndrome`` under ``code``.

    ``syndrome`` must be decodable by ``code`` and equal to the syndrome
    measured on ``state``.  The state is never mutated.
    """

    if not isinstance(syndrome, ErrorSyndrome):
        syndrome = ErrorSyndrome.from_bits(syndrome)
    if syndrome not in code:
        return False
    return measure_syndrome(state, code) == syndrome
