"""Statevector kernels.

Qubit ``k`` is bit ``k`` of the amplitude index (value ``1 << k``).
"""

from .control import apply_CNOT
from .one_qubit import apply_one_qubit

__all__ = ["apply_one_qubit", "apply_CNOT"]
