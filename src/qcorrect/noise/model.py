from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Sequence, Tuple

import torch

from ..errors import InvalidQubitIndex

if TYPE_CHECKING:  # pragma: no cover - circular import guard for typing only
    from qcorrect.state import QuantumState

__all__ = ["NoiseModel"]


def _pair(i: int, j: int) -> Tuple[int, int]:
    return (i, j) if i <= j else (j, i)


@dataclass(frozen=True)
class NoiseModel:
    """Rates and probabilities of the four stochastic noise processes.

    ``decoherence_rate``
        Per-qubit probability of a ``Z`` (phase) flip.
    ``depolarizing_probability``
        Per-qubit probability of a uniformly chosen ``X``/``Y``/``Z``.
    ``thermal_noise_strength``
        Standard deviation of the complex Gaussian added to every amplitude
        (per real and imaginary component).  Strengths at or below
        ``qcorrect.noise.channels.NEAR_ZERO`` add nothing and draw nothing
        from the generator.
    ``correlation_length``
        Length scale of pairwise errors: qubits ``i`` and ``j`` are hit
        together with probability ``exp(-|i - j| / correlation_length)``.
        ``0`` disables pairwise errors.
    ``target_qubits``
        Restrict the per-qubit and pairwise processes to these qubits
        (``None`` means all of them).  Thermal noise always acts on the whole
        amplitude vector.

    The pairwise coefficients are cached per unordered pair on first use,
    under a lock, so a model can be shared between threads.  Call
    :meth:`precompute` to fill the cache eagerly before sharing.
    """

    decoherence_rate: float = 0.0
    depolarizing_probability: float = 0.0
    thermal_noise_strength: float = 0.0
    correlation_length: float = 0.0
    target_qubits: Optional[Tuple[int, ...]] = None
    _correlations: Dict[Tuple[int, int], float] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        for name in ("decoherence_rate", "depolarizing_probability"):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be in [0,1]; got {value}")
            object.__setattr__(self, name, float(value))
        for name in ("thermal_noise_strength", "correlation_length"):
            value = getattr(self, name)
            if not (value >= 0 and math.isfinite(value)):
                raise ValueError(f"{name} must be a finite non-negative number; got {value}")
            object.__setattr__(self, name, float(value))
        if self.target_qubits is not None:
            targets = tuple(int(q) for q in self.target_qubits)
            if len(set(targets)) != len(targets):
                raise ValueError(f"target_qubits must be unique; got {targets}")
            if any(q < 0 for q in targets):
                raise ValueError(f"target_qubits must be non-negative; got {targets}")
            object.__setattr__(self, "target_qubits", tuple(sorted(targets)))

    @classmethod
    def noiseless(cls) -> "NoiseModel":
        return cls()

    @property
    def is_identity(self) -> bool:
        return (
            self.decoherence_rate == 0
            and self.depolarizing_probability == 0
            and self.thermal_noise_strength == 0
            and self.correlation_length == 0
        )

    def qubits(self, num_qubits: int) -> Sequence[int]:
        """The qubits of an ``num_qubits`` register the per-qubit processes touch.

        Raises :class:`~qcorrect.errors.InvalidQubitIndex` when a target lies
        outside the register.
        """
        if self.target_qubits is None:
            return range(num_qubits)
        for q in self.target_qubits:
            if q >= num_qubits:
                raise InvalidQubitIndex(q, num_qubits)
        return list(self.target_qubits)

    # Pickling ------------------------------------------------------------
    def __getstate__(self) -> dict:
        state = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "_lock"}
        with self._lock:
            state["_correlations"] = dict(self._correlations)
        return state

    def __setstate__(self, state: dict) -> None:
        for name, value in state.items():
            object.__setattr__(self, name, value)
        object.__setattr__(self, "_lock", threading.Lock())

    # Spatial correlations ----------------------------------------------
    def _compute_correlation(self, i: int, j: int) -> float:
        if self.correlation_length == 0:
            return 0.0
        return math.exp(-abs(i - j) / self.correlation_length)

    def spatial_correlation(self, i: int, j: int) -> float:
        """Return the pair coefficient for qubits ``i`` and ``j``, caching it."""
        key = _pair(i, j)
        value = self._correlations.get(key)
        if value is None:
            with self._lock:
                value = self._correlations.get(key)
                if value is None:
                    value = self._compute_correlation(*key)
                    self._correlations[key] = value
        return value

    def precompute(self, num_qubits: int) -> "NoiseModel":
        """Fill the cache for every pair of ``num_qubits`` qubits."""
        qubits = list(self.qubits(num_qubits))
        for a, i in enumerate(qubits):
            for j in qubits[a + 1 :]:
                self.spatial_correlation(i, j)
        return self

    @property
    def correlations(self) -> Mapping[Tuple[int, int], float]:
        """Read-only snapshot of the cached pair coefficients."""
        with self._lock:
            return MappingProxyType(dict(self._correlations))

    # Application --------------------------------------------------------
    def apply(self, state: "QuantumState", rng: torch.Generator) -> "QuantumState":
        from .channels import apply_noise  # local import

        return apply_noise(state, self, rng)
