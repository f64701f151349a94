"""Stochastic noise processes acting on a :class:`~qcorrect.state.QuantumState`.

:func:`apply_noise` runs four independent processes in a fixed order:

1. decoherence: per qubit, a ``Z`` flip with probability ``decoherence_rate``;
2. depolarisation: per qubit, with probability ``depolarizing_probability``
   one of ``X``/``Y``/``Z`` chosen uniformly;
3. thermal noise: a complex Gaussian added to every amplitude, followed by
   renormalisation;
4. correlated noise: per unordered qubit pair, with the pair's spatial
   correlation coefficient, ``XX`` or ``ZZ`` chosen uniformly.

All randomness is drawn from the ``rng`` argument through :func:`_uniform` and
:func:`_normal`.  The state is always renormalised before control returns.

Trajectory reproducibility
--------------------------

>>> import torch
>>> from qcorrect import QuantumState
>>> from qcorrect.noise import NoiseModel, apply_noise
>>> model = NoiseModel(0.1, 0.1, 0.01, 1.0)
>>> a = apply_noise(QuantumState(3), model, torch.Generator().manual_seed(7))
>>> b = apply_noise(QuantumState(3), model, torch.Generator().manual_seed(7))
>>> torch.allclose(a.amplitudes, b.amplitudes)
True
"""

from __future__ import annotations

import torch

from ..pauli import PauliOperator
from ..state import QuantumState
from .model import NoiseModel

__all__ = [
    "apply_noise",
    "apply_decoherence",
    "apply_depolarizing",
    "apply_thermal_noise",
    "apply_correlated_noise",
]


# Parameters smaller than this threshold are treated as zero.
NEAR_ZERO = 1e-12


def _require_generator(rng) -> None:
    if not isinstance(rng, torch.Generator):
        raise TypeError("noise processes require an explicit torch.Generator")


def _uniform(rng: torch.Generator) -> float:
    """One draw from U[0, 1)."""
    return float(torch.rand((), generator=rng, dtype=torch.float64).item())


def _normal(rng: torch.Generator, std: float, size: int) -> torch.Tensor:
    """``size`` independent draws from N(0, std**2)."""
    return torch.randn(size, generator=rng, dtype=torch.float64) * std


def apply_decoherence(state: QuantumState, model: NoiseModel, rng: torch.Generator) -> None:
    for qubit in model.qubits(state.num_qubits):
        if _uniform(rng) < model.decoherence_rate:
            state.apply_pauli(PauliOperator.Z, qubit)


def apply_depolarizing(state: QuantumState, model: NoiseModel, rng: torch.Generator) -> None:
    for qubit in model.qubits(state.num_qubits):
        if _uniform(rng) < model.depolarizing_probability:
            draw = _uniform(rng)
            if draw < 1.0 / 3.0:
                state.apply_pauli(PauliOperator.X, qubit)
            elif draw < 2.0 / 3.0:
                state.apply_pauli(PauliOperator.Y, qubit)
            else:
                state.apply_pauli(PauliOperator.Z, qubit)


def apply_thermal_noise(state: QuantumState, model: NoiseModel, rng: torch.Generator) -> None:
    """Add complex Gaussian noise to every amplitude and renormalise.

    This is the only process that changes the norm, so it always ends with a
    renormalisation, even when the strength is zero.
    """

    if model.thermal_noise_strength > NEAR_ZERO:
        size = state.amplitudes.numel()
        real = _normal(rng, model.thermal_noise_strength, size)
        imag = _normal(rng, model.thermal_noise_strength, size)
        noise = torch.complex(real, imag).to(state.amplitudes)
        state.amplitudes = state.amplitudes + noise
    state.renormalize()


def apply_correlated_noise(state: QuantumState, model: NoiseModel, rng: torch.Generator) -> None:
    qubits = list(model.qubits(state.num_qubits))
    for a, i in enumerate(qubits):
        for j in qubits[a + 1 :]:
            if _uniform(rng) < model.spatial_correlation(i, j):
                pauli = PauliOperator.X if _uniform(rng) < 0.5 else PauliOperator.Z
                state.apply_pauli(pauli, i)
                state.apply_pauli(pauli, j)


def apply_noise(state: QuantumState, model: NoiseModel, rng: torch.Generator) -> QuantumState:
    """Run the four noise processes on ``state`` in place and return it."""

    _require_generator(rng)
    apply_decoherence(state, model, rng)
    apply_depolarizing(state, model, rng)
    apply_thermal_noise(state, model, rng)
    apply_correlated_noise(state, model, rng)
    state.renormalize()
    state.check_normalization()
    return state
