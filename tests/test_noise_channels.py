"""Scripted-draw regression tests for the stochastic noise processes."""

from __future__ import annotations

import math
from unittest import mock

import pytest
import torch

from qcorrect.errors import InvalidQubitIndex
from qcorrect.noise import (
    NoiseModel,
    apply_correlated_noise,
    apply_decoherence,
    apply_depolarizing,
    apply_noise,
    apply_thermal_noise,
)
from qcorrect.noise import channels
from qcorrect.pauli import PauliOperator
from qcorrect.state import QuantumState
from qcorrect.utils_gates import H

X, Y, Z = PauliOperator.X, PauliOperator.Y, PauliOperator.Z


def _spy(state: QuantumState) -> mock.Mock:
    state.apply_pauli = mock.Mock(wraps=state.apply_pauli)
    return state.apply_pauli


def _applied(spy: mock.Mock) -> list[tuple[PauliOperator, int]]:
    return [c.args for c in spy.call_args_list]


def _draws(*values: float):
    return mock.patch.object(channels, "_uniform", side_effect=list(values))


def test_decoherence_flips_phase_below_rate() -> None:
    state = QuantumState(3)
    spy = _spy(state)
    with _draws(0.05, 0.5, 0.0999):
        apply_decoherence(state, NoiseModel(decoherence_rate=0.1), torch.Generator())
    assert _applied(spy) == [(Z, 0), (Z, 2)]


@pytest.mark.parametrize(
    "type_draw, expected",
    [(0.0, X), (0.3333, X), (0.34, Y), (0.6666, Y), (0.67, Z), (0.9999, Z)],
)
def test_depolarizing_picks_pauli_uniformly(type_draw: float, expected: PauliOperator) -> None:
    state = QuantumState(1)
    spy = _spy(state)
    with _draws(0.0, type_draw):
        apply_depolarizing(state, NoiseModel(depolarizing_probability=0.5), torch.Generator())
    assert _applied(spy) == [(expected, 0)]


def test_depolarizing_skips_type_draw_when_not_triggered() -> None:
    state = QuantumState(2)
    spy = _spy(state)
    with _draws(0.9, 0.1, 0.8) as uniform:
        apply_depolarizing(state, NoiseModel(depolarizing_probability=0.5), torch.Generator())
    assert _applied(spy) == [(Z, 1)]
    assert uniform.call_count == 3


def test_correlated_noise_visits_pairs_in_order() -> None:
    model = NoiseModel(correlation_length=1.0)
    state = QuantumState(3)
    spy = _spy(state)
    # (0, 1): e^-1 ~ 0.37 hit, XX; (0, 2): e^-2 ~ 0.14 miss; (1, 2): hit, ZZ.
    with _draws(0.0, 0.2, 0.9, 0.1, 0.7):
        apply_correlated_noise(state, model, torch.Generator())
    assert _applied(spy) == [(X, 0), (X, 1), (Z, 1), (Z, 2)]


def test_targets_outside_register_raise() -> None:
    model = NoiseModel(decoherence_rate=1.0, depolarizing_probability=1.0, target_qubits=(5,))
    state = QuantumState(3)
    before = state.amplitudes.clone()
    with pytest.raises(InvalidQubitIndex):
        apply_noise(state, model, torch.Generator().manual_seed(0))
    for process in (apply_decoherence, apply_depolarizing, apply_correlated_noise):
        with pytest.raises(InvalidQubitIndex):
            process(state, model, torch.Generator())
    assert torch.equal(state.amplitudes, before)


def test_correlated_noise_disabled_at_zero_length() -> None:
    state = QuantumState(3)
    spy = _spy(state)
    with _draws(0.0, 0.0, 0.0):
        apply_correlated_noise(state, NoiseModel(), torch.Generator())
    assert spy.call_count == 0


def test_target_qubits_restrict_per_qubit_processes() -> None:
    model = NoiseModel(decoherence_rate=1.0, correlation_length=5.0, target_qubits=(4, 1))
    state = QuantumState(6)
    spy = _spy(state)
    with _draws(0.0, 0.0, 0.0, 0.9):
        apply_decoherence(state, model, torch.Generator())
        apply_correlated_noise(state, model, torch.Generator())
    assert _applied(spy) == [(Z, 1), (Z, 4), (Z, 1), (Z, 4)]


def test_apply_noise_runs_processes_in_order() -> None:
    order: list[str] = []
    names = (
        "apply_decoherence",
        "apply_depolarizing",
        "apply_thermal_noise",
        "apply_correlated_noise",
    )
    patches = [
        mock.patch.object(channels, name, side_effect=lambda *args, name=name: order.append(name))
        for name in names
    ]
    for patch in patches:
        patch.start()
    try:
        apply_noise(QuantumState(2), NoiseModel(), torch.Generator())
    finally:
        for patch in patches:
            patch.stop()
    assert order == list(names)


def test_scripted_trajectory_end_to_end() -> None:
    model = NoiseModel(
        decoherence_rate=0.5,
        depolarizing_probability=0.5,
        correlation_length=1.0,
        target_qubits=(0, 1),
    )
    state = QuantumState(2)
    spy = _spy(state)
    draws = [
        0.1, 0.9,  # decoherence: Z on qubit 0 only
        0.9, 0.2, 0.4,  # depolarizing: none on 0, Y on 1
        0.0, 0.9,  # pair (0, 1): ZZ
    ]
    with _draws(*draws):
        apply_noise(state, model, torch.Generator())
    assert _applied(spy) == [(Z, 0), (Y, 1), (Z, 0), (Z, 1)]
    assert state.is_normalized()


@pytest.mark.parametrize("strength", [1e-6, 1e-3, 0.5, 5.0])
def test_thermal_noise_keeps_state_normalized(strength: float, rng: torch.Generator) -> None:
    state = QuantumState(7)
    apply_thermal_noise(state, NoiseModel(thermal_noise_strength=strength), rng)
    assert abs(state.norm() ** 2 - 1) <= 1e-9


def test_thermal_noise_adds_scaled_gaussians() -> None:
    state = QuantumState(1)
    real = torch.tensor([0.3, -0.1], dtype=torch.float64)
    imag = torch.tensor([0.0, 0.2], dtype=torch.float64)
    with mock.patch.object(channels, "_normal", side_effect=[real, imag]) as normal:
        apply_thermal_noise(state, NoiseModel(thermal_noise_strength=0.1), torch.Generator())
    assert [c.args[1:] for c in normal.call_args_list] == [(0.1, 2), (0.1, 2)]
    expected = torch.tensor([1.3, -0.1 + 0.2j], dtype=torch.complex128)
    expected = expected / torch.linalg.vector_norm(expected)
    assert torch.allclose(state.amplitudes, expected, atol=1e-12)


def test_thermal_noise_below_threshold_draws_nothing() -> None:
    state = QuantumState(2)
    state.apply_gate(H, 0)
    before = state.amplitudes.clone()
    with mock.patch.object(channels, "_normal") as normal:
        apply_thermal_noise(state, NoiseModel(thermal_noise_strength=1e-13), torch.Generator())
    normal.assert_not_called()
    assert torch.allclose(state.amplitudes, before, atol=1e-15)


def test_noiseless_model_leaves_state_unchanged(rng: torch.Generator) -> None:
    state = QuantumState(3)
    state.apply_gate(H, 1)
    before = state.amplitudes.clone()
    apply_noise(state, NoiseModel.noiseless(), rng)
    assert torch.allclose(state.amplitudes, before, atol=1e-15)


def test_trajectories_reproducible_from_seed() -> None:
    model = NoiseModel(0.2, 0.3, 0.01, 2.0)
    a = apply_noise(QuantumState(4), model, torch.Generator().manual_seed(11))
    b = apply_noise(QuantumState(4), model, torch.Generator().manual_seed(11))
    assert torch.equal(a.amplitudes, b.amplitudes)


def test_decoherence_frequency_matches_rate(rng: torch.Generator) -> None:
    model = NoiseModel(decoherence_rate=0.25)
    flips = 0
    trials = 4000
    for _ in range(trials):
        state = QuantumState(1)
        state.apply_gate(H, 0)
        apply_decoherence(state, model, rng)
        # |+> turned into |-> exactly when a Z was applied.
        flips += int(state.amplitudes[1].real < 0)
    assert math.isclose(flips / trials, 0.25, abs_tol=0.03)


def test_rng_is_required() -> None:
    with pytest.raises(TypeError):
        apply_noise(QuantumState(1), NoiseModel(), None)
    with pytest.raises(TypeError):
        apply_noise(QuantumState(1), NoiseModel(), 42)


def test_model_apply_delegates(rng: torch.Generator) -> None:
    state = QuantumState(2)
    assert NoiseModel().apply(state, rng) is state
