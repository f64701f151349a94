from __future__ import annotations

import math

import pytest
import torch

from qcorrect.errors import InvalidQubitIndex
from qcorrect.state import Measurement, MeasurementBasis, QuantumState
from qcorrect.utils_gates import CNOT, H, T, X


def test_hadamard_outcomes_are_balanced(rng: torch.Generator) -> None:
    trials = 2000
    ones = 0
    for _ in range(trials):
        state = QuantumState(1)
        state.apply_gate(H, 0)
        ones += state.measure(rng=rng).outcome
    assert 0.45 <= ones / trials <= 0.55


def test_computational_measurement_collapses(rng: torch.Generator) -> None:
    state = QuantumState(2)
    state.apply_gate(H, 0)
    measurement = state.measure(MeasurementBasis.COMPUTATIONAL, rng=rng)

    assert measurement.basis is MeasurementBasis.COMPUTATIONAL
    assert measurement.qubits == (0, 1)
    assert measurement.outcome in (0, 1)
    assert math.isclose(measurement.probability, 0.5, abs_tol=1e-12)
    probs = state.probabilities()
    assert math.isclose(float(probs[measurement.outcome]), 1.0, abs_tol=1e-12)
    assert state.measurement_history == [measurement]
    assert state.is_normalized()


def test_partial_measurement_collapses_partner(rng: torch.Generator) -> None:
    for _ in range(10):
        state = QuantumState(3)
        state.apply_gate(H, 0)
        state.apply_gate(CNOT, 1, control=0)
        state.apply_gate(CNOT, 2, control=0)
        measurement = state.measure("computational", rng=rng, qubits=[0])
        expected_index = 7 if measurement.outcome else 0
        assert math.isclose(float(state.probabilities()[expected_index]), 1.0, abs_tol=1e-12)


def test_outcome_bits_follow_requested_qubit_order(rng: torch.Generator) -> None:
    state = QuantumState.basis_state(3, 0b100)
    measurement = state.measure(rng=rng, qubits=(2, 0))
    assert measurement.outcome == 1
    assert measurement.bits == (1, 0)
    assert measurement.label == "10"
    assert math.isclose(measurement.probability, 1.0)


@pytest.mark.parametrize("index, label", [(0, "phi+"), (1, "phi-"), (2, "psi+"), (3, "psi-")])
def test_bell_basis_labels(index: int, label: str, rng: torch.Generator) -> None:
    state = QuantumState.basis_state(2, index)
    state.apply_gate(H, 0)
    state.apply_gate(CNOT, 1, control=0)
    prepared = state.clone()

    measurement = state.measure(MeasurementBasis.BELL, rng=rng)

    assert measurement.label == label
    assert measurement.outcome == index
    assert math.isclose(measurement.probability, 1.0, abs_tol=1e-9)
    assert state.equals_up_to_global_phase(prepared)


def test_bell_measurement_needs_two_qubits(rng: torch.Generator) -> None:
    with pytest.raises(InvalidQubitIndex):
        QuantumState(1).measure("bell", rng=rng)
    with pytest.raises(ValueError, match="two qubits"):
        QuantumState(3).measure("bell", rng=rng, qubits=(0, 1, 2))


@pytest.mark.parametrize("flip, label", [(False, "A"), (True, "A-perp")])
def test_magic_basis_labels(flip: bool, label: str, rng: torch.Generator) -> None:
    state = QuantumState(1)
    if flip:
        state.apply_gate(X, 0)
    state.apply_gate(H, 0)
    state.apply_gate(T, 0)
    prepared = state.clone()

    measurement = state.measure(MeasurementBasis.MAGIC, rng=rng)

    assert measurement.label == label
    assert math.isclose(measurement.probability, 1.0, abs_tol=1e-9)
    assert state.equals_up_to_global_phase(prepared)


def test_magic_measurement_of_zero_state_is_balanced(rng: torch.Generator) -> None:
    measurement = QuantumState(1).measure("magic", rng=rng)
    assert math.isclose(measurement.probability, 0.5, abs_tol=1e-9)
    with pytest.raises(ValueError, match="one qubit"):
        QuantumState(2).measure("magic", rng=rng, qubits=(0, 1))


def test_history_accumulates(rng: torch.Generator) -> None:
    state = QuantumState(2)
    first = state.measure(rng=rng, qubits=[1])
    second = state.measure("bell", rng=rng)
    assert state.measurement_history == [first, second]
    assert all(isinstance(m, Measurement) for m in state.measurement_history)
    assert state.clone().measurement_history == [first, second]


def test_measurement_requires_generator() -> None:
    with pytest.raises(TypeError):
        QuantumState(1).measure()
    with pytest.raises(TypeError):
        QuantumState(1).measure(rng=7)


def test_unknown_basis(rng: torch.Generator) -> None:
    with pytest.raises(ValueError):
        QuantumState(1).measure("diagonal", rng=rng)


def test_duplicate_qubits_rejected(rng: torch.Generator) -> None:
    with pytest.raises(ValueError, match="unique"):
        QuantumState(2).measure(rng=rng, qubits=(1, 1))
