"""Example showing how to inject noise and recover with the 7-qubit code."""

import torch

import qcorrect


def main() -> None:
    """Depolarise the first qubit of a 7-qubit register and correct it."""
    code = qcorrect.steane_code()
    rng = torch.Generator().manual_seed(0)

    state = qcorrect.QuantumState(code.num_qubits)
    reference = state.clone()

    noise = qcorrect.NoiseModel(depolarizing_probability=1.0, target_qubits=(0,))
    qcorrect.apply_noise(state, noise, rng)

    recovery = state.apply_error_correction(code)
    print(f"syndrome: {state.error_syndrome}")
    print(f"recovery: {recovery.to_label(code.num_qubits)}")
    print(f"recovered: {state.equals_up_to_global_phase(reference)}")
    print(f"transcript bytes: {len(qcorrect.transcript_payload(state, state.error_syndrome))}")


if __name__ == "__main__":
    main()
