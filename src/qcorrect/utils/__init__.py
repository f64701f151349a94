from __future__ import annotations

from typing import Sequence

import torch

__all__ = ["marginal_probabilities", "index_bits"]


def index_bits(index: int, qubits: Sequence[int]) -> tuple[int, ...]:
    """Return the bits of basis ``index`` at ``qubits`` (qubit ``k`` is bit ``k``)."""

    return tuple((index >> q) & 1 for q in qubits)


def marginal_probabilities(
    probabilities: torch.Tensor,
    qubits: Sequence[int] | int | None,
    n_qubits: int,
) -> torch.Tensor:
    """Aggregate marginal probabilities for ``qubits``.

    Outcome ``j`` of the result has bit ``m`` equal to the value of
    ``qubits[m]``.
    """

    if probabilities.shape[0] != 1 << n_qubits:
        raise ValueError(f"expected {1 << n_qubits} probabilities, got {probabilities.shape[0]}")

    if qubits is None:
        return probabilities

    if isinstance(qubits, int):
        qubit_list: list[int] = [qubits]
    else:
        qubit_list = list(qubits)

    if len(qubit_list) == 0:
        return torch.ones(1, dtype=probabilities.dtype, device=probabilities.device)

    indices = torch.arange(probabilities.shape[0], device=probabilities.device)
    shifts = torch.tensor(qubit_list, device=probabilities.device, dtype=indices.dtype)
    bits = (indices.unsqueeze(-1) >> shifts) & 1
    weights = 1 << torch.arange(len(qubit_list), device=probabilities.device, dtype=indices.dtype)
    keys = (bits * weights).sum(dim=-1)
    out = torch.zeros(1 << len(qubit_list), dtype=probabilities.dtype, device=probabilities.device)
    return torch.scatter_add(out, 0, keys, probabilities)
