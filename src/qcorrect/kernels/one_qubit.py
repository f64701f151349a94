"""One-qubit statevector apply."""

from __future__ import annotations

from typing import Optional

import einops
import torch

__all__ = ["apply_one_qubit"]


def _infer_qubits(state: torch.Tensor) -> int:
    size = state.numel()
    if size == 0 or size & (size - 1):
        raise ValueError("state must represent a non-empty power-of-two sized vector")
    return size.bit_length() - 1


def apply_one_qubit(
    state: torch.Tensor,
    gate: torch.Tensor,
    q: int,
    n_qubits: Optional[int] = None,
) -> torch.Tensor:
    """Apply the 2x2 ``gate`` on qubit ``q`` of ``state`` and return a new vector.

    Index ``i = high * 2**(q+1) + b * 2**q + low`` is regrouped as
    ``(high, b, low)`` so the gate contracts the middle axis, which pairs up
    exactly the amplitudes that differ only in bit ``q``.
    """

    if n_qubits is None:
        n_qubits = _infer_qubits(state)
    if not 0 <= q < n_qubits:
        raise ValueError(f"qubit {q} out of range for {n_qubits} qubits")
    gate = gate.to(state)
    psi = einops.rearrange(state, "(high b low) -> high b low", b=2, low=1 << q)
    psi = torch.einsum("ab,hbl->hal", gate, psi)
    return einops.rearrange(psi, "high b low -> (high b low)")
