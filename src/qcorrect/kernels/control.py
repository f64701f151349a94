"""Control-gate statevector kernels."""

from __future__ import annotations

from typing import Optional

import torch

__all__ = ["apply_CNOT"]


def apply_CNOT(
    state: torch.Tensor,
    control: int,
    target: int,
    n_qubits: Optional[int] = None,
) -> torch.Tensor:
    """Apply a CNOT gate to ``state`` without materialising the dense matrix.

    Amplitudes whose control bit is set are swapped with their partner across
    the target bit.
    """

    if control == target:
        raise ValueError("control and target qubits must differ")

    dim = state.shape[-1]
    if n_qubits is not None and dim != 1 << n_qubits:
        raise ValueError(f"state of size {dim} does not hold {n_qubits} qubits")
    indices = torch.arange(dim, device=state.device)

    control_mask = 1 << control
    target_mask = 1 << target

    controlled = (indices & control_mask) != 0
    target_zero = (indices & target_mask) == 0
    swap_sources = torch.nonzero(controlled & target_zero, as_tuple=False).squeeze(-1)
    swap_targets = swap_sources ^ target_mask

    out = state.clone()
    if swap_sources.numel() == 0:
        return out
    out[swap_sources] = state[swap_targets]
    out[swap_targets] = state[swap_sources]
    return out
