import enum
import math
from dataclasses import dataclass

import torch

__all__ = ["GateKind", "Gate", "H", "X", "Y", "Z", "S", "T", "Phase", "CNOT"]

SQRT2 = math.sqrt(2)


class GateKind(enum.Enum):
    HADAMARD = "h"
    PAULI_X = "x"
    PAULI_Y = "y"
    PAULI_Z = "z"
    PHASE = "phase"
    CNOT = "cnot"


@dataclass(frozen=True)
class Gate:
    """A gate the amplitude state knows how to apply.

    ``angle`` is only meaningful for :attr:`GateKind.PHASE`.
    """

    kind: GateKind
    angle: float = 0.0

    @property
    def num_qubits(self) -> int:
        return 2 if self.kind is GateKind.CNOT else 1

    def __str__(self) -> str:
        if self.kind is GateKind.PHASE:
            return f"phase({self.angle:.16g})"
        return self.kind.value

    def to_matrix(self, dtype: torch.dtype = torch.complex128, device=None) -> torch.Tensor:
        """Return the 2x2 matrix of a single-qubit gate."""
        if self.kind is GateKind.HADAMARD:
            return torch.tensor([[1, 1], [1, -1]], dtype=dtype, device=device) / SQRT2
        if self.kind is GateKind.PAULI_X:
            return torch.tensor([[0, 1], [1, 0]], dtype=dtype, device=device)
        if self.kind is GateKind.PAULI_Y:
            return torch.tensor([[0, -1j], [1j, 0]], dtype=dtype, device=device)
        if self.kind is GateKind.PAULI_Z:
            return torch.tensor([[1, 0], [0, -1]], dtype=dtype, device=device)
        if self.kind is GateKind.PHASE:
            val = complex(math.cos(self.angle), math.sin(self.angle))
            return torch.tensor([[1, 0], [0, val]], dtype=dtype, device=device)
        raise ValueError(f"{self.kind.name} has no single-qubit matrix")


H = Gate(GateKind.HADAMARD)
X = Gate(GateKind.PAULI_X)
Y = Gate(GateKind.PAULI_Y)
Z = Gate(GateKind.PAULI_Z)
CNOT = Gate(GateKind.CNOT)


def Phase(phi: float) -> Gate:
    """Phase rotation ``diag(1, e^{i phi})``."""
    return Gate(GateKind.PHASE, float(phi))


S = Phase(math.pi / 2)
T = Phase(math.pi / 4)
