"""Dense amplitude-vector register.

A :class:`QuantumState` of ``n`` qubits stores ``2**n`` complex amplitudes in a
1-D torch tensor.  Amplitude ``i`` belongs to the computational basis state
whose qubit ``k`` equals bit ``k`` of ``i``.

Example
-------

>>> import torch
>>> from qcorrect import QuantumState, H, CNOT
>>> psi = QuantumState(2)
>>> psi.apply_gate(H, 0)
>>> psi.apply_gate(CNOT, 1, control=0)
>>> [round(p, 3) for p in psi.probabilities().tolist()]
[0.5, 0.0, 0.0, 0.5]
>>> m = psi.measure("computational", rng=torch.Generator().manual_seed(0))
>>> m.label in ("00", "11")
True
"""

from __future__ import annotations

import copy
import enum
import math
import warnings
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import torch

from . import config
from . import utils
from .errors import DimensionMismatch, InvalidQubitIndex, NormalizationError
from .kernels import apply_CNOT, apply_one_qubit
from .pauli import PauliOperator, QuantumError, Stabilizer
from .utils_gates import CNOT, Gate, GateKind, H, Phase, X, Y, Z

if TYPE_CHECKING:  # pragma: no cover - circular import guard for typing only
    from .codes.stabilizer_code import StabilizerCode
    from .codes.syndrome import ErrorSyndrome
    from .pauli import RecoveryOperation

__all__ = ["MeasurementBasis", "Measurement", "QuantumState"]


# Drift beyond this before a periodic renormalisation is worth flagging.
DRIFT_WARNING = 1e-6

_PAULI_GATES = {
    PauliOperator.X: X,
    PauliOperator.Y: Y,
    PauliOperator.Z: Z,
}

_BELL_LABELS = ("phi+", "phi-", "psi+", "psi-")
_MAGIC_LABELS = ("A", "A-perp")


class MeasurementBasis(enum.Enum):
    COMPUTATIONAL = "computational"
    BELL = "bell"
    # Non-stabilizer basis {|A>, |A-perp>}, |A> = (|0> + e^{i pi/4}|1>)/sqrt(2).
    MAGIC = "magic"


@dataclass(frozen=True)
class Measurement:
    """One entry of a state's measurement history.

    ``outcome`` packs the measured bits with bit ``m`` belonging to
    ``qubits[m]``; ``probability`` is the Born probability of the outcome
    before collapse.
    """

    basis: MeasurementBasis
    qubits: Tuple[int, ...]
    outcome: int
    probability: float
    label: str

    @property
    def bits(self) -> Tuple[int, ...]:
        return tuple((self.outcome >> m) & 1 for m in range(len(self.qubits)))


@lru_cache(maxsize=64)
def _gate_matrix(gate: Gate, dtype: torch.dtype, device: str) -> torch.Tensor:
    return gate.to_matrix(dtype=dtype, device=device)


class QuantumState:
    """Amplitude vector plus the bookkeeping attached to it.

    Every public operation leaves ``sum(|a_i|**2)`` within
    :data:`qcorrect.config.NORM_TOLERANCE` of one; when
    :data:`qcorrect.config.CHECK_NORMALIZATION` is set a violation raises
    :class:`~qcorrect.errors.NormalizationError`.
    """

    def __init__(
        self,
        num_qubits: int,
        *,
        dtype: torch.dtype | None = None,
        device: str | torch.device = "cpu",
        renormalize_every: int | None = None,
    ):
        if num_qubits < 0:
            raise ValueError(f"num_qubits must be non-negative; got {num_qubits}")
        if num_qubits > config.MAX_QUBITS:
            raise ValueError(
                f"{num_qubits} qubits need 2**{num_qubits} amplitudes; the limit is "
                f"config.MAX_QUBITS = {config.MAX_QUBITS}"
            )
        if num_qubits > config.WARN_QUBITS:
            warnings.warn(
                f"allocating a dense register of {num_qubits} qubits (2**{num_qubits} amplitudes) "
                "may be prohibitively expensive",
                UserWarning,
            )
        if renormalize_every is None:
            renormalize_every = config.RENORMALIZE_EVERY
        if renormalize_every < 0:
            raise ValueError("renormalize_every must be non-negative")

        self.num_qubits = num_qubits
        self.dtype = dtype or config.DEFAULT_DTYPE
        self.device = torch.device(device)
        self.renormalize_every = renormalize_every
        self.amplitudes = torch.zeros(1 << num_qubits, dtype=self.dtype, device=self.device)
        self.amplitudes[0] = 1.0
        self.measurement_history: List[Measurement] = []
        self.entanglement_map: Dict[int, List[int]] = {}
        self.error_syndrome: Optional["ErrorSyndrome"] = None
        self._gate_count = 0

    # Constructors -----------------------------------------------------
    @classmethod
    def basis_state(cls, num_qubits: int, index: int, **kwargs) -> "QuantumState":
        state = cls(num_qubits, **kwargs)
        if not 0 <= index < 1 << num_qubits:
            raise ValueError(f"basis index {index} out of range for {num_qubits} qubits")
        state.amplitudes.zero_()
        state.amplitudes[index] = 1.0
        return state

    @classmethod
    def from_amplitudes(cls, amplitudes, *, normalize: bool = False, **kwargs) -> "QuantumState":
        values = torch.as_tensor(amplitudes, dtype=kwargs.get("dtype") or config.DEFAULT_DTYPE)
        values = values.reshape(-1)
        size = values.numel()
        if size == 0 or size & (size - 1):
            raise DimensionMismatch(f"{size} amplitudes do not describe a whole number of qubits")
        state = cls(size.bit_length() - 1, **kwargs)
        state.amplitudes = values.to(device=state.device).clone()
        if normalize:
            state.renormalize()
        state._verify()
        return state

    def clone(self) -> "QuantumState":
        """Independent copy; mutating the copy never touches ``self``."""
        other = QuantumState.__new__(QuantumState)
        other.num_qubits = self.num_qubits
        other.dtype = self.dtype
        other.device = self.device
        other.renormalize_every = self.renormalize_every
        other.amplitudes = self.amplitudes.clone()
        other.measurement_history = list(self.measurement_history)
        other.entanglement_map = copy.deepcopy(self.entanglement_map)
        other.error_syndrome = self.error_syndrome
        other._gate_count = self._gate_count
        return other

    def __repr__(self) -> str:
        return f"QuantumState(num_qubits={self.num_qubits}, dtype={self.dtype})"

    # Normalisation ----------------------------------------------------
    def norm(self) -> float:
        return float(torch.linalg.vector_norm(self.amplitudes).item())

    def is_normalized(self, tol: float | None = None) -> bool:
        tol = config.NORM_TOLERANCE if tol is None else tol
        return abs(self.norm() ** 2 - 1.0) <= tol

    def check_normalization(self) -> None:
        squared = self.norm() ** 2
        if not abs(squared - 1.0) <= config.NORM_TOLERANCE:
            raise NormalizationError(
                f"state norm drifted: sum |a_i|^2 = {squared!r} "
                f"(tolerance {config.NORM_TOLERANCE})"
            )

    def renormalize(self) -> None:
        """Divide the amplitudes by their Euclidean norm."""
        norm = self.norm()
        if not math.isfinite(norm) or norm <= torch.finfo(self.amplitudes.real.dtype).tiny:
            raise NormalizationError(f"cannot renormalise a vector of norm {norm!r}")
        self.amplitudes = self.amplitudes / norm

    def _verify(self) -> None:
        if config.CHECK_NORMALIZATION:
            self.check_normalization()

    def _after_gate(self) -> None:
        self._gate_count += 1
        if self.renormalize_every and self._gate_count % self.renormalize_every == 0:
            drift = abs(self.norm() - 1.0)
            if drift > DRIFT_WARNING:
                warnings.warn(
                    f"state norm drifted by {drift:.3g} after {self._gate_count} gates",
                    UserWarning,
                )
            self.renormalize()
        self._verify()

    # Gates ------------------------------------------------------------
    def _check_qubit(self, qubit: int) -> None:
        if not 0 <= qubit < self.num_qubits:
            raise InvalidQubitIndex(qubit, self.num_qubits)

    def apply_gate(self, gate: Gate, target: int, control: int | None = None) -> None:
        """Apply ``gate`` on ``target`` (and ``control`` for CNOT) in place."""

        self._check_qubit(target)
        if gate.kind is GateKind.CNOT:
            if control is None:
                raise ValueError("CNOT requires a control qubit")
            self._check_qubit(control)
            if control == target:
                raise ValueError("control and target qubits must differ")
            self.amplitudes = apply_CNOT(self.amplitudes, control, target, self.num_qubits)
            self._record_coupling(control, target)
        else:
            if control is not None:
                raise ValueError(f"{gate} is a single-qubit gate and takes no control qubit")
            matrix = _gate_matrix(gate, self.dtype, str(self.device))
            self.amplitudes = apply_one_qubit(self.amplitudes, matrix, target, self.num_qubits)
        self._after_gate()

    def apply_pauli(self, pauli: PauliOperator, qubit: int) -> None:
        self.apply_gate(_PAULI_GATES[PauliOperator(pauli)], qubit)

    def apply_error(self, error: QuantumError) -> None:
        """Apply every Pauli of ``error`` (identity elsewhere)."""
        for qubit in error:
            self._check_qubit(qubit)
        for qubit, pauli in error.items():
            self.apply_pauli(pauli, qubit)

    def _record_coupling(self, a: int, b: int) -> None:
        for x, y in ((a, b), (b, a)):
            partners = self.entanglement_map.setdefault(x, [])
            if y not in partners:
                partners.append(y)
                partners.sort()

    # Overlaps ---------------------------------------------------------
    def compute_overlap(self, other: "QuantumState") -> complex:
        """Return ``sum(conj(a_i) * b_i)`` with ``a = self`` and ``b = other``."""
        if self.num_qubits != other.num_qubits:
            raise DimensionMismatch(
                f"cannot compare a {self.num_qubits}-qubit state with a {other.num_qubits}-qubit state"
            )
        other_amps = other.amplitudes.to(dtype=self.amplitudes.dtype, device=self.amplitudes.device)
        return complex(torch.vdot(self.amplitudes, other_amps).item())

    def measure_stabilizer(self, stabilizer: Stabilizer) -> bool:
        """Probe one stabilizer without disturbing the state.

        The stabilizer's Paulis are applied to a clone and the clone's overlap
        with ``self`` is read: a non-negative real part is even parity
        (``False``), a negative one odd parity (``True``).
        """

        probe = self.clone()
        for qubit, pauli in stabilizer:
            probe.apply_pauli(pauli, qubit)
        overlap = probe.compute_overlap(self)
        return overlap.real < -config.OVERLAP_TOLERANCE

    def equals_up_to_global_phase(self, other: "QuantumState", atol: float = 1e-9) -> bool:
        overlap = self.compute_overlap(other)
        if abs(overlap) <= atol:
            return False
        phase = overlap / abs(overlap)
        other_amps = other.amplitudes.to(self.amplitudes)
        return bool(torch.allclose(self.amplitudes * phase, other_amps, atol=atol, rtol=0.0))

    # Measurement ------------------------------------------------------
    def probabilities(self, qubits: Sequence[int] | None = None) -> torch.Tensor:
        if qubits is not None:
            for q in qubits:
                self._check_qubit(q)
        probs = (self.amplitudes.abs() ** 2).real
        return utils.marginal_probabilities(probs, qubits, self.num_qubits)

    def measure(
        self,
        basis: MeasurementBasis | str = MeasurementBasis.COMPUTATIONAL,
        *,
        rng: torch.Generator,
        qubits: Sequence[int] | None = None,
    ) -> Measurement:
        """Collapse the state in ``basis`` and record the outcome.

        ``computational`` measures ``qubits`` (default: all of them), ``bell``
        a pair (default ``(0, 1)``) and ``magic`` one qubit (default ``0``).
        The randomness comes from ``rng`` only.
        """

        if not isinstance(rng, torch.Generator):
            raise TypeError("measure requires an explicit torch.Generator via rng=")
        basis = MeasurementBasis(basis)

        if basis is MeasurementBasis.COMPUTATIONAL:
            targets = tuple(range(self.num_qubits)) if qubits is None else tuple(qubits)
            measurement = self._measure_computational(targets, rng)
        elif basis is MeasurementBasis.BELL:
            targets = (0, 1) if qubits is None else tuple(qubits)
            measurement = self._measure_bell(targets, rng)
        else:
            targets = (0,) if qubits is None else tuple(qubits)
            measurement = self._measure_magic(targets, rng)

        self.measurement_history.append(measurement)
        self._verify()
        return measurement

    def _collapse(self, qubits: Tuple[int, ...], rng: torch.Generator) -> Tuple[int, float]:
        for q in qubits:
            self._check_qubit(q)
        if len(set(qubits)) != len(qubits):
            raise ValueError(f"qubits must be unique; got {qubits}")

        marginal = self.probabilities(qubits)
        outcome = int(torch.multinomial(marginal, 1, generator=rng).item())
        probability = float(marginal[outcome].item())

        indices = torch.arange(self.amplitudes.shape[0], device=self.amplitudes.device)
        keep = torch.ones_like(indices, dtype=torch.bool)
        for m, q in enumerate(qubits):
            keep &= ((indices >> q) & 1) == ((outcome >> m) & 1)
        self.amplitudes = torch.where(keep, self.amplitudes, torch.zeros_like(self.amplitudes))
        self.renormalize()
        return outcome, probability

    def _measure_computational(self, qubits: Tuple[int, ...], rng: torch.Generator) -> Measurement:
        outcome, probability = self._collapse(qubits, rng)
        label = "".join(str(b) for b in utils.index_bits(outcome, range(len(qubits))))
        return Measurement(MeasurementBasis.COMPUTATIONAL, qubits, outcome, probability, label)

    def _measure_bell(self, qubits: Tuple[int, ...], rng: torch.Generator) -> Measurement:
        if len(qubits) != 2:
            raise ValueError(f"Bell measurement needs exactly two qubits; got {qubits}")
        a, b = qubits
        # Rotate the Bell basis onto the computational one, measure, rotate back.
        self.apply_gate(CNOT, b, control=a)
        self.apply_gate(H, a)
        outcome, probability = self._collapse(qubits, rng)
        self.apply_gate(H, a)
        self.apply_gate(CNOT, b, control=a)
        return Measurement(MeasurementBasis.BELL, qubits, outcome, probability, _BELL_LABELS[outcome])

    def _measure_magic(self, qubits: Tuple[int, ...], rng: torch.Generator) -> Measurement:
        if len(qubits) != 1:
            raise ValueError(f"magic-basis measurement acts on one qubit; got {qubits}")
        (q,) = qubits
        self.apply_gate(Phase(-math.pi / 4), q)
        self.apply_gate(H, q)
        outcome, probability = self._collapse(qubits, rng)
        self.apply_gate(H, q)
        self.apply_gate(Phase(math.pi / 4), q)
        return Measurement(MeasurementBasis.MAGIC, qubits, outcome, probability, _MAGIC_LABELS[outcome])

    # Error correction -------------------------------------------------
    def apply_error_correction(self, code: "StabilizerCode") -> "RecoveryOperation":
        from .codes.correction import correct  # local import

        return correct(self, code)
