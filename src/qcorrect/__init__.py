# ruff: noqa: F403 F401 F405

from . import config
from .errors import *
from .pauli import *
from .utils_gates import *
from .state import *
from .noise import *
from .codes import *
from .encoding import *
from .utils import marginal_probabilities

from .utils_gates import H, X, Y, Z, S, T, CNOT, Phase

__all__ = [
    # registers and gates
    "QuantumState",
    "Measurement",
    "MeasurementBasis",
    "Gate",
    "GateKind",
    "H",
    "X",
    "Y",
    "Z",
    "S",
    "T",
    "CNOT",
    "Phase",
    # Pauli algebra
    "PauliOperator",
    "OperatorType",
    "Stabilizer",
    "LogicalOperator",
    "QuantumError",
    "RecoveryOperation",
    "commutes",
    "multiply",
    # noise
    "NoiseModel",
    "NoisePreset",
    "DEFAULT_PRESETS",
    "load_presets",
    "apply_noise",
    # codes
    "ErrorSyndrome",
    "StabilizerCode",
    "steane_code",
    "measure_syndrome",
    "correct",
    "verify_syndrome",
    # encoding
    "encode_state",
    "decode_state",
    "encode_syndrome",
    "decode_syndrome",
    "encode_paulis",
    "decode_error",
    "transcript_payload",
    # errors
    "QCorrectError",
    "InvalidQubitIndex",
    "DimensionMismatch",
    "UnknownSyndrome",
    "NormalizationError",
    "EncodingError",
    "config",
    "marginal_probabilities",
]
