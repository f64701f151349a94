__all__ = [
    "QCorrectError",
    "InvalidQubitIndex",
    "DimensionMismatch",
    "UnknownSyndrome",
    "NormalizationError",
    "EncodingError",
]


class QCorrectError(Exception):
    """Base class for all errors raised by qcorrect."""


class InvalidQubitIndex(QCorrectError, IndexError):
    def __init__(self, qubit: int, num_qubits: int):
        self.qubit = qubit
        self.num_qubits = num_qubits
        super().__init__(f"qubit index {qubit} out of range for a {num_qubits}-qubit register")


class DimensionMismatch(QCorrectError, ValueError):
    pass


class UnknownSyndrome(QCorrectError, LookupError):
    """The syndrome is not reachable by any enumerated correctable error."""

    def __init__(self, syndrome):
        self.syndrome = syndrome
        super().__init__(f"no recovery operation known for syndrome {syndrome}")


class NormalizationError(QCorrectError, ArithmeticError):
    """The state norm left the configured tolerance.

    This signals a bug in gate or noise application, not a physical effect,
    and is never patched silently.
    """


class EncodingError(QCorrectError, ValueError):
    pass
