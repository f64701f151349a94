from .correction import correct, measure_syndrome, verify_syndrome
from .stabilizer_code import StabilizerCode, steane_code
from .syndrome import ErrorSyndrome

__all__ = [
    "ErrorSyndrome",
    "StabilizerCode",
    "steane_code",
    "measure_syndrome",
    "correct",
    "verify_syndrome",
]
