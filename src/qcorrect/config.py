"""Package-wide defaults.

Values are read at call time, so assigning to them (``qcorrect.config.X = ...``)
changes the behaviour of subsequently created objects and calls.
"""

import torch

DEFAULT_DTYPE = torch.complex128

# Allowed deviation of sum(|a_i|^2) from one at externally observable points.
NORM_TOLERANCE = 1e-9

# Verify the norm after every public operation that mutates a state.
CHECK_NORMALIZATION = True

# Renormalise after this many gate applications; 0 disables periodic renormalisation.
RENORMALIZE_EVERY = 0

# Real overlaps in [-OVERLAP_TOLERANCE, 0) are read as zero when probing stabilizers.
OVERLAP_TOLERANCE = 1e-12

# Dense registers above this size are refused.
MAX_QUBITS = 24

# Registers above this size trigger a memory warning on allocation.
WARN_QUBITS = 20

ENCODING_VERSION = 1
