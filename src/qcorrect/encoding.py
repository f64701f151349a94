"""Flat, versioned binary encodings for hashing by an external transcript.

All integers and floats are little-endian.  Field order is part of the format:

state
    ``u8 version | u32 num_qubits | 2**n * (f64 re, f64 im) | u32 n_bits | n_bits * u8``
    (the trailing syndrome section has ``n_bits = 0`` when no syndrome is attached)
syndrome
    ``u8 version | u32 n_bits | n_bits * u8``
Pauli string (error, recovery, stabilizer)
    ``u8 version | u32 n_entries | n_entries * (u32 qubit, u8 ascii pauli)``
"""

from __future__ import annotations

import struct
from typing import Iterable, Optional, Tuple

import numpy as np
import torch

from . import config
from .codes.syndrome import ErrorSyndrome
from .errors import DimensionMismatch, EncodingError
from .pauli import PauliOperator, QuantumError
from .state import QuantumState

__all__ = [
    "encode_state",
    "decode_state",
    "encode_syndrome",
    "decode_syndrome",
    "encode_paulis",
    "decode_error",
    "transcript_payload",
]

_VERSION = struct.Struct("<B")
_U32 = struct.Struct("<I")
_ENTRY = struct.Struct("<IB")
_AMPLITUDE_DTYPE = np.dtype("<f8")


def _header() -> bytes:
    return _VERSION.pack(config.ENCODING_VERSION)


def _read(fmt: struct.Struct, data: bytes, offset: int) -> Tuple[tuple, int]:
    end = offset + fmt.size
    if end > len(data):
        raise EncodingError(f"payload truncated at byte {offset}; expected {fmt.size} more bytes")
    return fmt.unpack_from(data, offset), end


def _check_version(data: bytes) -> int:
    (version,), offset = _read(_VERSION, data, 0)
    if version != config.ENCODING_VERSION:
        raise EncodingError(f"unsupported encoding version {version}")
    return offset


def _syndrome_body(syndrome: Optional[ErrorSyndrome]) -> bytes:
    bits = () if syndrome is None else syndrome.bits
    return _U32.pack(len(bits)) + bytes(1 if b else 0 for b in bits)


def _read_syndrome_body(data: bytes, offset: int) -> Tuple[ErrorSyndrome, int]:
    (n_bits,), offset = _read(_U32, data, offset)
    end = offset + n_bits
    if end > len(data):
        raise EncodingError(f"payload truncated: {n_bits} syndrome bits announced")
    raw = data[offset:end]
    if any(b not in (0, 1) for b in raw):
        raise EncodingError("syndrome bits must be encoded as 0 or 1")
    return ErrorSyndrome.from_bits(raw), end


def _expect_end(data: bytes, offset: int) -> None:
    if offset != len(data):
        raise EncodingError(f"{len(data) - offset} trailing bytes after payload")


# States ---------------------------------------------------------------------
def encode_state(state: QuantumState, syndrome: Optional[ErrorSyndrome] = None) -> bytes:
    """Encode ``state`` (and optionally a syndrome, e.g. ``state.error_syndrome``)."""

    pairs = torch.view_as_real(state.amplitudes.detach().cpu().to(torch.complex128))
    body = pairs.numpy().astype(_AMPLITUDE_DTYPE, copy=False).tobytes()
    return b"".join((_header(), _U32.pack(state.num_qubits), body, _syndrome_body(syndrome)))


def decode_state(data: bytes) -> Tuple[QuantumState, Optional[ErrorSyndrome]]:
    """Inverse of :func:`encode_state`; the syndrome is ``None`` when empty."""

    offset = _check_version(data)
    (num_qubits,), offset = _read(_U32, data, offset)
    if num_qubits > config.MAX_QUBITS:
        raise EncodingError(f"{num_qubits} qubits exceed config.MAX_QUBITS")
    size = (1 << num_qubits) * 2 * _AMPLITUDE_DTYPE.itemsize
    end = offset + size
    if end > len(data):
        raise DimensionMismatch(
            f"header announces {num_qubits} qubits but only {len(data) - offset} amplitude bytes follow"
        )
    pairs = np.frombuffer(data, dtype=_AMPLITUDE_DTYPE, count=(1 << num_qubits) * 2, offset=offset)
    amplitudes = torch.view_as_complex(torch.from_numpy(pairs.reshape(-1, 2).copy()))
    syndrome, end = _read_syndrome_body(data, end)
    _expect_end(data, end)

    state = QuantumState.from_amplitudes(amplitudes)
    state.error_syndrome = syndrome if len(syndrome) else None
    return state, state.error_syndrome


# Syndromes ------------------------------------------------------------------
def encode_syndrome(syndrome: ErrorSyndrome | Iterable[bool]) -> bytes:
    if not isinstance(syndrome, ErrorSyndrome):
        syndrome = ErrorSyndrome.from_bits(syndrome)
    return _header() + _syndrome_body(syndrome)


def decode_syndrome(data: bytes) -> ErrorSyndrome:
    offset = _check_version(data)
    syndrome, offset = _read_syndrome_body(data, offset)
    _expect_end(data, offset)
    return syndrome


# Pauli strings --------------------------------------------------------------
def encode_paulis(operator: Iterable[Tuple[int, PauliOperator]] | QuantumError) -> bytes:
    """Encode a :class:`QuantumError` or any ``(qubit, Pauli)`` sequence such as a stabilizer."""

    items = operator.items() if isinstance(operator, QuantumError) else operator
    entries = [_ENTRY.pack(q, ord(PauliOperator(p).value)) for q, p in items]
    return b"".join((_header(), _U32.pack(len(entries)), *entries))


def decode_error(data: bytes, cls: type[QuantumError] = QuantumError) -> QuantumError:
    offset = _check_version(data)
    (count,), offset = _read(_U32, data, offset)
    pairs = []
    for _ in range(count):
        (qubit, code), offset = _read(_ENTRY, data, offset)
        try:
            pauli = PauliOperator(chr(code))
        except ValueError:
            raise EncodingError(f"invalid Pauli byte {code:#x}") from None
        pairs.append((qubit, pauli))
    _expect_end(data, offset)
    return cls(pairs)


def transcript_payload(
    state: Optional[QuantumState] = None, syndrome: Optional[ErrorSyndrome] = None
) -> bytes:
    """Statement material for a proof transcript: the state and/or the syndrome."""

    if state is None and syndrome is None:
        raise ValueError("transcript_payload needs a state, a syndrome, or both")
    if state is None:
        return encode_syndrome(syndrome)
    return encode_state(state, syndrome)
