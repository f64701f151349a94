from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

__all__ = ["ErrorSyndrome"]


@dataclass(frozen=True)
class ErrorSyndrome:
    """One bit per stabilizer, in stabilizer declaration order.

    ``True`` means the stabilizer returned the odd-parity outcome.
    """

    bits: Tuple[bool, ...]

    def __post_init__(self):
        object.__setattr__(self, "bits", tuple(bool(b) for b in self.bits))

    @classmethod
    def zeros(cls, size: int) -> "ErrorSyndrome":
        return cls((False,) * size)

    @classmethod
    def from_bits(cls, bits: Iterable[bool | int]) -> "ErrorSyndrome":
        return cls(tuple(bits))

    @classmethod
    def from_int(cls, value: int, size: int) -> "ErrorSyndrome":
        """Inverse of :meth:`to_int`."""
        if not 0 <= value < 1 << size:
            raise ValueError(f"{value} does not fit in {size} syndrome bits")
        return cls(tuple((value >> i) & 1 for i in range(size)))

    def __len__(self) -> int:
        return len(self.bits)

    def __iter__(self) -> Iterator[bool]:
        return iter(self.bits)

    def __getitem__(self, index: int) -> bool:
        return self.bits[index]

    def get_bit(self, index: int) -> bool | None:
        """Bit ``index``, or ``None`` past the end."""
        if 0 <= index < len(self.bits):
            return self.bits[index]
        return None

    @property
    def is_trivial(self) -> bool:
        return not any(self.bits)

    def to_list(self) -> list[bool]:
        return list(self.bits)

    def to_int(self) -> int:
        """Pack the bits with stabilizer ``i`` as bit ``i``."""
        return sum(1 << i for i, bit in enumerate(self.bits) if bit)

    def __str__(self) -> str:
        return "".join("1" if b else "0" for b in self.bits)
