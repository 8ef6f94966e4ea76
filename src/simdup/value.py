from __future__ import annotations

from dataclasses import dataclass

MASK64 = (1 << 64) - 1


def hamming_distance(a: int, b: int) -> int:
    return ((a ^ b) & MASK64).bit_count()


@dataclass(frozen=True, slots=True, order=True, repr=False)
class SimHash:
    """Immutable 64-bit fingerprint."""

    value: int

    @staticmethod
    def from_int(value: int) -> "SimHash":
        return SimHash(int(value))

    def difference(self, other: "SimHash | int") -> int:
        """Number of differing bits (Hamming distance), 0..64."""
        other_value = other.value if isinstance(other, SimHash) else int(other)
        return hamming_distance(self.value, other_value)

    hamming_distance = difference

    def hex(self) -> str:
        return f"0x{self.value:016x}"

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"<SimHash {self.hex()}>"

    def __int__(self) -> int:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)
