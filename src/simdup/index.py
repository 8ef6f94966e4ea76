"""
Fingerprint indexes answering "which stored fingerprint is nearest, within
``max_diff`` bits?".

``LinearIndex`` scans every stored fingerprint and serves as the reference.
``BandedIndex`` cuts the 64 bits into ``max_diff + 1`` bands: two fingerprints
within ``max_diff`` bits of each other differ in at most ``max_diff`` bands, so
they agree exactly on at least one. Only fingerprints sharing a band with the
query are verified.

Both return the nearest match, ties going to the earliest added fingerprint.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .errors import InvalidConfiguration
from .value import MASK64, hamming_distance

Match = tuple[int, int]  # (entry id, distance)

LINEAR = "linear"
BANDED = "banded"
INDEX_KINDS = (LINEAR, BANDED)


class FingerprintIndex(Protocol):
    max_diff: int

    def add(self, fingerprint: int) -> int: ...

    def nearest(self, fingerprint: int) -> Optional[Match]: ...

    def within(self, fingerprint: int) -> list[Match]: ...

    def __len__(self) -> int: ...


def check_max_diff(max_diff: int) -> int:
    if isinstance(max_diff, bool) or not isinstance(max_diff, int):
        raise InvalidConfiguration(f"max_diff must be an integer, got {max_diff!r}")
    if max_diff < 0:
        raise InvalidConfiguration(f"max_diff must be >= 0, got {max_diff}")
    return max_diff


def _best(fingerprint: int, candidates: Iterable[int], stored: list[int], max_diff: int) -> Optional[Match]:
    # candidates arrive in ascending id order
    best: Optional[Match] = None
    for entry_id in candidates:
        distance = hamming_distance(fingerprint, stored[entry_id])
        if distance > max_diff:
            continue
        if best is None or (distance, entry_id) < (best[1], best[0]):
            best = (entry_id, distance)
            if distance == 0:
                break
    return best


class LinearIndex:
    def __init__(self, max_diff: int) -> None:
        self.max_diff = check_max_diff(max_diff)
        self._fingerprints: list[int] = []

    def add(self, fingerprint: int) -> int:
        self._fingerprints.append(fingerprint & MASK64)
        return len(self._fingerprints) - 1

    def nearest(self, fingerprint: int) -> Optional[Match]:
        return _best(fingerprint, range(len(self._fingerprints)), self._fingerprints, self.max_diff)

    def within(self, fingerprint: int) -> list[Match]:
        matches = []
        for entry_id, stored in enumerate(self._fingerprints):
            distance = hamming_distance(fingerprint, stored)
            if distance <= self.max_diff:
                matches.append((entry_id, distance))
        return matches

    def __len__(self) -> int:
        return len(self._fingerprints)


def band_layout(bands: int) -> list[tuple[int, int]]:
    """Split 64 bits into ``bands`` contiguous (shift, mask) slices."""
    if not 1 <= bands <= 64:
        raise InvalidConfiguration(f"band count must be within 1..64, got {bands}")
    base, extra = divmod(64, bands)
    layout = []
    shift = 0
    for band in range(bands):
        width = base + (1 if band < extra else 0)
        layout.append((shift, (1 << width) - 1))
        shift += width
    return layout


class BandedIndex:
    def __init__(self, max_diff: int) -> None:
        self.max_diff = check_max_diff(max_diff)
        self._fingerprints: list[int] = []
        # max_diff >= 64 matches everything; banding cannot help there.
        self._layout = band_layout(self.max_diff + 1) if self.max_diff < 64 else []
        self._tables: list[dict[int, list[int]]] = [{} for _ in self._layout]

    @property
    def bands(self) -> int:
        return len(self._layout)

    def add(self, fingerprint: int) -> int:
        fingerprint &= MASK64
        entry_id = len(self._fingerprints)
        self._fingerprints.append(fingerprint)
        for (shift, mask), table in zip(self._layout, self._tables):
            table.setdefault((fingerprint >> shift) & mask, []).append(entry_id)
        return entry_id

    def candidates(self, fingerprint: int) -> list[int]:
        if not self._layout:
            return list(range(len(self._fingerprints)))
        found: set[int] = set()
        for (shift, mask), table in zip(self._layout, self._tables):
            bucket = table.get((fingerprint >> shift) & mask)
            if bucket:
                found.update(bucket)
        return sorted(found)

    def nearest(self, fingerprint: int) -> Optional[Match]:
        return _best(fingerprint, self.candidates(fingerprint), self._fingerprints, self.max_diff)

    def within(self, fingerprint: int) -> list[Match]:
        matches = []
        for entry_id in self.candidates(fingerprint):
            distance = hamming_distance(fingerprint, self._fingerprints[entry_id])
            if distance <= self.max_diff:
                matches.append((entry_id, distance))
        return matches

    def __len__(self) -> int:
        return len(self._fingerprints)


def make_index(kind: str, max_diff: int) -> FingerprintIndex:
    kind = str(kind).strip().lower()
    if kind == LINEAR:
        return LinearIndex(max_diff)
    if kind == BANDED:
        return BandedIndex(max_diff)
    raise InvalidConfiguration(f"Unknown index kind {kind!r} (expected one of: {', '.join(INDEX_KINDS)})")
