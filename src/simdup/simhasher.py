"""
Simhash engine: per-feature 64-bit hashes combined by bit voting.

For every bit position a counter is incremented for each feature hash with the
bit set and decremented otherwise. The output bit is 1 only when its counter is
strictly positive, so ties resolve to 0 and an input without features yields the
all-zero fingerprint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Sequence

import numpy as np

from .features import (
    FeatureExtractor,
    FeatureMode,
    FeatureType,
    TextInput,
    WordPolicy,
    resolve_mode,
)
from .hashing import HashMethod, hash_function, validate_key
from .value import SimHash

if TYPE_CHECKING:
    from .grouping import Group

BITS = 64


def vote(hashes: Iterable[int]) -> int:
    """Aggregate feature hashes into one fingerprint."""
    values = np.fromiter(hashes, dtype=np.uint64)
    total = values.size
    if total == 0:
        return 0
    # Column i of ``bits`` holds bit i of every hash.
    raw = values.astype("<u8").view(np.uint8).reshape(total, 8)
    bits = np.unpackbits(raw, axis=1, bitorder="little")
    ones = bits.sum(axis=0, dtype=np.int64)
    # counter = ones - zeros = 2 * ones - total
    winners = (2 * ones - total) > 0
    packed = np.packbits(winners, bitorder="little")
    return int.from_bytes(packed.tobytes(), "little")


class SimHasher:
    """Reusable, immutable simhash configuration."""

    __slots__ = ("_method", "_mode", "_key", "_extractor", "_hash_fn")

    def __init__(
        self,
        method: HashMethod | str = HashMethod.KEYED,
        features: FeatureMode | FeatureType | str = FeatureType.BYTES,
        n: int = 2,
        *,
        key: bytes | None = None,
        word_policy: WordPolicy | str = WordPolicy.PUNCTUATION,
    ) -> None:
        self._method = HashMethod.parse(method)
        self._mode = resolve_mode(features, n, word_policy)
        self._key = validate_key(key) if self._method is HashMethod.KEYED else None
        self._extractor = FeatureExtractor(self._mode)
        self._hash_fn = hash_function(self._method, self._key)

    @property
    def method(self) -> HashMethod:
        return self._method

    @property
    def feature_mode(self) -> FeatureMode:
        return self._mode

    @property
    def key(self) -> bytes | None:
        return self._key

    def features(self, text: TextInput) -> list[bytes]:
        return list(self._extractor.extract(text))

    def hash_int(self, text: TextInput) -> int:
        hash_fn = self._hash_fn
        return vote(hash_fn(feature) for feature in self._extractor.extract(text))

    def hash(self, text: TextInput) -> SimHash:
        return SimHash(self.hash_int(text))

    def hash_many(self, texts: Iterable[TextInput]) -> list[SimHash]:
        return [self.hash(text) for text in texts]

    def group_texts(self, texts: Sequence[str], max_diff: int = 3, **kwargs: Any) -> list["Group"]:
        from .grouping import group_texts

        return group_texts(texts, max_diff=max_diff, hasher=self, **kwargs)

    def _config(self) -> tuple:
        return (self._method, self._mode, self._key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimHasher):
            return NotImplemented
        return self._config() == other._config()

    def __hash__(self) -> int:
        return hash(self._config())

    def __repr__(self) -> str:
        return f"SimHasher(method={self._method.value}, features={self._mode})"
