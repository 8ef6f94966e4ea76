"""
Dictionary keyed by near-identical strings.

Keys are reduced to their simhash. A key whose fingerprint lies within
``max_diff`` bits of an existing bucket joins that bucket: it is recorded as a
member, but the payload stored by the bucket's first key is kept. All members
read back that first payload. ``len()`` counts buckets, not keys.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterator, Optional

from .errors import KeyNotFound
from .index import BANDED, FingerprintIndex, make_index
from .simhasher import SimHasher
from .value import SimHash

logger = logging.getLogger(__name__)

_MISSING = object()


def _as_key(key: Any) -> Hashable:
    if isinstance(key, (bytearray, memoryview)):
        return bytes(key)
    return key


@dataclass(slots=True)
class Bucket:
    fingerprint: SimHash
    value: Any
    members: list[Hashable] = field(default_factory=list)

    @property
    def key(self) -> Hashable:
        return self.members[0]


class SimDict:
    def __init__(
        self,
        max_diff: int = 3,
        hasher: SimHasher | None = None,
        *,
        index: str = BANDED,
    ) -> None:
        self._hasher = hasher if hasher is not None else SimHasher()
        self._index: FingerprintIndex = make_index(index, max_diff)
        self._buckets: list[Bucket] = []
        self._keys: dict[Hashable, int] = {}

    @property
    def max_diff(self) -> int:
        return self._index.max_diff

    @property
    def hasher(self) -> SimHasher:
        return self._hasher

    def _lookup(self, key: Any) -> Optional[Bucket]:
        fingerprint = self._hasher.hash(key)
        match = self._index.nearest(fingerprint.value)
        if match is None:
            return None
        return self._buckets[match[0]]

    def insert(self, key: Any, value: Any) -> SimHash:
        """Store ``value`` under ``key`` unless a near-duplicate bucket exists.

        Returns the fingerprint of the bucket the key ended up in. Mutable
        byte keys are stored as ``bytes``; other unhashable keys raise
        TypeError before anything is recorded.
        """
        key = _as_key(key)
        known = key in self._keys
        fingerprint = self._hasher.hash(key)
        match = self._index.nearest(fingerprint.value)
        if match is not None:
            bucket_id, distance = match
            bucket = self._buckets[bucket_id]
            if not known:
                bucket.members.append(key)
                self._keys[key] = bucket_id
            logger.debug(
                "Key joined bucket %d (%s) at distance %d", bucket_id, bucket.fingerprint, distance
            )
            return bucket.fingerprint

        bucket_id = self._index.add(fingerprint.value)
        self._buckets.append(Bucket(fingerprint=fingerprint, value=value, members=[key]))
        self._keys[key] = bucket_id
        logger.debug("New bucket %d (%s)", bucket_id, fingerprint)
        return fingerprint

    def contains(self, key: Any) -> bool:
        return self._lookup(key) is not None

    def contains_key(self, key: Any) -> bool:
        """True only if ``key`` itself was inserted."""
        return _as_key(key) in self._keys

    def get(self, key: Any, default: Any = _MISSING) -> Any:
        """Payload of the nearest bucket within ``max_diff``.

        Raises KeyNotFound on a miss unless ``default`` is given.
        """
        bucket = self._lookup(key)
        if bucket is not None:
            return bucket.value
        if default is _MISSING:
            raise KeyNotFound(key)
        return default

    def members(self, key: Any) -> list[Hashable]:
        bucket = self._lookup(key)
        if bucket is None:
            raise KeyNotFound(key)
        return list(bucket.members)

    def fingerprint(self, key: Any) -> SimHash:
        return self._hasher.hash(key)

    @property
    def buckets(self) -> tuple[Bucket, ...]:
        return tuple(self._buckets)

    def keys(self) -> list[Hashable]:
        return [bucket.key for bucket in self._buckets]

    def values(self) -> list[Any]:
        return [bucket.value for bucket in self._buckets]

    def items(self) -> list[tuple[Hashable, Any]]:
        return [(bucket.key, bucket.value) for bucket in self._buckets]

    def __setitem__(self, key: Any, value: Any) -> None:
        self.insert(key, value)

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return self.contains(key)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"SimDict(max_diff={self.max_diff}, buckets={len(self)}, hasher={self._hasher!r})"
