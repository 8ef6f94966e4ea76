"""
64-bit hash primitives applied to individual features.

Two interchangeable methods are available:

- ``HashMethod.KEYED``: blake2b with an 8-byte digest and a secret key
  (``DEFAULT_KEY`` unless one is supplied).
- ``HashMethod.FAST``: unseeded xxh3-64.

Both map a byte string to an unsigned 64-bit integer and are deterministic for a
given method and key.
"""

from __future__ import annotations

import hashlib
from enum import Enum
from functools import lru_cache
from typing import Callable

import xxhash

from .errors import InvalidConfiguration

DEFAULT_KEY = b"simdup.keyed.v1\x00"
FEATURE_CACHE_SIZE = 1 << 16
HASHER_CACHE_SIZE = 32

HashFunction = Callable[[bytes], int]


class HashMethod(str, Enum):
    KEYED = "keyed"
    FAST = "fast"

    @classmethod
    def parse(cls, value: "HashMethod | str") -> "HashMethod":
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = _METHOD_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError as exc:
            choices = ", ".join(m.value for m in cls)
            raise InvalidConfiguration(
                f"Unknown hash method {value!r} (expected one of: {choices})"
            ) from exc


# Names used by the original bindings
_METHOD_ALIASES = {
    "siphash": "keyed",
    "sip": "keyed",
    "blake2b": "keyed",
    "xxhash": "fast",
    "xxh3": "fast",
}


def validate_key(key: bytes | None) -> bytes:
    if key is None:
        return DEFAULT_KEY
    if not isinstance(key, (bytes, bytearray)):
        raise InvalidConfiguration(f"Hash key must be bytes, got {type(key).__name__}")
    if not 1 <= len(key) <= hashlib.blake2b.MAX_KEY_SIZE:
        raise InvalidConfiguration(
            f"Hash key must be 1..{hashlib.blake2b.MAX_KEY_SIZE} bytes, got {len(key)}"
        )
    return bytes(key)


def _keyed(data: bytes, key: bytes) -> int:
    digest = hashlib.blake2b(data, digest_size=8, key=key).digest()
    return int.from_bytes(digest, "little")


def _fast(data: bytes) -> int:
    return xxhash.xxh3_64_intdigest(data)


def hash_bytes(data: bytes, method: HashMethod | str = HashMethod.KEYED, key: bytes | None = None) -> int:
    """Hash ``data`` to an unsigned 64-bit integer."""
    method = HashMethod.parse(method)
    if method is HashMethod.FAST:
        return _fast(bytes(data))
    return _keyed(bytes(data), validate_key(key))


@lru_cache(maxsize=HASHER_CACHE_SIZE)
def hash_function(method: HashMethod = HashMethod.KEYED, key: bytes | None = None) -> HashFunction:
    """
    Return a memoised ``bytes -> int`` callable for ``method``.

    Short features repeat a lot (a 2-byte window has at most 65536 values), so
    each function keeps its own bounded cache. ``key`` is ignored by FAST.
    """
    method = HashMethod.parse(method)
    if method is HashMethod.FAST:
        return lru_cache(maxsize=FEATURE_CACHE_SIZE)(_fast)

    resolved = validate_key(key)

    @lru_cache(maxsize=FEATURE_CACHE_SIZE)
    def keyed(data: bytes) -> int:
        return _keyed(data, resolved)

    return keyed
