import pytest

from simdup.errors import InvalidConfiguration
from simdup.hashing import (
    DEFAULT_KEY,
    HASHER_CACHE_SIZE,
    HashMethod,
    hash_bytes,
    hash_function,
)


@pytest.mark.parametrize("method", list(HashMethod))
def test_hash_is_deterministic_64bit(method):
    v1 = hash_bytes(b"hello", method)
    v2 = hash_bytes(b"world", method)
    assert v1 != v2
    assert v1 == hash_bytes(b"hello", method)
    assert 0 <= v1 < 2**64


def test_methods_differ():
    assert hash_bytes(b"hello", HashMethod.KEYED) != hash_bytes(b"hello", HashMethod.FAST)


def test_keyed_depends_on_key():
    default = hash_bytes(b"hello", HashMethod.KEYED)
    assert default == hash_bytes(b"hello", HashMethod.KEYED, DEFAULT_KEY)
    assert default != hash_bytes(b"hello", HashMethod.KEYED, b"another key")


def test_fast_matches_xxh3():
    xxhash = pytest.importorskip("xxhash")
    assert hash_bytes(b"ab", HashMethod.FAST) == xxhash.xxh3_64_intdigest(b"ab")


def test_hash_function_is_shared_and_consistent():
    fn = hash_function(HashMethod.KEYED, DEFAULT_KEY)
    assert fn is hash_function(HashMethod.KEYED, DEFAULT_KEY)
    assert fn(b"abc") == hash_bytes(b"abc", HashMethod.KEYED)


def test_parse_accepts_aliases():
    assert HashMethod.parse("siphash") is HashMethod.KEYED
    assert HashMethod.parse("XXHash") is HashMethod.FAST
    assert HashMethod.parse(HashMethod.FAST) is HashMethod.FAST
    with pytest.raises(InvalidConfiguration):
        HashMethod.parse("md5")


@pytest.mark.parametrize("key", [b"", b"x" * 65, "text-key"])
def test_invalid_keys(key):
    with pytest.raises(InvalidConfiguration):
        hash_bytes(b"abc", HashMethod.KEYED, key)


def test_hash_function_cache_is_bounded():
    hash_function.cache_clear()
    for i in range(HASHER_CACHE_SIZE + 8):
        keyed = hash_function(HashMethod.KEYED, b"key-%d" % i)
        assert keyed(b"ab") == hash_bytes(b"ab", HashMethod.KEYED, b"key-%d" % i)
    info = hash_function.cache_info()
    assert info.maxsize == HASHER_CACHE_SIZE
    assert info.currsize == HASHER_CACHE_SIZE
