"""Module-level shortcuts mirroring the SimHasher methods."""

from __future__ import annotations

from typing import Iterable, Optional

from .features import FeatureMode, FeatureType, TextInput, WordPolicy
from .features import features as _features
from .grouping import Group
from .grouping import group_texts as _group_texts
from .hashing import HashMethod
from .simhasher import SimHasher
from .value import SimHash


def hash(
    text: TextInput,
    method: HashMethod | str = HashMethod.KEYED,
    features: FeatureMode | FeatureType | str = FeatureType.BYTES,
    n: int = 2,
) -> SimHash:
    return SimHasher(method, features, n).hash(text)


def features(
    text: TextInput,
    features: FeatureMode | FeatureType | str = FeatureType.BYTES,
    n: int = 1,
    word_policy: WordPolicy | str = WordPolicy.PUNCTUATION,
) -> list[bytes]:
    return _features(text, features, n, word_policy)


def group_texts(
    texts: Iterable[TextInput],
    max_diff: int = 3,
    method: HashMethod | str = HashMethod.FAST,
    features: FeatureMode | FeatureType | str = FeatureType.BYTES,
    n: int = 2,
    *,
    max_workers: Optional[int] = None,
    progress: bool = False,
) -> list[Group]:
    hasher = SimHasher(method, features, n)
    return _group_texts(texts, max_diff, hasher, max_workers=max_workers, progress=progress)
