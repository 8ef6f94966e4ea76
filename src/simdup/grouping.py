"""
Cluster a batch of texts into groups of near-duplicates.

Texts are nodes; two texts are linked when their fingerprints differ by at most
``max_diff`` bits. Groups are the connected components of that graph, so a
chain A~B~C lands in one group even when A and C are far apart.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Optional, Protocol, Sequence

import numpy as np
from tqdm import tqdm

from .features import TextInput
from .hashing import HashMethod
from .index import check_max_diff
from .value import SimHash

logger = logging.getLogger(__name__)

Group = list[TextInput]

_POPCOUNT8 = np.array([bin(i).count("1") for i in range(256)], dtype=np.uint8)


class Hasher(Protocol):
    def hash(self, text: TextInput) -> SimHash: ...


class DisjointSet:
    """Union-find whose roots are always the smallest member index."""

    def __init__(self, size: int) -> None:
        self.parent = list(range(size))

    def find(self, item: int) -> int:
        parent = self.parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def union(self, a: int, b: int) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        if root_a < root_b:
            self.parent[root_b] = root_a
        else:
            self.parent[root_a] = root_b


def distances_from(fingerprints: np.ndarray, row: int) -> np.ndarray:
    """Hamming distances from ``fingerprints[row]`` to every later fingerprint."""
    xored = np.bitwise_xor(fingerprints[row + 1:], fingerprints[row])
    return _POPCOUNT8[xored.view(np.uint8)].reshape(-1, 8).sum(axis=1)


def _edges(fingerprints: np.ndarray, rows: Iterable[int], max_diff: int) -> list[tuple[int, int]]:
    edges = []
    for row in rows:
        close = np.flatnonzero(distances_from(fingerprints, row) <= max_diff)
        edges.extend((row, row + 1 + int(offset)) for offset in close)
    return edges


def group_fingerprints(
    fingerprints: Sequence[SimHash | int],
    max_diff: int = 3,
    *,
    max_workers: Optional[int] = None,
) -> list[list[int]]:
    """Partition fingerprint positions into connected components.

    Returns lists of indices; groups are ordered by their first index and each
    group is sorted.
    """
    check_max_diff(max_diff)
    count = len(fingerprints)
    values = np.array(
        [f.value if isinstance(f, SimHash) else int(f) for f in fingerprints],
        dtype=np.uint64,
    )
    sets = DisjointSet(count)

    rows = range(count - 1)
    if max_workers and max_workers > 1 and count > 1:
        # Interleave rows so every worker gets a similar share of short and long tails.
        chunks = [rows[start::max_workers] for start in range(max_workers)]
        with ThreadPoolExecutor(max_workers=max_workers) as ex:
            futures = [ex.submit(_edges, values, chunk, max_diff) for chunk in chunks if len(chunk)]
            for fut in as_completed(futures):
                for a, b in fut.result():
                    sets.union(a, b)
    else:
        for a, b in _edges(values, rows, max_diff):
            sets.union(a, b)

    components: dict[int, list[int]] = {}
    for position in range(count):
        components.setdefault(sets.find(position), []).append(position)
    return list(components.values())


def group_texts(
    texts: Iterable[TextInput],
    max_diff: int = 3,
    hasher: Optional[Hasher] = None,
    *,
    max_workers: Optional[int] = None,
    progress: bool = False,
) -> list[Group]:
    """Group ``texts`` into connected components of near-duplicates.

    Each input occurrence appears in exactly one group; groups keep input order
    and are ordered by their earliest member. Without ``hasher`` the FAST
    method over byte bigrams is used.
    """
    if hasher is None:
        from .simhasher import SimHasher

        hasher = SimHasher(HashMethod.FAST)
    check_max_diff(max_diff)
    items = list(texts)
    fingerprints = [
        hasher.hash(text)
        for text in tqdm(items, desc="simhash", unit="text", disable=not progress)
    ]
    components = group_fingerprints(fingerprints, max_diff, max_workers=max_workers)
    logger.debug(
        "Grouped %d texts into %d groups (max_diff=%d)", len(items), len(components), max_diff
    )
    return [[items[position] for position in component] for component in components]
