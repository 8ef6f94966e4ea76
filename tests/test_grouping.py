import numpy as np
import pytest

import simdup
from simdup import HashMethod, InvalidConfiguration, SimHash, SimHasher
from simdup.grouping import DisjointSet, distances_from, group_fingerprints, group_texts


class TableHasher:
    def __init__(self, table):
        self.table = table

    def hash(self, text):
        return SimHash.from_int(self.table[text])


SENTENCES = [
    "The cat sat on the mat",
    "The cat spat on the mat",
    "A dog barked all the way to the $MOON",
    "A doge barked all the way to the $MOON",
]


def test_grouping():
    groups = simdup.group_texts(SENTENCES, max_diff=6, method=HashMethod.FAST)
    assert len(groups) == 2
    assert sorted(groups, key=lambda g: g[0]) == [
        [
            "A dog barked all the way to the $MOON",
            "A doge barked all the way to the $MOON",
        ],
        [
            "The cat sat on the mat",
            "The cat spat on the mat",
        ],
    ]


def test_grouping_default_method():
    groups = simdup.group_texts(SENTENCES, max_diff=6)
    assert groups == [SENTENCES[:2], SENTENCES[2:]]
    assert group_texts(SENTENCES, 6) == groups


def test_hasher_group_texts_matches_function():
    hasher = SimHasher(HashMethod.FAST)
    assert hasher.group_texts(SENTENCES, max_diff=6) == group_texts(SENTENCES, 6, hasher)


def test_bridging_pair_joins_distant_texts():
    # A~B and B~C within 3 bits, A and C 6 bits apart
    hasher = TableHasher({"A": 0b000000, "B": 0b000111, "C": 0b111111, "D": 0xFFFF_0000})
    assert hasher.hash("A").difference(hasher.hash("C")) > 3
    groups = group_texts(["A", "C", "D", "B"], max_diff=3, hasher=hasher)
    assert groups == [["A", "C", "B"], ["D"]]


def test_singletons_and_duplicates():
    hasher = TableHasher({"x": 0, "y": 0xFFFFFFFFFFFFFFFF})
    groups = group_texts(["x", "y", "x"], max_diff=0, hasher=hasher)
    assert groups == [["x", "x"], ["y"]]
    assert group_texts([], max_diff=3, hasher=hasher) == []


def test_group_fingerprints_chain():
    # Each neighbour 2 bits apart; the ends are 8 bits apart
    chain = [0b0, 0b11, 0b1111, 0b111111, 0b11111111]
    assert group_fingerprints(chain, max_diff=2) == [[0, 1, 2, 3, 4]]
    assert group_fingerprints(chain, max_diff=1) == [[0], [1], [2], [3], [4]]


@pytest.mark.parametrize("workers", [None, 1, 2, 4])
def test_partition_does_not_depend_on_workers(workers):
    rng = np.random.default_rng(7)
    base = [int(v) for v in rng.integers(0, 2**63, size=20, dtype=np.uint64)]
    values = []
    for value in base:
        values.append(value)
        values.append(value ^ 0b101)
    expected = [[2 * i, 2 * i + 1] for i in range(20)]
    assert group_fingerprints(values, max_diff=2, max_workers=workers) == expected


def test_distances_from():
    values = np.array([0, 1, 3, 0xFFFFFFFFFFFFFFFF], dtype=np.uint64)
    assert distances_from(values, 0).tolist() == [1, 2, 64]
    assert distances_from(values, 3).tolist() == []


def test_disjoint_set_roots_are_smallest():
    sets = DisjointSet(5)
    sets.union(4, 2)
    sets.union(2, 3)
    assert sets.find(4) == 2
    sets.union(3, 0)
    assert {sets.find(i) for i in (0, 2, 3, 4)} == {0}
    assert sets.find(1) == 1


def test_negative_threshold_rejected():
    with pytest.raises(InvalidConfiguration):
        group_texts(["a"], max_diff=-1)
