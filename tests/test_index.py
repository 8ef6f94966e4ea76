import random

import pytest

from simdup.errors import InvalidConfiguration
from simdup.index import BandedIndex, LinearIndex, band_layout, make_index


def _perturb(rng, value, bits):
    for position in rng.sample(range(64), bits):
        value ^= 1 << position
    return value


def test_band_layout_covers_all_bits():
    for bands in (1, 3, 4, 7, 64):
        layout = band_layout(bands)
        assert len(layout) == bands
        covered = 0
        for shift, mask in layout:
            covered |= mask << shift
        assert covered == (1 << 64) - 1
        assert sum(mask.bit_length() for _, mask in layout) == 64


def test_band_layout_rejects_bad_counts():
    with pytest.raises(InvalidConfiguration):
        band_layout(0)
    with pytest.raises(InvalidConfiguration):
        band_layout(65)


@pytest.mark.parametrize("max_diff", [0, 1, 3, 6, 12, 63, 64, 80])
def test_banded_matches_linear(max_diff):
    rng = random.Random(1234 + max_diff)
    linear = LinearIndex(max_diff)
    banded = BandedIndex(max_diff)

    stored = [rng.getrandbits(64) for _ in range(200)]
    for value in stored:
        assert linear.add(value) == banded.add(value)

    queries = [rng.getrandbits(64) for _ in range(100)]
    for value in stored[:100]:
        queries.append(_perturb(rng, value, rng.randint(0, min(max_diff + 2, 64))))

    for query in queries:
        assert banded.nearest(query) == linear.nearest(query)
        assert banded.within(query) == linear.within(query)


def test_nearest_prefers_closest_then_earliest():
    index = LinearIndex(4)
    index.add(0b1111)
    index.add(0b0111)
    index.add(0b0111)
    assert index.nearest(0b0011) == (1, 1)
    assert index.nearest(0xFF00) is None
    assert len(index) == 3


def test_banded_fallback_for_huge_threshold():
    index = BandedIndex(64)
    assert index.bands == 0
    index.add(0)
    assert index.nearest(0xFFFFFFFFFFFFFFFF) == (0, 64)


def test_make_index():
    assert isinstance(make_index("linear", 2), LinearIndex)
    assert isinstance(make_index("Banded", 2), BandedIndex)
    with pytest.raises(InvalidConfiguration):
        make_index("tree", 2)
