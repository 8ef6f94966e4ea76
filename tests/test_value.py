from simdup import SimHash


def test_from_int_round_trip():
    for value in (0, 1, 123, 2**63, 0xFFFFFFFFFFFFFFFF):
        sh = SimHash.from_int(value)
        assert sh.value == value
        assert int(sh) == value
        assert sh.difference(sh) == 0


def test_rendering():
    sh = SimHash.from_int(123)
    assert str(sh) == "0x000000000000007b"
    assert repr(sh) == "<SimHash 0x000000000000007b>"
    assert str(SimHash.from_int(0xFFFFFFFFFFFFFFFF)) == "0xffffffffffffffff"
    assert hash(sh) == 123


def test_equality_and_ordering():
    sh1 = SimHash.from_int(123)
    sh2 = SimHash.from_int(123)
    sh3 = SimHash.from_int(456)
    assert sh1 == sh2
    assert sh1 != sh3
    assert sh1 < sh3 and sh3 > sh1 and sh1 <= sh2
    assert sorted([sh3, sh1]) == [sh1, sh3]
    assert len({sh1, sh2, sh3}) == 2


def test_difference():
    sh1 = SimHash.from_int(0b101010)
    sh2 = SimHash.from_int(0b101110)
    sh3 = SimHash.from_int(0b100010)
    assert sh1.difference(sh2) == 1
    assert sh2.difference(sh1) == 1
    assert sh1.difference(sh3) == 1
    assert sh2.difference(sh3) == 2
    assert sh2.hamming_distance(sh3) == 2
    assert sh2.difference(0b100010) == 2

    empty = SimHash.from_int(0)
    full = SimHash.from_int(0xFFFFFFFFFFFFFFFF)
    assert empty.difference(full) == 64
    assert full.difference(empty) == 64
