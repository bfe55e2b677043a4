import pytest

from lsindex.support import bitreverse, clz, ctz, ffs, lower_bound


@pytest.mark.parametrize("value", [-1, 0, 3, 4, 5, 9, 100])
def test_lower_bound_invariant(value):
    data = [0, 2, 4, 4, 4, 8, 10]
    i = lower_bound(0, len(data), value, data)
    assert 0 <= i <= len(data)
    assert all(x < value for x in data[:i])
    assert all(x >= value for x in data[i:])


def test_lower_bound_first_of_duplicates():
    data = [1, 4, 4, 4, 7]
    assert lower_bound(0, len(data), 4, data) == 1


def test_lower_bound_respects_range():
    data = [1, 2, 3, 4, 5, 6]
    assert lower_bound(2, 4, 0, data) == 2
    assert lower_bound(2, 4, 100, data) == 4


def test_lower_bound_custom_sequence():
    class Squares:
        def __getitem__(self, i):
            return i * i

    assert lower_bound(0, 1000, 49, Squares()) == 7


def test_lower_bound_bad_range():
    with pytest.raises(ValueError):
        lower_bound(5, 2, 0, [0] * 10)


@pytest.mark.parametrize("width", [8, 16, 32, 64])
def test_zero_conventions(width):
    assert ffs(0, width) == 0
    assert ctz(0, width) == width
    assert clz(0, width) == width


@pytest.mark.parametrize("k", [0, 1, 17, 31, 63])
def test_single_bit_positions(k):
    x = 1 << k
    assert ctz(x) == k
    assert ffs(x) == k + 1
    assert clz(x) == 63 - k


def test_ctz_ignores_higher_bits():
    assert ctz(0b101000, 32) == ctz(0b1000, 32)


def test_clz_full_width():
    assert clz(2**64 - 1) == 0
    assert clz(2**32 - 1, 32) == 0


@pytest.mark.parametrize("width", [8, 16, 32, 64])
def test_bitreverse_top_bit(width):
    assert bitreverse(1, width) == 1 << (width - 1)


@pytest.mark.parametrize("x", [0, 1, 0xDEADBEEF, 2**64 - 1, 12345678901234])
def test_bitreverse_involution(x):
    assert bitreverse(bitreverse(x)) == x


def test_bitreverse_swaps_ctz_and_clz():
    x = 0b1011000
    assert clz(bitreverse(x, 16), 16) == ctz(x, 16)


def test_out_of_range_values():
    with pytest.raises(ValueError):
        ctz(-1)
    with pytest.raises(ValueError):
        clz(1 << 32, 32)
    with pytest.raises(ValueError):
        bitreverse(1, 0)