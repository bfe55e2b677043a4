import random

import pytest

from lsindex.bit_packing import (
    SLOP_BYTES,
    BitPackedReader,
    bit_packing_bytes_required,
    bit_width,
    bits_required,
    bits_required64,
    fast_bit_mask,
    max_bit_width,
    put_slop_bytes,
    store_bit_packed,
)
from lsindex.byte_coding import ByteBuffer


def _pack(values, width):
    buffer = ByteBuffer()
    store_bit_packed(values, width, buffer)
    put_slop_bytes(buffer)
    return buffer


def test_bit_width_of_zero_is_zero():
    assert bit_width(0) == 0


@pytest.mark.parametrize("value", [1, 2, 3, 255, 256, 2**32 - 1, 2**63, 2**64 - 1])
def test_bit_width_bounds_value(value):
    w = bit_width(value)
    assert 2 ** (w - 1) <= value < 2**w


def test_bit_width_rejects_out_of_range():
    with pytest.raises(ValueError):
        bit_width(2**64)
    with pytest.raises(ValueError):
        bit_width(-1)


def test_bits_required_counts_zero_as_one():
    assert bits_required(0) == bits_required(1)
    assert bits_required64(0) == bits_required64(1)
    assert bits_required64(2**64 - 1) == 64


def test_bits_required_rejects_wide_value():
    with pytest.raises(ValueError):
        bits_required(2**32)


def test_max_bit_width():
    assert max_bit_width([]) == 0
    assert max_bit_width([0, 0, 0]) == 0
    values = [5, 1000, 17, 3]
    assert max_bit_width(values) == bit_width(1000)


def test_bytes_required_documented_values():
    assert bit_packing_bytes_required(0) == 0
    for bits in range(1, 9):
        assert bit_packing_bytes_required(bits) == 1


def test_bytes_required_rejects_negative():
    with pytest.raises(ValueError):
        bit_packing_bytes_required(-1)


@pytest.mark.parametrize("n", [0, 1, 7, 32, 63])
def test_fast_bit_mask_has_n_low_bits(n):
    mask = fast_bit_mask(n)
    assert mask.bit_length() == n
    assert bin(mask).count("1") == n


def test_fast_bit_mask_rejects_64():
    with pytest.raises(ValueError):
        fast_bit_mask(64)


@pytest.mark.parametrize("width", range(1, 65))
def test_round_trip_all_widths(width):
    rng = random.Random(width)
    values = [rng.getrandbits(width) for _ in range(200)]
    values[0] = 2**width - 1
    buffer = ByteBuffer()
    store_bit_packed(values, width, buffer)
    assert buffer.pos == bit_packing_bytes_required(len(values) * width)
    put_slop_bytes(buffer)
    reader = BitPackedReader(width, buffer.getvalue())
    assert [reader.get(i) for i in range(len(values))] == values


def test_worked_example_bytes():
    buffer = ByteBuffer()
    store_bit_packed([1, 2, 3], 2, buffer)
    assert buffer.getvalue() == b"\x39"


def test_zero_width_writes_nothing():
    buffer = ByteBuffer()
    store_bit_packed([0, 0, 0], 0, buffer)
    assert buffer.pos == 0
    put_slop_bytes(buffer)
    reader = BitPackedReader(0, buffer.getvalue())
    assert reader.get(2) == 0


def test_value_too_wide_raises():
    with pytest.raises(ValueError):
        store_bit_packed([8], 3, ByteBuffer())


def test_invalid_width_raises():
    with pytest.raises(ValueError):
        store_bit_packed([1], 65, ByteBuffer())


def test_two_arrays_with_offset():
    first = [3, 1, 4, 1, 5, 9]
    second = [200, 17, 0, 99]
    buffer = ByteBuffer(4)
    store_bit_packed(first, max_bit_width(first), buffer)
    second_pos = buffer.pos
    store_bit_packed(second, max_bit_width(second), buffer)
    put_slop_bytes(buffer)
    data = buffer.getvalue()
    r1 = BitPackedReader(max_bit_width(first), data)
    r2 = BitPackedReader(max_bit_width(second), data, second_pos)
    assert [r1.get(i) for i in range(len(first))] == first
    assert [r2.get(i) for i in range(len(second))] == second


def test_get_batch_matches_values():
    rng = random.Random(7)
    values = [rng.getrandbits(13) for _ in range(70)]
    buffer = _pack(values, 13)
    reader = BitPackedReader(13, buffer.getvalue())
    assert reader.get_batch(len(values)) == values


def test_get_batch_rejects_wide_widths():
    buffer = _pack([1, 2], 33)
    with pytest.raises(ValueError):
        BitPackedReader(33, buffer.getvalue()).get_batch(2)


def test_debug_string():
    assert BitPackedReader(3, b"").debug_string(10) == "size: 10, bit-width: 3, bytes: 4"


def test_put_slop_bytes_appends_zeros():
    buffer = ByteBuffer()
    buffer.put_bytes(b"\xff")
    put_slop_bytes(buffer)
    assert buffer.pos == 1 + SLOP_BYTES
    assert buffer.getvalue()[1:] == bytes(SLOP_BYTES)


def test_get_beyond_data_raises():
    with pytest.raises(IndexError):
        BitPackedReader(8, b"").get(0)
    with pytest.raises(IndexError):
        BitPackedReader(8, b"\x01").get(-1)