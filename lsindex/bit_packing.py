"""Fixed-width bit packing of unsigned integer arrays."""

from __future__ import annotations

from collections.abc import Iterable

from .byte_coding import ByteBuffer

MAX_SINGLE_WORD_BIT_WIDTH = 58
SLOP_BYTES = 8
MAX_BATCH_BIT_WIDTH = 32

_UINT32_LIMIT = 1 << 32
_UINT64_LIMIT = 1 << 64


def _check_uint(value: int, limit: int) -> None:
    if not 0 <= value < limit:
        raise ValueError(f"{value} is out of the unsigned range below {limit}")


def bits_required(x: int) -> int:
    """Bits needed for a 32-bit value, counting zero as one bit."""
    _check_uint(x, _UINT32_LIMIT)
    return (x | 1).bit_length()


def bits_required64(x: int) -> int:
    """Bits needed for a 64-bit value, counting zero as one bit."""
    _check_uint(x, _UINT64_LIMIT)
    return (x | 1).bit_length()


def bit_width(value: int) -> int:
    """Bits needed for an unsigned 64-bit value; zero needs zero bits."""
    _check_uint(value, _UINT64_LIMIT)
    return value.bit_length()


def max_bit_width(values: Iterable[int]) -> int:
    """Largest bit width among ``values``; 0 when empty or all zero."""
    return max((bit_width(v) for v in values), default=0)


def bit_packing_bytes_required(num_bits: int) -> int:
    """Number of whole bytes needed to hold ``num_bits`` bits."""
    if not 0 <= num_bits <= _UINT64_LIMIT - 1 - 7:
        raise ValueError(f"invalid number of bits: {num_bits}")
    return (num_bits + 7) >> 3


def fast_bit_mask(num_bits: int) -> int:
    """Mask with the lowest ``num_bits`` bits set, for ``num_bits`` below 64."""
    if not 0 <= num_bits < 64:
        raise ValueError(f"mask width must be in [0, 64), got {num_bits}")
    return (1 << num_bits) - 1


def _check_width(width: int) -> None:
    if not 0 <= width <= 64:
        raise ValueError(f"bit width must be in [0, 64], got {width}")


def store_bit_packed(values: Iterable[int], bit_width: int, buffer: ByteBuffer) -> None:
    """Append ``values`` to ``buffer``, each using exactly ``bit_width`` bits.

    Nothing is written for a bit width of zero. Room for the slop bytes that
    readers may touch is reserved but not counted in the buffer position.
    """
    _check_width(bit_width)
    if bit_width == 0:
        return

    packed = bytearray()
    acc = 0
    pending = 0
    for value in values:
        _check_uint(value, _UINT64_LIMIT)
        if value.bit_length() > bit_width:
            raise ValueError(f"{value} does not fit in {bit_width} bits")
        acc |= value << pending
        pending += bit_width
        full = pending >> 3
        if full:
            packed += (acc & ((1 << (full * 8)) - 1)).to_bytes(full, "little")
            acc >>= full * 8
            pending -= full * 8
    if pending:
        packed += acc.to_bytes(1, "little")

    start = buffer.pos
    end = start + len(packed)
    buffer.ensure_capacity(end + SLOP_BYTES)
    buffer.data[start:end] = packed
    buffer.pos = end


def put_slop_bytes(buffer: ByteBuffer) -> None:
    """Append the zero bytes that bit-packed readers may read past the end."""
    buffer.put_primitive(0, "Q")


class BitPackedReader:
    """Reads values from an array written by :func:`store_bit_packed`."""

    def __init__(self, bit_width: int = 0, data=b"", offset: int = 0) -> None:
        _check_width(bit_width)
        if offset < 0:
            raise ValueError("offset must not be negative")
        self.bit_width = bit_width
        self._data = data
        self._offset = offset

    def get(self, index: int) -> int:
        """Return the value stored at ``index``."""
        if index < 0:
            raise IndexError("index must not be negative")
        if self.bit_width == 0:
            return 0
        bit0 = index * self.bit_width
        byte0 = self._offset + (bit0 >> 3)
        start = bit0 & 0x7
        needed = (start + self.bit_width + 7) >> 3
        if byte0 + needed > len(self._data):
            raise IndexError(f"index {index} is beyond the packed data")
        word = int.from_bytes(self._data[byte0:byte0 + needed], "little")
        return (word >> start) & ((1 << self.bit_width) - 1)

    def get_batch(self, size: int) -> list[int]:
        """Return the first ``size`` values; bit widths up to 32 only."""
        if self.bit_width > MAX_BATCH_BIT_WIDTH:
            raise ValueError(f"unexpected bit-width: {self.bit_width}")
        return [self.get(i) for i in range(size)]

    def debug_string(self, size: int) -> str:
        """Describe an array of ``size`` values read by this reader."""
        return (
            f"size: {size}, bit-width: {self.bit_width}, "
            f"bytes: {bit_packing_bytes_required(size * self.bit_width)}"
        )