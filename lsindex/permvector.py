"""Bit-packed permutation vector with optional fingerprint bits."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from .bit_packing import (
    BitPackedReader,
    max_bit_width,
    put_slop_bytes,
    store_bit_packed,
)
from .byte_coding import ByteBuffer
from .fingerprinter import Fingerprinter

# Fixed bookkeeping overhead accounted for each vector.
_HEADER_BYTES = 80


@dataclass(frozen=True)
class PermValue:
    """One entry: an offset into the original data plus its fingerprint bits."""

    index: int = 0
    fingerprint_bits: int = 0


class PermVector:
    """Packed sequence of offsets, each optionally tagged with fingerprint bits."""

    def __init__(self, fingerprinter: Fingerprinter | None = None) -> None:
        self.fingerprinter = fingerprinter if fingerprinter is not None else Fingerprinter(0)
        self._size = 0
        self._data = b""
        self._offsets_reader = BitPackedReader()
        self._fingerprint_reader = BitPackedReader()

    def build(self, offsets: Sequence[int], keys: Sequence[int] | None = None) -> None:
        """Pack ``offsets``; ``keys`` supply the fingerprints, one per offset."""
        offsets = list(offsets)
        with_fingerprints = self.fingerprinter.size > 0
        if with_fingerprints:
            if keys is None:
                raise ValueError("keys are required to compute fingerprint bits")
            keys = list(keys)
            if len(keys) != len(offsets):
                raise ValueError("keys and offsets must have the same length")

        buffer = ByteBuffer()
        offsets_width = max_bit_width(offsets)
        store_bit_packed(offsets, offsets_width, buffer)

        fingerprint_width = 0
        fingerprint_pos = 0
        if with_fingerprints:
            prints = [self.fingerprinter.fingerprint(k) for k in keys]
            fingerprint_width = max_bit_width(prints)
            fingerprint_pos = buffer.pos
            store_bit_packed(prints, fingerprint_width, buffer)

        put_slop_bytes(buffer)

        self._size = len(offsets)
        self._data = buffer.getvalue()
        self._offsets_reader = BitPackedReader(offsets_width, self._data, 0)
        if with_fingerprints:
            self._fingerprint_reader = BitPackedReader(
                fingerprint_width, self._data, fingerprint_pos
            )
        else:
            self._fingerprint_reader = BitPackedReader()

    def __getitem__(self, index: int) -> PermValue:
        if not 0 <= index < self._size:
            raise IndexError(f"index {index} out of range for size {self._size}")
        fingerprint_bits = (
            self._fingerprint_reader.get(index) if self.fingerprinter.size > 0 else 0
        )
        return PermValue(self._offsets_reader.get(index), fingerprint_bits)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[PermValue]:
        for i in range(self._size):
            yield self[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PermVector):
            return NotImplemented
        return self._data == other._data and self._size == other._size

    __hash__ = None

    def test(self, key: int, value: PermValue) -> bool:
        """Whether ``key`` matches the fingerprint bits stored in ``value``."""
        return self.fingerprinter.test(key, value.fingerprint_bits)

    def byte_size(self) -> int:
        """Total memory occupied in bytes."""
        return _HEADER_BYTES + len(self._data)