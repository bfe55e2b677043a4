"""Growable byte buffer with little-endian primitive and varint coding."""

from __future__ import annotations

import struct

DEFAULT_CAPACITY = 32
VARINT32_MAX_BYTES = 5
VARINT64_MAX_BYTES = 10

_UINT32_LIMIT = 1 << 32
_UINT64_LIMIT = 1 << 64


def _struct_for(fmt: str) -> struct.Struct:
    if not fmt or fmt[0] in "<>!=@":
        raise ValueError(f"format {fmt!r} must be a bare struct code")
    return struct.Struct("<" + fmt)


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        low = value & 0x7F
        value >>= 7
        if value:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


class ByteBuffer:
    """A growable byte array with a write position.

    The capacity at least doubles whenever it has to grow. Bytes beyond
    ``pos`` are not meaningful.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._data = bytearray(capacity)
        self.pos = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytearray:
        """The underlying array; replaced when the buffer grows."""
        return self._data

    def ensure_capacity(self, required_capacity: int) -> None:
        """Grow to at least ``required_capacity`` bytes, at least doubling."""
        if required_capacity > len(self._data):
            new_capacity = max(2 * len(self._data), required_capacity)
            self._data.extend(bytes(new_capacity - len(self._data)))

    def release(self) -> bytes:
        """Return the written bytes and reset to an empty default buffer."""
        written = bytes(self._data[: self.pos])
        self._data = bytearray(DEFAULT_CAPACITY)
        self.pos = 0
        return written

    def getvalue(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._data[: self.pos])

    def _write(self, chunk: bytes) -> None:
        end = self.pos + len(chunk)
        self.ensure_capacity(end)
        self._data[self.pos:end] = chunk
        self.pos = end

    def put_primitive(self, value, fmt: str) -> None:
        """Append ``value`` packed little-endian with struct code ``fmt``."""
        try:
            chunk = _struct_for(fmt).pack(value)
        except struct.error as exc:
            raise ValueError(str(exc)) from exc
        self._write(chunk)

    def put_varint32(self, value: int) -> None:
        """Append an unsigned 32-bit integer in varint encoding."""
        if not 0 <= value < _UINT32_LIMIT:
            raise ValueError(f"{value} does not fit in 32 unsigned bits")
        self.ensure_capacity(self.pos + VARINT32_MAX_BYTES)
        self._write(_encode_varint(value))

    def put_varint64(self, value: int) -> None:
        """Append an unsigned 64-bit integer in varint encoding."""
        if not 0 <= value < _UINT64_LIMIT:
            raise ValueError(f"{value} does not fit in 64 unsigned bits")
        self.ensure_capacity(self.pos + VARINT64_MAX_BYTES)
        self._write(_encode_varint(value))

    def put_bytes(self, data: bytes) -> None:
        """Append raw bytes."""
        self._write(bytes(data))

    def put_string(self, data: bytes | str) -> None:
        """Append a varint length followed by the bytes (str is UTF-8 encoded)."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.put_varint64(len(data))
        self.put_bytes(data)


class ByteReader:
    """Reads values written by :class:`ByteBuffer`, advancing ``pos``."""

    def __init__(self, data, pos: int = 0) -> None:
        self._data = data
        self.pos = pos

    def get_primitive(self, fmt: str):
        """Read one little-endian value with struct code ``fmt``."""
        codec = _struct_for(fmt)
        if self.pos + codec.size > len(self._data):
            raise ValueError("not enough data for primitive")
        (value,) = codec.unpack_from(self._data, self.pos)
        self.pos += codec.size
        return value

    def _get_varint(self, max_bytes: int, limit: int) -> int:
        result = 0
        for i in range(max_bytes):
            if self.pos + i >= len(self._data):
                raise ValueError("truncated varint")
            byte = self._data[self.pos + i]
            result |= (byte & 0x7F) << (7 * i)
            if not byte & 0x80:
                self.pos += i + 1
                return result % limit
        raise ValueError("varint too long")

    def get_varint32(self) -> int:
        """Read a varint-encoded unsigned 32-bit integer."""
        return self._get_varint(VARINT32_MAX_BYTES, _UINT32_LIMIT)

    def get_varint64(self) -> int:
        """Read a varint-encoded unsigned 64-bit integer."""
        return self._get_varint(VARINT64_MAX_BYTES, _UINT64_LIMIT)

    def get_string(self) -> bytes:
        """Read bytes written by :meth:`ByteBuffer.put_string`."""
        length = self.get_varint64()
        end = self.pos + length
        if end > len(self._data):
            raise ValueError("not enough data for string")
        value = bytes(self._data[self.pos:end])
        self.pos = end
        return value