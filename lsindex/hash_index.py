"""Hash table secondary index supporting equality lookups only."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from math import ceil
from typing import Optional

_MAX_LOAD_FACTOR = 0.5
_ENTRY_BYTES = 16


def _next_power_of_two(value: int) -> int:
    return 1 << (value - 1).bit_length() if value > 1 else 1


class RobinHash:
    """Maps each key to the offset of its first occurrence in the data."""

    def __init__(self, data: Optional[Iterable[int]] = None) -> None:
        self._map: dict[int, int] = {}
        self._bucket_count = 0
        if data is not None:
            self.fit(data)

    def _reserve(self, count: int) -> None:
        needed = ceil(count / _MAX_LOAD_FACTOR)
        if needed > self._bucket_count:
            self._bucket_count = _next_power_of_two(needed)

    def fit(self, data: Sequence[int]) -> None:
        """Insert every key of ``data``; existing keys keep their offset."""
        data = list(data)
        self._reserve(4 * len(data) // 3)
        for offset, key in enumerate(data):
            self._map.setdefault(key, offset)
        while len(self._map) > self._bucket_count * _MAX_LOAD_FACTOR:
            self._bucket_count = max(1, self._bucket_count * 2)

    def lookup(self, data: Sequence[int], key: int, lowerbound: bool = False) -> Optional[int]:
        """Offset of ``key`` in the data, or None if absent."""
        if lowerbound:
            raise ValueError("hash only supports equality lookups")
        return self._map.get(key)

    def __iter__(self) -> Iterator[int]:
        """Yield the stored offsets."""
        return iter(list(self._map.values()))

    def __len__(self) -> int:
        return len(self._map)

    def model_byte_size(self) -> int:
        return self._bucket_count * _ENTRY_BYTES

    def perm_vector_byte_size(self) -> int:
        return 0

    def byte_size(self) -> int:
        return self.perm_vector_byte_size() + self.model_byte_size()

    def name(self) -> str:
        return "RobinHash"