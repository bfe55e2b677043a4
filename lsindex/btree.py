"""B-tree style secondary index keeping (key, offset) pairs in key order."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator, Sequence
from itertools import chain
from math import ceil
from operator import itemgetter
from typing import Optional

_KEY_BYTES = 8
_POINTER_BYTES = 8
_PAIR_BYTES = 16
# Slot counts of a tree node holding 8-byte keys and 8-byte offsets.
_LEAF_SLOTS = 16
_INNER_SLOTS = 16


class BTree:
    """Secondary index mapping keys of unsorted data to their offsets.

    Entries are kept sorted by key. When filled by insertion, a key that is
    already present is placed in front of its earlier duplicates; a bulk load
    keeps duplicates in offset order and requires an empty tree.
    """

    def __init__(self, data: Optional[Iterable[int]] = None, bulk_load: bool = False) -> None:
        self.bulk_load = bulk_load
        self._keys: list[int] = []
        self._offsets: list[int] = []
        if data is not None:
            self.fit(data)

    def fit(self, data: Iterable[int]) -> None:
        """Add every key of ``data`` together with its offset."""
        entries = [(key, offset) for offset, key in enumerate(data)]
        if self.bulk_load:
            if self._keys:
                raise ValueError("bulk loading requires an empty tree")
            pairs = sorted(entries, key=itemgetter(0))
        else:
            # Each insertion lands before existing equal keys, so later
            # offsets of a key precede earlier ones.
            new = sorted(entries, key=lambda p: (p[0], -p[1]))
            pairs = sorted(chain(new, zip(self._keys, self._offsets)), key=itemgetter(0))
        self._keys = [key for key, _ in pairs]
        self._offsets = [offset for _, offset in pairs]

    def lookup(self, data: Sequence[int], key: int, lowerbound: bool = False) -> Optional[int]:
        """Position of the first entry whose key is not less than ``key``.

        ``data`` and ``lowerbound`` are accepted for a uniform index
        interface; the tree always answers with the lower bound. Returns None
        when every key is smaller.
        """
        position = bisect_left(self._keys, key)
        return position if position < len(self._keys) else None

    def offset(self, position: int) -> int:
        """Offset into the original data stored at ``position``."""
        return self._offsets[position]

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[int]:
        """Yield data offsets in key order."""
        return iter(list(self._offsets))

    def _node_counts(self) -> tuple[int, int]:
        leaves = ceil(len(self._keys) / _LEAF_SLOTS)
        inner = 0
        level = leaves
        while level > 1:
            level = ceil(level / (_INNER_SLOTS + 1))
            inner += level
        return leaves, inner

    def model_byte_size(self) -> int:
        """Bytes occupied by the inner nodes."""
        _, inner = self._node_counts()
        return (
            inner * _INNER_SLOTS * _KEY_BYTES
            + inner * (_INNER_SLOTS + 1) * _POINTER_BYTES
        )

    def perm_vector_byte_size(self) -> int:
        """Bytes occupied by the leaves holding (key, offset) pairs."""
        leaves, _ = self._node_counts()
        return leaves * _LEAF_SLOTS * _PAIR_BYTES + 2 * _POINTER_BYTES

    def byte_size(self) -> int:
        return self.model_byte_size() + self.perm_vector_byte_size()

    def name(self) -> str:
        return "BTree"