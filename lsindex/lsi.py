"""Learned secondary index over unsorted data."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator, Sequence

from .fingerprinter import Fingerprinter
from .permvector import PermVector

_MAX_ERROR_BYTES = 8


class _KnotSplineModel:
    """Piecewise linear CDF through every ``step``-th sorted key."""

    def __init__(self, step: int = 64) -> None:
        if step < 1:
            raise ValueError("step must be positive")
        self.step = step
        self._knot_keys: list = []
        self._knot_positions: list[int] = []

    def train(self, keys: Sequence) -> None:
        n = len(keys)
        positions = list(range(0, n, self.step))
        if n and positions[-1] != n - 1:
            positions.append(n - 1)
        self._knot_positions = positions
        self._knot_keys = [keys[p] for p in positions]

    def __call__(self, key) -> int:
        if not self._knot_keys:
            return 0
        j = bisect_right(self._knot_keys, key) - 1
        if j < 0:
            return 0
        if j >= len(self._knot_keys) - 1:
            return self._knot_positions[-1]
        k0, k1 = self._knot_keys[j], self._knot_keys[j + 1]
        p0, p1 = self._knot_positions[j], self._knot_positions[j + 1]
        if k1 == k0:
            return p0
        return p0 + int((key - k0) * (p1 - p0) // (k1 - k0))

    def byte_size(self) -> int:
        return 16 + 16 * len(self._knot_keys)

    def name(self) -> str:
        return f"KnotSpline<{self.step}>"


class LearnedSecondaryIndex:
    """Secondary index that predicts positions with a learned CDF model.

    The model must provide ``train(sorted_keys)``, be callable with a key to
    predict its position, and offer ``byte_size()`` and ``name()``.
    """

    def __init__(
        self,
        model=None,
        fingerprint_size: int = 0,
        force_linear_search: bool = False,
        data: Sequence | None = None,
    ) -> None:
        self.model = model if model is not None else _KnotSplineModel()
        self.fingerprint_size = fingerprint_size
        self.force_linear_search = force_linear_search
        self._perm_vector = PermVector(Fingerprinter(fingerprint_size))
        self.max_error = 0
        self.base_data_accesses = 0
        self.false_positive_accesses = 0
        if data is not None:
            self.fit(data)

    def fit(self, data: Sequence) -> None:
        """Build the permutation vector and train the model on ``data``."""
        pairs = sorted(((key, i) for i, key in enumerate(data)), key=lambda p: p[0])
        keys = [key for key, _ in pairs]
        offsets = [offset for _, offset in pairs]

        self._perm_vector.build(offsets, keys)
        self.model.train(keys)

        max_error = 0
        current_lower_bound = 0
        for j, key in enumerate(keys):
            if keys[current_lower_bound] != key:
                current_lower_bound = j
            max_error = max(max_error, abs(self._predict(key) - current_lower_bound))
        self.max_error = max_error

    def _predict(self, key) -> int:
        return max(0, int(self.model(key)))

    def lookup(self, data: Sequence, key, lowerbound: bool = False) -> int | None:
        """Find ``key`` in ``data``, which must match what was fitted.

        Returns a position in the index (use :meth:`offset` to map it into
        ``data``), or None when the key is absent (equality) or every key
        is smaller (lower bound).
        """
        n = len(self._perm_vector)
        if n == 0:
            return None

        pred = self._predict(key)
        start_i = pred - min(pred, self.max_error)
        stop_i = min(pred + self.max_error + 1, n)

        if self.force_linear_search or self.fingerprint_size > 0:
            ind = start_i
            while ind < stop_i:
                value = self._perm_vector[ind]
                if not lowerbound and not self._perm_vector.test(key, value):
                    ind += 1
                    continue
                self.base_data_accesses += 1
                if data[value.index] >= key:
                    break
                self.false_positive_accesses += 1
                ind += 1
        else:
            while start_i < stop_i:
                mid_i = start_i + (stop_i - start_i) // 2
                self.base_data_accesses += 1
                if data[self._perm_vector[mid_i].index] < key:
                    start_i = mid_i + 1
                else:
                    stop_i = mid_i
            ind = start_i

        if lowerbound:
            while ind < n and data[self.offset(ind)] < key:
                self.base_data_accesses += 1
                ind += 1
            return ind if ind < n else None

        if ind >= n or data[self.offset(ind)] != key:
            return None
        return ind

    def offset(self, position: int) -> int:
        """Offset into the original data stored at ``position``."""
        return self._perm_vector[position].index

    def __len__(self) -> int:
        return len(self._perm_vector)

    def __iter__(self) -> Iterator[int]:
        for value in self._perm_vector:
            yield value.index

    def model_byte_size(self) -> int:
        return self.model.byte_size()

    def perm_vector_byte_size(self) -> int:
        return self._perm_vector.byte_size()

    def byte_size(self) -> int:
        """Total index size in bytes."""
        return _MAX_ERROR_BYTES + self.model_byte_size() + self.perm_vector_byte_size()

    def name(self) -> str:
        return (
            f"LSI<{self.model.name()}, {self.fingerprint_size}, "
            f"{int(self.force_linear_search)}>"
        )