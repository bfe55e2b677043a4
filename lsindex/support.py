"""Search and bit manipulation helpers."""

from __future__ import annotations

from bisect import bisect_left


def lower_bound(first: int, last: int, value, dataset) -> int:
    """Return the first index in ``[first, last)`` whose element is not less than ``value``.

    ``dataset`` only needs to support indexing and must be sorted in that range.
    """
    if last < first:
        raise ValueError("last must not be smaller than first")
    return bisect_left(dataset, value, first, last)


def _check(x: int, width: int) -> None:
    if width <= 0:
        raise ValueError("width must be positive")
    if not 0 <= x < (1 << width):
        raise ValueError(f"{x} does not fit in {width} unsigned bits")


def ffs(x: int, width: int = 64) -> int:
    """One-based position of the least significant set bit, 0 if none."""
    _check(x, width)
    return (x & -x).bit_length()


def ctz(x: int, width: int = 64) -> int:
    """Number of trailing zero bits; ``width`` for zero."""
    _check(x, width)
    if x == 0:
        return width
    return (x & -x).bit_length() - 1


def clz(x: int, width: int = 64) -> int:
    """Number of leading zero bits within ``width``; ``width`` for zero."""
    _check(x, width)
    return width - x.bit_length()


def bitreverse(x: int, width: int = 64) -> int:
    """Reverse the order of the lowest ``width`` bits."""
    _check(x, width)
    return int(format(x, f"0{width}b")[::-1], 2)