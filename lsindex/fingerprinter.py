"""Short hash fingerprints of 64-bit keys."""

from __future__ import annotations

from dataclasses import dataclass, field

_MASK64 = (1 << 64) - 1
MAX_FINGERPRINT_BITS = 63


def murmur_finalizer(value: int) -> int:
    """Mix all bits of an unsigned 64-bit value (the murmur3 finalizer)."""
    if not 0 <= value <= _MASK64:
        raise ValueError(f"{value} does not fit in 64 unsigned bits")
    k = value
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK64
    k ^= k >> 33
    return k


@dataclass(frozen=True)
class Fingerprinter:
    """Derives ``size`` fingerprint bits from a key's hash."""

    size: int = 0
    _mask: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.size <= MAX_FINGERPRINT_BITS:
            raise ValueError(
                "a maximum of 63 fingerprint bits is supported, "
                f"got {self.size}"
            )
        object.__setattr__(self, "_mask", (1 << self.size) - 1)

    def fingerprint(self, value: int) -> int:
        """Return the fingerprint bits of ``value``."""
        return murmur_finalizer(value) & self._mask

    def test(self, value: int, fingerprint: int) -> bool:
        """Whether ``fingerprint`` matches the fingerprint of ``value``."""
        return fingerprint == self.fingerprint(value)