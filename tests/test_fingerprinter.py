import random

import pytest

from lsindex.fingerprinter import Fingerprinter, murmur_finalizer


def test_murmur_finalizer_of_zero_is_zero():
    assert murmur_finalizer(0) == 0


def test_murmur_finalizer_stays_in_64_bits():
    rng = random.Random(7)
    for _ in range(200):
        value = rng.randrange(1 << 64)
        assert 0 <= murmur_finalizer(value) < (1 << 64)


def test_murmur_finalizer_has_no_collisions_on_small_range():
    hashes = {murmur_finalizer(v) for v in range(5000)}
    assert len(hashes) == 5000


def test_murmur_finalizer_rejects_out_of_range():
    with pytest.raises(ValueError):
        murmur_finalizer(-1)
    with pytest.raises(ValueError):
        murmur_finalizer(1 << 64)


@pytest.mark.parametrize("size", [1, 4, 8, 16, 63])
def test_fingerprint_fits_size(size):
    fp = Fingerprinter(size)
    for value in range(0, 100000, 37):
        assert 0 <= fp.fingerprint(value) < (1 << size)


def test_fingerprint_is_low_bits_of_hash():
    fp = Fingerprinter(8)
    for value in range(1000):
        assert fp.fingerprint(value) == murmur_finalizer(value) & 0xFF


def test_zero_size_fingerprint_is_always_zero():
    fp = Fingerprinter(0)
    assert {fp.fingerprint(v) for v in range(1000)} == {0}
    assert fp.test(123, 0)


def test_fingerprint_test_round_trip():
    fp = Fingerprinter(16)
    for value in range(500):
        assert fp.test(value, fp.fingerprint(value))
        assert not fp.test(value, fp.fingerprint(value) ^ 1)


def test_wider_fingerprint_extends_narrower():
    narrow, wide = Fingerprinter(4), Fingerprinter(12)
    for value in range(300):
        assert wide.fingerprint(value) & 0xF == narrow.fingerprint(value)


@pytest.mark.parametrize("size", [-1, 64, 100])
def test_invalid_size_raises(size):
    with pytest.raises(ValueError):
        Fingerprinter(size)