"""Loading and generating benchmark datasets of unsigned 64-bit keys."""

from __future__ import annotations

import logging
import math
import random
import struct
from enum import IntEnum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_UINT64_MAX = (1 << 64) - 1
_HEADER_BYTES = 8


class DatasetId(IntEnum):
    SEQUENTIAL = 0
    GAPPED_10 = 1
    UNIFORM = 2
    FB = 3
    OSM = 4
    WIKI = 5
    NORMAL = 6
    BOOKS = 7


_NAMES = {
    DatasetId.SEQUENTIAL: "seq",
    DatasetId.GAPPED_10: "gap_10",
    DatasetId.UNIFORM: "uniform",
    DatasetId.NORMAL: "normal",
    DatasetId.FB: "fb",
    DatasetId.OSM: "osm",
    DatasetId.WIKI: "wiki",
    DatasetId.BOOKS: "books",
}

_FILES = {
    DatasetId.FB: "fb_200M_uint64",
    DatasetId.OSM: "osm_cellids_200M_uint64",
    DatasetId.WIKI: "wiki_ts_200M_uint64",
    DatasetId.BOOKS: "books_200M_uint64",
}


def dataset_name(dataset_id) -> str:
    """Short name of a dataset, "unnamed" for unknown ids."""
    try:
        return _NAMES[DatasetId(dataset_id)]
    except ValueError:
        return "unnamed"


def load(filepath, key_size: int = 8) -> list[int]:
    """Read a dataset file and return its values sorted.

    The file holds a little-endian 64-bit element count followed by the
    elements, each ``key_size`` bytes. Room in the file beyond the counted
    elements shows up as zeros. A missing file yields an empty list.
    """
    path = Path(filepath)
    logger.info("loading dataset %s", path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.error("file '%s' does not exist", path)
        return []

    if key_size not in (4, 8):
        raise ValueError(f"unimplemented amount of bytes per value in dataset: {key_size}")
    if len(raw) < _HEADER_BYTES:
        raise ValueError(f"Failed to read dataset '{path}'")

    max_num_elements = (len(raw) - _HEADER_BYTES) // key_size
    num_elements = int.from_bytes(raw[:_HEADER_BYTES], "little")
    if num_elements > max_num_elements:
        raise ValueError(
            f"dataset '{path}' claims {num_elements} elements but holds at most {max_num_elements}"
        )
    code = "Q" if key_size == 8 else "I"
    values = list(struct.unpack_from(f"<{num_elements}{code}", raw, _HEADER_BYTES))
    values.extend([0] * (max_num_elements - num_elements))
    values.sort()
    return values


class DatasetCache:
    """Generates or samples datasets, caching them per id and size."""

    def __init__(self, data_dir="data", rng: Optional[random.Random] = None) -> None:
        self.data_dir = Path(data_dir)
        self.rng = rng if rng is not None else random.Random()
        self._datasets: dict[tuple[DatasetId, int], list[int]] = {}
        self._files: dict[DatasetId, list[int]] = {}

    def load(self, dataset_id, dataset_size: int) -> list[int]:
        """Return a sorted dataset of ``dataset_size`` keys, or [] if its file is missing."""
        dataset_id = DatasetId(dataset_id)
        if dataset_size < 0:
            raise ValueError("dataset size must not be negative")
        cached = self._datasets.get((dataset_id, dataset_size))
        if cached is not None:
            return list(cached)

        ds = self._generate(dataset_id, dataset_size)
        if ds is None:
            return []

        # The maximum value is reserved as a sentinel.
        ds = [_UINT64_MAX - 1 if key == _UINT64_MAX else key for key in ds]
        ds.sort()
        self._datasets[(dataset_id, dataset_size)] = ds
        return list(ds)

    def _generate(self, dataset_id: DatasetId, size: int) -> Optional[list[int]]:
        rng = self.rng
        if dataset_id is DatasetId.SEQUENTIAL:
            return [i + 20000 for i in range(size)]
        if dataset_id is DatasetId.GAPPED_10:
            ds = []
            num = 0
            for _ in range(size):
                num += 1
                while rng.randint(0, 99999) < 10000:
                    num += 1
                ds.append(num)
            return ds
        if dataset_id is DatasetId.UNIFORM:
            return [rng.randint(0, (1 << 50) - 1) for _ in range(size)]
        if dataset_id is DatasetId.NORMAL:
            mean, std_dev = 100.0, 20.0
            low, high = mean - 3 * std_dev, mean + 3 * std_dev
            ds = []
            for _ in range(size):
                value = max(low, min(high, rng.gauss(mean, std_dev)))
                ds.append(math.floor((value - low) * 2.0**50))
            return ds
        return self._sample_file(dataset_id, size)

    def _sample_file(self, dataset_id: DatasetId, size: int) -> Optional[list[int]]:
        source = self._files.get(dataset_id)
        if not source:
            source = load(self.data_dir / _FILES[dataset_id])
            self.rng.shuffle(source)
            self._files[dataset_id] = source
        if not source:
            return None
        # Sampling a prefix is valid because the source is shuffled.
        sample = source[:size]
        return sample + [0] * (size - len(sample))