"""Query workloads drawn from a dataset."""

from __future__ import annotations

import random
from collections.abc import Sequence
from enum import IntEnum
from typing import Optional


class ProbingDistribution(IntEnum):
    # every key has the same probability to be queried
    UNIFORM = 0
    # some keys are far more likely to be queried than others
    EXPONENTIAL = 1


_NAMES = {
    ProbingDistribution.UNIFORM: "uniform",
    ProbingDistribution.EXPONENTIAL: "exponential",
}


def distribution_name(distribution) -> str:
    """Short name of a probing distribution, "unnamed" for unknown ones."""
    try:
        return _NAMES[ProbingDistribution(distribution)]
    except ValueError:
        return "unnamed"


def generate_probing_set(
    dataset: Sequence, distribution, rng: Optional[random.Random] = None
) -> list:
    """Draw ``len(dataset)`` probes from ``dataset`` following ``distribution``."""
    distribution = ProbingDistribution(distribution)
    if not dataset:
        return []
    rng = rng if rng is not None else random.Random()
    size = len(dataset)

    if distribution is ProbingDistribution.UNIFORM:
        return [dataset[rng.randint(0, size - 1)] for _ in range(size)]

    # Shuffle so that sorted input does not always favour the lowest keys.
    shuffled = list(dataset)
    rng.shuffle(shuffled)
    return [
        shuffled[int((size - 1) * min(1.0, rng.expovariate(10)))]
        for _ in range(size)
    ]