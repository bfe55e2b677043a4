import random
from collections import Counter

import pytest

from lsindex.probing_set import (
    ProbingDistribution,
    distribution_name,
    generate_probing_set,
)


def test_names():
    assert distribution_name(ProbingDistribution.UNIFORM) == "uniform"
    assert distribution_name(ProbingDistribution.EXPONENTIAL) == "exponential"
    assert distribution_name(7) == "unnamed"


@pytest.mark.parametrize("distribution", list(ProbingDistribution))
def test_empty_dataset(distribution):
    assert generate_probing_set([], distribution) == []


@pytest.mark.parametrize("distribution", list(ProbingDistribution))
def test_probes_come_from_dataset(distribution):
    dataset = list(range(100, 400))
    probes = generate_probing_set(dataset, distribution, random.Random(1))
    assert len(probes) == len(dataset)
    assert set(probes) <= set(dataset)


@pytest.mark.parametrize("distribution", list(ProbingDistribution))
def test_seeded_generation_is_reproducible(distribution):
    dataset = list(range(50))
    first = generate_probing_set(dataset, distribution, random.Random(9))
    second = generate_probing_set(dataset, distribution, random.Random(9))
    assert first == second


def test_input_is_not_modified():
    dataset = list(range(20))
    generate_probing_set(dataset, ProbingDistribution.EXPONENTIAL, random.Random(2))
    assert dataset == list(range(20))


def test_exponential_is_skewed():
    dataset = list(range(1000))
    probes = generate_probing_set(dataset, ProbingDistribution.EXPONENTIAL, random.Random(3))
    uniform = generate_probing_set(dataset, ProbingDistribution.UNIFORM, random.Random(3))
    assert len(Counter(probes)) < len(Counter(uniform))


def test_accepts_integer_distribution():
    dataset = [5, 6, 7]
    probes = generate_probing_set(dataset, 0, random.Random(4))
    assert set(probes) <= set(dataset)


def test_invalid_distribution():
    with pytest.raises(ValueError):
        generate_probing_set([1, 2], 5)