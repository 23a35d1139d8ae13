"""Tests for genome construction and persistence helpers."""

import numpy as np
import pytest

from chillai.evolution.genome import Genome
from chillai.evolution.topology import validate
from chillai.exceptions import RecordFormatError, ShapeMismatchError


@pytest.fixture()
def topology():
    return validate([2, 3, 1], ["input", "relu", "sigmoid"])


def test_zeros_matches_topology(topology) -> None:
    genome = Genome.zeros(topology)
    assert genome.fits(topology)
    assert genome.weights[0].shape == (0, 0)
    assert genome.biases[0].shape == (0,)
    assert genome.parameter_count() == 3 * 2 + 3 + 1 * 3 + 1


def test_random_init_respects_ranges(topology) -> None:
    rng = np.random.default_rng(7)
    genome = Genome.random_init(topology, (-0.5, 0.5), (2.0, 3.0), rng)
    assert genome.fits(topology)
    for layer in range(1, 3):
        assert genome.weights[layer].dtype == np.float32
        assert np.all(genome.weights[layer] >= -0.5) and np.all(genome.weights[layer] <= 0.5)
        assert np.all(genome.biases[layer] >= 2.0) and np.all(genome.biases[layer] <= 3.0)


def test_random_init_accepts_reversed_ranges(topology) -> None:
    genome = Genome.random_init(topology, (1.0, -1.0), (0.0, -0.25), np.random.default_rng(1))
    assert np.all(np.abs(genome.weights[1]) <= 1.0)
    assert np.all(genome.biases[1] <= 0.0) and np.all(genome.biases[1] >= -0.25)


def test_random_init_is_reproducible_with_seed(topology) -> None:
    first = Genome.random_init(topology, (-1, 1), (-1, 1), np.random.default_rng(42))
    second = Genome.random_init(topology, (-1, 1), (-1, 1), np.random.default_rng(42))
    assert first == second


def test_copy_is_independent(topology) -> None:
    genome = Genome.random_init(topology, (-1, 1), (-1, 1), np.random.default_rng(3))
    clone = genome.copy()
    clone.weights[1][0, 0] += 1.0
    assert clone != genome


def test_save_and_load_restore_identical_values(topology) -> None:
    genome = Genome.random_init(topology, (-1, 1), (-1, 1), np.random.default_rng(5))
    restored = Genome.load(genome.save(topology.input_size, topology.output_size), topology)
    assert restored == genome


def test_load_rejects_different_layer_count(topology) -> None:
    other = validate([2, 3, 3, 1], ["input", "relu", "relu", "sigmoid"])
    data = Genome.zeros(other).save(2, 1)
    with pytest.raises(ShapeMismatchError):
        Genome.load(data, topology)


def test_load_rejects_different_hidden_width(topology) -> None:
    other = validate([2, 4, 1], ["input", "relu", "sigmoid"])
    data = Genome.zeros(other).save(2, 1)
    with pytest.raises(ShapeMismatchError) as err:
        Genome.load(data, topology)
    assert "hidden" in str(err.value)


def test_load_rejects_corrupt_bytes(topology) -> None:
    with pytest.raises(RecordFormatError):
        Genome.load(b"not a network", topology)
