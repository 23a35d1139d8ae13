"""Tests for mutation and crossover."""

import numpy as np
import pytest

from chillai.evolution.genome import Genome
from chillai.evolution.operators import crossover, mutate
from chillai.evolution.topology import validate
from chillai.exceptions import ShapeMismatchError


@pytest.fixture()
def topology():
    return validate([3, 5, 2], ["input", "tanh", "sigmoid"])


@pytest.fixture()
def genome(topology):
    return Genome.random_init(topology, (-1, 1), (-1, 1), np.random.default_rng(11))


def test_zero_rate_mutation_is_an_exact_copy(genome) -> None:
    child = mutate(genome, 0.0, 0.5, np.random.default_rng(0))
    assert child == genome
    assert child.weights[1] is not genome.weights[1]


def test_full_rate_mutation_changes_everything_within_bounds(genome) -> None:
    before = genome.copy()
    child = mutate(genome, 1.0, 0.1, np.random.default_rng(0))
    assert genome == before
    for layer in range(1, genome.layer_count):
        delta_w = np.abs(child.weights[layer] - genome.weights[layer])
        delta_b = np.abs(child.biases[layer] - genome.biases[layer])
        assert np.all(delta_w <= 0.1 + 1e-6)
        assert np.all(delta_b <= 0.1 + 1e-6)
        assert np.any(delta_w > 0)
    assert child.weights[0].shape == (0, 0)


def test_partial_rate_leaves_unselected_values_untouched(genome) -> None:
    child = mutate(genome, 0.3, 0.5, np.random.default_rng(4))
    unchanged = np.concatenate(
        [(child.weights[layer] == genome.weights[layer]).ravel() for layer in range(1, genome.layer_count)]
    )
    assert unchanged.any()
    assert not unchanged.all()


def test_crossover_with_itself_is_identity(genome) -> None:
    assert crossover(genome, genome) == genome


def test_crossover_is_the_elementwise_mean(topology) -> None:
    a = Genome.zeros(topology)
    b = Genome.zeros(topology)
    b.weights[1][:] = 2.0
    b.biases[2][:] = -4.0
    child = crossover(a, b)
    assert np.allclose(child.weights[1], 1.0)
    assert np.allclose(child.biases[2], -2.0)
    assert child.weights[1].dtype == np.float32


def test_crossover_rejects_different_shapes(genome) -> None:
    other = Genome.zeros(validate([3, 4, 2], ["input", "tanh", "sigmoid"]))
    with pytest.raises(ShapeMismatchError):
        crossover(genome, other)
