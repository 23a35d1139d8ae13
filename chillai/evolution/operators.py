"""
Mutation and crossover operators.

Both operators allocate a fresh :class:`Genome` and leave their inputs
untouched.  Mutation follows a copy-then-maybe-perturb policy: every value is
copied from the parent and only values selected by the per-parameter coin flip
receive a uniform offset in ``[-learning_rate, learning_rate)``.
"""

from __future__ import annotations

import numpy as np

from chillai.exceptions import ShapeMismatchError

from .genome import Genome


def _perturb(values: np.ndarray, mutation_rate: float, learning_rate: float, rng: np.random.Generator) -> np.ndarray:
    selected = rng.random(values.shape) < mutation_rate
    offsets = rng.uniform(-learning_rate, learning_rate, size=values.shape)
    return np.where(selected, values + offsets, values).astype(np.float32)


def mutate(
    genome: Genome,
    mutation_rate: float,
    learning_rate: float,
    rng: np.random.Generator,
) -> Genome:
    """
    Return a mutated copy of ``genome``.

    Each weight and bias of layers 1..N-1 is perturbed independently with
    probability ``mutation_rate``. A rate of 0 reproduces the parent exactly and
    a rate of 1 perturbs every parameter by at most ``learning_rate``.
    """

    weights = [genome.weights[0].copy()]
    biases = [genome.biases[0].copy()]
    for layer in range(1, genome.layer_count):
        biases.append(_perturb(genome.biases[layer], mutation_rate, learning_rate, rng))
        weights.append(_perturb(genome.weights[layer], mutation_rate, learning_rate, rng))
    return Genome(weights=weights, biases=biases)


def crossover(parent_a: Genome, parent_b: Genome) -> Genome:
    """Average two parents elementwise into a new child genome."""

    if parent_a.shapes != parent_b.shapes or parent_a.layer_count != parent_b.layer_count:
        raise ShapeMismatchError(
            "Cannot cross over genomes with different shapes.",
            context={"parent_a": parent_a.shapes, "parent_b": parent_b.shapes},
        )
    weights = [np.zeros((0, 0), dtype=np.float32)]
    biases = [np.zeros(0, dtype=np.float32)]
    for layer in range(1, parent_a.layer_count):
        weights.append(((parent_a.weights[layer] + parent_b.weights[layer]) / 2).astype(np.float32))
        biases.append(((parent_a.biases[layer] + parent_b.biases[layer]) / 2).astype(np.float32))
    return Genome(weights=weights, biases=biases)


__all__ = ["mutate", "crossover"]
