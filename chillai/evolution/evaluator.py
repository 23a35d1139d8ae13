"""
Forward pass for ChillAI feedforward networks.

Evaluation is a pure function of ``(genome, topology, inputs)``: no state is
kept between calls so identical arguments always give identical outputs.
"""

from __future__ import annotations

from typing import Callable, Dict, Sequence

import numpy as np

from chillai.exceptions import InputSizeMismatchError

from .genome import Genome
from .topology import ActivationTag, Topology


def sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


def tanh(x: np.ndarray) -> np.ndarray:
    return 2.0 / (1.0 + np.exp(-2.0 * x)) - 1.0


def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, x)


def binary_step(x: np.ndarray) -> np.ndarray:
    return np.where(x < 0, 0.0, 1.0)


def identity(x: np.ndarray) -> np.ndarray:
    return x


ACTIVATIONS: Dict[ActivationTag, Callable[[np.ndarray], np.ndarray]] = {
    ActivationTag.INPUT: identity,
    ActivationTag.SIGMOID: sigmoid,
    ActivationTag.TANH: tanh,
    ActivationTag.RELU: relu,
    ActivationTag.BINARY_STEP: binary_step,
    ActivationTag.OUTPUT: identity,
}


def activate(values: np.ndarray, tag: ActivationTag) -> np.ndarray:
    """Apply the activation named by ``tag`` elementwise, returning float32."""

    # exp() overflows to inf for large negative sums; the formulas still saturate correctly.
    with np.errstate(over="ignore"):
        return np.asarray(ACTIVATIONS[tag](values), dtype=np.float32)


def evaluate(genome: Genome, topology: Topology, inputs: Sequence[float]) -> np.ndarray:
    """
    Run ``inputs`` through the network and return the output layer activations.

    Raises :class:`InputSizeMismatchError` when the input length differs from
    the topology's input size. The vector is never truncated or padded.
    """

    values = np.asarray(inputs, dtype=np.float32).reshape(-1)
    if values.shape[0] != topology.input_size:
        raise InputSizeMismatchError(
            "Wrong size input given to the network!",
            context={"expected": topology.input_size, "received": int(values.shape[0])},
        )

    last = topology.network_size - 1
    for layer in range(1, topology.network_size):
        summed = genome.biases[layer] + genome.weights[layer] @ values
        if layer == last and topology.custom_output:
            values = np.array(
                [activate(summed[n : n + 1], tag)[0] for n, tag in enumerate(topology.output_activations)],
                dtype=np.float32,
            )
        else:
            values = activate(summed, topology.activations[layer])
    return values


__all__ = ["ACTIVATIONS", "activate", "evaluate", "sigmoid", "tanh", "relu", "binary_step"]
