"""
Parameter store for ChillAI networks.

A :class:`Genome` holds one float32 weight block and one bias vector per layer.
Layer 0 is the input layer and owns empty blocks because nothing feeds into
it.  Genomes are treated as values: the evolution operators always build new
arrays and never write into an existing genome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from chillai.exceptions import ShapeMismatchError

from .record import NetworkRecord, decode, encode
from .topology import Topology


def _ordered(bounds: Sequence[float]) -> Tuple[float, float]:
    low, high = float(bounds[0]), float(bounds[1])
    return (low, high) if low <= high else (high, low)


@dataclass(eq=False)
class Genome:
    """Weights ``[layer][neuron][prev_neuron]`` and biases ``[layer][neuron]``."""

    weights: List[np.ndarray]
    biases: List[np.ndarray]

    @property
    def layer_count(self) -> int:
        return len(self.biases)

    @property
    def shapes(self) -> List[Tuple[int, ...]]:
        return [block.shape for block in self.weights]

    @classmethod
    def zeros(cls, topology: Topology) -> "Genome":
        """Genome with every weight and bias set to zero."""
        return cls(
            weights=[np.zeros(topology.weight_shape(layer), dtype=np.float32) for layer in range(topology.network_size)],
            biases=[np.zeros(topology.bias_shape(layer), dtype=np.float32) for layer in range(topology.network_size)],
        )

    @classmethod
    def random_init(
        cls,
        topology: Topology,
        weight_range: Sequence[float],
        bias_range: Sequence[float],
        rng: np.random.Generator,
    ) -> "Genome":
        """
        Draw every weight and bias uniformly from its range.

        Ranges are unordered: ``(1.0, -1.0)`` samples the same interval as
        ``(-1.0, 1.0)``.  Draws happen layer by layer, weights before biases,
        so a seeded generator always reproduces the same genome.
        """

        w_low, w_high = _ordered(weight_range)
        b_low, b_high = _ordered(bias_range)
        weights = [np.zeros((0, 0), dtype=np.float32)]
        biases = [np.zeros(0, dtype=np.float32)]
        for layer in range(1, topology.network_size):
            weights.append(rng.uniform(w_low, w_high, size=topology.weight_shape(layer)).astype(np.float32))
            biases.append(rng.uniform(b_low, b_high, size=topology.bias_shape(layer)).astype(np.float32))
        return cls(weights=weights, biases=biases)

    def copy(self) -> "Genome":
        return Genome(
            weights=[block.copy() for block in self.weights],
            biases=[bias.copy() for bias in self.biases],
        )

    def fits(self, topology: Topology) -> bool:
        if self.layer_count != topology.network_size or len(self.weights) != topology.network_size:
            return False
        for layer in range(topology.network_size):
            if self.weights[layer].shape != topology.weight_shape(layer):
                return False
            if self.biases[layer].shape != topology.bias_shape(layer):
                return False
        return True

    def parameter_count(self) -> int:
        return int(sum(block.size for block in self.weights) + sum(bias.size for bias in self.biases))

    def save(self, input_size: int, output_size: int) -> bytes:
        """Serialise the genome into a persisted network record."""
        return encode(
            NetworkRecord(
                weights=self.weights,
                biases=self.biases,
                input_size=input_size,
                output_size=output_size,
            )
        )

    @classmethod
    def load(cls, data: bytes, topology: Topology) -> "Genome":
        """
        Decode a persisted record and check it against ``topology``.

        Raises :class:`ShapeMismatchError` when the record's layer count,
        declared input/output sizes or any layer shape disagree with the live
        topology.  Callers usually recover by falling back to random weights.
        """

        record = decode(data)
        context = {
            "record_layers": record.layer_count,
            "record_input": record.input_size,
            "record_output": record.output_size,
            "topology": list(topology.layer_sizes),
        }
        if (
            record.layer_count != topology.network_size
            or record.input_size != topology.input_size
            or record.output_size != topology.output_size
        ):
            raise ShapeMismatchError(
                "Loaded network has different input, output, or size than what is required!",
                context=context,
            )
        genome = cls(weights=list(record.weights), biases=list(record.biases))
        if not genome.fits(topology):
            raise ShapeMismatchError(
                "Loaded network hidden layers do not match the configured topology.",
                context={**context, "record_shapes": genome.shapes},
            )
        return genome

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        if self.layer_count != other.layer_count or len(self.weights) != len(other.weights):
            return False
        return all(
            np.array_equal(a, b) for a, b in zip(self.weights, other.weights)
        ) and all(np.array_equal(a, b) for a, b in zip(self.biases, other.biases))

    def __repr__(self) -> str:
        return f"Genome(layers={self.layer_count}, parameters={self.parameter_count()})"


__all__ = ["Genome"]
