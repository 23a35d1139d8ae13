"""
Network topology description and validation.

A topology is the ordered list of layer sizes together with one activation tag
per layer.  The first tag is always ``Input`` and carries no activation; the
last layer may use the ``Output`` tag, in which case every output neuron gets
its own activation from ``output_activations`` ("custom output" mode).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from chillai.exceptions import ChillAIConfigError


class ActivationTag(str, Enum):
    """Activation functions and structural markers a layer can carry."""

    INPUT = "input"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    RELU = "relu"
    BINARY_STEP = "binary_step"
    OUTPUT = "output"

    @classmethod
    def parse(cls, value: Union[str, "ActivationTag"]) -> "ActivationTag":
        """Accept enum members or loosely formatted names such as ``"Binary_Step"``."""

        if isinstance(value, ActivationTag):
            return value
        normalized = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        if normalized == "binarystep":
            normalized = "binary_step"
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ChillAIConfigError(
                f"Unknown activation function '{value}'.",
                context={"options": [tag.value for tag in cls]},
            ) from exc


TagLike = Union[str, ActivationTag]


@dataclass(frozen=True)
class Topology:
    """Validated network shape. Build instances with :func:`validate`."""

    layer_sizes: Tuple[int, ...]
    activations: Tuple[ActivationTag, ...]
    output_activations: Tuple[ActivationTag, ...] = ()

    @property
    def network_size(self) -> int:
        return len(self.layer_sizes)

    @property
    def input_size(self) -> int:
        return self.layer_sizes[0]

    @property
    def output_size(self) -> int:
        return self.layer_sizes[-1]

    @property
    def custom_output(self) -> bool:
        return self.activations[-1] is ActivationTag.OUTPUT

    def weight_shape(self, layer: int) -> Tuple[int, int]:
        """Shape of the incoming weight block for ``layer`` (empty for the input layer)."""
        if layer == 0:
            return (0, 0)
        return (self.layer_sizes[layer], self.layer_sizes[layer - 1])

    def bias_shape(self, layer: int) -> Tuple[int]:
        if layer == 0:
            return (0,)
        return (self.layer_sizes[layer],)

    def describe(self) -> str:
        layers = " -> ".join(
            f"{size}({tag.value})" for size, tag in zip(self.layer_sizes, self.activations)
        )
        if self.custom_output:
            layers += " [" + ", ".join(tag.value for tag in self.output_activations) + "]"
        return layers


def _input_layer_correct(tags: Sequence[ActivationTag]) -> bool:
    if tags[0] is not ActivationTag.INPUT:
        return False
    return ActivationTag.INPUT not in tags[1:]


def _output_layer_correct(tags: Sequence[ActivationTag]) -> bool:
    return ActivationTag.OUTPUT not in tags[:-1]


def validate(
    layer_sizes: Sequence[int],
    activations: Iterable[TagLike],
    output_activations: Optional[Iterable[TagLike]] = None,
) -> Topology:
    """
    Check a layer/activation configuration and return a :class:`Topology`.

    Checks run in a fixed order and the first failure is raised as a
    :class:`ChillAIConfigError`: layer count, activation count, input layer
    placement, output layer placement, custom output width and finally the
    layer sizes themselves.
    """

    sizes: List[int] = list(layer_sizes)
    if len(sizes) < 2:
        raise ChillAIConfigError(
            "Network size is too small! At least an input and an output layer are required.",
            context={"layer_sizes": sizes},
        )

    tags = [ActivationTag.parse(tag) for tag in activations]
    if len(tags) != len(sizes):
        raise ChillAIConfigError(
            "Network activation functions list is not the same size as the neural network!",
            context={"layers": len(sizes), "activations": len(tags)},
        )

    if not _input_layer_correct(tags):
        raise ChillAIConfigError(
            "Input layer was not set up correctly. Input must be the first activation only.",
            context={"activations": [tag.value for tag in tags]},
        )

    if not _output_layer_correct(tags):
        raise ChillAIConfigError(
            "Output layer is in an incorrect position! Only the last layer may use Output.",
            context={"activations": [tag.value for tag in tags]},
        )

    overrides: List[ActivationTag] = []
    if tags[-1] is ActivationTag.OUTPUT:
        overrides = [ActivationTag.parse(tag) for tag in (output_activations or [])]
        if len(overrides) != sizes[-1]:
            raise ChillAIConfigError(
                "Custom output does not fit output layer size.",
                context={"output_size": sizes[-1], "output_activations": len(overrides)},
            )
    elif output_activations:
        logger.warning("Output activations were given but the last layer is not 'output'; ignoring them.")

    for index, size in enumerate(sizes):
        if int(size) != size or size < 1:
            raise ChillAIConfigError(
                f"Layer {index} must have a positive number of neurons.",
                context={"layer": index, "size": size},
            )

    return Topology(
        layer_sizes=tuple(int(size) for size in sizes),
        activations=tuple(tags),
        output_activations=tuple(overrides),
    )


__all__ = ["ActivationTag", "Topology", "validate"]
