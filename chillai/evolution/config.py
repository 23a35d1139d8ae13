"""
Typed training configuration consumed by the evolution engine.

`EngineConfig` is the flat view of the ``network``, ``training``,
``persistence``, ``agent`` and ``simulation`` configuration sections.  Use
:meth:`EngineConfig.from_mapping` on the dictionary produced by
:class:`chillai.utils.ConfigLoader`, then :meth:`EngineConfig.validate` to run
the start-of-run checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from chillai.exceptions import ChillAIConfigError

from .population import SelectionStrategy
from .topology import Topology, validate as validate_topology

INPUT_ERROR_POLICIES = ("skip", "abort")


@dataclass
class Pose:
    """Start position and rotation (Euler angles) agents are reset to."""

    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class EngineConfig:
    """Hyperparameters and options for one training run."""

    layer_sizes: List[int] = field(default_factory=lambda: [2, 4, 2])
    activations: List[str] = field(default_factory=lambda: ["input", "tanh", "tanh"])
    output_activations: Optional[List[str]] = None
    weight_init_range: Tuple[float, float] = (-1.0, 1.0)
    bias_init_range: Tuple[float, float] = (-1.0, 1.0)

    selection_strategy: str = "top_half"
    time_per_generation: float = 10.0
    population_size: int = 20
    generations: int = 10
    mutation_rate: float = 0.1
    learning_rate: float = 0.5
    higher_fitness_is_better: bool = True
    seed: Optional[int] = None
    on_input_error: str = "skip"

    save_on_completion: bool = False
    load_on_start: bool = False
    save_name: str = ""
    save_directory: str = "networks"

    start_pose: Pose = field(default_factory=Pose)
    delta_time: float = 0.02

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from the sectioned dictionary used by the YAML files."""

        network = dict(config.get("network") or {})
        training = dict(config.get("training") or {})
        persistence = dict(config.get("persistence") or {})
        agent = dict(config.get("agent") or {})
        simulation = dict(config.get("simulation") or {})
        defaults = cls()

        def pair(value: Any, fallback: Tuple[float, float]) -> Tuple[float, float]:
            if value is None:
                return fallback
            values = list(value)
            if len(values) != 2:
                raise ChillAIConfigError("Init ranges must contain exactly two numbers.", context={"value": values})
            return (float(values[0]), float(values[1]))

        def triple(value: Any) -> Tuple[float, float, float]:
            values = list(value or (0.0, 0.0, 0.0))
            if len(values) != 3:
                raise ChillAIConfigError("Start poses need three components.", context={"value": values})
            return (float(values[0]), float(values[1]), float(values[2]))

        output_activations = network.get("output_activations")
        return cls(
            layer_sizes=list(network.get("layer_sizes", defaults.layer_sizes)),
            activations=[str(tag) for tag in network.get("activations", defaults.activations)],
            output_activations=[str(tag) for tag in output_activations] if output_activations else None,
            weight_init_range=pair(network.get("weight_init_range"), defaults.weight_init_range),
            bias_init_range=pair(network.get("bias_init_range"), defaults.bias_init_range),
            selection_strategy=str(training.get("selection_strategy", defaults.selection_strategy)),
            time_per_generation=float(training.get("time_per_generation", defaults.time_per_generation)),
            population_size=int(training.get("population_size", defaults.population_size)),
            generations=int(training.get("generations", defaults.generations)),
            mutation_rate=float(training.get("mutation_rate", defaults.mutation_rate)),
            learning_rate=float(training.get("learning_rate", defaults.learning_rate)),
            higher_fitness_is_better=bool(training.get("higher_fitness_is_better", defaults.higher_fitness_is_better)),
            seed=training.get("seed"),
            on_input_error=str(training.get("on_input_error", defaults.on_input_error)).lower(),
            save_on_completion=bool(persistence.get("save_on_completion", defaults.save_on_completion)),
            load_on_start=bool(persistence.get("load_on_start", defaults.load_on_start)),
            save_name=str(persistence.get("save_name") or ""),
            save_directory=str(persistence.get("directory") or defaults.save_directory),
            start_pose=Pose(
                position=triple(agent.get("start_position")),
                rotation=triple(agent.get("start_rotation")),
            ),
            delta_time=float(simulation.get("delta_time", defaults.delta_time)),
        )

    def validate(self) -> Topology:
        """
        Run every start-of-run check and return the validated topology.

        The topology is checked first, then the training settings in the
        order a user is most likely to get them wrong.  The first failure is
        raised as :class:`ChillAIConfigError`.
        """

        topology = validate_topology(self.layer_sizes, self.activations, self.output_activations)
        strategy = SelectionStrategy.parse(self.selection_strategy)

        checks = [
            (self.population_size < 1, "Number of networks must be at least 1!"),
            (self.generations < 1, "Number of gens was below 1!"),
            (self.learning_rate < 0, "Learning rate is negative!"),
            (self.time_per_generation < 0, "Negative time given for each generation!"),
            (
                self.save_on_completion and not self.save_name.strip(),
                "Save is enabled but there isn't a save name entered!",
            ),
            (
                self.load_on_start and not self.save_name.strip(),
                "Load is enabled but there isn't a save name entered!",
            ),
            (self.mutation_rate < 0, "Mutation rate is negative!"),
            (
                strategy is SelectionStrategy.TOP_TWO and self.population_size < 3,
                "TopTwo mutation type was chosen but there are less than 3 networks!",
            ),
            (
                self.on_input_error not in INPUT_ERROR_POLICIES,
                f"on_input_error must be one of {list(INPUT_ERROR_POLICIES)}.",
            ),
        ]
        for failed, message in checks:
            if failed:
                raise ChillAIConfigError(message, context=self.summary())
        return topology

    def summary(self) -> Dict[str, Any]:
        return {
            "layer_sizes": list(self.layer_sizes),
            "selection_strategy": self.selection_strategy,
            "population_size": self.population_size,
            "generations": self.generations,
            "mutation_rate": self.mutation_rate,
            "learning_rate": self.learning_rate,
            "time_per_generation": self.time_per_generation,
        }


__all__ = ["EngineConfig", "Pose", "INPUT_ERROR_POLICIES"]
