"""
Training engine driving a ChillAI population through its generations.

The engine is a small state machine::

    INITIALIZING -> EVALUATING -> RANKING -> REPRODUCING -> RESETTING
                        ^                                      |
                        +---------------- (more gens) ---------+--> FINISHED

The host owns the clock.  It calls :meth:`EvolutionEngine.tick` once per frame
while a generation is running and :meth:`EvolutionEngine.advance_generation`
when the generation is over, or simply :meth:`EvolutionEngine.step` which
decides between the two the same way a per-frame update callback would.  The
engine never spawns threads and must not be re-entered concurrently.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

import numpy as np
from loguru import logger

from chillai.exceptions import (
    ChillAIConfigError,
    ChillAIRuntimeError,
    InputSizeMismatchError,
    MissingSaveFileError,
    ShapeMismatchError,
)

from .config import EngineConfig
from .evaluator import evaluate
from .genome import Genome
from .persistence import NetworkStore
from .population import PopulationManager, SelectionStrategy

if TYPE_CHECKING:
    from chillai.agents.base import BaseAgent
    from chillai.utils.logger import ExperimentLogger


class EngineState(str, Enum):
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    RANKING = "ranking"
    REPRODUCING = "reproducing"
    RESETTING = "resetting"
    FINISHED = "finished"


@dataclass
class GenerationStats:
    """Summary of one finished generation."""

    generation: int
    best_fitness: float
    mean_fitness: float
    worst_fitness: float
    alive: int
    elapsed: float

    def as_metrics(self) -> Dict[str, float]:
        return {
            "best_fitness": self.best_fitness,
            "mean_fitness": self.mean_fitness,
            "worst_fitness": self.worst_fitness,
            "alive": float(self.alive),
        }

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


class EvolutionEngine:
    """Central coordinator for one ChillAI training run."""

    def __init__(
        self,
        config: EngineConfig,
        agents: Sequence["BaseAgent"],
        store: Optional[NetworkStore] = None,
        experiment_logger: Optional["ExperimentLogger"] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Validate ``config`` and prepare a run.

        Parameters
        ----------
        config : EngineConfig
            Topology and training settings. Invalid settings raise
            :class:`ChillAIConfigError` before anything else happens.
        agents : sequence of BaseAgent
            One agent per network; the count must equal ``population_size``.
        store : NetworkStore, optional
            Save slot storage. Defaults to ``config.save_directory``.
        experiment_logger : ExperimentLogger, optional
            Receives per-generation metrics and the saved network artefact.
        rng : numpy.random.Generator, optional
            Source of randomness. Defaults to a generator seeded with ``config.seed``.
        """

        self.config = config
        self.topology = config.validate()
        self.strategy = SelectionStrategy.parse(config.selection_strategy)
        self.agents = list(agents)
        if len(self.agents) != config.population_size:
            raise ChillAIConfigError(
                "Number of agents does not match the number of networks.",
                context={"agents": len(self.agents), "population_size": config.population_size},
            )
        self.store = store or NetworkStore(config.save_directory)
        self.experiment_logger = experiment_logger
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.population = PopulationManager(
            mutation_rate=config.mutation_rate,
            learning_rate=config.learning_rate,
            rng=self.rng,
            higher_fitness_is_better=config.higher_fitness_is_better,
        )
        self.state = EngineState.INITIALIZING
        self.generation = 0
        self.elapsed = 0.0
        self.best_fitness = 0.0
        self.history: List[GenerationStats] = []
        self.saved_path: Optional[Path] = None

    # ------------------------------------------------------------ Properties
    @property
    def finished(self) -> bool:
        return self.state is EngineState.FINISHED

    @property
    def best_genome(self) -> Genome:
        """Genome in slot 0: the previous generation's winner once ranked."""
        if not self.population.slots:
            raise ChillAIRuntimeError("The engine has not been started yet.")
        return self.population.slots[0].genome

    def all_dead(self) -> bool:
        return all(not slot.agent.is_alive() for slot in self.population.slots)

    def generation_over(self) -> bool:
        return self.elapsed >= self.config.time_per_generation or self.all_dead()

    def _require(self, state: EngineState) -> None:
        if self.state is not state:
            raise ChillAIRuntimeError(
                f"Engine is {self.state.value}, expected {state.value}.",
                context={"generation": self.generation},
            )

    # -------------------------------------------------------- Initialisation
    def start(self) -> None:
        """Create the initial genomes, bind agents and begin generation 1."""

        self._require(EngineState.INITIALIZING)
        logger.info("Initializing {} networks: {}", self.config.population_size, self.topology.describe())
        self.population.seed(self._initial_genomes(), self.agents)
        for agent in self.agents:
            agent.reset_to_start(self.config.start_pose)
        self.state = EngineState.EVALUATING
        logger.info("Starting training for generation 1")

    def _initial_genomes(self) -> List[Genome]:
        count = self.config.population_size
        if self.config.load_on_start:
            loaded = self._load_saved()
            if loaded is not None:
                return [loaded.copy() for _ in range(count)]
        return [
            Genome.random_init(
                self.topology,
                self.config.weight_init_range,
                self.config.bias_init_range,
                self.rng,
            )
            for _ in range(count)
        ]

    def _load_saved(self) -> Optional[Genome]:
        name = self.config.save_name
        try:
            genome = self.store.load(name, self.topology)
        except MissingSaveFileError:
            logger.info("No network named '{}' found to load. Using random weights and biases instead.", name)
            return None
        except ShapeMismatchError as exc:
            logger.warning("{} Using random weights and biases instead. Details: {}", exc, exc.context)
            return None
        logger.info("Network '{}' found and loaded.", name)
        return genome

    # ------------------------------------------------------------ Evaluation
    def tick(self, delta_time: float) -> None:
        """Run every live network once and advance the generation clock."""

        self._require(EngineState.EVALUATING)
        if delta_time < 0:
            raise ChillAIRuntimeError("delta_time cannot be negative.", context={"delta_time": delta_time})

        for index, slot in enumerate(self.population.slots):
            agent = slot.agent
            agent.check_failure()
            slot.alive = agent.is_alive()
            if not slot.alive:
                continue
            try:
                outputs = evaluate(slot.genome, self.topology, agent.sense_input())
            except InputSizeMismatchError as exc:
                if self.config.on_input_error == "abort":
                    logger.error("Agent {} produced an invalid input: {} {}", index, exc, exc.context)
                    raise
                logger.warning("Skipping agent {} this tick: {} {}", index, exc, exc.context)
                continue
            agent.apply_output(outputs)
            agent.act()
            slot.fitness = float(agent.compute_fitness())

        self.elapsed += delta_time

    # ---------------------------------------------------- Generation boundary
    def advance_generation(self) -> GenerationStats:
        """Rank, reproduce and reset; finishes the run after the last generation."""

        self._require(EngineState.EVALUATING)

        self.state = EngineState.RANKING
        self.best_fitness = self.population.rank()
        stats = self._summarise()

        self.state = EngineState.REPRODUCING
        self.population.reproduce(self.strategy)

        self.state = EngineState.RESETTING
        self.population.reset()
        for slot in self.population.slots:
            slot.agent.reset_to_start(self.config.start_pose)
        self.elapsed = 0.0
        self.generation += 1

        self.history.append(stats)
        logger.info("Best fitness of generation {}: {}", self.generation, self.best_fitness)
        if self.experiment_logger is not None:
            self.experiment_logger.log_metrics(stats.as_metrics(), step=self.generation)

        if self.generation >= self.config.generations:
            self._finish()
        else:
            self.state = EngineState.EVALUATING
            logger.info("Training generation {}...", self.generation + 1)
        return stats

    def step(self, delta_time: float) -> None:
        """Do whatever the current state calls for; a no-op once finished."""

        if self.state is EngineState.INITIALIZING:
            self.start()
        if self.finished:
            return
        if self.generation_over():
            self.advance_generation()
        else:
            self.tick(delta_time)

    def _summarise(self) -> GenerationStats:
        scores = [value for value in self.population.fitnesses if not math.isnan(value)]
        best = self.best_fitness
        if scores:
            mean = sum(scores) / len(scores)
            worst = min(scores) if self.config.higher_fitness_is_better else max(scores)
        else:
            logger.warning("Every network reported a NaN fitness in generation {}.", self.generation + 1)
            mean = worst = math.nan
        return GenerationStats(
            generation=self.generation + 1,
            best_fitness=best,
            mean_fitness=mean,
            worst_fitness=worst,
            alive=sum(1 for slot in self.population.slots if slot.agent.is_alive()),
            elapsed=self.elapsed,
        )

    def _finish(self) -> None:
        self.state = EngineState.FINISHED
        logger.info("Training finished after {} generations.", self.generation)
        if not self.config.save_on_completion:
            return
        logger.info("Saving the best network...")
        self.saved_path = self.store.save(
            self.config.save_name,
            self.best_genome,
            self.topology.input_size,
            self.topology.output_size,
        )
        if self.experiment_logger is not None:
            self.experiment_logger.log_artifact(self.saved_path)


__all__ = ["EngineState", "GenerationStats", "EvolutionEngine"]
