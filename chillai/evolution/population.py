"""
Population management utilities for ChillAI training runs.

The `PopulationManager` owns a fixed number of slots.  Each slot pairs a
genome with the fitness and liveness reported by the agent bound to it.  At a
generation boundary the slots are ranked and the configured reproduction
strategy rewrites the genomes of the weaker slots.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from chillai.exceptions import ChillAIConfigError

from .genome import Genome
from .operators import crossover, mutate


class SelectionStrategy(str, Enum):
    """How the next generation is derived from the ranked population."""

    TOP_HALF = "top_half"
    TOP_TWO = "top_two"
    TOP = "top"

    @classmethod
    def parse(cls, value: "str | SelectionStrategy") -> "SelectionStrategy":
        if isinstance(value, SelectionStrategy):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        normalized = {"tophalf": "top_half", "toptwo": "top_two"}.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ChillAIConfigError(
                f"Unknown selection strategy '{value}'.",
                context={"options": [item.value for item in cls]},
            ) from exc


@dataclass
class Slot:
    """One member of the population."""

    genome: Genome
    fitness: float = 0.0
    alive: bool = True
    agent: Optional[object] = field(default=None, repr=False)


def _sort_key(higher_is_better: bool) -> Callable[[Slot], float]:
    worst = -math.inf if higher_is_better else math.inf

    def key(slot: Slot) -> float:
        value = float(slot.fitness)
        return worst if math.isnan(value) else value

    return key


@dataclass
class PopulationManager:
    """Container around the population slots with ranking and reproduction helpers."""

    mutation_rate: float
    learning_rate: float
    rng: np.random.Generator
    higher_fitness_is_better: bool = True
    slots: List[Slot] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.slots)

    @property
    def genomes(self) -> List[Genome]:
        return [slot.genome for slot in self.slots]

    @property
    def fitnesses(self) -> List[float]:
        return [slot.fitness for slot in self.slots]

    def seed(self, genomes: Sequence[Genome], agents: Optional[Sequence[object]] = None) -> None:
        """Populate the manager with one slot per genome, binding agents in order."""
        bound = list(agents) if agents is not None else [None] * len(genomes)
        self.slots = [Slot(genome=genome, agent=agent) for genome, agent in zip(genomes, bound)]

    def rank(self) -> float:
        """
        Order slots best first and return the best fitness.

        Python's sort is stable, so slots with equal fitness keep their relative
        order.  NaN fitness is always treated as the worst possible score.
        """

        self.slots.sort(key=_sort_key(self.higher_fitness_is_better), reverse=self.higher_fitness_is_better)
        return self.slots[0].fitness if self.slots else 0.0

    def top_k(self, k: int) -> List[Slot]:
        """Return the best performing slots (call :meth:`rank` first)."""
        return self.slots[:k]

    def _mutate(self, genome: Genome) -> Genome:
        return mutate(genome, self.mutation_rate, self.learning_rate, self.rng)

    def reproduce_top_half(self) -> None:
        """Overwrite the bottom half with mutated copies of the top half."""
        count = self.size
        cutoff = math.ceil(count / 2)
        for index in range(cutoff, count):
            self.slots[index].genome = self._mutate(self.slots[index - cutoff].genome)

    def reproduce_top_two(self) -> None:
        """Fill every slot after the top two with an independent mutation of their crossover child."""
        if self.size < 3:
            raise ChillAIConfigError(
                "TopTwo mutation type was chosen but there are less than 3 networks!",
                context={"population_size": self.size},
            )
        child = crossover(self.slots[0].genome, self.slots[1].genome)
        for index in range(2, self.size):
            self.slots[index].genome = self._mutate(child)

    def reproduce_top(self) -> None:
        """Clone the champion into every other slot, mutating each copy."""
        if not self.slots:
            return
        champion = self.slots[0].genome
        self.slots[0].genome = champion.copy()
        for index in range(1, self.size):
            self.slots[index].genome = self._mutate(champion)

    def reproduce(self, strategy: SelectionStrategy) -> None:
        handlers: Dict[SelectionStrategy, Callable[[], None]] = {
            SelectionStrategy.TOP_HALF: self.reproduce_top_half,
            SelectionStrategy.TOP_TWO: self.reproduce_top_two,
            SelectionStrategy.TOP: self.reproduce_top,
        }
        handlers[SelectionStrategy.parse(strategy)]()

    def reset(self) -> None:
        """Zero fitness and re-arm liveness for every slot."""
        for slot in self.slots:
            slot.fitness = 0.0
            slot.alive = True


__all__ = ["SelectionStrategy", "Slot", "PopulationManager"]
