"""Scripted agents shared by the engine tests."""

from __future__ import annotations

from typing import Optional, Sequence

from chillai.agents.base import BaseAgent


class ScriptedAgent(BaseAgent):
    """Agent that always senses ``inputs`` and reports ``fitness``."""

    def __init__(self, fitness: float = 0.0, inputs: Sequence[float] = (0.0, 0.0), alive: bool = True) -> None:
        super().__init__()
        self.fitness = fitness
        self.inputs = list(inputs)
        self.start_alive = alive
        self.alive = alive
        self.ticks = 0
        self.resets = 0

    def sense_input(self) -> Sequence[float]:
        return self.inputs

    def act(self) -> None:
        self.ticks += 1

    def compute_fitness(self) -> float:
        return self.fitness

    def reset_to_start(self, pose) -> None:
        super().reset_to_start(pose)
        self.alive = self.start_alive
        self.resets += 1


def scripted_agents(fitnesses: Sequence[float], inputs: Optional[Sequence[float]] = None) -> list:
    return [ScriptedAgent(fitness=value, inputs=inputs or (0.5, -0.5)) for value in fitnesses]
