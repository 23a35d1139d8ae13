"""
Scheduler utilities orchestrating a headless ChillAI training run.

Inside a game or simulation the host calls the engine once per frame.  The
`EvolutionScheduler` plays that host role for batch runs: it advances the
engine with a fixed time step until training finishes and wraps the run in an
experiment logging context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

import pandas as pd

from chillai.exceptions import ChillAIConfigError
from chillai.utils.logger import ExperimentLogger

from .engine import EvolutionEngine, GenerationStats

if TYPE_CHECKING:
    from .genome import Genome


@dataclass
class SchedulerConfig:
    """Configuration for the fixed-step driver; invalid values fail on construction."""

    delta_time: float = 0.02
    run_name: str = "chillai-run"
    max_steps: Optional[int] = None

    def __post_init__(self) -> None:
        if self.delta_time <= 0:
            raise ChillAIConfigError(
                "simulation.delta_time must be positive.",
                context={"delta_time": self.delta_time},
            )
        if self.max_steps is not None and self.max_steps < 1:
            raise ChillAIConfigError(
                "simulation.max_steps must be at least 1 when set.",
                context={"max_steps": self.max_steps},
            )


@dataclass
class EvolutionScheduler:
    """Drive the engine from the first tick to the finished state."""

    engine: EvolutionEngine
    logger: ExperimentLogger
    config: SchedulerConfig = field(default_factory=SchedulerConfig)
    steps: int = 0

    def run(self) -> List[GenerationStats]:
        """Execute every configured generation and return the statistics history."""

        params = {key: str(value) for key, value in self.engine.config.summary().items()}
        with self.logger.start_run(self.config.run_name, params=params):
            while not self.engine.finished:
                if self.config.max_steps is not None and self.steps >= self.config.max_steps:
                    self.logger.log_message(
                        f"Stopping after {self.steps} steps before training finished "
                        f"(generation {self.engine.generation})."
                    )
                    break
                self.engine.step(self.config.delta_time)
                self.steps += 1
        return list(self.engine.history)

    @property
    def best_genome(self) -> "Genome":
        return self.engine.best_genome

    def history_frame(self) -> pd.DataFrame:
        """Return the per-generation statistics as a dataframe."""
        columns = ["generation", "best_fitness", "mean_fitness", "worst_fitness", "alive", "elapsed"]
        return pd.DataFrame([stats.as_dict() for stats in self.engine.history], columns=columns)


__all__ = ["SchedulerConfig", "EvolutionScheduler"]
