"""Agent base class describing what the engine needs from an environment."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

import numpy as np

from chillai.evolution.config import Pose


class BaseAgent(ABC):
    """
    Base class for everything a ChillAI network can control.

    The engine never looks inside an agent.  Once per tick it calls
    :meth:`check_failure`, and for live agents :meth:`sense_input`,
    :meth:`apply_output`, :meth:`act` and :meth:`compute_fitness` in that
    order.  At every generation boundary the agent is put back at the start
    pose with :meth:`reset_to_start`.
    """

    def __init__(self, *, options: Optional[Dict[str, Any]] = None) -> None:
        self.options: Dict[str, Any] = dict(options or {})
        self.alive = True
        self.outputs: np.ndarray = np.zeros(0, dtype=np.float32)

    # ---------------------------------------------------------------- Liveness
    def is_alive(self) -> bool:
        return self.alive

    def check_failure(self) -> None:
        """Update :attr:`alive`. Agents that never fail can keep the default."""

    # ----------------------------------------------------------- Sense and act
    @abstractmethod
    def sense_input(self) -> Sequence[float]:
        """Return the input vector fed to the network (length = input layer size)."""

    def apply_output(self, outputs: np.ndarray) -> None:
        """Receive the output layer activations for this tick."""
        self.outputs = outputs

    def act(self) -> None:
        """Turn :attr:`outputs` into behaviour. Called right after :meth:`apply_output`."""

    @abstractmethod
    def compute_fitness(self) -> float:
        """Score the agent's performance so far."""

    # ------------------------------------------------------------------- Reset
    def reset_to_start(self, pose: Pose) -> None:
        """Return to ``pose`` and re-arm liveness for the next generation."""
        self.alive = True
        self.outputs = np.zeros(0, dtype=np.float32)


__all__ = ["BaseAgent"]
