"""
Reference agent: a point on a plane learning to reach a fixed target.

The agent senses the offset from its position to the target, reads a 2D
velocity from the first two network outputs and moves by
``velocity * speed * delta_time`` each tick.  Leaving the arena kills it.
Fitness is the negative distance to the target, so higher is better.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import numpy as np

from chillai.evolution.config import Pose

from .base import BaseAgent
from .registry import register_agent


@register_agent("target_seeker")
class TargetSeekerAgent(BaseAgent):
    """
    Options
    -------
    target : (float, float)
        Point to reach. Defaults to ``(3.0, 4.0)``.
    speed : float
        Distance covered per second at full output. Defaults to ``1.0``.
    arena_radius : float
        Agents further than this from the origin die. Defaults to ``10.0``.
    delta_time : float
        Time step used to integrate movement. Defaults to ``0.02``.
    """

    def __init__(self, *, options: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(options=options)
        target = self.options.get("target", (3.0, 4.0))
        self.target = np.asarray(target, dtype=np.float64)
        self.speed = float(self.options.get("speed", 1.0))
        self.arena_radius = float(self.options.get("arena_radius", 10.0))
        self.delta_time = float(self.options.get("delta_time", 0.02))
        self.position = np.zeros(2, dtype=np.float64)

    def distance(self) -> float:
        return float(np.linalg.norm(self.target - self.position))

    def check_failure(self) -> None:
        if float(np.linalg.norm(self.position)) > self.arena_radius:
            self.alive = False

    def sense_input(self) -> Sequence[float]:
        return (self.target - self.position).tolist()

    def act(self) -> None:
        velocity = np.zeros(2, dtype=np.float64)
        count = min(2, len(self.outputs))
        velocity[:count] = self.outputs[:count]
        self.position = self.position + velocity * self.speed * self.delta_time

    def compute_fitness(self) -> float:
        return -self.distance()

    def reset_to_start(self, pose: Pose) -> None:
        super().reset_to_start(pose)
        self.position = np.asarray(pose.position[:2], dtype=np.float64)


__all__ = ["TargetSeekerAgent"]
