"""Agents ChillAI networks can control."""

from .base import BaseAgent
from .registry import agent_registry, get_agent, list_agents, register_agent
from .target_seeker import TargetSeekerAgent

__all__ = [
    "BaseAgent",
    "TargetSeekerAgent",
    "agent_registry",
    "get_agent",
    "list_agents",
    "register_agent",
]
