"""Agent registry used by ChillAI to locate the environments networks control."""

from __future__ import annotations

from typing import Dict, Iterator, Type

from .base import BaseAgent


class AgentRegistry:
    """Light-weight registry storing agent classes by name."""

    def __init__(self) -> None:
        self._registry: Dict[str, Type[BaseAgent]] = {}

    def register(self, name: str, agent_cls: Type[BaseAgent]) -> None:
        key = name.strip().lower()
        if not key:
            raise ValueError("Agent name cannot be empty.")
        self._registry[key] = agent_cls

    def get(self, name: str) -> Type[BaseAgent]:
        key = name.strip().lower()
        if key not in self._registry:
            raise KeyError(f"Agent '{name}' is not registered. Available agents: {sorted(self._registry)}")
        return self._registry[key]

    def available(self) -> Dict[str, Type[BaseAgent]]:
        return dict(self._registry)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name.strip().lower() in self._registry

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._registry))


agent_registry = AgentRegistry()


def register_agent(name: str):
    """Decorator registering agents in the global registry."""

    def decorator(cls: Type[BaseAgent]) -> Type[BaseAgent]:
        agent_registry.register(name, cls)
        return cls

    return decorator


def list_agents() -> Dict[str, Type[BaseAgent]]:
    return agent_registry.available()


def get_agent(name: str) -> Type[BaseAgent]:
    return agent_registry.get(name)


__all__ = ["agent_registry", "AgentRegistry", "register_agent", "list_agents", "get_agent"]
