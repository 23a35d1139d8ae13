"""
Predefined configuration profiles for ChillAI.

Profiles provide convenient shortcuts for common training modes such as
quick smoke tests or long searches. They are merged on top of the defaults
before user overrides are applied.
"""

from __future__ import annotations

from typing import Dict

from omegaconf import OmegaConf


PROFILES: Dict[str, Dict[str, object]] = {
    "quick": {
        "training": {
            "population_size": 6,
            "generations": 2,
            "time_per_generation": 1.0,
        },
        "simulation": {
            "delta_time": 0.1,
        },
    },
    "standard": {
        "training": {
            "population_size": 20,
            "generations": 10,
            "time_per_generation": 10.0,
        },
    },
    "thorough": {
        "training": {
            "population_size": 50,
            "generations": 40,
            "time_per_generation": 20.0,
            "mutation_rate": 0.05,
            "learning_rate": 0.25,
        },
    },
}


def list_profiles() -> Dict[str, Dict[str, object]]:
    """Return a copy of the registered profiles."""

    return {name: OmegaConf.to_container(OmegaConf.create(conf), resolve=True) for name, conf in PROFILES.items()}


def get_profile(name: str) -> Dict[str, object]:
    """Return a profile configuration by name."""

    if name not in PROFILES:
        raise KeyError(f"Unknown profile '{name}'. Available profiles: {list(PROFILES)}")
    return OmegaConf.to_container(OmegaConf.create(PROFILES[name]), resolve=True)
