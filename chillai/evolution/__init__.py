"""Evolution module exports."""

from .config import EngineConfig, Pose
from .engine import EngineState, EvolutionEngine, GenerationStats
from .evaluator import activate, evaluate
from .genome import Genome
from .operators import crossover, mutate
from .persistence import NetworkStore
from .population import PopulationManager, SelectionStrategy, Slot
from .record import NetworkRecord
from .scheduler import EvolutionScheduler, SchedulerConfig
from .topology import ActivationTag, Topology, validate

__all__ = [
    "ActivationTag",
    "EngineConfig",
    "EngineState",
    "EvolutionEngine",
    "EvolutionScheduler",
    "GenerationStats",
    "Genome",
    "NetworkRecord",
    "NetworkStore",
    "PopulationManager",
    "Pose",
    "SchedulerConfig",
    "SelectionStrategy",
    "Slot",
    "Topology",
    "activate",
    "crossover",
    "evaluate",
    "mutate",
    "validate",
]
