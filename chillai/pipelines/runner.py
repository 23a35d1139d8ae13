"""
SDK entry point exposing the `ChillAI` orchestration class.

The runner coordinates configuration loading, agent construction, the
evolution engine and the headless scheduler, then persists run artefacts.  It
serves as the backbone for the CLI and for scripted experiments.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, Union

import pandas as pd
from loguru import logger
from omegaconf import OmegaConf

from chillai.agents import BaseAgent, get_agent, list_agents
from chillai.evolution import (
    EngineConfig,
    EvolutionEngine,
    EvolutionScheduler,
    GenerationStats,
    Genome,
    NetworkStore,
    SchedulerConfig,
)
from chillai.exceptions import ChillAIConfigError
from chillai.utils import ConfigLoader, ExperimentLogger, configure_console
from chillai.utils.config_reference import (
    as_dict as _config_schema_dict,
    explain as _config_explain,
    to_console as _config_schema_console,
    to_markdown as _config_schema_markdown,
    write_markdown as _config_write_markdown,
)
from chillai.utils.profiles import get_profile, list_profiles

ConfigSource = Union[str, Path, Mapping[str, Any]]


def _slugify_name(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "run"


@dataclass
class ChillAIResult:
    """Return payload exposed by the SDK."""

    run_id: str
    best_genome: Genome
    metrics: Dict[str, Any]
    history: List[GenerationStats]
    artifacts: Dict[str, Path]
    output_dir: Path
    engine: EvolutionEngine
    profile: Optional[str] = None

    def history_frame(self) -> pd.DataFrame:
        """Per-generation statistics as a dataframe."""
        return pd.DataFrame([stats.as_dict() for stats in self.history])


class ChillAI:
    """Primary interface wiring configuration, agents and the evolution engine.

    Use :meth:`describe_config` for interactive documentation of every
    tunable parameter and :meth:`run` to train a population headlessly.
    """

    @classmethod
    def available_agents(cls) -> Dict[str, Type[BaseAgent]]:
        """Return the currently registered agents."""

        return list_agents()

    @classmethod
    def available_profiles(cls) -> Dict[str, Dict[str, object]]:
        """Return a mapping of available configuration profiles."""

        return list_profiles()

    @classmethod
    def describe_config(
        cls,
        section: Optional[str] = None,
        *,
        as_markdown: bool = False,
        to_console: bool = False,
    ) -> Union[str, Dict[str, Dict[str, Dict[str, object]]]]:
        """Return metadata describing ChillAI configuration keys.

        Parameters
        ----------
        section : str, optional
            When provided, only return information for a single section
            (for example ``"training"``).
        as_markdown : bool, default False
            Return Markdown text instead of a nested dictionary.
        to_console : bool, default False
            Also print the table to stdout.
        """

        if as_markdown:
            markdown = _config_schema_markdown(section=section)
            if to_console:
                print(markdown)
            return markdown

        if to_console:
            print(_config_schema_console(section=section))
        return _config_schema_dict(section)

    @classmethod
    def explain(cls, key: str) -> str:
        """Return a human readable description for a configuration key.

        Accepts either a bare key (``mutation_rate``) or ``section.key``.
        """

        try:
            return _config_explain(key)
        except KeyError as exc:
            raise ChillAIConfigError(f"Unknown configuration key '{key}'.", context={"key": key}) from exc

    @classmethod
    def generate_config_docs(cls, path: Union[str, Path] = Path("CONFIG.md")) -> Path:
        """Render the configuration reference to a markdown file."""

        return _config_write_markdown(Path(path))

    @classmethod
    def list_networks(cls, directory: Union[str, Path] = "networks") -> List[str]:
        """Return the names of the save slots stored in ``directory``."""

        return NetworkStore(directory).list_slots()

    @classmethod
    def inspect_network(cls, name: str, directory: Union[str, Path] = "networks") -> Dict[str, Any]:
        """Summarise a saved network without needing a topology."""

        store = NetworkStore(directory)
        record = store.read_record(name)
        layers = [
            {
                "layer": index,
                "weights": list(weights.shape),
                "biases": list(biases.shape),
            }
            for index, (weights, biases) in enumerate(zip(record.weights, record.biases))
        ]
        parameters = sum(int(w.size) + int(b.size) for w, b in zip(record.weights, record.biases))
        return {
            "name": name,
            "path": str(store.path_for(name)),
            "layers": record.layer_count,
            "input_size": record.input_size,
            "output_size": record.output_size,
            "parameters": parameters,
            "shapes": layers,
        }

    def __init__(
        self,
        agent: Optional[str] = None,
        profile: Optional[str] = None,
        config: Optional[ConfigSource] = None,
        global_config: Optional[ConfigSource] = None,
        run_name: Optional[str] = None,
    ) -> None:
        """Create a new ChillAI orchestrator.

        Parameters
        ----------
        agent : str, optional
            Registered agent name. Overrides ``agent.name`` from the config.
        profile : str, optional
            Configuration profile (``"quick"``, ``"standard"``, ``"thorough"``)
            merged before ``config``.
        config : str | Path | dict, optional
            Run configuration supplied as a YAML/JSON file or a mapping.
        global_config : str | Path | dict, optional
            Base configuration merged right after the schema defaults.
        run_name : str, optional
            Slug used to name the run directory. Defaults to the experiment name.
        """

        self.profile = profile
        profile_overrides: Dict[str, Any] = {}
        if profile:
            try:
                profile_overrides = get_profile(profile)
            except KeyError as exc:
                raise ChillAIConfigError(str(exc), context={"profile": profile}) from exc

        self.config_loader = ConfigLoader(global_config)
        with_profile = self.config_loader.load(config=profile_overrides or None)
        loaded = ConfigLoader(with_profile.data).load(config=config)
        if agent:
            loaded = ConfigLoader(loaded.data).load(overrides={"agent": {"name": agent}})
        self.config: Dict[str, Any] = loaded.to_dict()

        logging_cfg = self.config.get("logging", {})
        experiment_cfg = self.config.get("experiment", {})
        configure_console(str(logging_cfg.get("level") or "INFO"))
        experiment_name = str(experiment_cfg.get("name") or "ChillAI")
        self.logger = ExperimentLogger(
            experiment_name=experiment_name,
            tracking_uri=logging_cfg.get("mlflow_uri"),
            enabled=bool(logging_cfg.get("enable_mlflow", False)),
        )
        self.engine_config = EngineConfig.from_mapping(self.config)
        max_steps = self.config.get("simulation", {}).get("max_steps")
        self.scheduler_config = SchedulerConfig(
            delta_time=self.engine_config.delta_time,
            max_steps=int(max_steps) if max_steps is not None else None,
        )
        self.experiments_dir = Path(experiment_cfg.get("output_dir") or "experiments")
        self.run_slug = _slugify_name(run_name or experiment_name)
        self.run_id: Optional[str] = None
        self.output_dir: Optional[Path] = None

    def _allocate_run_id(self, slug: str) -> str:
        self.experiments_dir.mkdir(parents=True, exist_ok=True)
        pattern = re.compile(rf"{re.escape(slug)}_(\d+)$")
        max_index = 0
        for entry in self.experiments_dir.iterdir():
            if entry.is_dir():
                match = pattern.match(entry.name)
                if match:
                    max_index = max(max_index, int(match.group(1)))
        return f"{slug}_{max_index + 1:03d}"

    def build_agents(self) -> List[BaseAgent]:
        """Instantiate one registered agent per network."""

        agent_cfg = self.config.get("agent", {})
        agent_cls = get_agent(str(agent_cfg.get("name") or "target_seeker"))
        options = dict(agent_cfg.get("options") or {})
        options.setdefault("delta_time", self.engine_config.delta_time)
        return [agent_cls(options=options) for _ in range(self.engine_config.population_size)]

    def run(self, agents: Optional[List[BaseAgent]] = None) -> ChillAIResult:
        """Train the population and write the run artefacts.

        Parameters
        ----------
        agents : list of BaseAgent, optional
            Pre-built agents. When omitted, ``agent.name`` is looked up in the
            registry and instantiated ``population_size`` times.
        """

        agents = agents if agents is not None else self.build_agents()
        engine = EvolutionEngine(self.engine_config, agents, experiment_logger=self.logger)

        run_id = self._allocate_run_id(self.run_slug)
        output_dir = self.experiments_dir / run_id
        output_dir.mkdir(parents=True, exist_ok=True)
        self.run_id, self.output_dir = run_id, output_dir
        logger.info("Writing run artefacts to {}", output_dir)

        scheduler = EvolutionScheduler(
            engine=engine,
            logger=self.logger,
            config=replace(self.scheduler_config, run_name=run_id),
        )
        history = scheduler.run()

        metrics: Dict[str, Any] = {
            "generations": engine.generation,
            "steps": scheduler.steps,
            "finished": engine.finished,
            "best_fitness": history[-1].best_fitness if history else None,
            "best_fitness_overall": self._best_overall(history),
            "parameters": engine.best_genome.parameter_count(),
        }
        artifacts = self._persist_run_outputs(output_dir, scheduler.history_frame(), metrics)
        if engine.saved_path is not None:
            artifacts["network"] = engine.saved_path

        return ChillAIResult(
            run_id=run_id,
            best_genome=engine.best_genome,
            metrics=metrics,
            history=history,
            artifacts=artifacts,
            output_dir=output_dir,
            engine=engine,
            profile=self.profile,
        )

    def _best_overall(self, history: List[GenerationStats]) -> Optional[float]:
        scores = [stats.best_fitness for stats in history if not math.isnan(stats.best_fitness)]
        if not scores:
            return None
        return max(scores) if self.engine_config.higher_fitness_is_better else min(scores)

    def _persist_run_outputs(
        self, output_dir: Path, history: pd.DataFrame, metrics: Dict[str, Any]
    ) -> Dict[str, Path]:
        paths: Dict[str, Path] = {}

        history_path = output_dir / "history.csv"
        history.to_csv(history_path, index=False)
        paths["history"] = history_path

        metrics_path = output_dir / "metrics.json"
        metrics_path.write_text(json.dumps(metrics, indent=2), encoding="utf-8")
        paths["metrics"] = metrics_path

        config_path = output_dir / "config.yaml"
        OmegaConf.save(OmegaConf.create(self.config), config_path)
        paths["config"] = config_path

        for path in paths.values():
            self.logger.log_artifact(path)
        return paths


__all__ = ["ChillAI", "ChillAIResult"]
