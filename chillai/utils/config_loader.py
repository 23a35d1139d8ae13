"""
Unified configuration loader for ChillAI.

This module normalises configuration handling across the CLI and SDK layers.
Configurations can be provided as dictionaries, JSON/YAML files, or YAML
strings and are merged on top of the schema defaults shipped in
``chillai/configs/config_default.yaml``.  Every section and key is checked
against that schema so a typo fails loudly instead of being ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Union

import yaml
from omegaconf import DictConfig, OmegaConf

from .config_reference import CONFIG_SCHEMA, defaults


ConfigLike = Union[str, Path, Mapping[str, Any], DictConfig]


@dataclass
class LoadedConfig:
    """Container that exposes both OmegaConf and plain-dict views."""

    data: DictConfig

    def to_dict(self) -> Dict[str, Any]:
        return OmegaConf.to_container(self.data, resolve=True)  # type: ignore[return-value]

    def __getitem__(self, item: str) -> Any:
        return self.data[item]


def validate_keys(config: Mapping[str, Any]) -> None:
    """Raise ``ValueError`` naming the first section or key the schema does not know."""

    for section, values in config.items():
        if section not in CONFIG_SCHEMA:
            raise ValueError(
                f"Unknown configuration section '{section}'. Expected one of {sorted(CONFIG_SCHEMA)}."
            )
        if values is None:
            continue
        if not isinstance(values, Mapping):
            raise ValueError(f"Configuration section '{section}' must be a mapping.")
        for key in values:
            if key not in CONFIG_SCHEMA[section]:
                raise ValueError(
                    f"Unknown configuration key '{section}.{key}'. "
                    f"Expected one of {sorted(CONFIG_SCHEMA[section])}."
                )


class ConfigLoader:
    """
    Load and merge ChillAI configuration sources.

    Parameters
    ----------
    global_config : Optional[ConfigLike]
        Optional path or mapping applied on top of the schema defaults.
    """

    def __init__(self, global_config: Optional[ConfigLike] = None) -> None:
        self._global_conf = OmegaConf.create(defaults())
        if global_config is not None:
            self._global_conf = self._merge(self._global_conf, self._coerce(global_config))

    def _coerce(self, source: ConfigLike) -> DictConfig:
        """Convert arbitrary config-like inputs into an OmegaConf instance."""
        if isinstance(source, DictConfig):
            return source
        if isinstance(source, Mapping):
            return OmegaConf.create(dict(source))
        if isinstance(source, Path):
            return self._load_path(source)
        if isinstance(source, str):
            potential_path = Path(source)
            if potential_path.suffix.lower() in {".yaml", ".yml", ".json"} or potential_path.exists():
                return self._load_path(potential_path)
            try:
                parsed = yaml.safe_load(source)
            except yaml.YAMLError as exc:
                raise ValueError(f"Failed to parse configuration string: {exc}") from exc
            if not isinstance(parsed, MutableMapping):
                raise ValueError("Configuration string must evaluate to a mapping.")
            return OmegaConf.create(dict(parsed))
        raise TypeError(f"Unsupported configuration source: {type(source)!r}")

    def _load_path(self, path: Path) -> DictConfig:
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        suffix = path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            loaded = OmegaConf.load(path)
            return loaded if isinstance(loaded, DictConfig) else OmegaConf.create({})
        if suffix == ".json":
            return OmegaConf.create(yaml.safe_load(path.read_text(encoding="utf-8")) or {})
        raise ValueError(f"Unsupported configuration file format: '{suffix}'. Expected YAML or JSON.")

    @staticmethod
    def _merge(base: DictConfig, extra: Any) -> DictConfig:
        container = OmegaConf.to_container(extra, resolve=True) if isinstance(extra, DictConfig) else dict(extra)
        validate_keys(container)
        return OmegaConf.merge(base, container)  # type: ignore[return-value]

    def load(
        self,
        config: Optional[ConfigLike] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> LoadedConfig:
        """Merge defaults with optional additional configuration and overrides."""

        merged = self._global_conf.copy()

        if config is not None:
            merged = self._merge(merged, self._coerce(config))

        if overrides:
            merged = self._merge(merged, overrides)

        return LoadedConfig(merged)
