"""Tests covering the ChillAI configuration loader behaviour."""

from pathlib import Path

import pytest

from chillai.utils import ConfigLoader


def test_config_loader_starts_from_schema_defaults() -> None:
    config = ConfigLoader().load().to_dict()
    assert config["training"]["population_size"] == 20
    assert config["network"]["layer_sizes"] == [2, 4, 2]
    assert config["persistence"]["directory"] == "networks"


def test_config_loader_merges_file_over_global(tmp_path: Path) -> None:
    """File configuration should override global settings."""
    global_path = tmp_path / "global.yaml"
    global_path.write_text("training:\n  generations: 7\n  population_size: 12\n", encoding="utf-8")
    run_path = tmp_path / "run.yaml"
    run_path.write_text("training:\n  generations: 3\n", encoding="utf-8")

    config = ConfigLoader(global_path).load(run_path).to_dict()
    assert config["training"]["generations"] == 3
    assert config["training"]["population_size"] == 12


def test_config_loader_accepts_dict_overrides() -> None:
    loader = ConfigLoader({"training": {"generations": 2}})
    config = loader.load(overrides={"training": {"population_size": 5}}).to_dict()
    assert config["training"]["generations"] == 2
    assert config["training"]["population_size"] == 5


def test_config_loader_accepts_json(tmp_path: Path) -> None:
    path = tmp_path / "run.json"
    path.write_text('{"training": {"selection_strategy": "top"}}', encoding="utf-8")
    config = ConfigLoader().load(path).to_dict()
    assert config["training"]["selection_strategy"] == "top"


def test_config_loader_accepts_yaml_strings() -> None:
    config = ConfigLoader().load("persistence:\n  save_name: champion\n").to_dict()
    assert config["persistence"]["save_name"] == "champion"


def test_config_loader_unknown_section_raises() -> None:
    loader = ConfigLoader()
    with pytest.raises(ValueError) as err:
        loader.load(overrides={"unknown_section": {"foo": 1}})
    assert "unknown_section" in str(err.value)


def test_config_loader_unknown_key_raises() -> None:
    loader = ConfigLoader()
    with pytest.raises(ValueError) as err:
        loader.load(overrides={"training": {"invalid_key": 1}})
    assert "training.invalid_key" in str(err.value)


def test_config_loader_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader().load(tmp_path / "missing.yaml")
