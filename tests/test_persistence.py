"""Tests for named network save slots."""

import numpy as np
import pytest

from chillai.evolution.genome import Genome
from chillai.evolution.persistence import NetworkStore
from chillai.evolution.topology import validate
from chillai.exceptions import ChillAIConfigError, MissingSaveFileError


@pytest.fixture()
def topology():
    return validate([2, 3, 1], ["input", "relu", "sigmoid"])


def test_save_then_load_round_trip(tmp_path, topology) -> None:
    store = NetworkStore(tmp_path / "nested" / "networks")
    genome = Genome.random_init(topology, (-1, 1), (-1, 1), np.random.default_rng(2))
    path = store.save("runner", genome, 2, 1)
    assert path.name == "runner.chill"
    assert store.exists("runner")
    assert store.load("runner", topology) == genome


def test_missing_slot_raises_file_not_found(tmp_path, topology) -> None:
    store = NetworkStore(tmp_path)
    with pytest.raises(MissingSaveFileError):
        store.load("nothing", topology)
    with pytest.raises(FileNotFoundError):
        store.read_bytes("nothing")


@pytest.mark.parametrize("name", ["", "   ", "../escape", "a/b"])
def test_invalid_names_are_rejected(tmp_path, name) -> None:
    with pytest.raises(ChillAIConfigError):
        NetworkStore(tmp_path).path_for(name)


def test_list_slots_and_read_record(tmp_path, topology) -> None:
    store = NetworkStore(tmp_path)
    assert store.list_slots() == []
    store.save("b", Genome.zeros(topology), 2, 1)
    store.save("a", Genome.zeros(topology), 2, 1)
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    assert store.list_slots() == ["a", "b"]
    record = store.read_record("a")
    assert (record.layer_count, record.input_size, record.output_size) == (3, 2, 1)
