"""Tests for the evolution engine state machine."""

import numpy as np
import pytest

from chillai.evolution import EngineConfig, EngineState, EvolutionEngine, NetworkStore
from chillai.evolution.genome import Genome
from chillai.exceptions import ChillAIConfigError, ChillAIRuntimeError, InputSizeMismatchError
from helpers import ScriptedAgent, scripted_agents


def _config(tmp_path, **overrides) -> EngineConfig:
    values = dict(
        layer_sizes=[2, 3, 1],
        activations=["input", "relu", "sigmoid"],
        population_size=4,
        generations=1,
        mutation_rate=0.0,
        learning_rate=0.5,
        time_per_generation=0.05,
        seed=0,
        save_directory=str(tmp_path / "networks"),
    )
    values.update(overrides)
    return EngineConfig(**values)


def test_agent_count_must_match_population(tmp_path) -> None:
    with pytest.raises(ChillAIConfigError):
        EvolutionEngine(_config(tmp_path), scripted_agents([0.0, 0.0]))


def test_invalid_topology_is_rejected_at_construction(tmp_path) -> None:
    with pytest.raises(ChillAIConfigError) as err:
        EvolutionEngine(_config(tmp_path, layer_sizes=[5], activations=["input"]), scripted_agents([0.0] * 4))
    assert "too small" in str(err.value)


def test_tick_before_start_is_refused(tmp_path) -> None:
    engine = EvolutionEngine(_config(tmp_path), scripted_agents([0.0] * 4))
    with pytest.raises(ChillAIRuntimeError):
        engine.tick(0.02)


def test_start_seeds_population_and_resets_agents(tmp_path) -> None:
    agents = scripted_agents([0.0] * 4)
    engine = EvolutionEngine(_config(tmp_path), agents)
    engine.start()
    assert engine.state is EngineState.EVALUATING
    assert engine.population.size == 4
    assert all(genome.fits(engine.topology) for genome in engine.population.genomes)
    assert all(agent.resets == 1 for agent in agents)


def test_tick_collects_fitness_and_advances_clock(tmp_path) -> None:
    agents = scripted_agents([0.1, 0.9, 0.3, 0.7])
    engine = EvolutionEngine(_config(tmp_path), agents)
    engine.start()
    engine.tick(0.02)
    assert engine.elapsed == pytest.approx(0.02)
    assert engine.population.fitnesses == [0.1, 0.9, 0.3, 0.7]
    assert all(agent.ticks == 1 for agent in agents)
    assert all(agent.outputs.shape == (1,) for agent in agents)


def test_negative_delta_time_is_refused(tmp_path) -> None:
    engine = EvolutionEngine(_config(tmp_path), scripted_agents([0.0] * 4))
    engine.start()
    with pytest.raises(ChillAIRuntimeError):
        engine.tick(-0.1)


def test_one_generation_with_zero_mutation(tmp_path) -> None:
    """Fitness [0.1, 0.9, 0.3, 0.7] leaves [G1, G3, G1, G3] after TopHalf."""
    engine = EvolutionEngine(_config(tmp_path), scripted_agents([0.1, 0.9, 0.3, 0.7]))
    engine.start()
    original = [genome.copy() for genome in engine.population.genomes]
    engine.tick(0.02)
    stats = engine.advance_generation()

    assert engine.finished
    assert engine.generation == 1
    assert stats.best_fitness == pytest.approx(0.9)
    assert stats.worst_fitness == pytest.approx(0.1)
    assert engine.population.genomes == [original[1], original[3], original[1], original[3]]
    assert engine.population.fitnesses == [0.0, 0.0, 0.0, 0.0]


def test_step_drives_the_run_to_completion(tmp_path) -> None:
    engine = EvolutionEngine(_config(tmp_path, generations=3), scripted_agents([0.4, 0.2, 0.8, 0.6]))
    for _ in range(100):
        if engine.finished:
            break
        engine.step(0.02)
    assert engine.finished
    assert [stats.generation for stats in engine.history] == [1, 2, 3]
    engine.step(0.02)
    assert engine.generation == 3


def test_generation_ends_early_when_every_agent_dies(tmp_path) -> None:
    agents = [ScriptedAgent(fitness=1.0, alive=False) for _ in range(4)]
    engine = EvolutionEngine(_config(tmp_path, time_per_generation=100.0), agents)
    engine.step(0.02)
    assert engine.finished
    assert engine.history[0].alive == 0
    assert engine.history[0].elapsed == 0.0


def test_dead_agents_are_not_evaluated(tmp_path) -> None:
    agents = scripted_agents([0.5] * 4)
    agents[2].start_alive = False
    engine = EvolutionEngine(_config(tmp_path), agents)
    engine.start()
    engine.tick(0.02)
    assert agents[2].ticks == 0
    assert engine.population.slots[2].alive is False
    assert engine.population.slots[2].fitness == 0.0


def test_wrong_input_size_is_skipped_by_default(tmp_path) -> None:
    agents = scripted_agents([0.5] * 4)
    agents[1].inputs = [1.0, 2.0, 3.0]
    engine = EvolutionEngine(_config(tmp_path), agents)
    engine.start()
    engine.tick(0.02)
    assert agents[1].ticks == 0
    assert engine.population.fitnesses == [0.5, 0.0, 0.5, 0.5]


def test_wrong_input_size_aborts_when_configured(tmp_path) -> None:
    agents = scripted_agents([0.5] * 4)
    agents[0].inputs = [1.0]
    engine = EvolutionEngine(_config(tmp_path, on_input_error="abort"), agents)
    engine.start()
    with pytest.raises(InputSizeMismatchError):
        engine.tick(0.02)


def test_best_network_is_saved_on_completion(tmp_path) -> None:
    config = _config(tmp_path, save_on_completion=True, save_name="best")
    engine = EvolutionEngine(config, scripted_agents([0.1, 0.9, 0.3, 0.7]))
    engine.start()
    winner = engine.population.genomes[1].copy()
    engine.tick(0.02)
    engine.advance_generation()

    assert engine.saved_path is not None and engine.saved_path.exists()
    loaded = NetworkStore(config.save_directory).load("best", engine.topology)
    assert loaded == winner


def test_load_on_start_seeds_every_slot(tmp_path) -> None:
    config = _config(tmp_path, load_on_start=True, save_name="seed")
    engine = EvolutionEngine(config, scripted_agents([0.0] * 4))
    saved = Genome.random_init(engine.topology, (-2, 2), (-2, 2), np.random.default_rng(99))
    NetworkStore(config.save_directory).save("seed", saved, 2, 1)
    engine.start()
    assert all(genome == saved for genome in engine.population.genomes)
    assert engine.population.genomes[0] is not engine.population.genomes[1]


def test_load_on_start_falls_back_when_file_is_missing(tmp_path) -> None:
    engine = EvolutionEngine(_config(tmp_path, load_on_start=True, save_name="absent"), scripted_agents([0.0] * 4))
    engine.start()
    assert all(genome.fits(engine.topology) for genome in engine.population.genomes)


def test_load_on_start_falls_back_on_shape_mismatch(tmp_path) -> None:
    store = NetworkStore(tmp_path / "networks")
    other = EvolutionEngine(
        _config(tmp_path, layer_sizes=[2, 5, 1]),
        scripted_agents([0.0] * 4),
    )
    store.save("seed", Genome.zeros(other.topology), 2, 1)

    engine = EvolutionEngine(_config(tmp_path, load_on_start=True, save_name="seed"), scripted_agents([0.0] * 4))
    engine.start()
    assert all(genome.fits(engine.topology) for genome in engine.population.genomes)
    assert engine.population.genomes[0].weights[1].shape == (3, 2)


def test_seeded_runs_are_reproducible(tmp_path) -> None:
    def run() -> list:
        engine = EvolutionEngine(
            _config(tmp_path, generations=2, mutation_rate=0.5, selection_strategy="top"),
            scripted_agents([0.3, 0.1, 0.4, 0.2]),
        )
        while not engine.finished:
            engine.step(0.02)
        return engine.population.genomes

    assert run() == run()


class _Recorder:
    def __init__(self) -> None:
        self.metrics = []
        self.artifacts = []

    def log_metrics(self, metrics, step=None) -> None:
        self.metrics.append((step, metrics))

    def log_artifact(self, path) -> None:
        self.artifacts.append(path)


def test_generation_metrics_are_forwarded(tmp_path) -> None:
    recorder = _Recorder()
    config = _config(tmp_path, generations=2, save_on_completion=True, save_name="tracked")
    engine = EvolutionEngine(config, scripted_agents([0.1, 0.2, 0.3, 0.4]), experiment_logger=recorder)
    while not engine.finished:
        engine.step(0.02)
    assert [step for step, _ in recorder.metrics] == [1, 2]
    assert recorder.metrics[0][1]["best_fitness"] == pytest.approx(0.4)
    assert recorder.artifacts == [engine.saved_path]
