"""Tests for SimulationConfig loading."""

from __future__ import annotations

from evoherd.config import HazardConfig, SimulationConfig


def test_defaults():
    """Defaults match the reference scene."""
    config = SimulationConfig()
    assert config.seed == 6
    assert config.box_points == 2.0
    assert config.gas_box_points == 4.0
    assert config.hazard_interval == 1.0
    assert config.hazards == [HazardConfig()]


def test_env_override(monkeypatch):
    """EVOHERD_ variables override defaults."""
    monkeypatch.setenv("EVOHERD_POPULATION_SIZE", "7")
    monkeypatch.setenv("EVOHERD_MUTATION_CHANCE", "0.9")
    config = SimulationConfig()
    assert config.population_size == 7
    assert config.mutation_chance == 0.9


def test_from_yaml(tmp_path):
    """YAML values load and explicit overrides win."""
    path = tmp_path / "experiment.yaml"
    path.write_text(
        "population_size: 3\n"
        "simulation_timer: 2.5\n"
        "hazards:\n"
        "  - name: swamp\n"
        "    center: [1.0, 0.0, 2.0]\n"
        "    radius: 4.0\n"
        "    damage_per_tick: 10.0\n"
    )

    config = SimulationConfig.from_yaml(str(path), seed=11, parent_size=None)

    assert config.population_size == 3
    assert config.simulation_timer == 2.5
    assert config.seed == 11
    assert config.parent_size == 4
    assert config.hazards[0].name == "swamp"
    assert config.hazards[0].center == (1.0, 0.0, 2.0)


def test_empty_yaml(tmp_path):
    """An empty YAML file yields the defaults."""
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert SimulationConfig.from_yaml(str(path)).population_size == 20
