"""Shared test fixtures for the evoherd test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from evoherd.agents.identity import AgentData
from evoherd.agents.registry import AgentRegistry
from evoherd.config import AreaConfig, HazardConfig, SimulationConfig
from evoherd.rng import RandomStream
from evoherd.simulation.entities import Agent
from evoherd.simulation.hazard import HazardZone
from evoherd.simulation.manager import GenerationManager


@pytest.fixture
def config(tmp_path) -> SimulationConfig:
    """Small deterministic setup writing into a temp directory."""
    return SimulationConfig(
        seed=6,
        simulation_timer=5.0,
        population_size=5,
        parent_size=2,
        box_count=10,
        mutation_factor=0.5,
        mutation_chance=0.3,
        agent_areas=[AreaConfig(name="pasture", size=(40.0, 1.0, 40.0))],
        box_areas=[AreaConfig(name="field", size=(40.0, 1.0, 40.0))],
        hazards=[HazardConfig(name="gas", radius=6.0, damage_per_tick=20.0)],
        export_path=str(tmp_path / "SimulationData.csv"),
        winners_dir=str(tmp_path / "winners"),
    )


@pytest.fixture
def rng() -> RandomStream:
    return RandomStream(6)


@pytest.fixture
def registry() -> AgentRegistry:
    """A fresh agent registry."""
    return AgentRegistry()


@pytest.fixture
def spawn(registry: AgentRegistry) -> Callable[..., Agent]:
    """Factory spawning born, awake agents with optional preset points."""

    def _spawn(points: float = 0.0, start_health: float = 100.0, **kwargs) -> Agent:
        agent = registry.spawn(start_health=start_health, **kwargs)
        agent.birth(AgentData.default(start_health))
        agent.awake_up()
        agent.points = points
        return agent

    return _spawn


@pytest.fixture
def agent(spawn: Callable[..., Agent]) -> Agent:
    """An active agent with default traits and full health."""
    return spawn()


@pytest.fixture
def zone(registry: AgentRegistry) -> HazardZone:
    """A gas zone at the origin wired to the registry."""
    hazard = HazardZone(registry.get, name="gas", radius=5.0, damage_per_tick=20.0, interval=1.0)
    registry.add_destroy_listener(hazard.forget)
    return hazard


@pytest.fixture
def manager(config: SimulationConfig) -> GenerationManager:
    """A fresh, idle generation manager."""
    return GenerationManager(config)
