"""Configuration settings for the evoherd simulation.

Uses Pydantic Settings for validation and environment variable support.
All settings can be overridden via EVOHERD_* environment variables.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class AreaConfig(BaseModel):
    """Axis-aligned spawn volume."""

    name: str = "area"
    center: tuple[float, float, float] = (0.0, 0.0, 0.0)
    size: tuple[float, float, float] = (50.0, 1.0, 50.0)


class HazardConfig(BaseModel):
    """Gas sphere that damages every agent inside it."""

    name: str = "gas"
    center: tuple[float, float, float] = (0.0, 0.0, 0.0)
    radius: float = 8.0
    damage_per_tick: float = 20.0


class SimulationConfig(BaseSettings):
    """Global configuration for the generational simulation."""

    # Reproducibility
    seed: int = 6

    # Generation window
    simulation_timer: float = 10.0  # seconds per generation
    generation_count: int = 0  # initial count, used for winner naming

    # Population
    population_size: int = 20
    parent_size: int = 4
    agent_basename: str = "Cow"
    start_health: float = 100.0
    agent_areas: list[AreaConfig] = Field(default_factory=lambda: [AreaConfig(name="pasture")])

    # Mutation
    mutation_factor: float = 0.5
    mutation_chance: float = 0.3  # probability per trait

    # Pickups
    box_count: int = 40
    box_kinds: list[str] = Field(default=["box", "gas_box"])
    box_points: float = 2.0
    gas_box_points: float = 4.0
    box_areas: list[AreaConfig] = Field(default_factory=lambda: [AreaConfig(name="field")])

    # Hazards
    hazards: list[HazardConfig] = Field(default_factory=lambda: [HazardConfig()])
    hazard_interval: float = 1.0  # seconds between damage ticks

    # Predators
    predator_penalty: float = 5.0

    # Output
    export_path: str = "data/SimulationData.csv"
    winners_dir: str = "data/winners"

    # Debug
    debug_disable_spawning: bool = False

    model_config = {"env_prefix": "EVOHERD_"}

    @classmethod
    def from_yaml(cls, path: str, **overrides) -> SimulationConfig:
        """Load config values from a YAML file.

        Args:
            path: Path to YAML file
            **overrides: Values that win over the file contents

        Returns:
            SimulationConfig instance
        """
        import yaml

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)
