"""Agent identity: handles, heritable traits, and data snapshots."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields

from evoherd.errors import SerializationError

# Valid range of every heritable trait. Mutation always clamps into these.
TRAIT_RANGES: dict[str, tuple[float, float]] = {
    "moving_speed": (0.5, 10.0),
    "sight": (1.0, 20.0),
    "ray_radius": (0.1, 5.0),
    "random_direction": (0.0, 1.0),
    "box_weight": (0.0, 2.0),
    "gas_box_weight": (0.0, 2.0),
    "risk_tolerance": (0.0, 1.0),
    "predator_avoidance": (0.0, 1.0),
}


@dataclass(frozen=True, order=True)
class AgentHandle:
    """Liveness-checked index into the agent registry arena.

    A handle stays valid only while its slot holds the same generation;
    once the agent is destroyed the slot generation moves on and the
    handle resolves to nothing.
    """

    index: int
    generation: int

    def __str__(self) -> str:
        return f"{self.index}:{self.generation}"


@dataclass(frozen=True)
class GeneticTraits:
    """Heritable trait vector. Each trait lives inside TRAIT_RANGES.

    Frozen; derive changed traits with ``dataclasses.replace``.
    """

    moving_speed: float = 3.0  # world units per second
    sight: float = 5.0  # detection distance for pickups
    ray_radius: float = 1.0  # pickup reach
    random_direction: float = 0.3  # 0=goal directed, 1=pure wander
    box_weight: float = 1.0  # attraction to plain boxes
    gas_box_weight: float = 1.0  # attraction to gas boxes
    risk_tolerance: float = 0.5  # 0=avoids gas, 1=walks straight in
    predator_avoidance: float = 0.5  # 0=oblivious, 1=always evades

    def as_dict(self) -> dict[str, float]:
        """Return traits as a flat dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def copy(self) -> GeneticTraits:
        """Return an independent copy of these traits."""
        return GeneticTraits(**self.as_dict())

    def clamped(self) -> GeneticTraits:
        """Return a copy with every trait clamped to its valid range."""
        values = {}
        for name, value in self.as_dict().items():
            low, high = TRAIT_RANGES[name]
            values[name] = max(low, min(high, value))
        return GeneticTraits(**values)

    def describe(self) -> str:
        """Compact ``name=value`` listing used in exports."""
        return ", ".join(f"{name}={value:.2f}" for name, value in self.as_dict().items())


def describe_behavior(traits: GeneticTraits) -> str:
    """Summarize the behavioral tendencies the traits bias towards."""
    if traits.moving_speed >= 6.0:
        pace = "fast"
    elif traits.moving_speed >= 3.0:
        pace = "steady"
    else:
        pace = "slow"

    if traits.random_direction > 0.6:
        exploration = "wanders"
    elif traits.random_direction < 0.3:
        exploration = "focused"
    else:
        exploration = "roams"

    preference = "gas boxes" if traits.gas_box_weight > traits.box_weight else "boxes"

    if traits.risk_tolerance >= 0.66:
        risk = "bold"
    elif traits.risk_tolerance <= 0.33:
        risk = "cautious"
    else:
        risk = "measured"

    predators = "evasive" if traits.predator_avoidance >= 0.5 else "oblivious"

    return (
        f"Pace: {pace} ({traits.moving_speed:.2f}), "
        f"Exploration: {exploration} ({traits.random_direction:.2f}), "
        f"Preference: {preference}, "
        f"Risk: {risk} ({traits.risk_tolerance:.2f}), "
        f"Predators: {predators} ({traits.predator_avoidance:.2f})"
    )


@dataclass(frozen=True)
class AgentData:
    """Immutable snapshot of an agent: unit of inheritance and export."""

    agent_id: str = "default"
    traits: GeneticTraits = field(default_factory=GeneticTraits)
    points: float = 0.0
    items_collected: int = 0
    hazard_survival_time: float = 0.0
    survival_time: float = 0.0
    health: float = 100.0
    start_health: float = 100.0
    behavior: str = ""

    @classmethod
    def default(cls, start_health: float = 100.0) -> AgentData:
        """Generation-zero snapshot with default traits."""
        traits = GeneticTraits()
        return cls(
            traits=traits,
            health=start_health,
            start_health=start_health,
            behavior=describe_behavior(traits),
        )

    def fitness(self) -> float:
        """Fitness score of the snapshot (same formula as the live agent)."""
        from evoherd.evolution.genetics import fitness_score

        return fitness_score(
            health=self.health,
            start_health=self.start_health,
            survival_time=self.survival_time,
            points=self.points,
            hazard_survival_time=self.hazard_survival_time,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> AgentData:
        """Rebuild a snapshot from ``to_dict`` output.

        Raises:
            SerializationError: If required keys are missing or malformed
        """
        try:
            traits = GeneticTraits(**data["traits"])
            return cls(
                agent_id=str(data["agent_id"]),
                traits=traits,
                points=float(data["points"]),
                items_collected=int(data.get("items_collected", 0)),
                hazard_survival_time=float(data["hazard_survival_time"]),
                survival_time=float(data["survival_time"]),
                health=float(data["health"]),
                start_health=float(data.get("start_health", 100.0)),
                behavior=data.get("behavior") or describe_behavior(traits),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Invalid agent snapshot: {e}") from e
