"""Entities in the simulation: agents, collectible items and interactions.

The Agent is the evolvable entity. The host environment reports what it
collides with through ``report_interaction``; the generation manager reads
its accumulated state at generation boundaries.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from evoherd.agents.identity import AgentData, AgentHandle, GeneticTraits, describe_behavior
from evoherd.errors import AgentStateError
from evoherd.evolution.genetics import fitness_score, mutate_traits

if TYPE_CHECKING:
    from evoherd.rng import RandomStream

logger = logging.getLogger(__name__)

Position = tuple[float, float, float]


class ItemKind(enum.Enum):
    """Collectible kinds (the host tags them on collision)."""

    BOX = "box"
    GAS_BOX = "gas_box"


ITEM_POINTS: dict[ItemKind, float] = {
    ItemKind.BOX: 2.0,
    ItemKind.GAS_BOX: 4.0,
}


@dataclass(frozen=True)
class Item:
    """A pickup placed in the world by a box spawner."""

    item_id: int
    kind: ItemKind
    position: Position
    area: str = ""


class InteractionKind(enum.Enum):
    PICKUP = "pickup"
    HAZARD_ENTER = "hazard_enter"
    HAZARD_EXIT = "hazard_exit"
    PREDATOR_CONTACT = "predator_contact"


@dataclass(frozen=True)
class InteractionEvent:
    """Typed event delivered by the host collision layer."""

    kind: InteractionKind
    item: Item | None = None

    @classmethod
    def pickup(cls, item: Item) -> InteractionEvent:
        return cls(InteractionKind.PICKUP, item)


class AgentState(enum.Enum):
    DORMANT = "dormant"
    ACTIVE = "active"
    DEAD = "dead"


@dataclass(eq=False)
class Agent:
    """An evolvable agent with traits, health, points and survival timers."""

    handle: AgentHandle
    serial: int = 0
    name: str = "Cow"
    position: Position = (0.0, 0.0, 0.0)
    area: str = ""
    start_health: float = 100.0
    traits: GeneticTraits = field(default_factory=GeneticTraits)
    health: float | None = None
    points: float = 0.0
    items_collected: int = 0
    survival_time: float = 0.0  # seconds active this generation
    hazard_survival_time: float = 0.0  # seconds spent exposed
    state: AgentState = AgentState.DORMANT
    in_hazard: bool = False
    point_values: dict[ItemKind, float] = field(default_factory=lambda: dict(ITEM_POINTS))
    predator_penalty: float = 5.0
    item_remover: Callable[[Item], bool] | None = field(default=None, repr=False)
    on_death: Callable[[Agent], None] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.health is None:
            self.health = self.start_health

    @property
    def alive(self) -> bool:
        return self.state is not AgentState.DEAD

    @property
    def active(self) -> bool:
        return self.state is AgentState.ACTIVE

    # --- lifecycle -------------------------------------------------------

    def birth(self, parent: AgentData) -> None:
        """Initialize from a parent snapshot.

        Traits are copied by value. Health returns to ``start_health`` and
        points, items and timers restart from zero.

        Raises:
            AgentStateError: If the agent is already active
        """
        if self.state is AgentState.DEAD:
            return
        if self.state is AgentState.ACTIVE:
            raise AgentStateError(f"{self.name} cannot be born while active")

        self.traits = parent.traits.copy()
        self.health = self.start_health
        self.points = 0.0
        self.items_collected = 0
        self.survival_time = 0.0
        self.hazard_survival_time = 0.0
        self.in_hazard = False

    def mutate(self, factor: float, chance: float, rng: RandomStream) -> None:
        """Perturb inherited traits (see ``mutate_traits``)."""
        if self.state is AgentState.DEAD:
            return
        self.traits = mutate_traits(self.traits, factor, chance, rng)

    def awake_up(self) -> None:
        """Start fitness and survival accounting."""
        if self.state is AgentState.DORMANT:
            self.state = AgentState.ACTIVE

    def sleep(self) -> None:
        """Pause the agent without destroying it."""
        if self.state is AgentState.ACTIVE:
            self.state = AgentState.DORMANT

    def mark_destroyed(self) -> None:
        """Final transition; called by the registry on destroy."""
        self.state = AgentState.DEAD
        self.in_hazard = False

    def tick(self, dt: float) -> None:
        """Advance survival timers by ``dt`` seconds."""
        if self.state is not AgentState.ACTIVE:
            return
        self.survival_time += dt
        if self.in_hazard:
            self.hazard_survival_time += dt

    # --- interactions ----------------------------------------------------

    def take_damage(self, amount: float) -> None:
        """Reduce health. Reaching zero kills the agent."""
        if self.state is AgentState.DEAD or amount <= 0:
            return

        self.health = max(0.0, self.health - amount)
        logger.debug(f"{self.name} health: {self.health:.2f}")
        if self.health <= 0:
            self._die()

    def _die(self) -> None:
        self.state = AgentState.DEAD
        self.in_hazard = False
        logger.info(f"{self.name} has died.")
        if self.on_death is not None:
            self.on_death(self)

    def report_interaction(self, event: InteractionEvent) -> bool:
        """Apply a host-reported interaction.

        Returns:
            True if the event changed the agent
        """
        if self.state is AgentState.DEAD:
            return False

        if event.kind is InteractionKind.HAZARD_EXIT:
            if not self.in_hazard:
                return False
            self.in_hazard = False
            return True

        if self.state is not AgentState.ACTIVE:
            return False

        if event.kind is InteractionKind.PICKUP:
            return self._collect(event.item)

        if event.kind is InteractionKind.HAZARD_ENTER:
            if self.in_hazard:
                return False
            self.in_hazard = True
            return True

        if event.kind is InteractionKind.PREDATOR_CONTACT:
            self.points -= self.predator_penalty
            return True

        return False

    def _collect(self, item: Item | None) -> bool:
        if item is None:
            logger.warning(f"{self.name} got a pickup event without an item")
            return False

        if self.item_remover is not None:
            try:
                removed = self.item_remover(item)
            except Exception as e:
                logger.warning(f"{self.name} could not remove item {item.item_id}: {e}")
                return False
            if not removed:
                logger.debug(f"{self.name} ignored pickup of missing item {item.item_id}")
                return False

        self.points += self.point_values.get(item.kind, 0.0)
        self.items_collected += 1
        return True

    # --- scoring ---------------------------------------------------------

    def get_fitness_score(self) -> float:
        return fitness_score(
            health=self.health,
            start_health=self.start_health,
            survival_time=self.survival_time,
            points=self.points,
            hazard_survival_time=self.hazard_survival_time,
        )

    def get_data(self) -> AgentData:
        """Immutable snapshot for inheritance and export."""
        return AgentData(
            agent_id=self.name,
            traits=self.traits.copy(),
            points=self.points,
            items_collected=self.items_collected,
            hazard_survival_time=self.hazard_survival_time,
            survival_time=self.survival_time,
            health=self.health,
            start_health=self.start_health,
            behavior=describe_behavior(self.traits),
        )
