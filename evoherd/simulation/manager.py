"""Generation manager: the evolutionary simulation state machine.

Owns simulation time, the active population, selection and mutation.
Every ``simulation_timer`` seconds the live population is ranked, the
best agents become parents, the generation is exported and destroyed,
and a new one is spawned from the parents.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from evoherd.agents.identity import AgentData
from evoherd.agents.registry import AgentRegistry
from evoherd.analytics.generation import GenerationAnalytics, average, median
from evoherd.config import SimulationConfig
from evoherd.errors import ConfigurationError, EvoherdError
from evoherd.evolution.genetics import rank_population, select_parents
from evoherd.persistence.winners import WinnerSink, WinnerStore, winner_name
from evoherd.rng import RandomStream
from evoherd.simulation.entities import Agent, Item, ItemKind, Position
from evoherd.simulation.hazard import HazardZone
from evoherd.simulation.spawner import Area, AreaSpawner, Spawner

logger = logging.getLogger(__name__)


class ManagerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class GenerationRecord:
    """Summary of one finished generation."""

    generation: int
    population: int
    winner: str | None = None
    winner_fitness: float = 0.0
    median_fitness: float = 0.0
    average_fitness: float = 0.0
    respawned: bool = False
    parents: list[str] = field(default_factory=list)


class GenerationManager:
    """Drives spawn, evaluate, select, mutate and respawn."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: RandomStream | None = None,
        registry: AgentRegistry | None = None,
        analytics: GenerationAnalytics | None = None,
        winner_store: WinnerSink | None = None,
        agent_spawner: Spawner | None = None,
    ):
        self.config = config or SimulationConfig()
        self.rng = rng or RandomStream(self.config.seed)
        self.registry = registry or AgentRegistry(self.config.agent_basename)
        self.analytics = analytics or GenerationAnalytics(self.config.export_path)
        self.winner_store = winner_store or WinnerStore(self.config.winners_dir)

        self.agent_areas = [
            Area(a.name, a.center, a.size) for a in self.config.agent_areas
        ]
        self._agent_spawner = agent_spawner or AreaSpawner(
            self.agent_areas,
            self.config.population_size,
            factory=self._make_agent,
            kinds=["agent"],
            rng=self.rng,
            destroy=self._destroy_entity,
            name="agents",
        )

        self._item_serial = 0
        self.box_spawners = [
            AreaSpawner(
                [Area(a.name, a.center, a.size) for a in self.config.box_areas],
                self.config.box_count,
                factory=self._make_item,
                kinds=self._item_kinds(),
                rng=self.rng,
                name="boxes",
            )
        ]

        self.hazards: list[HazardZone] = []
        for hazard in self.config.hazards:
            zone = HazardZone(
                self.registry.get,
                name=hazard.name,
                center=hazard.center,
                radius=hazard.radius,
                damage_per_tick=hazard.damage_per_tick,
                interval=self.config.hazard_interval,
            )
            self.registry.add_destroy_listener(zone.forget)
            self.hazards.append(zone)

        self.state = ManagerState.IDLE
        self.generation_count = self.config.generation_count
        self.simulation_count = 0.0
        self.last_winner: AgentData | None = None
        self.history: list[GenerationRecord] = []
        self._active: list[Agent] = []
        self._parents: list[AgentData] = []

    # --- read-only views -------------------------------------------------

    @property
    def running(self) -> bool:
        return self.state is ManagerState.RUNNING

    @property
    def active_agents(self) -> list[Agent]:
        """Live agents of the current generation (destroyed ones filtered)."""
        return [a for a in self._active if self.registry.is_alive(a.handle)]

    @property
    def parents(self) -> list[AgentData]:
        return list(self._parents)

    @property
    def items(self) -> list[Item]:
        return [item for spawner in self.box_spawners for item in spawner.children]

    def area_of(self, agent: Agent) -> Area | None:
        for area in self.agent_areas:
            if area.name == agent.area:
                return area
        return None

    # --- operator commands -----------------------------------------------

    def validate(self) -> None:
        """Check the setup before anything is spawned.

        Raises:
            ConfigurationError: On an unusable configuration
        """
        try:
            if self.config.simulation_timer <= 0:
                raise ConfigurationError("simulation_timer must be positive")
            if self.config.population_size < 1:
                raise ConfigurationError("population_size must be at least 1")
            if self.config.parent_size < 0:
                raise ConfigurationError("parent_size cannot be negative")
            if not 0.0 <= self.config.mutation_chance <= 1.0:
                raise ConfigurationError("mutation_chance must be within [0, 1]")
            if isinstance(self._agent_spawner, AreaSpawner):
                self._agent_spawner.validate()
            for spawner in self.box_spawners:
                spawner.validate()
        except ConfigurationError as e:
            logger.error(f"Invalid simulation setup: {e}")
            raise

    def start_simulation(self) -> None:
        """Spawn generation zero from default traits and start the clock."""
        self.validate()

        self.rng.reset()
        self._parents = []
        for zone in self.hazards:
            zone.clear()
        self.simulation_count = 0.0
        self.generate_boxes()
        self.generate_objects()
        self.state = ManagerState.RUNNING
        logger.info(f"Simulation started with {len(self._active)} agents")

    def stop_simulation(self) -> None:
        """Pause: keep surviving agents asleep so the run can continue later."""
        self.state = ManagerState.IDLE
        self._purge()
        for agent in self._active:
            agent.sleep()
        logger.info(f"Simulation stopped at generation {self.generation_count}")

    def continue_simulation(self) -> None:
        """Roll the paused population into a new generation and resume."""
        self.advance_generation()
        self.state = ManagerState.RUNNING

    def generate_boxes(self) -> list[Item]:
        """Regenerate the pickups of every box spawner."""
        created = []
        for spawner in self.box_spawners:
            created.extend(spawner.regenerate())
        return created

    def generate_objects(self, parents: list[AgentData] | None = None) -> list[Agent]:
        """Spawn a new population from ``parents`` (default traits if empty)."""
        self._generate_agents(parents or [])
        return list(self._active)

    # --- time ------------------------------------------------------------

    def update(self, dt: float) -> bool:
        """Advance simulation time by ``dt`` seconds.

        Returns:
            True if a generation boundary was crossed
        """
        if not self.running:
            return False

        for agent in self.active_agents:
            agent.tick(dt)
        for zone in self.hazards:
            zone.tick(dt)

        self.simulation_count += dt
        if self.simulation_count < self.config.simulation_timer:
            return False

        self.generation_count += 1
        self.advance_generation()
        self.simulation_count -= self.config.simulation_timer
        return True

    def advance_generation(self) -> GenerationRecord:
        """Rank, select, export and replace the current generation."""
        self.rng.reset()
        self.generate_boxes()

        for zone in self.hazards:
            zone.refresh(self.active_agents)

        self._purge()
        respawned = False
        if not self._active:
            logger.warning("Generation has no survivors, respawning from last parents")
            self._generate_agents(self._parents)
            self._purge()
            respawned = True

        ranked = rank_population(self._active)
        if ranked:
            self._parents = select_parents(ranked, self.config.parent_size)

        self.analytics.export_generation(ranked, self.generation_count)
        record = self._record(ranked, respawned)

        if ranked:
            self._save_winner(ranked[0])

        for agent in ranked:
            self.registry.destroy(agent.handle)
        self._agent_spawner.clear(self.agent_areas)
        self._active = []

        self._generate_agents(self._parents)
        self.generation_count += 1
        return record

    # --- internals -------------------------------------------------------

    def _generate_agents(self, parents: list[AgentData]) -> None:
        if self.config.debug_disable_spawning:
            logger.info("Agent spawning is disabled via debug option.")
            self._active = []
            return

        try:
            self._agent_spawner.clear(self.agent_areas)
            created = self._agent_spawner.populate(self.agent_areas, self.config.population_size)
        except EvoherdError as e:
            logger.error(f"Agent spawner failed: {e}")
            created = []

        agents = [entity for entity in created if isinstance(entity, Agent)]
        if not agents:
            logger.warning("Spawner produced no agents; will retry next generation")
            self._active = []
            return

        default = AgentData.default(self.config.start_health)
        for agent in agents:
            parent = parents[self.rng.randrange(len(parents))] if parents else default
            agent.birth(parent)
            agent.mutate(self.config.mutation_factor, self.config.mutation_chance, self.rng)
            agent.awake_up()

        self._active = agents

    def _purge(self) -> None:
        self._active = [a for a in self._active if self.registry.is_alive(a.handle)]

    def _save_winner(self, best: Agent) -> None:
        name = winner_name(best.name, self.generation_count)
        self.last_winner = best.get_data()
        try:
            self.winner_store.save_winner(best, name)
        except (OSError, EvoherdError) as e:
            logger.warning(f"Could not save winner {name}: {e}")
        logger.info(f"Last winner had: {best.points} points!")

    def _record(self, ranked: list[Agent], respawned: bool) -> GenerationRecord:
        fitness = [agent.get_fitness_score() for agent in ranked]
        record = GenerationRecord(
            generation=self.generation_count,
            population=len(ranked),
            respawned=respawned,
            parents=[p.agent_id for p in self._parents],
        )
        if ranked:
            record.winner = ranked[0].name
            record.winner_fitness = fitness[0]
            record.median_fitness = median(fitness)
            record.average_fitness = average(fitness)
        self.history.append(record)
        return record

    def _make_agent(self, area: Area, position: Position, kind: str) -> Agent:
        return self.registry.spawn(
            position=position,
            area=area.name,
            start_health=self.config.start_health,
            point_values={
                ItemKind.BOX: self.config.box_points,
                ItemKind.GAS_BOX: self.config.gas_box_points,
            },
            predator_penalty=self.config.predator_penalty,
            item_remover=self.remove_item,
        )

    def _make_item(self, area: Area, position: Position, kind: ItemKind) -> Item:
        self._item_serial += 1
        return Item(self._item_serial, kind, position, area.name)

    def _destroy_entity(self, entity: Agent) -> None:
        self.registry.destroy(entity.handle)

    def _item_kinds(self) -> list[ItemKind]:
        try:
            return [ItemKind(kind) for kind in self.config.box_kinds]
        except ValueError as e:
            raise ConfigurationError(f"Unknown box kind: {e}") from e

    def remove_item(self, item: Item) -> bool:
        """Take a collected item out of the world."""
        return any(spawner.remove(item) for spawner in self.box_spawners)
