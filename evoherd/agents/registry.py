"""Agent registry: arena of agent slots (spawn, destroy, liveness-checked lookup)."""

from __future__ import annotations

import logging
from collections.abc import Callable

from evoherd.agents.identity import AgentHandle
from evoherd.simulation.entities import Agent, Item, ItemKind, Position

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Manages agent lifecycle: spawn, destroy, lookup.

    Single source of truth for every agent entity. Other components keep
    ``AgentHandle`` values, never the agents themselves; a handle stops
    resolving as soon as its agent is destroyed.
    """

    def __init__(self, basename: str = "Cow"):
        self.basename = basename
        self._slots: list[Agent | None] = []
        self._generations: list[int] = []
        self._free: list[int] = []
        self._serial = 0
        self._destroy_listeners: list[Callable[[AgentHandle], None]] = []

    def spawn(
        self,
        position: Position = (0.0, 0.0, 0.0),
        area: str = "",
        start_health: float = 100.0,
        point_values: dict[ItemKind, float] | None = None,
        predator_penalty: float = 5.0,
        item_remover: Callable[[Item], bool] | None = None,
    ) -> Agent:
        """Spawn a new dormant agent in a free slot."""
        if self._free:
            index = self._free.pop()
        else:
            index = len(self._slots)
            self._slots.append(None)
            self._generations.append(0)

        self._serial += 1
        agent = Agent(
            handle=AgentHandle(index, self._generations[index]),
            serial=self._serial,
            name=f"{self.basename}-{self._serial:04d}",
            position=position,
            area=area,
            start_health=start_health,
            predator_penalty=predator_penalty,
            item_remover=item_remover,
            on_death=self._on_agent_death,
        )
        if point_values is not None:
            agent.point_values = dict(point_values)

        self._slots[index] = agent
        return agent

    def get(self, handle: AgentHandle) -> Agent | None:
        """Look up a living agent by handle. Stale handles give None."""
        if not 0 <= handle.index < len(self._slots):
            return None
        if self._generations[handle.index] != handle.generation:
            return None
        return self._slots[handle.index]

    def is_alive(self, handle: AgentHandle) -> bool:
        agent = self.get(handle)
        return agent is not None and agent.alive

    def destroy(self, handle: AgentHandle) -> bool:
        """Destroy the agent behind ``handle`` and invalidate the handle.

        Returns:
            False if the handle was already stale
        """
        agent = self.get(handle)
        if agent is None:
            return False

        agent.mark_destroyed()
        self._slots[handle.index] = None
        self._generations[handle.index] += 1
        self._free.append(handle.index)

        for listener in list(self._destroy_listeners):
            listener(handle)
        return True

    def add_destroy_listener(self, listener: Callable[[AgentHandle], None]) -> None:
        """Register a callback fired with the handle of every destroyed agent."""
        self._destroy_listeners.append(listener)

    def living_agents(self) -> list[Agent]:
        """All living agents, in spawn order."""
        agents = [agent for agent in self._slots if agent is not None and agent.alive]
        return sorted(agents, key=lambda agent: agent.serial)

    def __len__(self) -> int:
        return sum(1 for agent in self._slots if agent is not None)

    def _on_agent_death(self, agent: Agent) -> None:
        logger.debug(f"Destroying {agent.name} ({agent.handle})")
        self.destroy(agent.handle)
