"""Hazard zones: gas spheres that damage every agent inside them.

A zone holds agent handles, never agents. While at least one agent is
inside, a single repeating task applies damage once per interval.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable

from evoherd.agents.identity import AgentHandle
from evoherd.simulation.entities import Agent, Position
from evoherd.simulation.scheduler import RepeatingTask

logger = logging.getLogger(__name__)


class HazardZone:
    """Sphere-shaped hazard with occupancy-gated damage over time."""

    def __init__(
        self,
        resolve: Callable[[AgentHandle], Agent | None],
        name: str = "gas",
        center: Position = (0.0, 0.0, 0.0),
        radius: float = 8.0,
        damage_per_tick: float = 20.0,
        interval: float = 1.0,
    ):
        """Initialize hazard zone.

        Args:
            resolve: Handle lookup (``AgentRegistry.get``)
            name: Zone label for logs
            center: Sphere center
            radius: Sphere radius
            damage_per_tick: Damage applied to each occupant per interval
            interval: Seconds between damage applications
        """
        self._resolve = resolve
        self.name = name
        self.center = center
        self.radius = radius
        self.damage_per_tick = damage_per_tick
        self.interval = interval

        # dict keeps entry order for deterministic damage order
        self._members: dict[AgentHandle, None] = {}
        self._schedule: RepeatingTask | None = None

        self.schedule_starts = 0
        self.schedule_stops = 0
        self.damage_applications = 0

    @property
    def members(self) -> list[AgentHandle]:
        return list(self._members)

    @property
    def occupied(self) -> bool:
        return bool(self._members)

    @property
    def damaging(self) -> bool:
        return self._schedule is not None

    def __contains__(self, agent: Agent) -> bool:
        return agent.handle in self._members

    def enter(self, agent: Agent) -> bool:
        """Add ``agent`` to the zone. Re-entering is a no-op."""
        if not agent.alive or agent.handle in self._members:
            return False

        self._members[agent.handle] = None
        if self._schedule is None:
            self._start_schedule()
        return True

    def exit(self, agent: Agent) -> bool:
        """Remove ``agent`` from the zone. Leaving twice is a no-op."""
        return self.forget(agent.handle)

    def forget(self, handle: AgentHandle) -> bool:
        """Drop a handle from membership (registry destroy listener)."""
        if handle not in self._members:
            return False

        del self._members[handle]
        if not self._members:
            self._stop_schedule()
        return True

    def contains(self, position: Position) -> bool:
        return math.dist(position, self.center) <= self.radius

    def refresh(self, agents: Iterable[Agent]) -> int:
        """Add every live agent currently inside the sphere.

        Returns:
            Number of agents that joined
        """
        joined = 0
        for agent in agents:
            if agent.alive and self.contains(agent.position) and self.enter(agent):
                joined += 1
        return joined

    def tick(self, dt: float) -> int:
        """Advance the damage schedule by ``dt`` seconds."""
        if self._schedule is None:
            return 0
        return self._schedule.advance(dt)

    def clear(self) -> None:
        """Drop every occupant and stop the damage schedule."""
        self._members.clear()
        self._stop_schedule()

    def _start_schedule(self) -> None:
        self._schedule = RepeatingTask(self.interval, self._apply_damage)
        self._schedule.start()
        self.schedule_starts += 1
        logger.debug(f"{self.name}: damage schedule started")

    def _stop_schedule(self) -> None:
        if self._schedule is None:
            return
        self._schedule.cancel()
        self._schedule = None
        self.schedule_stops += 1
        logger.debug(f"{self.name}: damage schedule stopped")

    def _apply_damage(self) -> None:
        self.damage_applications += 1
        for handle in list(self._members):
            agent = self._resolve(handle)
            if agent is None or not agent.alive:
                self.forget(handle)
                continue

            agent.take_damage(self.damage_per_tick)
            if not agent.alive:
                logger.info(f"{agent.name} died in {self.name}")
                self.forget(handle)
