"""Headless host environment.

Stands in for the physics/collision layer so a simulation can run from
the command line: moves agents around their spawn area, detects pickups
and hazard overlaps, and reports them as interaction events. Traits bias
the movement, which is what gives selection something to work with.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from evoherd.agents.identity import AgentHandle
from evoherd.simulation.entities import Agent, InteractionEvent, InteractionKind, Item, ItemKind

if TYPE_CHECKING:
    from evoherd.simulation.hazard import HazardZone
    from evoherd.simulation.manager import GenerationManager


def _planar_distance(a: tuple[float, ...], b: tuple[float, ...]) -> float:
    return math.hypot(a[0] - b[0], a[2] - b[2])


class SimulatedHost:
    """Random-walk host driving a GenerationManager."""

    def __init__(self, manager: GenerationManager, predator_rate: float = 0.0):
        """Initialize host.

        Args:
            manager: Manager whose agents this host moves
            predator_rate: Expected predator contacts per agent per second
        """
        self.manager = manager
        self.predator_rate = predator_rate
        self._headings: dict[AgentHandle, tuple[float, float]] = {}
        self.elapsed = 0.0

    def step(self, dt: float) -> bool:
        """Move every active agent, report interactions, then advance time.

        Returns:
            True if the manager crossed a generation boundary
        """
        agents = [a for a in self.manager.active_agents if a.active]
        self._headings = {
            a.handle: self._headings[a.handle] for a in agents if a.handle in self._headings
        }

        for agent in agents:
            self._move(agent, dt)
            self._collect(agent)
            self._check_hazards(agent)
            self._check_predators(agent, dt)

        self.elapsed += dt
        return self.manager.update(dt)

    def _move(self, agent: Agent, dt: float) -> None:
        rng = self.manager.rng
        traits = agent.traits

        target = self._pick_target(agent)
        if target is None or rng.random() < traits.random_direction:
            heading = self._headings.get(agent.handle)
            if heading is None or rng.random() < traits.random_direction:
                angle = rng.uniform(0.0, 2.0 * math.pi)
                heading = (math.cos(angle), math.sin(angle))
        else:
            dx = target.position[0] - agent.position[0]
            dz = target.position[2] - agent.position[2]
            length = math.hypot(dx, dz) or 1.0
            heading = (dx / length, dz / length)
        self._headings[agent.handle] = heading

        step = traits.moving_speed * dt
        x, y, z = agent.position
        candidate = (x + heading[0] * step, y, z + heading[1] * step)
        area = self.manager.area_of(agent)
        if area is not None:
            candidate = area.clamp(candidate)

        # cautious agents tend to stop at the edge of a gas sphere
        for zone in self.manager.hazards:
            if zone.contains(candidate) and agent not in zone:
                if rng.random() > traits.risk_tolerance:
                    return
        agent.position = candidate

    def _pick_target(self, agent: Agent) -> Item | None:
        traits = agent.traits
        best = None
        best_score = 0.0
        for item in self.manager.items:
            distance = _planar_distance(agent.position, item.position)
            if distance > traits.sight:
                continue
            weight = traits.gas_box_weight if item.kind is ItemKind.GAS_BOX else traits.box_weight
            score = weight / (1.0 + distance)
            if score > best_score:
                best, best_score = item, score
        return best

    def _collect(self, agent: Agent) -> None:
        for item in self.manager.items:
            if _planar_distance(agent.position, item.position) <= agent.traits.ray_radius:
                agent.report_interaction(InteractionEvent.pickup(item))

    def _check_hazards(self, agent: Agent) -> None:
        zones: list[HazardZone] = self.manager.hazards
        for zone in zones:
            inside = zone.contains(agent.position)
            if inside and agent not in zone:
                zone.enter(agent)
                agent.report_interaction(InteractionEvent(InteractionKind.HAZARD_ENTER))
            elif not inside and agent in zone:
                zone.exit(agent)

        if agent.in_hazard and not any(agent in zone for zone in zones):
            agent.report_interaction(InteractionEvent(InteractionKind.HAZARD_EXIT))

    def _check_predators(self, agent: Agent, dt: float) -> None:
        if self.predator_rate <= 0:
            return
        chance = self.predator_rate * dt * (1.0 - agent.traits.predator_avoidance)
        if self.manager.rng.random() < chance:
            agent.report_interaction(InteractionEvent(InteractionKind.PREDATOR_CONTACT))
