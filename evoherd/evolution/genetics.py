"""Genetic system: mutation, fitness, ranking and parent selection.

Implements the generational algorithm used by the generation manager:
- Bounded uniform mutation of inherited traits
- Weighted fitness combining survival, points and risk
- Deterministic descending ranking
- Truncation selection of the parent pool
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from evoherd.agents.identity import TRAIT_RANGES, GeneticTraits

if TYPE_CHECKING:
    from evoherd.agents.identity import AgentData
    from evoherd.rng import RandomStream
    from evoherd.simulation.entities import Agent

# Fitness weights
SURVIVAL_WEIGHT = 2.0
HAZARD_POINT_BONUS = 0.5
RISK_PENALTY = -10.0
MIN_HEALTH_FACTOR = 0.1


def mutate_traits(
    traits: GeneticTraits,
    factor: float,
    chance: float,
    rng: RandomStream,
) -> GeneticTraits:
    """Return mutated copy of ``traits``.

    Each trait, with probability ``chance``, moves by a uniform amount in
    ``[-factor, factor]`` and is clamped to its valid range. One draw decides
    whether a trait mutates and, if it does, one more draw sets the amount,
    always in trait declaration order.

    Args:
        traits: Traits to mutate (left untouched)
        factor: Maximum perturbation magnitude
        chance: Probability of mutation per trait (0.0-1.0)
        rng: Random stream

    Returns:
        New GeneticTraits for the child
    """
    child = {}
    for name, value in traits.as_dict().items():
        if rng.random() < chance:
            value = value + rng.uniform(-1.0, 1.0) * factor

        low, high = TRAIT_RANGES[name]
        child[name] = max(low, min(high, value))

    return GeneticTraits(**child)


def fitness_score(
    health: float,
    start_health: float,
    survival_time: float,
    points: float,
    hazard_survival_time: float,
) -> float:
    """Weighted fitness of an agent.

    Survival is scaled by remaining health, points earn a bonus when the
    agent also survived the hazard zone, and agents that entered the hazard
    without gaining anything are penalized.
    """
    if start_health > 0:
        health_factor = max(MIN_HEALTH_FACTOR, min(1.0, health / start_health))
    else:
        health_factor = MIN_HEALTH_FACTOR

    survival_score = survival_time * health_factor * SURVIVAL_WEIGHT
    exposed = hazard_survival_time > 0
    point_score = points + (points * HAZARD_POINT_BONUS if exposed else 0.0)
    risk_penalty = RISK_PENALTY if exposed and points <= 0 else 0.0

    return survival_score + point_score + risk_penalty


def rank_population(agents: list[Agent]) -> list[Agent]:
    """Sort agents by fitness, best first.

    Ties fall back to spawn serial so the ranking never depends on the
    order of the incoming list.
    """
    return sorted(agents, key=lambda agent: (-agent.get_fitness_score(), agent.serial))


def select_parents(ranked: list[Agent], parent_size: int) -> list[AgentData]:
    """Snapshot the top ``parent_size`` agents of an already ranked list."""
    count = max(0, min(parent_size, len(ranked)))
    return [agent.get_data() for agent in ranked[:count]]
