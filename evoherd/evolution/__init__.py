"""Genetic operators for generational evolution.

- mutate_traits: Bounded mutation of inherited traits
- fitness_score: Weighted survival/points/risk fitness
- rank_population: Deterministic best-first ranking
- select_parents: Truncation selection of the parent pool
"""

from __future__ import annotations

from evoherd.evolution.genetics import (
    fitness_score,
    mutate_traits,
    rank_population,
    select_parents,
)

__all__ = [
    "fitness_score",
    "mutate_traits",
    "rank_population",
    "select_parents",
]
