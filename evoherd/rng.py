"""Seedable random stream shared by the manager, spawners and host."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class RandomStream:
    """Single deterministic RNG stream with an explicit reset hook.

    Never touches the global ``random`` state. The generation manager resets
    it at simulation start and at every generation advance.
    """

    def __init__(self, seed: int = 6):
        self.seed = seed
        self._rng = random.Random(seed)

    def reset(self, seed: int | None = None) -> None:
        """Re-seed the stream (to ``seed`` or the stored fixed seed)."""
        if seed is not None:
            self.seed = seed
        self._rng.seed(self.seed)

    def random(self) -> float:
        return self._rng.random()

    def uniform(self, a: float, b: float) -> float:
        return self._rng.uniform(a, b)

    def randrange(self, n: int) -> int:
        return self._rng.randrange(n)

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)
