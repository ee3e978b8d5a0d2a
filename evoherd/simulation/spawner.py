"""Spawning entities inside one or more box-shaped areas.

Entities are spread across areas in proportion to each area's volume.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from evoherd.errors import ConfigurationError
from evoherd.rng import RandomStream
from evoherd.simulation.entities import Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Area:
    """Axis-aligned spawn volume."""

    name: str
    center: Position = (0.0, 0.0, 0.0)
    size: Position = (10.0, 1.0, 10.0)

    @property
    def volume(self) -> float:
        x, y, z = self.size
        return abs(x * y * z)

    @property
    def bounds(self) -> tuple[Position, Position]:
        low = tuple(c - s / 2.0 for c, s in zip(self.center, self.size, strict=True))
        high = tuple(c + s / 2.0 for c, s in zip(self.center, self.size, strict=True))
        return low, high  # type: ignore[return-value]

    def random_position(self, rng: RandomStream) -> Position:
        """Random point on the area floor (y stays at the center height)."""
        low, high = self.bounds
        return (rng.uniform(low[0], high[0]), self.center[1], rng.uniform(low[2], high[2]))

    def clamp(self, position: Position) -> Position:
        low, high = self.bounds
        return (
            max(low[0], min(high[0], position[0])),
            position[1],
            max(low[2], min(high[2], position[2])),
        )


class Spawner(Protocol):
    """Host contract for placing entities into areas."""

    def populate(self, areas: Sequence[Area], count: int) -> list[Any]: ...

    def clear(self, areas: Sequence[Area]) -> None: ...


def allocate(areas: Sequence[Area], count: int) -> list[int]:
    """Split ``count`` across ``areas`` proportionally to their volume.

    Per-area counts are rounded half to even, so the total can differ from
    ``count`` by a few entities when several areas are used.

    Raises:
        ConfigurationError: If there are no areas or they have no volume
    """
    if not areas:
        raise ConfigurationError("At least one spawn area is required")

    volumes = [area.volume for area in areas]
    total = sum(volumes)
    if total <= 0:
        raise ConfigurationError("Spawn areas have zero total volume")

    return [round(volume / total * count) for volume in volumes]


# factory(area, position, kind) -> entity
EntityFactory = Callable[[Area, Position, Any], Any]


class AreaSpawner:
    """Owns the entities it created and regenerates them on demand."""

    def __init__(
        self,
        areas: Sequence[Area],
        count: int,
        factory: EntityFactory,
        kinds: Sequence[Any],
        rng: RandomStream,
        destroy: Callable[[Any], None] | None = None,
        name: str = "spawner",
    ):
        """Initialize spawner.

        Args:
            areas: Areas to spawn into
            count: Entities per regeneration
            factory: Builds one entity for an area, position and kind
            kinds: Possible entity kinds, chosen uniformly per entity
            rng: Shared random stream
            destroy: Called for every child removed by ``clear``
            name: Label for logs
        """
        self.areas = list(areas)
        self.count = count
        self.kinds = list(kinds)
        self.name = name
        self._factory = factory
        self._rng = rng
        self._destroy = destroy
        self._children: list[Any] = []

    @property
    def children(self) -> list[Any]:
        return list(self._children)

    def validate(self) -> None:
        """Raise ConfigurationError if this spawner can never produce anything."""
        if not self.kinds:
            raise ConfigurationError(f"{self.name}: no entity kinds to spawn")
        allocate(self.areas, self.count)

    def regenerate(self) -> list[Any]:
        """Remove all previous children and create a fresh set."""
        self.clear(self.areas)
        return self.populate(self.areas, self.count)

    def populate(self, areas: Sequence[Area], count: int) -> list[Any]:
        self.validate()
        created = []
        for area, area_count in zip(areas, allocate(areas, count), strict=True):
            for _ in range(area_count):
                kind = self.kinds[self._rng.randrange(len(self.kinds))]
                position = area.random_position(self._rng)
                entity = self._factory(area, position, kind)
                if entity is not None:
                    created.append(entity)
        self._children.extend(created)
        logger.debug(f"{self.name}: spawned {len(created)} entities")
        return created

    def clear(self, areas: Sequence[Area]) -> None:
        names = {area.name for area in areas}
        kept = []
        for child in self._children:
            if getattr(child, "area", None) in names:
                if self._destroy is not None:
                    self._destroy(child)
            else:
                kept.append(child)
        self._children = kept

    def remove(self, entity: Any) -> bool:
        """Forget one child (e.g. an item that was collected)."""
        try:
            self._children.remove(entity)
        except ValueError:
            return False
        return True
