"""Winner persistence: durable snapshots of each generation's best agent.

Provides atomic writes keyed by generation-qualified names
(``<basename>Gen-<N>``).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from evoherd.agents.identity import AgentData
from evoherd.errors import SerializationError

if TYPE_CHECKING:
    from evoherd.simulation.entities import Agent

logger = logging.getLogger(__name__)


def winner_name(basename: str, generation: int) -> str:
    return f"{basename}Gen-{generation}"


class WinnerSink(Protocol):
    def save_winner(self, agent: Agent, name: str) -> str | None: ...


class WinnerStore:
    """Stores winner snapshots as JSON files in one directory."""

    def __init__(self, directory: str = "data/winners"):
        self._dir = Path(directory)

    def save_winner(self, agent: Agent, name: str) -> str:
        """Save the agent snapshot under ``name`` with an atomic write.

        Returns:
            Path to the saved file
        """
        self._dir.mkdir(parents=True, exist_ok=True)
        data = {"name": name, "fitness": agent.get_fitness_score(), **agent.get_data().to_dict()}

        filepath = self._dir / f"{name}.json"
        temp_path = self._dir / f".{name}.json.tmp"
        try:
            with open(temp_path, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, filepath)
        finally:
            if temp_path.exists():
                temp_path.unlink()

        logger.info(f"Saved winner {name} to {filepath}")
        return str(filepath)

    def load_winner(self, name: str) -> AgentData:
        """Load a saved winner snapshot.

        Raises:
            SerializationError: If the file is not valid JSON or not a snapshot
        """
        path = self._dir / f"{name}.json"
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Corrupted winner file {path}: {e}") from e
        return AgentData.from_dict(data)

    def list_winners(self) -> list[str]:
        """Names of all stored winners, sorted."""
        if not self._dir.exists():
            return []
        return sorted(p.stem for p in self._dir.glob("*.json"))


class NullWinnerStore:
    """Sink used when winner persistence is disabled."""

    def save_winner(self, agent: Agent, name: str) -> None:
        logger.debug(f"Winner persistence disabled, skipping {name}")
        return None
