"""Per-generation statistics export.

Appends one Winner / Median / Average record set per generation to a
semicolon-delimited file:

    Type;Generation;AgentID;FitnessScore;ItemsCollected;SurvivalTime;Health;
    BehavioralPatterns;GeneticTraits
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from evoherd.errors import ExportError

if TYPE_CHECKING:
    from evoherd.agents.identity import AgentData
    from evoherd.simulation.entities import Agent

logger = logging.getLogger(__name__)

DELIMITER = ";"
NOT_AVAILABLE = "N/A"
HEADERS = [
    "Type",
    "Generation",
    "AgentID",
    "FitnessScore",
    "ItemsCollected",
    "SurvivalTime",
    "Health",
    "BehavioralPatterns",
    "GeneticTraits",
]


def median(values: Sequence[float]) -> float:
    """Median after ascending sort; mean of the middle pair for even sizes."""
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2.0
    return ordered[mid]


def average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _fmt(value: float) -> str:
    return f"{value:.2f}"


class GenerationAnalytics:
    """Aggregates ranked generations and appends them to an export file."""

    def __init__(self, export_path: str = "data/SimulationData.csv"):
        self.export_path = Path(export_path)
        self.generations_exported = 0

    def build_rows(self, snapshots: Sequence[AgentData], generation: int) -> list[list[str]]:
        """Winner, Median and Average rows for already ranked snapshots."""
        winner = snapshots[0]
        fitness = [s.fitness() for s in snapshots]
        items = [float(s.items_collected) for s in snapshots]
        survival = [s.survival_time for s in snapshots]
        health = [s.health for s in snapshots]

        return [
            [
                "Winner",
                str(generation),
                winner.agent_id,
                _fmt(winner.fitness()),
                _fmt(winner.items_collected),
                _fmt(winner.survival_time),
                _fmt(winner.health),
                winner.behavior,
                winner.traits.describe(),
            ],
            [
                "Median",
                str(generation),
                NOT_AVAILABLE,
                _fmt(median(fitness)),
                _fmt(median(items)),
                _fmt(median(survival)),
                _fmt(median(health)),
                NOT_AVAILABLE,
                NOT_AVAILABLE,
            ],
            [
                "Average",
                str(generation),
                NOT_AVAILABLE,
                _fmt(average(fitness)),
                _fmt(average(items)),
                _fmt(average(survival)),
                _fmt(average(health)),
                NOT_AVAILABLE,
                NOT_AVAILABLE,
            ],
        ]

    def export_generation(self, ranked_agents: Sequence[Agent], generation: int) -> bool:
        """Append the statistics of one ranked generation.

        Best effort: write failures are logged and reported through the
        return value, never raised.

        Args:
            ranked_agents: Agents ordered best first
            generation: Generation index written in every row

        Returns:
            True if rows were written
        """
        if not ranked_agents:
            return False

        snapshots = [agent.get_data() for agent in ranked_agents]
        rows = self.build_rows(snapshots, generation)

        try:
            self.export_path.parent.mkdir(parents=True, exist_ok=True)
            write_header = not self.export_path.exists() or self.export_path.stat().st_size == 0
            with open(self.export_path, "a", newline="") as f:
                writer = csv.writer(f, delimiter=DELIMITER, lineterminator="\n")
                if write_header:
                    writer.writerow(HEADERS)
                writer.writerows(rows)
        except OSError as e:
            logger.warning(f"Could not export generation {generation} to {self.export_path}: {e}")
            return False

        self.generations_exported += 1
        logger.info(f"Data exported to: {self.export_path}")
        return True


def read_export(path: str) -> list[dict[str, str]]:
    """Load an export file back as one dict per data row.

    Raises:
        ExportError: If the file does not start with the export header
    """
    with open(path, newline="") as f:
        reader = csv.DictReader(f, delimiter=DELIMITER)
        if reader.fieldnames != HEADERS:
            raise ExportError(f"{path} is not a generation export")
        return list(reader)
