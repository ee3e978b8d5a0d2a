"""Rich terminal output for generation summaries and exports."""

from __future__ import annotations

import io
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from evoherd.simulation.manager import GenerationRecord


def _make_console() -> Console:
    """Create a Rich Console that works on Windows (force UTF-8)."""
    if sys.platform == "win32" and hasattr(sys.stdout, "buffer"):
        utf8_stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
        return Console(file=utf8_stdout, force_terminal=True)
    return Console()


class GenerationRenderer:
    """Renders finished generations as Rich tables."""

    def __init__(self, console: Console | None = None):
        self.console = console or _make_console()

    def history_table(self, records: Sequence[GenerationRecord]) -> Table:
        table = Table(title="Generations")
        table.add_column("Gen", justify="right")
        table.add_column("Pop", justify="right")
        table.add_column("Winner")
        table.add_column("Best", justify="right", style="bold green")
        table.add_column("Median", justify="right")
        table.add_column("Average", justify="right")
        table.add_column("Note", style="yellow")

        for record in records:
            table.add_row(
                str(record.generation),
                str(record.population),
                record.winner or "-",
                f"{record.winner_fitness:.2f}",
                f"{record.median_fitness:.2f}",
                f"{record.average_fitness:.2f}",
                "respawned" if record.respawned else "",
            )
        return table

    def export_table(self, rows: Sequence[dict[str, str]]) -> Table:
        """Winner rows of an export file, one line per generation."""
        table = Table(title="Exported winners")
        table.add_column("Gen", justify="right")
        table.add_column("Agent")
        table.add_column("Fitness", justify="right", style="bold green")
        table.add_column("Items", justify="right")
        table.add_column("Survival", justify="right")
        table.add_column("Health", justify="right")
        table.add_column("Behavior", overflow="fold")

        for row in rows:
            if row.get("Type") != "Winner":
                continue
            table.add_row(
                row["Generation"],
                row["AgentID"],
                row["FitnessScore"],
                row["ItemsCollected"],
                row["SurvivalTime"],
                row["Health"],
                row["BehavioralPatterns"],
            )
        return table

    def print_history(self, records: Sequence[GenerationRecord]) -> None:
        self.console.print(self.history_table(records))

    def print_export(self, rows: Sequence[dict[str, str]]) -> None:
        self.console.print(self.export_table(rows))
