"""Winner snapshot persistence."""

from __future__ import annotations

from evoherd.persistence.winners import NullWinnerStore, WinnerStore, winner_name

__all__ = ["NullWinnerStore", "WinnerStore", "winner_name"]
