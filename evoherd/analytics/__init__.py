"""Generation statistics export."""

from __future__ import annotations

from evoherd.analytics.generation import GenerationAnalytics, average, median, read_export

__all__ = ["GenerationAnalytics", "average", "median", "read_export"]
