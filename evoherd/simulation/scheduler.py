"""Cancellable repeating task driven by simulation time."""

from __future__ import annotations

from collections.abc import Callable


class RepeatingTask:
    """Fires ``callback`` once per elapsed ``interval`` while active.

    Time only moves through ``advance``. The first firing happens one full
    interval after ``start``; ``cancel`` discards any partial interval.
    """

    def __init__(self, interval: float, callback: Callable[[], None]):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._callback = callback
        self._elapsed = 0.0
        self.active = False

    def start(self) -> None:
        if self.active:
            return
        self.active = True
        self._elapsed = 0.0

    def cancel(self) -> None:
        self.active = False
        self._elapsed = 0.0

    def advance(self, dt: float) -> int:
        """Move the task forward by ``dt`` seconds.

        The callback may cancel the task; remaining intervals are then dropped.

        Returns:
            Number of firings during this call
        """
        if not self.active:
            return 0

        self._elapsed += dt
        count = 0
        while self.active and self._elapsed >= self.interval:
            self._elapsed -= self.interval
            self._callback()
            count += 1
        return count
