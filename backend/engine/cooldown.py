"""Minimum temporal spacing between emitted signals within one run."""

from __future__ import annotations


class CooldownGate:
    """Admits a signal only if it is at least `min_gap_ms` after the last admitted one.

    Scoped to a single engine call; a fresh gate is created per call.
    """

    def __init__(self, cooldown_candles: int, candle_duration_ms: int):
        self.cooldown_candles = cooldown_candles
        self.candle_duration_ms = candle_duration_ms
        self._last_time: int | None = None

    @property
    def min_gap_ms(self) -> int:
        return self.cooldown_candles * self.candle_duration_ms

    @property
    def last_time(self) -> int | None:
        return self._last_time

    def is_open(self, candle_time: int) -> bool:
        """Check whether a signal at candle_time would be admitted."""
        if self._last_time is None:
            return True
        return candle_time - self._last_time >= self.min_gap_ms

    def admit(self, candle_time: int) -> bool:
        """Record candle_time as emitted if the gate is open. Returns True if admitted."""
        if not self.is_open(candle_time):
            return False
        self._last_time = candle_time
        return True
