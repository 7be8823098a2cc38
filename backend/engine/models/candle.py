"""Candle (OHLCV bar) data models."""

from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Fallback spacing when only one candle is available
DEFAULT_CANDLE_DURATION_MS = 60_000


class Timeframe(str, Enum):
    """Supported chart timeframes."""

    S1 = "1s"
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"
    H4 = "4h"
    D1 = "24h"

    @property
    def ms(self) -> int:
        """Duration of one candle in milliseconds."""
        return _TIMEFRAME_MS[self]

    @property
    def label(self) -> str:
        return "1D" if self is Timeframe.D1 else self.value


_TIMEFRAME_MS: dict[Timeframe, int] = {
    Timeframe.S1: 1_000,
    Timeframe.M1: 60_000,
    Timeframe.M5: 5 * 60_000,
    Timeframe.M15: 15 * 60_000,
    Timeframe.H1: 60 * 60_000,
    Timeframe.H4: 4 * 60 * 60_000,
    Timeframe.D1: 24 * 60 * 60_000,
}


class Candle(BaseModel):
    """One OHLCV bar. `time` is the bar open time in epoch milliseconds."""

    model_config = ConfigDict(frozen=True)

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0, ge=0)


def infer_candle_duration(candles: Sequence[Candle]) -> int:
    """Candle spacing in ms, taken from the first two candles."""
    if len(candles) > 1:
        return candles[1].time - candles[0].time
    return DEFAULT_CANDLE_DURATION_MS
