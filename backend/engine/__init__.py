"""Market-signal engine: indicators, strategies, filters and scoring.

This package contains pure computation with no I/O dependencies
(no network, storage or UI access). Every call recomputes all
indicator series from the supplied candle array, so callers can
re-run it on every tick without accumulating state.
"""

from engine.models import (
    Candle,
    EngineConfig,
    SensitivityProfile,
    Signal,
    SignalStatus,
    SignalType,
    StrategyType,
    Timeframe,
)
from engine.signal_generator import MIN_CANDLES, SignalEngine, compute_signals

__all__ = [
    "Candle",
    "EngineConfig",
    "SensitivityProfile",
    "Signal",
    "SignalStatus",
    "SignalType",
    "StrategyType",
    "Timeframe",
    "MIN_CANDLES",
    "SignalEngine",
    "compute_signals",
]
