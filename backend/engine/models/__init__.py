"""Engine data models."""

from engine.models.candle import Candle, Timeframe, infer_candle_duration
from engine.models.signal import Signal, SignalStatus, SignalType
from engine.models.config import EngineConfig, SensitivityProfile, StrategyType

__all__ = [
    "Candle",
    "Timeframe",
    "infer_candle_duration",
    "Signal",
    "SignalStatus",
    "SignalType",
    "EngineConfig",
    "SensitivityProfile",
    "StrategyType",
]
