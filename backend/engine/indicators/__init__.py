"""Technical indicators (pure math, no I/O)."""

from engine.indicators.indicators import (
    adx,
    atr,
    average_volume,
    bollinger_bands,
    donchian_channel,
    ema,
    highest,
    hma,
    lowest,
    macd,
    MacdResult,
    rsi,
    sma,
    stddev,
    supertrend,
    SuperTrendResult,
    true_range,
    wma,
)
from engine.indicators.calculator import IndicatorCalculator, IndicatorSet

__all__ = [
    "adx",
    "atr",
    "average_volume",
    "bollinger_bands",
    "donchian_channel",
    "ema",
    "highest",
    "hma",
    "lowest",
    "macd",
    "MacdResult",
    "rsi",
    "sma",
    "stddev",
    "supertrend",
    "SuperTrendResult",
    "true_range",
    "wma",
    "IndicatorCalculator",
    "IndicatorSet",
]
