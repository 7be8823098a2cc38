"""Confirmation filters applied to strategy candidates.

Each enabled filter either vetoes the candidate or lets it through with
a tag appended to the reason. Filters never flip direction. They run in
a fixed order (RSI, volume, MACD, EMA trend, ADX) and the first veto
short-circuits the rest.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from engine.indicators.calculator import IndicatorSet
from engine.models.config import EngineConfig
from engine.models.signal import SignalType
from engine.strategy.protocol import Candidate

logger = logging.getLogger(__name__)

# Fixed RSI bounds, independent of the sensitivity-derived reversal bounds
RSI_LONG_MIN = 40.0
RSI_LONG_MAX = 70.0
RSI_SHORT_MIN = 30.0
RSI_SHORT_MAX = 60.0

VOLUME_SPIKE_MULT = 1.2

# (candidate, indicators, index, config) -> candidate with tag, or None on veto
Filter = Callable[[Candidate, IndicatorSet, int, EngineConfig], Candidate | None]


def rsi_filter(
    candidate: Candidate, ind: IndicatorSet, i: int, config: EngineConfig
) -> Candidate | None:
    value = ind.rsi[i]
    if candidate.type == SignalType.LONG:
        if value < RSI_LONG_MIN or value > RSI_LONG_MAX:
            return None
    elif value > RSI_SHORT_MAX or value < RSI_SHORT_MIN:
        return None
    return candidate.with_reason_suffix(" (RSI)")


def volume_filter(
    candidate: Candidate, ind: IndicatorSet, i: int, config: EngineConfig
) -> Candidate | None:
    if not ind.volume[i] > ind.avg_volume[i] * VOLUME_SPIKE_MULT:
        return None
    return candidate.with_reason_suffix(" (Volume)")


def macd_filter(
    candidate: Candidate, ind: IndicatorSet, i: int, config: EngineConfig
) -> Candidate | None:
    hist = ind.macd_histogram[i]
    if candidate.type == SignalType.LONG and hist < 0:
        return None
    if candidate.type == SignalType.SHORT and hist > 0:
        return None
    return candidate.with_reason_suffix(" (MACD)")


def ema_trend_filter(
    candidate: Candidate, ind: IndicatorSet, i: int, config: EngineConfig
) -> Candidate | None:
    above = ind.close[i] > ind.ema200[i]
    if candidate.type == SignalType.LONG and not above:
        return None
    if candidate.type == SignalType.SHORT and above:
        return None
    return candidate.with_reason_suffix(" (Trend)")


def adx_filter(
    candidate: Candidate, ind: IndicatorSet, i: int, config: EngineConfig
) -> Candidate | None:
    value = ind.adx[i]
    if value < config.adx_threshold:
        return None
    return candidate.with_reason_suffix(f" (ADX {value:.1f})")


def build_filter_chain(config: EngineConfig) -> list[tuple[str, Filter]]:
    """Return the enabled filters in evaluation order."""
    chain: list[tuple[str, Filter]] = []
    if config.use_rsi_filter:
        chain.append(("rsi", rsi_filter))
    if config.use_volume_filter:
        chain.append(("volume", volume_filter))
    if config.use_macd_filter:
        chain.append(("macd", macd_filter))
    if config.use_ema_trend_filter:
        chain.append(("ema_trend", ema_trend_filter))
    if config.use_adx_filter:
        chain.append(("adx", adx_filter))
    return chain


def apply_filters(
    candidate: Candidate,
    ind: IndicatorSet,
    i: int,
    config: EngineConfig,
    chain: list[tuple[str, Filter]],
) -> Candidate | None:
    """Run the candidate through the chain; None means it was vetoed."""
    for name, check in chain:
        result = check(candidate, ind, i, config)
        if result is None:
            logger.debug(
                "Veto %s %s at t=%d by %s filter",
                candidate.type.value, candidate.reason, int(ind.time[i]), name,
            )
            return None
        candidate = result
    return candidate
