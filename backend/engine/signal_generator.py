"""Signal generator: candles -> indicators -> strategy -> filters -> scoring -> cooldown.

This module is pure computation with no I/O dependencies. Each call
recomputes every indicator from the full candle array and keeps no
state between calls, so the same input always yields the same signals
and appending candles never changes signals already emitted for the
earlier part of the array.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from engine.cooldown import CooldownGate
from engine.filters import apply_filters, build_filter_chain
from engine.indicators.calculator import IndicatorCalculator
from engine.models import (
    Candle,
    EngineConfig,
    SensitivityProfile,
    Signal,
    SignalStatus,
    Timeframe,
    infer_candle_duration,
)
from engine.models.signal import signal_id_for
from engine.scoring import price_levels, score_confidence
from engine.strategy import get_strategy

logger = logging.getLogger(__name__)

# Longest warm-up (EMA200); no candle before this index is evaluated
MIN_CANDLES = 200


def compute_signals(
    candles: Sequence[Candle],
    config: EngineConfig,
    timeframe: Timeframe | str | None = None,
) -> list[Signal]:
    """
    Compute trading signals for an ordered candle array.

    Args:
        candles: Candles with strictly increasing, evenly spaced `time`
        config: Engine configuration
        timeframe: Optional chart timeframe; "1s" quadruples the cooldown

    Returns:
        Signals ordered by ascending candle_time, no two closer than
        cooldown_candles * candle duration. Empty if fewer than
        MIN_CANDLES candles are supplied.
    """
    if len(candles) < MIN_CANDLES:
        return []

    tf = Timeframe(timeframe) if timeframe is not None else None
    profile = SensitivityProfile.from_config(config, tf)
    ind = IndicatorCalculator(config, profile).calculate_all(candles)

    evaluate = get_strategy(config.strategy)
    chain = build_filter_chain(config)
    gate = CooldownGate(profile.cooldown_candles, infer_candle_duration(candles))

    signals: list[Signal] = []
    candidates = 0

    for i in range(MIN_CANDLES, len(candles)):
        candidate = evaluate(ind, i, profile)
        if candidate is None:
            continue
        candidates += 1

        candidate = apply_filters(candidate, ind, i, config, chain)
        if candidate is None:
            continue

        confidence = score_confidence(ind, i, candidate.type)

        candle = candles[i]
        if not gate.admit(candle.time):
            logger.debug(
                "Cooldown drop %s at t=%d (last=%s)",
                candidate.type.value, candle.time, gate.last_time,
            )
            continue

        levels = price_levels(
            candle.close, float(ind.atr[i]), config.risk_reward, candidate.type
        )
        signals.append(
            Signal(
                id=signal_id_for(candle.time),
                candle_time=candle.time,
                type=candidate.type,
                entry_price=levels.entry,
                stop_loss=levels.stop_loss,
                take_profit=levels.take_profit,
                status=SignalStatus.ACTIVE,
                reason=candidate.reason,
                confidence=confidence,
            )
        )

    logger.debug(
        "%s sens=%d: %d candles, %d candidates, %d signals",
        config.strategy.value, profile.sensitivity, len(candles), candidates, len(signals),
    )
    return signals


class SignalEngine:
    """Stateless engine bound to a configuration.

    Holds only the configuration and timeframe; every `compute` call is
    an independent full recompute.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        timeframe: Timeframe | str | None = None,
    ):
        self.config = config or EngineConfig()
        self.timeframe = Timeframe(timeframe) if timeframe is not None else None

    @property
    def profile(self) -> SensitivityProfile:
        return SensitivityProfile.from_config(self.config, self.timeframe)

    def with_config(self, config: EngineConfig) -> SignalEngine:
        return SignalEngine(config, self.timeframe)

    def compute(self, candles: Sequence[Candle]) -> list[Signal]:
        return compute_signals(candles, self.config, self.timeframe)
