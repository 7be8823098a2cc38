"""Confidence scoring and ATR-based risk sizing.

Confidence is an additive heuristic, not a probability:
- base 60
- RSI alignment: +15 on stretched RSI in the trade direction, -10 when
  RSI is already extended against it
- volume: +15 above 1.5x the 10-candle average, else +5 above average
- medium trend (close / EMA21 / EMA50) agreeing with direction: +10
- ADX above 30: +10
then clamped to [30, 98].

Stop and target sit 2 ATR and 2 ATR * risk_reward from the close.
"""

from __future__ import annotations

from dataclasses import dataclass

from engine.indicators.calculator import IndicatorSet
from engine.models.signal import SignalType

BASE_CONFIDENCE = 60
MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 98

RSI_BOOST = 15
RSI_PENALTY = 10
VOLUME_SPIKE_BOOST = 15
VOLUME_ABOVE_AVG_BOOST = 5
TREND_ALIGN_BOOST = 10
ADX_BOOST = 10

VOLUME_SPIKE_MULT = 1.5
STRONG_ADX = 30.0

ATR_STOP_MULT = 2.0


def score_confidence(ind: IndicatorSet, i: int, signal_type: SignalType) -> int:
    """Compute the clamped confidence score for a candidate at index i."""
    score = BASE_CONFIDENCE
    rsi_now = ind.rsi[i]
    close = ind.close[i]

    if signal_type == SignalType.LONG:
        if rsi_now < 35:
            score += RSI_BOOST
        elif rsi_now > 60:
            score -= RSI_PENALTY
    else:
        if rsi_now > 65:
            score += RSI_BOOST
        elif rsi_now < 40:
            score -= RSI_PENALTY

    volume, avg_volume = ind.volume[i], ind.avg_volume[i]
    if volume > avg_volume * VOLUME_SPIKE_MULT:
        score += VOLUME_SPIKE_BOOST
    elif volume > avg_volume:
        score += VOLUME_ABOVE_AVG_BOOST

    ema21, ema50 = ind.ema21[i], ind.ema50[i]
    trend_long = close > ema50 and ema21 > ema50
    trend_short = close < ema50 and ema21 < ema50
    if (signal_type == SignalType.LONG and trend_long) or (
        signal_type == SignalType.SHORT and trend_short
    ):
        score += TREND_ALIGN_BOOST

    if ind.adx[i] > STRONG_ADX:
        score += ADX_BOOST

    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, score))


@dataclass(frozen=True, slots=True)
class PriceLevels:
    """Entry, stop loss and take profit for one signal."""

    entry: float
    stop_loss: float
    take_profit: float


def price_levels(
    close: float,
    atr_value: float,
    risk_reward: float,
    signal_type: SignalType,
) -> PriceLevels:
    """Place stop and target around the close using an ATR volatility buffer."""
    buffer = atr_value * ATR_STOP_MULT
    target = buffer * risk_reward
    if signal_type == SignalType.LONG:
        return PriceLevels(entry=close, stop_loss=close - buffer, take_profit=close + target)
    return PriceLevels(entry=close, stop_loss=close + buffer, take_profit=close - target)
