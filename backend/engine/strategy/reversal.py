"""Reversal strategy: Bollinger Band rejection confirmed by RSI.

LONG when the previous low pierced the lower band, the current close
recovered above it, RSI is below the sensitivity-derived lower bound
and the candle closed bullish. SHORT mirrors this at the upper band.
"""

from engine.indicators.calculator import IndicatorSet
from engine.models.config import SensitivityProfile, StrategyType, round_half_up
from engine.models.signal import SignalType
from engine.strategy.protocol import Candidate
from engine.strategy.registry import register_strategy


@register_strategy(StrategyType.REVERSAL)
def evaluate_reversal(
    ind: IndicatorSet,
    i: int,
    profile: SensitivityProfile,
) -> Candidate | None:
    close, open_ = ind.close[i], ind.open[i]
    upper, lower = ind.bb_upper[i], ind.bb_lower[i]
    rsi_now = ind.rsi[i]

    if (
        ind.low[i - 1] < lower
        and close > lower
        and rsi_now < profile.rsi_lower
        and close > open_
    ):
        return Candidate(
            SignalType.LONG,
            f"BB Rejection (RSI < {round_half_up(profile.rsi_lower)})",
        )

    if (
        ind.high[i - 1] > upper
        and close < upper
        and rsi_now > profile.rsi_upper
        and close < open_
    ):
        return Candidate(
            SignalType.SHORT,
            f"BB Rejection (RSI > {round_half_up(profile.rsi_upper)})",
        )

    return None
