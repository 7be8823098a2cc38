"""Momentum strategy: Donchian channel breakout.

The channel covers the `momentum_lookback` candles before the current
one, so a close above the prior highest high is a breakout and a close
below the prior lowest low is a breakdown.
"""

from engine.indicators.calculator import IndicatorSet
from engine.models.config import SensitivityProfile, StrategyType
from engine.models.signal import SignalType
from engine.strategy.protocol import Candidate
from engine.strategy.registry import register_strategy


@register_strategy(StrategyType.MOMENTUM)
def evaluate_momentum(
    ind: IndicatorSet,
    i: int,
    profile: SensitivityProfile,
) -> Candidate | None:
    lookback = profile.momentum_lookback
    close = ind.close[i]

    if close > ind.donchian_upper[i]:
        return Candidate(SignalType.LONG, f"{lookback}-Period Breakout")
    if close < ind.donchian_lower[i]:
        return Candidate(SignalType.SHORT, f"{lookback}-Period Breakdown")
    return None
