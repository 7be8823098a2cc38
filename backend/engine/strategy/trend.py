"""Smart Trend strategy: SuperTrend flips with HMA pullback entries.

- SuperTrend direction flip (-1 -> +1 LONG, +1 -> -1 SHORT) is the
  primary trigger.
- Without a flip, a close crossing HMA(9) in the SuperTrend direction
  is a secondary trend entry.
"""

from engine.indicators.calculator import IndicatorSet
from engine.models.config import SensitivityProfile, StrategyType
from engine.models.signal import SignalType
from engine.strategy.protocol import Candidate
from engine.strategy.registry import register_strategy


@register_strategy(StrategyType.TREND)
def evaluate_trend(
    ind: IndicatorSet,
    i: int,
    profile: SensitivityProfile,
) -> Candidate | None:
    direction = ind.st_direction[i]
    prev_direction = ind.st_direction[i - 1]

    if prev_direction == -1 and direction == 1:
        return Candidate(SignalType.LONG, "SuperTrend Buy Flip")
    if prev_direction == 1 and direction == -1:
        return Candidate(SignalType.SHORT, "SuperTrend Sell Flip")

    close, prev_close = ind.close[i], ind.close[i - 1]
    hma_now, hma_prev = ind.hma9[i], ind.hma9[i - 1]

    if prev_close < hma_prev and close > hma_now and direction == 1:
        return Candidate(SignalType.LONG, "HMA Trend Entry")
    if prev_close > hma_prev and close < hma_now and direction == -1:
        return Candidate(SignalType.SHORT, "HMA Trend Entry")

    return None
