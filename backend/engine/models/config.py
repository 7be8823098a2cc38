"""Engine configuration models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from engine.models.candle import Timeframe


class StrategyType(str, Enum):
    """The three mutually exclusive signal strategies."""

    TREND = "TREND"
    REVERSAL = "REVERSAL"
    MOMENTUM = "MOMENTUM"


class EngineConfig(BaseModel):
    """Signal engine configuration.

    Immutable for the duration of one engine call. `show_tp` and
    `show_sl` only affect chart display and are ignored by the engine.
    """

    model_config = ConfigDict(frozen=True)

    strategy: StrategyType = StrategyType.MOMENTUM
    sensitivity: int = Field(default=5, ge=1, le=100)
    risk_reward: float = Field(default=2.0, gt=0)
    atr_period: int = Field(default=14, ge=1)

    # Confirmation filters
    use_rsi_filter: bool = False
    use_volume_filter: bool = False
    use_macd_filter: bool = False
    use_ema_trend_filter: bool = False
    use_adx_filter: bool = False
    adx_threshold: float = 25.0

    # Display only
    show_tp: bool = True
    show_sl: bool = True


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (chart-side rounding)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class SensitivityProfile:
    """Thresholds derived from the single sensitivity input (1-100).

    Higher sensitivity means shorter cooldown, shorter breakout lookback,
    a wider RSI acceptance band and a faster, tighter SuperTrend.
    """

    sensitivity: int
    cooldown_candles: int
    momentum_lookback: int
    rsi_lower: float
    rsi_upper: float
    st_factor: float
    st_period: int

    @classmethod
    def from_sensitivity(
        cls,
        sensitivity: int,
        timeframe: Timeframe | None = None,
    ) -> SensitivityProfile:
        s = max(1, min(100, int(sensitivity)))

        cooldown = max(2, round_half_up(20 - s * 0.18))
        # Second bars are noisy; space signals further apart
        if timeframe is Timeframe.S1:
            cooldown *= 4

        return cls(
            sensitivity=s,
            cooldown_candles=cooldown,
            momentum_lookback=max(5, round_half_up(30 - s * 0.25)),
            rsi_lower=20 + s * 0.25,
            rsi_upper=80 - s * 0.25,
            st_factor=4.0 - s * 0.025,
            st_period=max(7, round_half_up(14 - s * 0.07)),
        )

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        timeframe: Timeframe | None = None,
    ) -> SensitivityProfile:
        return cls.from_sensitivity(config.sensitivity, timeframe)
