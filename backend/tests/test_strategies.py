"""Tests for strategy evaluators and the strategy registry."""

from dataclasses import fields

import numpy as np
import pytest

from engine.indicators import IndicatorSet
from engine.models.config import SensitivityProfile, StrategyType
from engine.models.signal import SignalType
from engine.strategy import get_strategy, list_strategies, register_strategy
from engine.strategy.momentum import evaluate_momentum
from engine.strategy.reversal import evaluate_reversal
from engine.strategy.trend import evaluate_trend


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_indicators(n: int = 2, **series) -> IndicatorSet:
    """IndicatorSet of length n, zero-filled except for the given series."""
    values = {}
    for f in fields(IndicatorSet):
        if f.name in series:
            values[f.name] = np.asarray(series[f.name], dtype=np.float64)
        else:
            values[f.name] = np.zeros(n, dtype=np.float64)
    values["time"] = np.arange(n, dtype=np.int64) * 60_000
    return IndicatorSet(**values)


def reversal_setup(rsi_value: float, side: SignalType) -> IndicatorSet:
    """Previous candle pierced the band, current candle closed back inside."""
    if side == SignalType.LONG:
        return make_indicators(
            low=[94.0, 96.0],
            high=[99.0, 98.0],
            open=[97.0, 96.0],
            close=[95.0, 97.0],
            bb_lower=[95.0, 95.0],
            bb_upper=[105.0, 105.0],
            rsi=[rsi_value, rsi_value],
        )
    return make_indicators(
        low=[101.0, 102.0],
        high=[106.0, 104.0],
        open=[103.0, 104.0],
        close=[105.0, 103.0],
        bb_lower=[95.0, 95.0],
        bb_upper=[105.0, 105.0],
        rsi=[rsi_value, rsi_value],
    )


SENS_1 = SensitivityProfile.from_sensitivity(1)
SENS_50 = SensitivityProfile.from_sensitivity(50)
SENS_100 = SensitivityProfile.from_sensitivity(100)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_builtin_strategies_registered(self):
        assert list_strategies() == ["MOMENTUM", "REVERSAL", "TREND"]

    def test_lookup_by_enum_and_name(self):
        assert get_strategy(StrategyType.TREND) is evaluate_trend
        assert get_strategy("REVERSAL") is evaluate_reversal
        assert get_strategy(StrategyType.MOMENTUM) is evaluate_momentum

    def test_unknown_strategy(self):
        with pytest.raises(KeyError, match="Available: MOMENTUM, REVERSAL, TREND"):
            get_strategy("SCALPING")

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError, match="already registered"):

            @register_strategy(StrategyType.TREND)
            def another_trend(ind, i, profile):
                return None

        assert get_strategy(StrategyType.TREND) is evaluate_trend


# ---------------------------------------------------------------------------
# TREND
# ---------------------------------------------------------------------------

class TestTrendStrategy:
    def test_supertrend_buy_flip(self):
        ind = make_indicators(st_direction=[-1, 1])
        candidate = evaluate_trend(ind, 1, SENS_50)

        assert candidate.type == SignalType.LONG
        assert candidate.reason == "SuperTrend Buy Flip"

    def test_supertrend_sell_flip(self):
        ind = make_indicators(st_direction=[1, -1])
        candidate = evaluate_trend(ind, 1, SENS_50)

        assert candidate.type == SignalType.SHORT
        assert candidate.reason == "SuperTrend Sell Flip"

    def test_hma_entry_long(self):
        """Close crosses above HMA(9) while SuperTrend is long."""
        ind = make_indicators(st_direction=[1, 1], close=[9.0, 11.0], hma9=[10.0, 10.0])
        candidate = evaluate_trend(ind, 1, SENS_50)

        assert candidate.type == SignalType.LONG
        assert candidate.reason == "HMA Trend Entry"

    def test_hma_entry_short(self):
        ind = make_indicators(st_direction=[-1, -1], close=[11.0, 9.0], hma9=[10.0, 10.0])
        candidate = evaluate_trend(ind, 1, SENS_50)

        assert candidate.type == SignalType.SHORT
        assert candidate.reason == "HMA Trend Entry"

    def test_hma_cross_against_supertrend_ignored(self):
        ind = make_indicators(st_direction=[-1, -1], close=[9.0, 11.0], hma9=[10.0, 10.0])
        assert evaluate_trend(ind, 1, SENS_50) is None

    def test_flip_takes_precedence_over_hma(self):
        ind = make_indicators(st_direction=[1, -1], close=[9.0, 11.0], hma9=[10.0, 10.0])
        assert evaluate_trend(ind, 1, SENS_50).reason == "SuperTrend Sell Flip"


# ---------------------------------------------------------------------------
# REVERSAL
# ---------------------------------------------------------------------------

class TestReversalStrategy:
    def test_long_rejection(self):
        candidate = evaluate_reversal(reversal_setup(40.0, SignalType.LONG), 1, SENS_100)

        assert candidate.type == SignalType.LONG
        assert candidate.reason == "BB Rejection (RSI < 45)"

    def test_short_rejection(self):
        candidate = evaluate_reversal(reversal_setup(60.0, SignalType.SHORT), 1, SENS_100)

        assert candidate.type == SignalType.SHORT
        assert candidate.reason == "BB Rejection (RSI > 55)"

    def test_low_sensitivity_rejects_same_rsi(self):
        """The same setups fall outside the narrow RSI band at sensitivity 1."""
        assert evaluate_reversal(reversal_setup(40.0, SignalType.LONG), 1, SENS_1) is None
        assert evaluate_reversal(reversal_setup(60.0, SignalType.SHORT), 1, SENS_1) is None

    def test_low_sensitivity_accepts_extreme_rsi(self):
        candidate = evaluate_reversal(reversal_setup(15.0, SignalType.LONG), 1, SENS_1)
        assert candidate.reason == "BB Rejection (RSI < 20)"

    def test_neutral_rsi_rejected(self):
        assert evaluate_reversal(reversal_setup(50.0, SignalType.LONG), 1, SENS_100) is None
        assert evaluate_reversal(reversal_setup(50.0, SignalType.SHORT), 1, SENS_100) is None

    def test_bearish_candle_blocks_long(self):
        ind = reversal_setup(40.0, SignalType.LONG)
        ind.open[1] = 98.0
        assert evaluate_reversal(ind, 1, SENS_100) is None

    def test_rounded_threshold_in_reason(self):
        candidate = evaluate_reversal(reversal_setup(30.0, SignalType.LONG), 1, SENS_50)
        # rsi_lower = 32.5 -> 33
        assert candidate.reason == "BB Rejection (RSI < 33)"


# ---------------------------------------------------------------------------
# MOMENTUM
# ---------------------------------------------------------------------------

class TestMomentumStrategy:
    def test_breakout(self):
        ind = make_indicators(close=[0.0, 105.0], donchian_upper=[0.0, 104.0], donchian_lower=[0.0, 96.0])
        candidate = evaluate_momentum(ind, 1, SENS_50)

        assert candidate.type == SignalType.LONG
        assert candidate.reason == "18-Period Breakout"

    def test_breakdown(self):
        ind = make_indicators(close=[0.0, 95.0], donchian_upper=[0.0, 104.0], donchian_lower=[0.0, 96.0])
        candidate = evaluate_momentum(ind, 1, SENS_100)

        assert candidate.type == SignalType.SHORT
        assert candidate.reason == "5-Period Breakdown"

    def test_inside_channel(self):
        ind = make_indicators(close=[0.0, 100.0], donchian_upper=[0.0, 104.0], donchian_lower=[0.0, 96.0])
        assert evaluate_momentum(ind, 1, SENS_50) is None

    def test_equal_to_high_is_not_breakout(self):
        ind = make_indicators(close=[0.0, 104.0], donchian_upper=[0.0, 104.0], donchian_lower=[0.0, 96.0])
        assert evaluate_momentum(ind, 1, SENS_50) is None
