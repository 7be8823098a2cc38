"""Precomputed indicator stack consumed by strategies, filters and scoring."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from engine.indicators.indicators import (
    adx,
    atr,
    average_volume,
    bollinger_bands,
    closes_of,
    donchian_channel,
    ema,
    highs_of,
    hma,
    lows_of,
    macd,
    opens_of,
    rsi,
    supertrend,
    volumes_of,
)
from engine.models.candle import Candle
from engine.models.config import EngineConfig, SensitivityProfile

RSI_PERIOD = 14
ADX_PERIOD = 14
HMA_PERIOD = 9
BB_PERIOD = 20
BB_WIDTH = 2.0
VOLUME_LOOKBACK = 10


@dataclass(frozen=True, slots=True)
class IndicatorSet:
    """Parallel series aligned by index with the candle array."""

    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray
    volume: np.ndarray
    time: np.ndarray

    ema21: np.ndarray
    ema50: np.ndarray
    ema200: np.ndarray
    rsi: np.ndarray
    atr: np.ndarray
    adx: np.ndarray
    macd_line: np.ndarray
    macd_signal: np.ndarray
    macd_histogram: np.ndarray
    hma9: np.ndarray
    st_line: np.ndarray
    st_direction: np.ndarray
    bb_upper: np.ndarray
    bb_lower: np.ndarray
    donchian_upper: np.ndarray
    donchian_lower: np.ndarray
    avg_volume: np.ndarray

    def __len__(self) -> int:
        return len(self.close)


class IndicatorCalculator:
    """Calculator for all technical indicators needed by the engine."""

    def __init__(self, config: EngineConfig, profile: SensitivityProfile):
        self.config = config
        self.profile = profile

    def calculate_all(self, candles: Sequence[Candle]) -> IndicatorSet:
        """
        Calculate every indicator series for the given candles.

        Full recompute: nothing is carried over from previous calls.

        Args:
            candles: Ordered candle array

        Returns:
            IndicatorSet with one series per indicator
        """
        ema21 = ema(candles, 21)
        atr_values = atr(candles, self.config.atr_period)
        st = supertrend(
            candles,
            factor=self.profile.st_factor,
            period=self.profile.st_period,
            atr_values=atr_values,
        )
        bb_upper, bb_lower = bollinger_bands(candles, ema21, BB_PERIOD, BB_WIDTH)
        don_upper, don_lower = donchian_channel(candles, self.profile.momentum_lookback)
        macd_result = macd(candles)

        return IndicatorSet(
            open=opens_of(candles),
            high=highs_of(candles),
            low=lows_of(candles),
            close=closes_of(candles),
            volume=volumes_of(candles),
            time=np.fromiter((c.time for c in candles), dtype=np.int64, count=len(candles)),
            ema21=ema21,
            ema50=ema(candles, 50),
            ema200=ema(candles, 200),
            rsi=rsi(candles, RSI_PERIOD),
            atr=atr_values,
            adx=adx(candles, ADX_PERIOD),
            macd_line=macd_result.macd,
            macd_signal=macd_result.signal,
            macd_histogram=macd_result.histogram,
            hma9=hma(candles, HMA_PERIOD),
            st_line=st.line,
            st_direction=st.direction,
            bb_upper=bb_upper,
            bb_lower=bb_lower,
            donchian_upper=don_upper,
            donchian_lower=don_lower,
            avg_volume=average_volume(candles, VOLUME_LOOKBACK),
        )
