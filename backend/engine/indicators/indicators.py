"""Technical indicators for signal generation.

Every function takes the full candle array (or a numeric series) and
returns a float64 NumPy array of the same length, aligned by index.
Entries before an indicator's warm-up index are 0.0 and must not be
read by strategy logic.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from engine.models.candle import Candle


# =============================================================================
# Series extraction
# =============================================================================

def closes_of(candles: Sequence[Candle]) -> np.ndarray:
    return np.fromiter((c.close for c in candles), dtype=np.float64, count=len(candles))


def highs_of(candles: Sequence[Candle]) -> np.ndarray:
    return np.fromiter((c.high for c in candles), dtype=np.float64, count=len(candles))


def lows_of(candles: Sequence[Candle]) -> np.ndarray:
    return np.fromiter((c.low for c in candles), dtype=np.float64, count=len(candles))


def opens_of(candles: Sequence[Candle]) -> np.ndarray:
    return np.fromiter((c.open for c in candles), dtype=np.float64, count=len(candles))


def volumes_of(candles: Sequence[Candle]) -> np.ndarray:
    return np.fromiter((c.volume for c in candles), dtype=np.float64, count=len(candles))


# =============================================================================
# Array kernels
# =============================================================================

def _ema_values(values: np.ndarray, period: int) -> np.ndarray:
    """EMA seeded with the SMA of the first `period` values."""
    n = len(values)
    result = np.zeros(n, dtype=np.float64)
    if period <= 0 or n < period:
        return result

    k = 2.0 / (period + 1)
    result[period - 1] = values[:period].mean()
    for i in range(period, n):
        result[i] = values[i] * k + result[i - 1] * (1 - k)
    return result


def _wilder_average(values: np.ndarray, period: int, seed_index: int) -> np.ndarray:
    """Wilder smoothing: seed is the mean of values[seed_index-period+1 .. seed_index]."""
    n = len(values)
    result = np.zeros(n, dtype=np.float64)
    if period <= 0 or n <= seed_index:
        return result

    result[seed_index] = values[seed_index - period + 1 : seed_index + 1].mean()
    for i in range(seed_index + 1, n):
        result[i] = (result[i - 1] * (period - 1) + values[i]) / period
    return result


def wma(values: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """
    Calculate Weighted Moving Average.

    The j-th oldest value in the window gets weight j+1; the divisor is
    the triangular number period*(period+1)/2.

    Args:
        values: Numeric series
        period: WMA period

    Returns:
        Array of WMA values (0.0 before index period-1)
    """
    arr = np.asarray(values, dtype=np.float64)
    n = len(arr)
    result = np.zeros(n, dtype=np.float64)
    if period <= 0 or n < period:
        return result

    weights = np.arange(1, period + 1, dtype=np.float64)
    divisor = period * (period + 1) / 2
    for i in range(period - 1, n):
        result[i] = np.dot(arr[i - period + 1 : i + 1], weights) / divisor
    return result


# =============================================================================
# Public API
# =============================================================================

def highest(values: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """
    Calculate highest value over lookback period.

    Args:
        values: Numeric series (typically highs)
        period: Lookback period, current value included

    Returns:
        Array of highest values (0.0 before index period-1)
    """
    arr = np.asarray(values, dtype=np.float64)
    result = np.zeros(len(arr), dtype=np.float64)
    if period <= 0 or len(arr) < period:
        return result
    result[period - 1 :] = sliding_window_view(arr, period).max(axis=1)
    return result


def lowest(values: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """Lowest value over lookback period (0.0 before index period-1)."""
    arr = np.asarray(values, dtype=np.float64)
    result = np.zeros(len(arr), dtype=np.float64)
    if period <= 0 or len(arr) < period:
        return result
    result[period - 1 :] = sliding_window_view(arr, period).min(axis=1)
    return result



def sma(candles: Sequence[Candle], period: int) -> np.ndarray:
    """Simple moving average of closes."""
    arr = closes_of(candles)
    n = len(arr)
    result = np.zeros(n, dtype=np.float64)
    if period <= 0 or n < period:
        return result

    window_sums = np.convolve(arr, np.ones(period), mode="valid")
    result[period - 1 :] = window_sums / period
    return result


def ema(candles: Sequence[Candle], period: int) -> np.ndarray:
    """
    Calculate Exponential Moving Average of closes.

    Seed at index period-1 is the simple average of the first `period`
    closes, then ema[i] = close[i]*k + ema[i-1]*(1-k), k = 2/(period+1).

    Args:
        candles: Candle array
        period: EMA period

    Returns:
        Array of EMA values (0.0 before index period-1)
    """
    return _ema_values(closes_of(candles), period)


def rsi(candles: Sequence[Candle], period: int = 14) -> np.ndarray:
    """
    Calculate Wilder-smoothed Relative Strength Index.

    The average gain/loss is seeded from the simple mean of the first
    `period` close-to-close deltas, then smoothed as
    avg = (avg*(period-1) + x) / period. RSI is 100 when the average
    loss is zero.

    Args:
        candles: Candle array
        period: RSI period

    Returns:
        Array of RSI values (0.0 before index `period`)
    """
    arr = closes_of(candles)
    n = len(arr)
    result = np.zeros(n, dtype=np.float64)
    if period <= 0 or n <= period:
        return result

    deltas = np.diff(arr)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = gains[:period].sum() / period
    avg_loss = losses[:period].sum() / period
    result[period] = _rsi_from_averages(avg_gain, avg_loss)

    for i in range(period + 1, n):
        avg_gain = (avg_gain * (period - 1) + gains[i - 1]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i - 1]) / period
        result[i] = _rsi_from_averages(avg_gain, avg_loss)

    return result


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def true_range(candles: Sequence[Candle]) -> np.ndarray:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    The first candle has no previous close and contributes 0.
    """
    highs = highs_of(candles)
    lows = lows_of(candles)
    closes = closes_of(candles)
    n = len(closes)
    result = np.zeros(n, dtype=np.float64)
    if n < 2:
        return result

    prev_close = closes[:-1]
    hl = highs[1:] - lows[1:]
    hc = np.abs(highs[1:] - prev_close)
    lc = np.abs(lows[1:] - prev_close)
    result[1:] = np.maximum(hl, np.maximum(hc, lc))
    return result


def atr(candles: Sequence[Candle], period: int = 14) -> np.ndarray:
    """
    Calculate Average True Range with Wilder's smoothing.

    Args:
        candles: Candle array
        period: ATR period

    Returns:
        Array of ATR values (0.0 before index period-1)
    """
    return _wilder_average(true_range(candles), period, period - 1)


def stddev(closes: np.ndarray, period: int, index: int, mean: float) -> float:
    """Population stddev of the `period` closes ending at `index`, centered on `mean`."""
    if index < period - 1:
        return 0.0
    window = closes[index - period + 1 : index + 1]
    return math.sqrt(float(np.sum((window - mean) ** 2)) / period)


def bollinger_bands(
    candles: Sequence[Candle],
    center: np.ndarray,
    period: int = 20,
    width: float = 2.0,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Calculate Bollinger Bands around a precomputed center line.

    Args:
        candles: Candle array
        center: Mean series (EMA or SMA) aligned with candles
        period: Lookback for the standard deviation
        width: Band width in standard deviations

    Returns:
        Tuple of (upper, lower) arrays
    """
    closes = closes_of(candles)
    n = len(closes)
    deviation = np.zeros(n, dtype=np.float64)
    for i in range(period - 1, n):
        deviation[i] = stddev(closes, period, i, center[i])
    return center + deviation * width, center - deviation * width


def adx(candles: Sequence[Candle], period: int = 14) -> np.ndarray:
    """
    Calculate Average Directional Index.

    +DM/-DM use the larger-positive-wins rule. TR, +DM and -DM are
    Wilder-smoothed running sums seeded with the plain sum of bars
    1..period. The first ADX value (index 2*period-1) is the mean DX
    over period..2*period-1; later values use Wilder's average.

    Args:
        candles: Candle array
        period: ADX period

    Returns:
        Array of ADX values (all 0.0 if fewer than 2*period candles)
    """
    n = len(candles)
    result = np.zeros(n, dtype=np.float64)
    if period <= 0 or n < period * 2:
        return result

    highs = highs_of(candles)
    lows = lows_of(candles)
    tr = true_range(candles)

    up = np.zeros(n, dtype=np.float64)
    down = np.zeros(n, dtype=np.float64)
    up[1:] = highs[1:] - highs[:-1]
    down[1:] = lows[:-1] - lows[1:]
    plus_dm = np.where((up > down) & (up > 0), up, 0.0)
    minus_dm = np.where((down > up) & (down > 0), down, 0.0)

    smooth_tr = np.zeros(n, dtype=np.float64)
    smooth_plus = np.zeros(n, dtype=np.float64)
    smooth_minus = np.zeros(n, dtype=np.float64)
    smooth_tr[period] = tr[1 : period + 1].sum()
    smooth_plus[period] = plus_dm[1 : period + 1].sum()
    smooth_minus[period] = minus_dm[1 : period + 1].sum()
    for i in range(period + 1, n):
        smooth_tr[i] = smooth_tr[i - 1] - smooth_tr[i - 1] / period + tr[i]
        smooth_plus[i] = smooth_plus[i - 1] - smooth_plus[i - 1] / period + plus_dm[i]
        smooth_minus[i] = smooth_minus[i - 1] - smooth_minus[i - 1] / period + minus_dm[i]

    dx = np.zeros(n, dtype=np.float64)
    for i in range(period, n):
        if smooth_tr[i] == 0:
            continue
        plus_di = smooth_plus[i] / smooth_tr[i] * 100
        minus_di = smooth_minus[i] / smooth_tr[i] * 100
        di_sum = plus_di + minus_di
        if di_sum != 0:
            dx[i] = abs(plus_di - minus_di) / di_sum * 100

    return _wilder_average(dx, period, period * 2 - 1)


def hma(candles: Sequence[Candle], period: int = 9) -> np.ndarray:
    """
    Calculate Hull Moving Average of closes.

    HMA = WMA(2*WMA(period/2) - WMA(period), sqrt(period)), with the
    half and root lengths floored.
    """
    closes = closes_of(candles)
    half = wma(closes, period // 2) * 2
    full = wma(closes, period)
    return wma(half - full, int(math.floor(math.sqrt(period))))


@dataclass(frozen=True, slots=True)
class SuperTrendResult:
    """SuperTrend line and direction (+1 long, -1 short) per candle."""

    line: np.ndarray
    direction: np.ndarray


def supertrend(
    candles: Sequence[Candle],
    factor: float = 3.0,
    period: int = 10,
    atr_values: np.ndarray | None = None,
) -> SuperTrendResult:
    """
    Calculate SuperTrend.

    Basic bands are mid-price +/- factor*ATR. The upper band only moves
    down and the lower band only moves up, unless the previous close
    broke through the band. Direction flips to long when the close
    crosses above the prior upper band and to short when it crosses
    below the prior lower band.

    Args:
        candles: Candle array
        factor: ATR multiplier for the bands
        period: First index at which bands are computed
        atr_values: Precomputed ATR series; ATR(period) when omitted

    Returns:
        SuperTrendResult with the plotted line (lower band while long,
        upper band while short) and the direction series
    """
    n = len(candles)
    if atr_values is None:
        atr_values = atr(candles, period)

    closes = closes_of(candles)
    mids = (highs_of(candles) + lows_of(candles)) / 2

    line = closes.copy()
    direction = np.ones(n, dtype=np.float64)
    upper = np.zeros(n, dtype=np.float64)
    lower = np.zeros(n, dtype=np.float64)

    for i in range(period, n):
        basic_upper = mids[i] + factor * atr_values[i]
        basic_lower = mids[i] - factor * atr_values[i]

        if basic_upper < upper[i - 1] or closes[i - 1] > upper[i - 1]:
            upper[i] = basic_upper
        else:
            upper[i] = upper[i - 1]

        if basic_lower > lower[i - 1] or closes[i - 1] < lower[i - 1]:
            lower[i] = basic_lower
        else:
            lower[i] = lower[i - 1]

        current = direction[i - 1]
        if current == -1 and closes[i] > upper[i - 1]:
            current = 1
        elif current == 1 and closes[i] < lower[i - 1]:
            current = -1

        direction[i] = current
        line[i] = lower[i] if current == 1 else upper[i]

    return SuperTrendResult(line=line, direction=direction)


@dataclass(frozen=True, slots=True)
class MacdResult:
    """MACD line, signal line and histogram per candle."""

    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


def macd(
    candles: Sequence[Candle],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MacdResult:
    """
    Calculate MACD.

    MACD line = EMA(fast) - EMA(slow). The signal line is an EMA of the
    MACD line seeded by the simple average of its first `signal_period`
    values. Histogram = MACD - signal.
    """
    closes = closes_of(candles)
    macd_line = _ema_values(closes, fast_period) - _ema_values(closes, slow_period)
    signal_line = _ema_values(macd_line, signal_period)
    return MacdResult(
        macd=macd_line,
        signal=signal_line,
        histogram=macd_line - signal_line,
    )


def donchian_channel(
    candles: Sequence[Candle],
    lookback: int,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Highest high and lowest low of the `lookback` candles before each index.

    The current candle is excluded. Indices with fewer than `lookback`
    prior candles are 0.0 (upper) and +inf (lower).

    Returns:
        Tuple of (upper, lower) arrays
    """
    highs = highs_of(candles)
    lows = lows_of(candles)
    n = len(highs)
    upper = np.zeros(n, dtype=np.float64)
    lower = np.full(n, np.inf, dtype=np.float64)
    if lookback <= 0:
        return upper, lower

    if n <= lookback:
        return upper, lower

    # Window ending at i-1
    upper[lookback:] = highest(highs, lookback)[lookback - 1 : -1]
    lower[lookback:] = lowest(lows, lookback)[lookback - 1 : -1]
    return upper, lower


def average_volume(candles: Sequence[Candle], lookback: int = 10) -> np.ndarray:
    """Mean volume of the `lookback` candles before each index (current excluded)."""
    volumes = volumes_of(candles)
    n = len(volumes)
    result = np.zeros(n, dtype=np.float64)
    if lookback <= 0 or n <= lookback:
        return result

    window_sums = np.convolve(volumes, np.ones(lookback), mode="valid")
    # window_sums[j] covers volumes[j : j+lookback], i.e. the window before j+lookback
    result[lookback:] = window_sums[: n - lookback] / lookback
    return result
