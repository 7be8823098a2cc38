"""Deterministic market data simulator.

Produces candle history when no live feed is available:
- A pseudo-random walk is generated on a fixed 1m grid (1s grid for
  the 1s timeframe) from a sine hash of the timestamp, so the same
  symbol and time range always produce the same path.
- The path is aggregated into timeframe candles and rescaled so that
  the most recent close equals the target (or base) price.

Tick updates nudge the last candle towards a real price, or apply a
bounded random drift when no price is available.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass
from enum import Enum

from engine.models.candle import Candle, Timeframe

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000


class AssetType(str, Enum):
    CRYPTO = "CRYPTO"
    FOREX = "FOREX"
    COMMODITY = "COMMODITY"


@dataclass(frozen=True, slots=True)
class SymbolDef:
    """Tradable symbol with a reference price and relative volatility."""

    id: str
    name: str
    type: AssetType
    base_price: float
    volatility: float


SUPPORTED_SYMBOLS: list[SymbolDef] = [
    SymbolDef("BTCUSD", "Bitcoin / USD", AssetType.CRYPTO, 95417.06, 0.02),
    SymbolDef("ETHUSD", "Ethereum / USD", AssetType.CRYPTO, 2750.50, 0.025),
    SymbolDef("SOLUSD", "Solana / USD", AssetType.CRYPTO, 155.20, 0.035),
    SymbolDef("EURUSD", "EUR / USD", AssetType.FOREX, 1.0550, 0.004),
    SymbolDef("GBPUSD", "GBP / USD", AssetType.FOREX, 1.2650, 0.005),
    SymbolDef("USDJPY", "USD / JPY", AssetType.FOREX, 153.00, 0.004),
    SymbolDef("XAUUSD", "Gold / USD", AssetType.COMMODITY, 2650.00, 0.008),
]


def get_symbol(symbol_id: str) -> SymbolDef:
    """Look up a supported symbol by ID.

    Raises:
        KeyError: If the symbol is not supported.
    """
    for symbol in SUPPORTED_SYMBOLS:
        if symbol.id == symbol_id:
            return symbol
    available = ", ".join(s.id for s in SUPPORTED_SYMBOLS)
    raise KeyError(f"Unknown symbol '{symbol_id}'. Available: {available}")


def _hash_rand(seed: float) -> float:
    """Deterministic value in [0, 1) from a seed."""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def _symbol_seed(symbol: SymbolDef) -> int:
    return sum(ord(ch) for ch in symbol.id)


def generate_history(
    symbol: SymbolDef,
    timeframe: Timeframe | str,
    count: int = 300,
    target_price: float | None = None,
    now_ms: int | None = None,
) -> list[Candle]:
    """
    Generate a deterministic candle history ending at the current bar.

    Args:
        symbol: Symbol definition (seed, volatility and base price)
        timeframe: Candle timeframe
        count: Number of bars before the current one
        target_price: Price the last close is scaled to (base price if None)
        now_ms: Reference time in epoch ms (wall clock if None)

    Returns:
        count + 1 candles with strictly increasing time
    """
    tf = Timeframe(timeframe)
    now = now_ms if now_ms is not None else int(time.time() * 1000)

    aligned_now = (now // tf.ms) * tf.ms
    start_time = aligned_now - count * tf.ms

    base_seed = _symbol_seed(symbol)
    vol_mult = 1.5 if symbol.type == AssetType.CRYPTO else 0.5
    step_ms = 1000 if tf is Timeframe.S1 else 60_000
    drift_scale = 0.001 if tf is Timeframe.S1 else 0.003

    # 1. Random walk on the fine grid
    path: dict[int, float] = {}
    p = 1.0
    walk_start = (start_time // HOUR_MS) * HOUR_MS
    for t in range(walk_start, aligned_now + 1, step_ms):
        r = _hash_rand(base_seed + t / step_ms)
        p += (r - 0.5) * symbol.volatility * p * drift_scale * vol_mult
        path[t] = p

    end_rel_price = path.get(aligned_now, p)
    scale = (target_price if target_price is not None else symbol.base_price) / end_rel_price

    # 2. Aggregate into timeframe bars
    candles: list[Candle] = []
    for t in range(start_time, aligned_now + 1, tf.ms):
        prices = [
            path[mt] * scale
            for mt in range(t, t + tf.ms, step_ms)
            if mt in path
        ]
        if not prices:
            continue

        open_, close = prices[0], prices[-1]
        high, low = max(prices), min(prices)

        # Single-sample 1s bars get a small synthetic spread for visible wicks
        if tf is Timeframe.S1 and len(prices) == 1:
            seed = base_seed + t / 1000
            spread = open_ * symbol.volatility * 0.0002
            high = open_ + _hash_rand(seed * 1.1) * spread
            low = open_ - _hash_rand(seed * 1.2) * spread
            close = open_ + (_hash_rand(seed * 1.3) - 0.5) * spread
            high, low = max(high, close), min(low, close)

        candles.append(
            Candle(
                time=t,
                open=open_,
                high=high,
                low=low,
                close=close,
                volume=float(math.floor(1000 + _hash_rand(base_seed + t / 1000) * 5000)),
            )
        )

    logger.debug(
        "Generated %d %s candles for %s ending at %d",
        len(candles), tf.value, symbol.id, aligned_now,
    )
    return candles


def update_candle_with_tick(
    candle: Candle,
    volatility: float,
    real_price: float | None = None,
    rng: random.Random | None = None,
) -> Candle:
    """
    Apply one tick to a forming candle and return the updated copy.

    With a real price the close is pulled towards it (70/30 blend plus
    micro-jitter). Without one, a random move is applied and the close
    is kept within 2% of the open.

    Args:
        candle: The current (last) candle
        volatility: Symbol volatility
        real_price: Latest traded price, if known
        rng: Random source (unseeded if None)

    Returns:
        New Candle; the input is not modified
    """
    rng = rng or random.Random()
    base_tick_vol = candle.close * volatility * 0.002
    drift = (rng.random() - 0.5) * base_tick_vol

    if real_price is not None:
        alpha = 0.3
        target_close = real_price * (1 - alpha) + candle.close * alpha + drift * 0.2
        return candle.model_copy(
            update={
                "close": target_close,
                "high": max(candle.high, target_close, real_price),
                "low": min(candle.low, target_close, real_price),
                "volume": candle.volume + math.floor(rng.random() * 5),
            }
        )

    move = (rng.random() - 0.5) * base_tick_vol * 2 + drift * 0.5
    new_close = candle.close + move

    max_dev = candle.open * 0.02
    if abs(new_close - candle.open) > max_dev:
        new_close = candle.open + math.copysign(max_dev, new_close - candle.open)

    return candle.model_copy(
        update={
            "close": new_close,
            "high": max(candle.high, new_close),
            "low": min(candle.low, new_close),
            "volume": candle.volume + math.floor(rng.random() * 15),
        }
    )
