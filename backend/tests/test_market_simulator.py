"""Tests for the deterministic market simulator."""

import random

import pytest

from app.services.market_simulator import (
    SUPPORTED_SYMBOLS,
    AssetType,
    generate_history,
    get_symbol,
    update_candle_with_tick,
)
from engine.models.candle import Candle, Timeframe

NOW_MS = 1_735_000_000_000


class TestSymbols:
    def test_lookup(self):
        btc = get_symbol("BTCUSD")

        assert btc.type == AssetType.CRYPTO
        assert btc.base_price > 0

    def test_unknown_symbol(self):
        with pytest.raises(KeyError, match="Unknown symbol"):
            get_symbol("DOGEUSD")

    def test_ids_unique(self):
        ids = [s.id for s in SUPPORTED_SYMBOLS]
        assert len(ids) == len(set(ids))


class TestGenerateHistory:
    def test_count_and_spacing(self):
        candles = generate_history(get_symbol("ETHUSD"), "5m", count=300, now_ms=NOW_MS)

        assert len(candles) == 301
        gaps = {b.time - a.time for a, b in zip(candles, candles[1:])}
        assert gaps == {Timeframe.M5.ms}
        assert candles[-1].time == (NOW_MS // Timeframe.M5.ms) * Timeframe.M5.ms

    def test_deterministic(self):
        symbol = get_symbol("SOLUSD")
        a = generate_history(symbol, Timeframe.M1, count=250, now_ms=NOW_MS)
        b = generate_history(symbol, Timeframe.M1, count=250, now_ms=NOW_MS)

        assert a == b

    def test_symbols_differ(self):
        a = generate_history(get_symbol("BTCUSD"), "1m", count=50, now_ms=NOW_MS)
        b = generate_history(get_symbol("ETHUSD"), "1m", count=50, now_ms=NOW_MS)

        assert [c.close / a[-1].close for c in a] != [c.close / b[-1].close for c in b]

    def test_last_close_is_base_price(self):
        symbol = get_symbol("XAUUSD")
        candles = generate_history(symbol, "15m", count=100, now_ms=NOW_MS)

        assert candles[-1].close == pytest.approx(symbol.base_price)

    def test_target_price(self):
        candles = generate_history(
            get_symbol("BTCUSD"), "1h", count=50, target_price=60_000.0, now_ms=NOW_MS
        )
        assert candles[-1].close == pytest.approx(60_000.0)

    def test_ohlc_consistent(self):
        for c in generate_history(get_symbol("EURUSD"), "5m", count=200, now_ms=NOW_MS):
            assert c.low <= min(c.open, c.close)
            assert c.high >= max(c.open, c.close)
            assert 1000 <= c.volume < 6000

    def test_second_bars_have_wicks(self):
        candles = generate_history(get_symbol("BTCUSD"), "1s", count=30, now_ms=NOW_MS)

        assert len(candles) == 31
        assert any(c.high > c.low for c in candles)


class TestTickUpdate:
    def make_candle(self) -> Candle:
        return Candle(time=0, open=100.0, high=101.0, low=99.0, close=100.5, volume=10.0)

    def test_returns_new_candle(self):
        candle = self.make_candle()
        updated = update_candle_with_tick(candle, 0.02, rng=random.Random(1))

        assert updated is not candle
        assert candle.close == 100.5
        assert updated.time == candle.time
        assert updated.open == candle.open

    def test_random_move_stays_near_open(self):
        rng = random.Random(3)
        candle = self.make_candle()
        for _ in range(500):
            candle = update_candle_with_tick(candle, 0.5, rng=rng)
            assert abs(candle.close - candle.open) <= candle.open * 0.02 + 1e-9
            assert candle.low <= candle.close <= candle.high

    def test_real_price_pulls_close(self):
        candle = self.make_candle()
        updated = update_candle_with_tick(candle, 0.02, real_price=110.0, rng=random.Random(5))

        assert 107.0 < updated.close < 108.5
        assert updated.high == 110.0
        assert updated.volume >= candle.volume
