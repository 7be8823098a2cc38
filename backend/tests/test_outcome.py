"""Tests for backtest OutcomeResolver (candle-based outcome determination)."""

import pytest

from backtest.outcome import OutcomeResolver, TradeOutcome
from engine.models.candle import Candle
from engine.models.signal import Signal, SignalStatus, SignalType

T0 = 1_700_000_000_000
MINUTE = 60_000


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_candle(
    i: int,
    high: float = 50100,
    low: float = 49900,
    open: float = 50000,
    close: float = 50050,
) -> Candle:
    """Build a Candle i minutes after T0 with sensible defaults."""
    return Candle(time=T0 + i * MINUTE, open=open, high=high, low=low, close=close, volume=100)


def make_long_signal(entry=50000.0, tp=51000.0, sl=49500.0, i: int = 0) -> Signal:
    """LONG signal on candle i with 2R target."""
    return Signal(
        id=f"sig-{T0 + i * MINUTE}",
        candle_time=T0 + i * MINUTE,
        type=SignalType.LONG,
        entry_price=entry,
        stop_loss=sl,
        take_profit=tp,
        reason="Test",
        confidence=60,
    )


def make_short_signal(entry=50000.0, tp=49000.0, sl=50500.0, i: int = 0) -> Signal:
    """SHORT signal on candle i with 2R target."""
    return Signal(
        id=f"sig-{T0 + i * MINUTE}",
        candle_time=T0 + i * MINUTE,
        type=SignalType.SHORT,
        entry_price=entry,
        stop_loss=sl,
        take_profit=tp,
        reason="Test",
        confidence=60,
    )


def series(*bars: tuple[float, float]) -> list[Candle]:
    """Signal candle at index 0 followed by (high, low) bars."""
    return [make_candle(0)] + [make_candle(i + 1, high=h, low=l) for i, (h, l) in enumerate(bars)]


# ---------------------------------------------------------------------------
# Pessimistic rule: both TP and SL hit on same candle => SL
# ---------------------------------------------------------------------------

class TestPessimisticRule:
    def test_long_both_hit_yields_sl(self):
        outcome = OutcomeResolver().resolve(make_long_signal(), series((51100, 49400)))

        assert outcome.status == SignalStatus.HIT_SL
        assert outcome.exit_price == 49500
        assert outcome.r_multiple == -1.0

    def test_short_both_hit_yields_sl(self):
        outcome = OutcomeResolver().resolve(make_short_signal(), series((50600, 48900)))

        assert outcome.status == SignalStatus.HIT_SL
        assert outcome.exit_price == 50500

    def test_exact_boundaries(self):
        """high == tp and low == sl on the same candle => SL."""
        outcome = OutcomeResolver().resolve(make_long_signal(), series((51000, 49500)))
        assert outcome.status == SignalStatus.HIT_SL


# ---------------------------------------------------------------------------
# Directional outcomes
# ---------------------------------------------------------------------------

class TestLongOutcomes:
    def test_tp_hit(self):
        outcome = OutcomeResolver().resolve(
            make_long_signal(), series((50500, 49800), (51000, 50200))
        )

        assert outcome.status == SignalStatus.HIT_TP
        assert outcome.exit_price == 51000
        assert outcome.exit_time == T0 + 2 * MINUTE
        assert outcome.bars_held == 2
        assert outcome.r_multiple == pytest.approx(2.0)

    def test_sl_hit(self):
        outcome = OutcomeResolver().resolve(make_long_signal(), series((50200, 49500)))

        assert outcome.status == SignalStatus.HIT_SL
        assert outcome.bars_held == 1

    def test_no_hit_stays_active(self):
        outcome = OutcomeResolver().resolve(make_long_signal(), series((50200, 49600)))

        assert outcome.status == SignalStatus.ACTIVE
        assert outcome.exit_time is None
        assert outcome.r_multiple == 0.0


class TestShortOutcomes:
    def test_tp_hit(self):
        outcome = OutcomeResolver().resolve(make_short_signal(), series((50100, 49000)))

        assert outcome.status == SignalStatus.HIT_TP
        assert outcome.exit_price == 49000
        assert outcome.r_multiple == pytest.approx(2.0)

    def test_sl_hit(self):
        outcome = OutcomeResolver().resolve(make_short_signal(), series((50500, 49900)))
        assert outcome.status == SignalStatus.HIT_SL


# ---------------------------------------------------------------------------
# Candle selection and immutability
# ---------------------------------------------------------------------------

class TestResolution:
    def test_signal_candle_is_skipped(self):
        """The triggering candle itself never resolves the trade."""
        candles = [make_candle(0, high=52000, low=49000), make_candle(1)]
        outcome = OutcomeResolver().resolve(make_long_signal(), candles)

        assert outcome.status == SignalStatus.ACTIVE
        assert outcome.bars_held == 1

    def test_input_signal_untouched(self):
        signal = make_long_signal()
        outcome = OutcomeResolver().resolve(signal, series((51100, 49800)))

        assert signal.status == SignalStatus.ACTIVE
        assert outcome.signal.status == SignalStatus.HIT_TP
        assert outcome.signal.id == signal.id

    def test_max_hold(self):
        candles = series((50200, 49800), (50200, 49800), (51100, 49800))
        outcome = OutcomeResolver(max_hold_candles=2).resolve(make_long_signal(), candles)

        assert outcome.status == SignalStatus.ACTIVE
        assert outcome.bars_held == 2

    def test_mae_mfe(self):
        outcome = OutcomeResolver().resolve(
            make_long_signal(), series((50250, 49750), (51000, 49900))
        )

        # risk = 500: worst dip 250 (0.5R), best run 1000 (2R)
        assert outcome.mae_ratio == pytest.approx(0.5)
        assert outcome.mfe_ratio == pytest.approx(2.0)

    def test_already_resolved_signal_passthrough(self):
        signal = make_long_signal().model_copy(update={"status": SignalStatus.HIT_TP})
        outcome = OutcomeResolver().resolve(signal, series((40000, 30000)))

        assert outcome == TradeOutcome(signal=signal)

    def test_resolve_all_preserves_order(self):
        candles = series((50200, 49800), (51100, 49800), (50200, 49400))
        signals = [make_long_signal(i=0), make_long_signal(i=2), make_short_signal(i=3)]

        outcomes = OutcomeResolver().resolve_all(signals, candles)

        assert [o.signal.id for o in outcomes] == [s.id for s in signals]
        assert outcomes[0].status == SignalStatus.HIT_TP
        assert outcomes[1].status == SignalStatus.HIT_SL
        assert outcomes[2].status == SignalStatus.ACTIVE
