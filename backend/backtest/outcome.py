"""Candle-based outcome resolution for emitted signals.

Walks the candles after each signal and decides whether the take
profit or the stop loss was reached first.

Rules:
- LONG: high >= take_profit -> HIT_TP, low <= stop_loss -> HIT_SL
- SHORT: low <= take_profit -> HIT_TP, high >= stop_loss -> HIT_SL
- Both hit on the same candle -> HIT_SL (pessimistic assumption)
- MAE/MFE tracked as multiples of the risk distance
- Still open after max_hold_candles (or at the end of data) -> ACTIVE

Signals are immutable, so resolution returns copies with the new status.
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from engine.models.candle import Candle
from engine.models.signal import Signal, SignalStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TradeOutcome:
    """Resolved signal plus exit details."""

    signal: Signal
    exit_time: int | None = None
    exit_price: float | None = None
    bars_held: int = 0
    mae_ratio: float = 0.0  # Maximum Adverse Excursion / risk
    mfe_ratio: float = 0.0  # Maximum Favorable Excursion / risk

    @property
    def status(self) -> SignalStatus:
        return self.signal.status

    @property
    def r_multiple(self) -> float:
        """Result in units of initial risk (0 while unresolved)."""
        if self.status == SignalStatus.HIT_TP:
            risk = self.signal.risk_amount
            return self.signal.reward_amount / risk if risk > 0 else 0.0
        if self.status == SignalStatus.HIT_SL:
            return -1.0
        return 0.0


class OutcomeResolver:
    """Determine TP/SL outcomes from subsequent candles."""

    def __init__(self, max_hold_candles: int | None = None):
        self.max_hold_candles = max_hold_candles

    def resolve(self, signal: Signal, candles: Sequence[Candle]) -> TradeOutcome:
        """Resolve one signal against the candle array it came from."""
        if signal.status != SignalStatus.ACTIVE:
            return TradeOutcome(signal=signal)

        times = [c.time for c in candles]
        start = bisect.bisect_right(times, signal.candle_time)
        return self._walk(signal, candles, start)

    def resolve_all(
        self, signals: Sequence[Signal], candles: Sequence[Candle]
    ) -> list[TradeOutcome]:
        """Resolve every signal; order is preserved."""
        times = [c.time for c in candles]
        outcomes = []
        for signal in signals:
            if signal.status != SignalStatus.ACTIVE:
                outcomes.append(TradeOutcome(signal=signal))
                continue
            start = bisect.bisect_right(times, signal.candle_time)
            outcomes.append(self._walk(signal, candles, start))

        unresolved = sum(1 for o in outcomes if o.status == SignalStatus.ACTIVE)
        if unresolved:
            logger.info(f"{unresolved} of {len(outcomes)} signals unresolved (remain ACTIVE)")
        return outcomes

    def _walk(self, signal: Signal, candles: Sequence[Candle], start: int) -> TradeOutcome:
        risk = signal.risk_amount
        mae = 0.0
        mfe = 0.0
        end = len(candles)
        if self.max_hold_candles is not None:
            end = min(end, start + self.max_hold_candles)

        for idx in range(start, end):
            candle = candles[idx]

            # Update MAE/MFE using both extremes
            if risk > 0:
                if signal.is_long:
                    adverse = signal.entry_price - candle.low
                    favorable = candle.high - signal.entry_price
                else:
                    adverse = candle.high - signal.entry_price
                    favorable = signal.entry_price - candle.low
                mae = max(mae, adverse / risk)
                mfe = max(mfe, favorable / risk)

            status = self._check_candle(signal, candle)
            if status is None:
                continue

            exit_price = signal.take_profit if status == SignalStatus.HIT_TP else signal.stop_loss
            return TradeOutcome(
                signal=signal.model_copy(update={"status": status}),
                exit_time=candle.time,
                exit_price=exit_price,
                bars_held=idx - start + 1,
                mae_ratio=round(mae, 4),
                mfe_ratio=round(mfe, 4),
            )

        return TradeOutcome(
            signal=signal,
            bars_held=max(0, end - start),
            mae_ratio=round(mae, 4),
            mfe_ratio=round(mfe, 4),
        )

    @staticmethod
    def _check_candle(signal: Signal, candle: Candle) -> SignalStatus | None:
        """Check if a signal hits TP or SL on this candle.

        Pessimistic rule: if both TP and SL are hit in the same candle,
        the outcome is SL.
        """
        if signal.is_long:
            tp_hit = candle.high >= signal.take_profit
            sl_hit = candle.low <= signal.stop_loss
        else:
            tp_hit = candle.low <= signal.take_profit
            sl_hit = candle.high >= signal.stop_loss

        if sl_hit:
            return SignalStatus.HIT_SL
        if tp_hit:
            return SignalStatus.HIT_TP
        return None
