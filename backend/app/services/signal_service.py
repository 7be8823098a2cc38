"""Live signal service: owns the candle buffer and re-runs the engine.

The engine is stateless, so this service is the only place holding
state. It recomputes signals on:
- history load (always)
- a new candle (always)
- a tick updating the forming candle (throttled)
- a configuration change (always)

Subscribers are notified once per signal ID, and only for signals on the
candle that was forming at the previous recompute or later. Trimming the
buffer front reseeds the indicators and cooldown chain, which can give
older candles new IDs; those are never announced.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from engine import EngineConfig, Signal, SignalEngine, Timeframe
from engine.models.candle import Candle

logger = logging.getLogger(__name__)

SignalCallback = Callable[[Signal], Awaitable[None]]
Clock = Callable[[], float]


class SignalService:
    """Keeps the latest signal list in sync with a live candle stream."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        timeframe: Timeframe | str | None = None,
        recompute_throttle_ms: int = 1000,
        max_candles: int = 1000,
        clock: Clock = time.monotonic,
    ):
        self._engine = SignalEngine(config, timeframe)
        self.recompute_throttle_ms = recompute_throttle_ms
        self.max_candles = max_candles
        self._clock = clock

        self._candles: list[Candle] = []
        self._signals: list[Signal] = []
        self._external_signals: list[Signal] = []
        # id -> candle_time of notified signals at or after the watermark
        self._notified: dict[str, int] = {}
        self._watermark: int | None = None
        self._callbacks: list[SignalCallback] = []
        self._last_compute: float | None = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._engine.config

    @property
    def candles(self) -> list[Candle]:
        return list(self._candles)

    @property
    def signals(self) -> list[Signal]:
        """Engine signals merged with external ones, ordered by candle_time."""
        merged = self._signals + self._external_signals
        return sorted(merged, key=lambda s: s.candle_time)

    def on_signal(self, callback: SignalCallback) -> None:
        """Register callback for new signals."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def off_signal(self, callback: SignalCallback) -> None:
        """Unregister callback for new signals."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    async def load_history(self, candles: Sequence[Candle]) -> list[Signal]:
        """Replace the buffer with a fresh history and recompute."""
        self._candles = list(candles)[-self.max_candles :]
        logger.info("Loaded history with %d candles", len(self._candles))
        return await self._recompute()

    async def on_candle(self, candle: Candle) -> list[Signal]:
        """Append a new candle or update the forming one.

        A candle with the same time as the last one replaces it (tick
        update, throttled). A newer candle is appended. Older candles
        are ignored.
        """
        if self._candles and candle.time < self._candles[-1].time:
            logger.debug("Ignoring stale candle t=%d", candle.time)
            return self.signals

        if self._candles and candle.time == self._candles[-1].time:
            self._candles[-1] = candle
            if self._throttled():
                return self.signals
        else:
            self._candles.append(candle)
            if len(self._candles) > self.max_candles:
                self._candles = self._candles[-self.max_candles :]

        return await self._recompute()

    async def update_config(self, config: EngineConfig) -> list[Signal]:
        """Swap configuration and recompute immediately."""
        self._engine = self._engine.with_config(config)
        logger.info(
            "Config changed: strategy=%s sensitivity=%d",
            config.strategy.value, config.sensitivity,
        )
        return await self._recompute()

    def set_external_signals(self, signals: Sequence[Signal]) -> None:
        """Replace signals produced outside the engine (e.g. AI analysis)."""
        self._external_signals = list(signals)

    # ------------------------------------------------------------------
    # Core logic
    # ------------------------------------------------------------------

    def _throttled(self) -> bool:
        if self._last_compute is None:
            return False
        elapsed_ms = (self._clock() - self._last_compute) * 1000
        return elapsed_ms < self.recompute_throttle_ms

    async def _recompute(self) -> list[Signal]:
        self._signals = self._engine.compute(self._candles)
        self._last_compute = self._clock()

        new_signals = [
            s for s in self._signals
            if s.id not in self._notified
            and (self._watermark is None or s.candle_time >= self._watermark)
        ]
        if self._candles:
            self._watermark = self._candles[-1].time

        for signal in new_signals:
            self._notified[signal.id] = signal.candle_time
            logger.info(
                "New %s signal @ %.5f (SL %.5f TP %.5f) conf=%d: %s",
                signal.type.value,
                signal.entry_price,
                signal.stop_loss,
                signal.take_profit,
                signal.confidence,
                signal.reason,
            )
            for callback in self._callbacks:
                try:
                    await callback(signal)
                except Exception as e:
                    logger.error(f"Signal callback error: {e}")

        if self._watermark is not None:
            self._notified = {
                sid: t for sid, t in self._notified.items() if t >= self._watermark
            }
        return self.signals
