"""Main application entry point.

Runs the signal service against the simulated market feed:
history is generated once, then the forming candle is updated by
ticks and rolled over when its time bucket ends.

Usage:
    python -m app.main
    SIGNAL_SYMBOL=ETHUSD SIGNAL_TIMEFRAME=1s python -m app.main
"""

import asyncio
import logging
import random
import time

from app.config import get_settings
from app.engine_config import load_engine_config
from app.services import SignalService, generate_history, get_symbol, update_candle_with_tick
from engine import Signal, Timeframe
from engine.models.candle import Candle

logger = logging.getLogger(__name__)

TICK_INTERVAL_S = 0.5


async def on_new_signal(signal: Signal) -> None:
    """Print new signals to the console."""
    print(
        f"[{signal.type.value}] {signal.reason} @ {signal.entry_price:.5f} "
        f"SL {signal.stop_loss:.5f} TP {signal.take_profit:.5f} "
        f"(confidence {signal.confidence})"
    )


async def run_feed(
    service: SignalService,
    last: Candle,
    volatility: float,
    timeframe: Timeframe,
    ticks: int | None = None,
    tick_interval: float = TICK_INTERVAL_S,
    rng: random.Random | None = None,
    clock=time.time,
) -> Candle:
    """
    Stream simulated ticks into the service.

    Args:
        service: Signal service already loaded with history
        last: The current forming candle
        volatility: Symbol volatility for tick moves
        timeframe: Candle timeframe, used to roll over to a new candle
        ticks: Stop after this many ticks (run forever if None)
        tick_interval: Seconds to sleep between ticks
        rng: Random source for tick moves
        clock: Wall clock in seconds

    Returns:
        The forming candle after the last tick
    """
    rng = rng or random.Random()
    count = 0
    while ticks is None or count < ticks:
        now_ms = int(clock() * 1000)
        bucket = (now_ms // timeframe.ms) * timeframe.ms

        if bucket > last.time:
            last = Candle(
                time=bucket,
                open=last.close,
                high=last.close,
                low=last.close,
                close=last.close,
                volume=0.0,
            )
        else:
            last = update_candle_with_tick(last, volatility, rng=rng)

        await service.on_candle(last)
        count += 1
        if tick_interval > 0:
            await asyncio.sleep(tick_interval)
    return last


async def main() -> None:
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    symbol = get_symbol(settings.symbol)
    timeframe = Timeframe(settings.timeframe)
    config = load_engine_config(settings.engine_config_path)

    service = SignalService(
        config,
        timeframe,
        recompute_throttle_ms=settings.recompute_throttle_ms,
    )
    service.on_signal(on_new_signal)

    history = generate_history(symbol, timeframe, count=settings.history_count)
    signals = await service.load_history(history)
    logger.info(
        f"{symbol.id} {timeframe.label}: {len(history)} candles, {len(signals)} signals in history"
    )

    try:
        await run_feed(service, history[-1], symbol.volatility, timeframe)
    except asyncio.CancelledError:
        logger.info("Feed stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
