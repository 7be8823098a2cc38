"""BacktestRunner: orchestrates the backtest pipeline.

candles -> engine signals -> outcome resolution -> statistics.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from engine import EngineConfig, SignalEngine, Timeframe
from engine.models.candle import Candle

from backtest.outcome import OutcomeResolver
from backtest.stats import BacktestResult, StatisticsCalculator

logger = logging.getLogger(__name__)


@dataclass
class BacktestConfig:
    """Configuration for a backtest run."""

    symbol: str
    timeframe: str
    engine: EngineConfig
    max_hold_candles: int | None = None


class BacktestRunner:
    """Run the signal engine over a candle history and score the signals."""

    def __init__(self, config: BacktestConfig):
        self.config = config
        self._engine = SignalEngine(config.engine, Timeframe(config.timeframe))
        self._resolver = OutcomeResolver(config.max_hold_candles)

    def run(self, candles: Sequence[Candle]) -> BacktestResult:
        """Execute the full backtest pipeline."""
        started = time.time()
        engine_cfg = self.config.engine

        signals = self._engine.compute(candles)
        outcomes = self._resolver.resolve_all(signals, candles)

        result = StatisticsCalculator().calculate(
            outcomes,
            symbol=self.config.symbol,
            timeframe=self.config.timeframe,
            strategy=engine_cfg.strategy.value,
            sensitivity=engine_cfg.sensitivity,
            risk_reward=engine_cfg.risk_reward,
            candles=len(candles),
        )

        logger.info(
            f"Backtest {self.config.symbol} {self.config.timeframe} "
            f"{engine_cfg.strategy.value}: {result.total_signals} signals, "
            f"win rate {result.win_rate:.1f}%, {result.total_r:+.1f}R "
            f"in {time.time() - started:.2f}s"
        )
        return result
