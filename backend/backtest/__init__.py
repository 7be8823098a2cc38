"""Backtesting for the signal engine.

Business logic lives in engine/; candles come from the market
simulator in app/services or from a CSV/JSON file.

Usage:
    python -m backtest --symbol BTCUSD --timeframe 5m --count 1000
    python -m backtest --input candles.csv --strategy TREND --sensitivity 60
"""

from backtest.outcome import OutcomeResolver, TradeOutcome
from backtest.runner import BacktestConfig, BacktestRunner
from backtest.stats import BacktestResult, StatisticsCalculator

__all__ = [
    "BacktestConfig",
    "BacktestRunner",
    "BacktestResult",
    "OutcomeResolver",
    "StatisticsCalculator",
    "TradeOutcome",
]
