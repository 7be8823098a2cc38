"""CLI entry point for the backtesting system.

Usage:
    python -m backtest --symbol BTCUSD --timeframe 5m --count 1000
    python -m backtest --input candles.csv --timeframe 1h --strategy REVERSAL
    python -m backtest --config engine.yaml --output results.json
"""

import argparse
import logging
import os
import sys

# Add backend to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.engine_config import load_engine_config
from app.services.market_simulator import SUPPORTED_SYMBOLS, generate_history, get_symbol
from engine import StrategyType, Timeframe

from backtest.candle_source import load_candles
from backtest.config import get_backtest_settings
from backtest.report import ReportFormatter
from backtest.runner import BacktestConfig, BacktestRunner


def parse_args() -> argparse.Namespace:
    settings = get_backtest_settings()
    symbols = ",".join(s.id for s in SUPPORTED_SYMBOLS)

    parser = argparse.ArgumentParser(
        description="Backtest the signal engine on simulated or recorded candles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  python -m backtest --symbol ETHUSD --timeframe 15m --count 2000
  python -m backtest --input candles.csv --strategy TREND --sensitivity 60
  python -m backtest --config engine.yaml --output results.json

Simulated symbols: {symbols}
        """,
    )

    parser.add_argument(
        "--symbol",
        type=str,
        default=settings.symbol,
        help=f"Symbol to simulate, or label for --input (default: {settings.symbol})",
    )
    parser.add_argument(
        "--timeframe",
        type=str,
        default=settings.timeframe,
        choices=[tf.value for tf in Timeframe],
        help=f"Candle timeframe (default: {settings.timeframe})",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=settings.history_count,
        help=f"Number of simulated candles (default: {settings.history_count})",
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        default=None,
        help="CSV or JSON candle file instead of simulated history",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Engine config YAML (default: backend/engine.yaml)",
    )
    parser.add_argument(
        "--strategy",
        type=str.upper,
        default=None,
        choices=[s.value for s in StrategyType],
        help="Override the configured strategy",
    )
    parser.add_argument(
        "--sensitivity",
        type=int,
        default=None,
        help="Override the configured sensitivity (1-100)",
    )
    parser.add_argument(
        "--max-hold",
        type=int,
        default=settings.max_hold_candles,
        help="Close trades still open after N candles (0 = never)",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for JSON results",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        engine_config = load_engine_config(args.config)
        overrides = {}
        if args.strategy:
            overrides["strategy"] = StrategyType(args.strategy)
        if args.sensitivity is not None:
            overrides["sensitivity"] = args.sensitivity
        if overrides:
            engine_config = engine_config.model_validate(
                {**engine_config.model_dump(), **overrides}
            )
    except ValueError as e:
        print(f"Error: invalid engine config: {e}")
        sys.exit(1)

    if args.input:
        try:
            candles = load_candles(args.input)
        except (OSError, ValueError) as e:
            print(f"Error: cannot load candles: {e}")
            sys.exit(1)
    else:
        try:
            symbol = get_symbol(args.symbol)
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            sys.exit(1)
        candles = generate_history(symbol, args.timeframe, count=args.count)

    print(f"\nBacktest: {args.symbol} {args.timeframe}, {len(candles)} candles")
    print(f"Strategy: {engine_config.strategy.value} (sensitivity {engine_config.sensitivity})")

    runner = BacktestRunner(
        BacktestConfig(
            symbol=args.symbol,
            timeframe=args.timeframe,
            engine=engine_config,
            max_hold_candles=args.max_hold or None,
        )
    )

    print("\nRunning backtest...")
    result = runner.run(candles)

    ReportFormatter.print_console(result)

    if args.output:
        ReportFormatter.save_json(result, args.output)


if __name__ == "__main__":
    main()
