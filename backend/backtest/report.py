"""Report formatting for backtest results.

Outputs results to console (formatted tables) and JSON files.
"""

from __future__ import annotations

import json
import math

from backtest.stats import BacktestResult, GroupStats


def _finite(value: float) -> float | None:
    return round(value, 4) if math.isfinite(value) else None


class ReportFormatter:
    """Format backtest results for display and export."""

    @staticmethod
    def print_console(result: BacktestResult) -> None:
        """Print formatted report to console."""
        be = result.breakeven_win_rate

        print("\n" + "=" * 70)
        print(f"  BACKTEST RESULTS: {result.strategy} (sensitivity {result.sensitivity})")
        print("=" * 70)
        print(f"  Symbol: {result.symbol}  Timeframe: {result.timeframe}")
        print(f"  Candles: {result.candles}  Risk/Reward: 1:{result.risk_reward:g}")

        print("\n" + "-" * 70)
        print("  OVERALL")
        print("-" * 70)
        print(f"  Total signals:  {result.total_signals}")
        print(f"  Wins (TP):      {result.wins}")
        print(f"  Losses (SL):    {result.losses}")
        print(f"  Active:         {result.active}")
        above = "ABOVE" if result.win_rate >= be else "BELOW"
        print(f"  Win rate:       {result.win_rate:.1f}% ({above} {be:.1f}% breakeven)")
        print(f"  Expectancy:     {result.expectancy_r:+.2f}R per trade")
        print(f"  Total R:        {result.total_r:+.1f}R")
        print(f"  Profit factor:  {result.profit_factor:.2f}")
        print(f"  Avg confidence: {result.avg_confidence:.1f}")
        print(f"  Avg bars held:  {result.avg_bars_held:.1f}")
        print(f"  Avg MAE/MFE:    {result.avg_mae:.2f}R / {result.avg_mfe:.2f}R")

        ReportFormatter._print_groups("BY DIRECTION", "Direction", result.by_direction)
        ReportFormatter._print_groups("BY REASON", "Reason", result.by_reason, width=36)

        print("\n" + "=" * 70)

    @staticmethod
    def _print_groups(title: str, header: str, groups: list[GroupStats], width: int = 12) -> None:
        if not groups:
            return
        print("\n" + "-" * 70)
        print(f"  {title}")
        print("-" * 70)
        print(f"  {header:<{width}} {'Total':>6} {'Wins':>6} {'Losses':>6} {'Win%':>8} {'R':>8}")
        for g in groups:
            print(
                f"  {g.label[:width]:<{width}} {g.total:>6} {g.wins:>6} {g.losses:>6} "
                f"{g.win_rate:>7.1f}% {g.total_r:>+7.1f}R"
            )

    @staticmethod
    def to_dict(result: BacktestResult) -> dict:
        """Convert results to JSON-serializable dict."""

        def group_dict(g: GroupStats) -> dict:
            return {
                "label": g.label,
                "total": g.total,
                "wins": g.wins,
                "losses": g.losses,
                "active": g.active,
                "win_rate": round(g.win_rate, 2),
                "total_r": round(g.total_r, 2),
            }

        return {
            "metadata": {
                "symbol": result.symbol,
                "timeframe": result.timeframe,
                "strategy": result.strategy,
                "sensitivity": result.sensitivity,
                "risk_reward": result.risk_reward,
                "candles": result.candles,
            },
            "overall": {
                "total_signals": result.total_signals,
                "wins": result.wins,
                "losses": result.losses,
                "active": result.active,
                "win_rate": round(result.win_rate, 2),
                "breakeven_win_rate": round(result.breakeven_win_rate, 2),
                "expectancy_r": round(result.expectancy_r, 4),
                "total_r": round(result.total_r, 2),
                "profit_factor": _finite(result.profit_factor),
                "avg_confidence": round(result.avg_confidence, 2),
            },
            "by_direction": [group_dict(g) for g in result.by_direction],
            "by_reason": [group_dict(g) for g in result.by_reason],
            "signals": [
                {
                    **o.signal.model_dump(mode="json"),
                    "exit_time": o.exit_time,
                    "exit_price": o.exit_price,
                    "bars_held": o.bars_held,
                    "r_multiple": round(o.r_multiple, 4),
                    "mae_ratio": o.mae_ratio,
                    "mfe_ratio": o.mfe_ratio,
                }
                for o in result.outcomes
            ],
        }

    @staticmethod
    def save_json(result: BacktestResult, filepath: str) -> None:
        """Save results to JSON file."""
        data = ReportFormatter.to_dict(result)
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)
        print(f"\nResults saved to {filepath}")
