"""Statistics calculator for backtest results.

Computes overall metrics plus per-direction and per-reason breakdowns.

R-multiple convention: a stop loss costs 1R (R = stop distance) and a
take profit earns reward/risk R, i.e. the configured risk_reward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from engine.models.signal import SignalStatus, SignalType

from backtest.outcome import TradeOutcome

logger = logging.getLogger(__name__)


@dataclass
class GroupStats:
    label: str
    total: int = 0
    wins: int = 0
    losses: int = 0
    active: int = 0
    total_r: float = 0.0

    @property
    def win_rate(self) -> float:
        resolved = self.wins + self.losses
        return (self.wins / resolved * 100) if resolved > 0 else 0.0


@dataclass
class BacktestResult:
    """Complete backtest results."""

    # Metadata
    symbol: str
    timeframe: str
    strategy: str
    sensitivity: int
    risk_reward: float
    candles: int

    outcomes: list[TradeOutcome] = field(default_factory=list)

    # Overall
    total_signals: int = 0
    wins: int = 0
    losses: int = 0
    active: int = 0
    win_rate: float = 0.0
    breakeven_win_rate: float = 0.0
    expectancy_r: float = 0.0
    total_r: float = 0.0
    profit_factor: float = 0.0
    avg_confidence: float = 0.0
    avg_bars_held: float = 0.0
    avg_mae: float = 0.0
    avg_mfe: float = 0.0

    # Breakdowns
    by_direction: list[GroupStats] = field(default_factory=list)
    by_reason: list[GroupStats] = field(default_factory=list)


class StatisticsCalculator:
    """Calculate backtest statistics from resolved outcomes."""

    def calculate(
        self,
        outcomes: list[TradeOutcome],
        symbol: str,
        timeframe: str,
        strategy: str,
        sensitivity: int,
        risk_reward: float,
        candles: int,
    ) -> BacktestResult:
        result = BacktestResult(
            symbol=symbol,
            timeframe=timeframe,
            strategy=strategy,
            sensitivity=sensitivity,
            risk_reward=risk_reward,
            candles=candles,
            outcomes=outcomes,
        )
        self._calc_overall(result)
        result.by_direction = self._group(
            outcomes, lambda o: "LONG" if o.signal.type == SignalType.LONG else "SHORT"
        )
        result.by_reason = self._group(outcomes, lambda o: o.signal.reason)
        return result

    def _calc_overall(self, result: BacktestResult) -> None:
        outcomes = result.outcomes
        result.total_signals = len(outcomes)
        result.wins = sum(1 for o in outcomes if o.status == SignalStatus.HIT_TP)
        result.losses = sum(1 for o in outcomes if o.status == SignalStatus.HIT_SL)
        result.active = result.total_signals - result.wins - result.losses
        result.breakeven_win_rate = 100 / (1 + result.risk_reward)

        if outcomes:
            result.avg_confidence = sum(o.signal.confidence for o in outcomes) / len(outcomes)

        resolved = [o for o in outcomes if o.status != SignalStatus.ACTIVE]
        if not resolved:
            return

        result.win_rate = result.wins / len(resolved) * 100
        result.total_r = sum(o.r_multiple for o in resolved)
        result.expectancy_r = result.total_r / len(resolved)
        gross_profit = sum(o.r_multiple for o in resolved if o.r_multiple > 0)
        gross_loss = -sum(o.r_multiple for o in resolved if o.r_multiple < 0)
        result.profit_factor = gross_profit / gross_loss if gross_loss > 0 else float("inf")
        result.avg_bars_held = sum(o.bars_held for o in resolved) / len(resolved)
        result.avg_mae = sum(o.mae_ratio for o in resolved) / len(resolved)
        result.avg_mfe = sum(o.mfe_ratio for o in resolved) / len(resolved)

    @staticmethod
    def _group(outcomes: list[TradeOutcome], key) -> list[GroupStats]:
        groups: dict[str, GroupStats] = {}
        for outcome in outcomes:
            label = key(outcome)
            if label not in groups:
                groups[label] = GroupStats(label=label)
            stats = groups[label]
            stats.total += 1
            stats.total_r += outcome.r_multiple
            if outcome.status == SignalStatus.HIT_TP:
                stats.wins += 1
            elif outcome.status == SignalStatus.HIT_SL:
                stats.losses += 1
            else:
                stats.active += 1
        return sorted(groups.values(), key=lambda s: (-s.total, s.label))
