"""Strategy protocol shared by the three signal strategies.

This module provides:
- Candidate: directional trigger produced by a strategy for one candle
- StrategyEvaluator: callable Protocol every strategy must satisfy
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from engine.indicators.calculator import IndicatorSet
from engine.models.config import SensitivityProfile
from engine.models.signal import SignalType


@dataclass(frozen=True, slots=True)
class Candidate:
    """A directional signal candidate before filters and scoring.

    Attributes:
        type: LONG or SHORT.
        reason: Human-readable trigger description.
    """

    type: SignalType
    reason: str

    def with_reason_suffix(self, suffix: str) -> Candidate:
        return Candidate(type=self.type, reason=self.reason + suffix)


class StrategyEvaluator(Protocol):
    """Per-candle decision function.

    Pure: depends only on the index and the precomputed series, and
    returns at most one candidate.
    """

    def __call__(
        self,
        ind: IndicatorSet,
        i: int,
        profile: SensitivityProfile,
    ) -> Candidate | None:
        ...
