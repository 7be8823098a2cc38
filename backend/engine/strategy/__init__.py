"""Strategy evaluators.

Public API:
- Candidate: directional trigger for one candle
- StrategyEvaluator: Protocol every evaluator satisfies
- register_strategy: Decorator to register an evaluator
- get_strategy: Look up the evaluator for a StrategyType
- list_strategies: Names of all registered strategies

Importing this package auto-registers all built-in strategies.
"""

from engine.strategy.protocol import Candidate, StrategyEvaluator
from engine.strategy.registry import get_strategy, list_strategies, register_strategy

# Import built-in strategies to trigger auto-registration
import engine.strategy.trend  # noqa: F401
import engine.strategy.reversal  # noqa: F401
import engine.strategy.momentum  # noqa: F401

__all__ = [
    "Candidate",
    "StrategyEvaluator",
    "get_strategy",
    "list_strategies",
    "register_strategy",
]
