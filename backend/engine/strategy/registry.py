"""Strategy registry mapping each StrategyType to its evaluator.

Usage:
    @register_strategy(StrategyType.TREND)
    def evaluate_trend(ind, i, profile):
        ...

    evaluator = get_strategy(StrategyType.TREND)
    strategies = list_strategies()
"""

from __future__ import annotations

import logging

from engine.models.config import StrategyType
from engine.strategy.protocol import StrategyEvaluator

logger = logging.getLogger(__name__)

# Global registry: strategy type -> evaluator
_REGISTRY: dict[StrategyType, StrategyEvaluator] = {}


def register_strategy(strategy: StrategyType):
    """Decorator to register an evaluator under a strategy type.

    Raises:
        ValueError: If the strategy type is already registered.
    """

    def decorator(func):
        if strategy in _REGISTRY:
            raise ValueError(
                f"Strategy '{strategy.value}' is already registered by "
                f"{_REGISTRY[strategy].__name__}"
            )
        _REGISTRY[strategy] = func
        logger.debug("Registered strategy: %s -> %s", strategy.value, func.__name__)
        return func

    return decorator


def get_strategy(strategy: StrategyType | str) -> StrategyEvaluator:
    """Get the evaluator for a strategy type.

    Raises:
        KeyError: If no evaluator is registered for the type.
    """
    try:
        key = StrategyType(strategy)
    except ValueError:
        key = None
    evaluator = _REGISTRY.get(key) if key is not None else None
    if evaluator is None:
        available = ", ".join(sorted(s.value for s in _REGISTRY)) or "(none)"
        raise KeyError(f"Unknown strategy '{strategy}'. Available: {available}")
    return evaluator


def list_strategies() -> list[str]:
    """Return a sorted list of registered strategy names."""
    return sorted(s.value for s in _REGISTRY)
