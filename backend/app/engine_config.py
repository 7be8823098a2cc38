"""Engine configuration loaded from engine.yaml.

File layout:

    engine:
      strategy: TREND
      sensitivity: 50
      risk_reward: 2.0
      use_macd_filter: true

Missing file = defaults. ENGINE_STRATEGY and ENGINE_SENSITIVITY
environment variables (also read from a .env next to the file)
override the file values.
"""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

from engine.models.config import EngineConfig, StrategyType

logger = logging.getLogger(__name__)

_DEFAULT_PATH = Path(__file__).parent.parent / "engine.yaml"

_ENV_OVERRIDES = {
    "ENGINE_STRATEGY": "strategy",
    "ENGINE_SENSITIVITY": "sensitivity",
}


def _apply_env_overrides(raw: dict) -> dict:
    merged = dict(raw)
    for env_key, field in _ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            merged[field] = value.strip()
    return merged


def _normalize_strategy(raw: dict) -> dict:
    if "strategy" not in raw:
        return raw
    name = str(raw["strategy"]).strip().upper()
    valid = [s.value for s in StrategyType]
    if name not in valid:
        raise ValueError(f"strategy must be one of {valid}, got '{raw['strategy']}'")
    return {**raw, "strategy": name}


def load_engine_config(path: Path | str | None = None) -> EngineConfig:
    """Load engine config from a YAML file.

    Falls back to defaults if the file doesn't exist.

    Raises:
        ValueError: If the file is not a mapping or names an unknown strategy.
        pydantic.ValidationError: If a field value is out of range.
    """
    config_path = Path(path) if path is not None else _DEFAULT_PATH

    load_dotenv(config_path.parent / ".env", override=False)

    raw: dict = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            doc = yaml.safe_load(f) or {}
        if not isinstance(doc, dict):
            raise ValueError(f"{config_path}: expected a mapping at top level")
        raw = doc.get("engine", doc) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{config_path}: 'engine' must be a mapping")
    else:
        logger.info("No engine config found at %s, using defaults", config_path)

    raw = _normalize_strategy(_apply_env_overrides(raw))
    config = EngineConfig(**raw)
    logger.info(
        "Loaded engine config: strategy=%s sensitivity=%d rr=%.2f filters=%s",
        config.strategy.value,
        config.sensitivity,
        config.risk_reward,
        ",".join(enabled_filters(config)) or "none",
    )
    return config


def enabled_filters(config: EngineConfig) -> list[str]:
    """Names of the confirmation filters switched on in a config."""
    flags = {
        "rsi": config.use_rsi_filter,
        "volume": config.use_volume_filter,
        "macd": config.use_macd_filter,
        "ema_trend": config.use_ema_trend_filter,
        "adx": config.use_adx_filter,
    }
    return [name for name, on in flags.items() if on]
