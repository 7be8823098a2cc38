"""Tests for engine config loading (engine.yaml + environment overrides)."""

import os
import textwrap

import pytest
from pydantic import ValidationError

from app.config import Settings
from app.engine_config import enabled_filters, load_engine_config
from engine.models.config import EngineConfig, StrategyType


@pytest.fixture(autouse=True)
def clean_env():
    """Keep ENGINE_* overrides from leaking between tests."""
    keys = ("ENGINE_STRATEGY", "ENGINE_SENSITIVITY")
    saved = {k: os.environ.pop(k, None) for k in keys}
    yield
    for k in keys:
        os.environ.pop(k, None)
        if saved[k] is not None:
            os.environ[k] = saved[k]


def write_yaml(tmp_path, body: str):
    path = tmp_path / "engine.yaml"
    path.write_text(textwrap.dedent(body))
    return path


class TestLoadEngineConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_engine_config(tmp_path / "missing.yaml") == EngineConfig()

    def test_engine_section(self, tmp_path):
        path = write_yaml(
            tmp_path,
            """
            engine:
              strategy: TREND
              sensitivity: 60
              risk_reward: 3
              use_macd_filter: true
              adx_threshold: 20
            """,
        )
        config = load_engine_config(path)

        assert config.strategy == StrategyType.TREND
        assert config.sensitivity == 60
        assert config.risk_reward == 3.0
        assert config.use_macd_filter
        assert config.adx_threshold == 20.0

    def test_top_level_mapping_without_section(self, tmp_path):
        path = write_yaml(tmp_path, "strategy: reversal\nsensitivity: 90\n")
        config = load_engine_config(path)

        assert config.strategy == StrategyType.REVERSAL
        assert config.sensitivity == 90

    def test_empty_file(self, tmp_path):
        path = write_yaml(tmp_path, "")
        assert load_engine_config(path) == EngineConfig()

    def test_unknown_strategy(self, tmp_path):
        path = write_yaml(tmp_path, "engine:\n  strategy: SCALPING\n")
        with pytest.raises(ValueError, match="strategy must be one of"):
            load_engine_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = write_yaml(tmp_path, "- TREND\n- 50\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_engine_config(path)

    def test_engine_section_not_a_mapping(self, tmp_path):
        path = write_yaml(tmp_path, "engine: TREND\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_engine_config(path)

    def test_out_of_range_sensitivity(self, tmp_path):
        path = write_yaml(tmp_path, "engine:\n  sensitivity: 500\n")
        with pytest.raises(ValidationError):
            load_engine_config(path)


class TestEnvOverrides:
    def test_env_overrides_file(self, tmp_path):
        path = write_yaml(tmp_path, "engine:\n  strategy: TREND\n  sensitivity: 10\n")
        os.environ["ENGINE_STRATEGY"] = "momentum"
        os.environ["ENGINE_SENSITIVITY"] = "75"

        config = load_engine_config(path)

        assert config.strategy == StrategyType.MOMENTUM
        assert config.sensitivity == 75

    def test_dotenv_next_to_file(self, tmp_path):
        path = write_yaml(tmp_path, "engine:\n  strategy: TREND\n")
        (tmp_path / ".env").write_text("ENGINE_STRATEGY=REVERSAL\n")

        assert load_engine_config(path).strategy == StrategyType.REVERSAL

    def test_process_env_beats_dotenv(self, tmp_path):
        path = write_yaml(tmp_path, "engine:\n  strategy: TREND\n")
        (tmp_path / ".env").write_text("ENGINE_STRATEGY=REVERSAL\n")
        os.environ["ENGINE_STRATEGY"] = "MOMENTUM"

        assert load_engine_config(path).strategy == StrategyType.MOMENTUM

    def test_empty_env_value_ignored(self, tmp_path):
        path = write_yaml(tmp_path, "engine:\n  sensitivity: 42\n")
        os.environ["ENGINE_SENSITIVITY"] = ""

        assert load_engine_config(path).sensitivity == 42


class TestEnabledFilters:
    def test_none(self):
        assert enabled_filters(EngineConfig()) == []

    def test_order(self):
        config = EngineConfig(use_adx_filter=True, use_rsi_filter=True, use_ema_trend_filter=True)
        assert enabled_filters(config) == ["rsi", "ema_trend", "adx"]


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SIGNAL_HISTORY_COUNT", raising=False)
        settings = Settings(_env_file=None)

        assert settings.history_count == 300
        assert settings.engine_config_path == "engine.yaml"
        assert settings.recompute_throttle_ms == 1000

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SIGNAL_SYMBOL", "ETHUSD")
        monkeypatch.setenv("SIGNAL_TIMEFRAME", "1s")

        settings = Settings(_env_file=None)

        assert settings.symbol == "ETHUSD"
        assert settings.timeframe == "1s"
