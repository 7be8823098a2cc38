"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (SIGNAL_*)."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Market data
    symbol: str = "BTCUSD"
    timeframe: str = "1m"
    history_count: int = 300

    # Engine profile (YAML)
    engine_config_path: str = "engine.yaml"

    # Minimum spacing between recomputes triggered by ticks on the same candle
    recompute_throttle_ms: int = 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
