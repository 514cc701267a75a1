"""Runtime configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from barsignals.models.config import SignalConfig


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix ``BARSIGNALS_``)."""

    model_config = SettingsConfigDict(
        env_prefix="BARSIGNALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Indicator periods
    rsi_period: int = 14
    stoch_period: int = 14
    stoch_smooth_k: int = 3
    stoch_smooth_d: int = 3
    adx_period: int = 14
    cci_period: int = 20
    linreg_period: int = 14
    aroon_period: int = 14
    chop_period: int = 14
    cmf_period: int = 20
    volume_lookback: int = 5
    fib_period: int = 20

    # RSI degeneracy policy
    rsi_no_loss_value: float = 100.0
    rsi_flat_value: float = 50.0

    # Log every matched bar at INFO (DEBUG otherwise)
    log_bar_activity: bool = True

    def signal_config(self) -> SignalConfig:
        """Build the indicator configuration from these settings."""
        fields = SignalConfig.model_fields.keys()
        return SignalConfig(**{name: getattr(self, name) for name in fields})


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
