"""Core configuration management using Pydantic settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator, field_validator
from typing import Optional, List
import pytz


# Valid log levels
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# Supported price models (one per deployment)
PRICE_MODELS = ['random_walk', 'mean_reversion']

# Placeholder shipped in sample env files; treated as "no key"
PEXELS_PLACEHOLDER_KEY = "YOUR_PEXELS_API_KEY_HERE"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: str = "INFO"

    # Snapshot persistence
    data_file: str = "./engine_xie_data.json"

    # Image provider (Pexels)
    pexels_api_key: Optional[str] = None
    image_query: str = "finance"
    image_timeout_seconds: float = 10.0

    # CORS Configuration
    cors_origins: str = "*"  # Comma-separated list of allowed origins

    # Exchange calendar: every "day" and "hour" boundary is evaluated here
    exchange_timezone: str = "Asia/Shanghai"

    # Price model
    price_model: str = "random_walk"
    max_price_change_pct: float = 0.02  # ±2% per tick
    max_volume_per_tick: int = 1000
    reversion_noise: float = 0.05
    reversion_strength: float = 0.01

    # Timers (seconds)
    tick_interval_seconds: int = 60
    news_check_interval_seconds: int = 60

    # Retention
    transaction_log_limit: int = 20
    news_retention_months: int = 3
    history_start_date: str = "2024-10-01"

    # Admin
    admin_password: str = "IloveRong"
    news_requires_password: bool = True

    # Fresh-state descriptive fields
    symbol: str = "ENGINE-XIE"
    company_info: str = "Truly unstoppable. Runs 24/7."

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        upper_v = v.upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}")
        return upper_v

    @field_validator('price_model')
    @classmethod
    def validate_price_model(cls, v: str) -> str:
        lower_v = v.lower()
        if lower_v not in PRICE_MODELS:
            raise ValueError(f"price_model must be one of {PRICE_MODELS}")
        return lower_v

    @field_validator('exchange_timezone')
    @classmethod
    def validate_exchange_timezone(cls, v: str) -> str:
        """Validate timezone name is known to pytz."""
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown exchange timezone: {v}")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def image_provider_enabled(self) -> bool:
        """True when a real Pexels key is configured."""
        return bool(self.pexels_api_key) and self.pexels_api_key != PEXELS_PLACEHOLDER_KEY

    @model_validator(mode='after')
    def validate_config(self) -> 'Settings':
        """Validate configuration after all fields are set."""
        if self.tick_interval_seconds <= 0 or self.news_check_interval_seconds <= 0:
            raise ValueError("Timer intervals must be positive")
        if self.transaction_log_limit <= 0:
            raise ValueError("transaction_log_limit must be positive")
        if self.max_price_change_pct < 0 or self.reversion_noise < 0:
            raise ValueError("Price perturbation bounds cannot be negative")
        return self


# Global settings instance
settings = Settings()
