"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    records_api_base: str = "http://localhost:8001"

    # Service
    service_name: str = "finance-insights"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    fetch_max_retries: int = 3
    fetch_backoff_base: float = 0.5  # Exponential backoff base in seconds

    # Analysis tunables
    analysis_window_months: int = Field(6, ge=0)
    significance_threshold: float = Field(0.05, ge=0.0, lt=1.0)
    anomaly_multiplier: float = Field(2.0, gt=0.0)
    noise_threshold_percent: float = Field(10.0, ge=0.0)
    forecast_periods: int = Field(3, ge=0, le=24)


settings = Settings()
