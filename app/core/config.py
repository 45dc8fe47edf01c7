"""
Application configuration.

Loads settings from environment variables and .env file.
Every tunable of the service is declared here and read from the environment.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        database_url: SQLAlchemy URL of the ledger database.
        binance_api_url: Base URL of the Binance market-data API.
        quote_currency: Quote asset appended to every trading pair.
        http_timeout_seconds: Timeout for outbound HTTP calls.
        openrouter_api_key: Commentary is templated when unset.
        openrouter_api_url: OpenRouter chat-completions endpoint.
        openrouter_model: Model used for alert commentary.
        commentary_max_tokens: Completion token budget per alert.
        alert_threshold_percent: Absolute 24h change that triggers an alert.
        alert_interval_minutes: Period of the scheduled alert check.
        alert_suppression_minutes: Skip repeat alerts for the same symbol
            and direction inside this window. 0 re-alerts on every check.
        alerts_enabled: Start the alert scheduler with the application.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "CryptoFolio"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "120/minute"

    database_url: str = "sqlite:///./cryptofolio.db"

    binance_api_url: str = "https://data-api.binance.vision"
    quote_currency: str = "USDT"
    http_timeout_seconds: float = 10.0

    openrouter_api_key: Optional[str] = None
    openrouter_api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    openrouter_model: str = "meta-llama/llama-3.1-8b-instruct:free"
    commentary_max_tokens: int = 150

    alert_threshold_percent: Decimal = Decimal("5")
    alert_interval_minutes: int = 5
    alert_suppression_minutes: int = 0
    alerts_enabled: bool = True


settings = Settings()
