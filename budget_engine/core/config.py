from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    STORAGE_BACKEND, RATES_CACHE_TTL_SECONDS, EXCHANGE_RATE_PROVIDER).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Budget Engine"
    debug: bool = True
    version: str = "0.1.0"

    # Plan & transaction persistence
    storage_backend: str = "memory"
    data_dir: Path = Path("data")
    db_filename: str = "budget.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    exchange_api_base_url: str = "https://api.exchangerate-api.com/v4/latest"
    http_timeout_seconds: float = 5.0
    http_retries: int = 0  # extra attempts after the first request

    # Allowed: 'static' (default-rate table only), 'external-http' (live lookups)
    exchange_rate_provider: str = "external-http"

    # Used when a transaction synthesizes a plan and no base currency is given
    default_base_currency: Optional[str] = None

    enable_rate_override: bool = True

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        allowed_storage = {"memory", "sqlite"}
        if self.storage_backend not in allowed_storage:
            raise ValueError(
                f"Unsupported storage_backend '{self.storage_backend}'. Allowed: {allowed_storage}"
            )
        allowed_providers = {"static", "external-http"}
        if self.exchange_rate_provider not in allowed_providers:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed_providers}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")
        if self.default_base_currency:
            self.default_base_currency = self.default_base_currency.upper()
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        if self.storage_backend == "sqlite":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
