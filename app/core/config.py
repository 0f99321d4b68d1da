# app/core/config.py

from pathlib import Path
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Gastos Ledger API"
    DEBUG: bool = False
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:3000"

    # Every "today" used by the generation engine is computed in this zone
    TIMEZONE: str = "America/Argentina/Buenos_Aires"

    # Exchange rate configuration
    EXCHANGE_RATE_CACHE_TTL_SECONDS: int = 3600
    EXCHANGE_RATE_API_URL: str = "https://dolarapi.com/v1/dolares/oficial"
    EXCHANGE_RATE_HTTP_TIMEOUT: float = 10.0

    # Fallback feed, tried when the primary one fails
    EXCHANGE_RATE_FALLBACK_API_URL: str = "https://api.estadisticasbcra.com/usd_of"
    BCRA_API_TOKEN: Optional[str] = None

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def is_sqlite(self) -> bool:
        """SQLite URLs get no connection-pool tuning"""
        return self.DATABASE_URL.startswith("sqlite")

# Create a global settings instance
settings = Settings()
