# app/core/config.py

from pathlib import Path
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
    APP_NAME: str = "Expense Tracker API"
    DEBUG: bool = False
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str

    # JWT / Security Configuration
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:5173"

    # AI advisor (OpenRouter, OpenAI-compatible chat completions)
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    AI_MODEL: str = "openai/gpt-4o-mini"
    AI_FALLBACK_MODEL: str = "deepseek/deepseek-chat-v3-0324:free"
    AI_TIMEOUT_SECONDS: float = 30.0

    # Currency rates
    EXCHANGE_RATE_API_URL: str = "https://api.exchangerate-api.com/v4/latest/USD"
    CURRENCY_CACHE_TTL_SECONDS: int = 3600
    RATE_SOURCE_TIMEOUT_SECONDS: float = 10.0

    @property
    def is_sqlite(self) -> bool:
        """SQLite has no connection pool settings and no native UUID/enum types"""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def ai_enabled(self) -> bool:
        return bool(self.OPENROUTER_API_KEY)

# Create a global settings instance
settings = Settings()
