# App configuration using Pydantic BaseSettings (loads from .env or defaults).

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./barbershop.sqlite"

    # all "today"/"now" decisions happen in this zone, never the caller's
    BUSINESS_TIMEZONE: str = "America/New_York"
    EXCEPTION_LOOKAHEAD_DAYS: int = 90

    SQUARE_ACCESS_TOKEN: str | None = None
    SQUARE_ENVIRONMENT: str = "production"  # or "sandbox"
    SQUARE_LOCATION_ID: str | None = None
    SQUARE_API_VERSION: str = "2024-12-18"
    SQUARE_TIMEOUT: float = 30.0
    SQUARE_MAX_RETRIES: int = 3
    SQUARE_RETRY_DELAY: float = 1.0

    ADMIN_API_TOKEN: str | None = None

    HOURS_CSV: str | None = None
    EXCEPTIONS_CSV: str | None = None

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
