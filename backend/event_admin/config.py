"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./event_admin.db"

    # "sql" talks to DATABASE_URL directly, "rest" to a hosted PostgREST endpoint
    STORE_BACKEND: str = "sql"
    STORE_URL: str = ""
    STORE_API_KEY: str = ""
    STORE_TIMEOUT: float = 30.0

    FUNCTIONS_URL: str = ""

    FLYER_STORAGE_DIR: str = "./flyers"
    FLYER_PUBLIC_BASE_URL: str = "http://localhost:8000/flyers"

    APP_TIMEZONE: str = "America/Caracas"  # IANA tz
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
