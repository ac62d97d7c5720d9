# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, sqlite:// works for local runs)
      - JWT_SECRET (HS256 signing secret for access tokens)

    Optional:
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (product image hosting)
      - CORS_ORIGIN (storefront frontend origin)
    """

    PROJECT_NAME: str = "Storefront API"
    API_PREFIX: str = "/api"

    # "production" hides internal error details from responses
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str

    # JWT signing
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Revoked tokens only need to outlive the longest-lived access token
    REVOKED_TOKEN_TTL_MINUTES: int = 60

    PORT: int = 3000
    CORS_ORIGIN: str = "http://localhost:5173"

    # Image hosting (Supabase Storage)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "products"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
