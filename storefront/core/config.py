# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (SQLAlchemy URL, e.g. postgresql+psycopg2://...)
      - JWT_SECRET (signing secret shared with the identity provider)

    Optional:
      - CORS_ORIGINS, LOG_LEVEL, paging and cart retry knobs below
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"

    # DB config
    DATABASE_URL: str
    DB_ECHO: bool = False

    # JWT verification (tokens are issued elsewhere, we only verify)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    LOG_LEVEL: str = "INFO"

    # Catalog paging
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # How many times a cart mutation is re-run after losing a version race
    CART_MAX_ATTEMPTS: int = 3

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
