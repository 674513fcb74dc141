# distroflow/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - SUPABASE_SERVICE_ROLE_KEY (required only for tenant provisioning)
    """

    PROJECT_NAME: str = "DistroFlow POS API"
    API_V1_STR: str = "/api/v1"

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str = "sqlite:///./distroflow.db"

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # POS state is persisted as a whole under this key
    STORE_STATE_KEY: str = "distribuidora-store"

    # Receipts
    DISTRIBUTOR_NAME: str = "Distribuidora XYZ"
    RECEIPT_TIMEZONE: str = "America/Sao_Paulo"

    # Dashboard
    LOW_STOCK_THRESHOLD: int = 5

    # Tenant provisioning
    DEFAULT_TRIAL_DAYS: int = 30
    PROVISIONER_ROLES: list[str] = ["super_admin"]

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8080",
        "capacitor://localhost",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
