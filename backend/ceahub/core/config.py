# backend/ceahub/core/config.py

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _strip_asyncpg_unsupported_params(url: str) -> str:
    """
    asyncpg does NOT accept sslmode or channel_binding as connect kwargs.
    Supabase connection strings usually carry `?sslmode=require`, which
    SQLAlchemy would otherwise forward to asyncpg.connect():
      TypeError: connect() got an unexpected keyword argument 'sslmode'
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = parse_qsl(parts.query, keep_blank_values=True)
    filtered = [(k, v) for (k, v) in params if k not in {"sslmode", "channel_binding"}]
    new_query = urlencode(filtered, doseq=True)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, new_query, parts.fragment))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------
    # Environment
    # -----------------------------
    # Use: development | staging | production
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated
    CORS_ORIGINS: str = "http://localhost:5173,https://empowermenthub.onrender.com"

    # -----------------------------
    # DB (the Supabase project's Postgres)
    # -----------------------------
    DATABASE_URL_ASYNC: str
    DATABASE_URL_SYNC: str

    # -----------------------------
    # Supabase (auth + storage)
    # -----------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # When set, bearer tokens are verified locally instead of calling auth.get_user().
    SUPABASE_JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    PROFILE_PICTURES_BUCKET: str = "profile-pictures"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # -----------------------------
    # Reward policy
    # -----------------------------
    REWARD_TIER_THRESHOLD: int = 11
    REWARD_BASE_RATE: Decimal = Decimal("200")
    REWARD_BONUS_RATE: Decimal = Decimal("400")
    CURRENCY_PREFIX: str = "R"

    TOP_PERFORMERS_LIMIT: int = 10

    # False keeps admin overrides permissive (out-of-machine transitions are only logged).
    ENFORCE_STATUS_TRANSITIONS: bool = False

    AGENT_CODE_PREFIX: str = "CEA"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def DATABASE_URL_ASYNC_CLEAN(self) -> str:
        return _strip_asyncpg_unsupported_params(self.DATABASE_URL_ASYNC)

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        env = (self.ENVIRONMENT or "").strip().lower()

        # Staging/production must talk to a real Supabase project.
        if env in {"staging", "production"}:
            if not self.SUPABASE_URL or not self.SUPABASE_SERVICE_ROLE_KEY:
                raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in staging/production.")

        if self.JWT_ALGORITHM not in {"HS256"}:
            raise ValueError(f"Unsupported JWT_ALGORITHM={self.JWT_ALGORITHM!r}. Allowed: HS256")

        if self.REWARD_TIER_THRESHOLD < 1:
            raise ValueError("REWARD_TIER_THRESHOLD must be a positive integer.")


settings = Settings()
