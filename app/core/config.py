"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_V1_PREFIX: str = "/api/v1"

    # SQLite for local development; PostgreSQL in production
    DATABASE_URL: str = "sqlite:///./database/permits.db"

    # File storage for uploaded documents and generated permits
    UPLOADS_DIR: str = "uploads"
    UPLOADS_URL_PREFIX: str = "/uploads"

    # Permit document: optional letterhead assets (relative to UPLOADS_DIR) and header text
    PERMIT_BACKGROUND_PATH: str = "permit-bg.png"
    PERMIT_LOGO_PATH: str = "logo.jpg"
    PERMIT_VALIDITY_YEARS: int = 1
    PERMIT_JURISDICTION_LINES: list[str] = [
        "Republic of the Philippines",
        "Province of Eastern Samar",
        "Municipality of General MacArthur",
    ]
    PERMIT_OFFICE: str = "OFFICE OF THE MAYOR"
    PERMIT_MUNICIPALITY: str = "Municipality of General MacArthur, Eastern Samar"

    # Stripe (optional; required only for POST /payments/create-payment-intent)
    STRIPE_API_BASE: str = "https://api.stripe.com"
    STRIPE_SECRET_KEY: SecretStr | None = None
    STRIPE_CURRENCY: str = "php"
    STRIPE_REQUEST_TIMEOUT_SEC: float = 30.0

    # JWT authentication
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 1440

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///./permits.db or postgresql://)"
            )
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("UPLOADS_DIR")
    @classmethod
    def validate_uploads_dir(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("UPLOADS_DIR must be set and non-empty")
        return v.strip()

    @field_validator("UPLOADS_URL_PREFIX")
    @classmethod
    def validate_uploads_url_prefix(cls, v: str) -> str:
        s = (v or "").strip().rstrip("/")
        if not s.startswith("/"):
            raise ValueError("UPLOADS_URL_PREFIX must be an absolute path (e.g. /uploads)")
        return s

    @field_validator("PERMIT_VALIDITY_YEARS")
    @classmethod
    def validate_permit_validity_years(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("PERMIT_VALIDITY_YEARS must be between 1 and 10")
        return v

    @field_validator("STRIPE_API_BASE")
    @classmethod
    def validate_stripe_api_base(cls, v: str) -> str:
        s = v.strip().rstrip("/")
        if not (s.lower().startswith("http://") or s.lower().startswith("https://")):
            raise ValueError("STRIPE_API_BASE must use http or https")
        return s

    @field_validator("STRIPE_CURRENCY")
    @classmethod
    def validate_stripe_currency(cls, v: str) -> str:
        s = (v or "").strip().lower()
        if len(s) != 3 or not s.isalpha():
            raise ValueError("STRIPE_CURRENCY must be a three-letter ISO currency code")
        return s

    @field_validator("STRIPE_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_stripe_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError(
                "STRIPE_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 120"
            )
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
