"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List, Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_title: str = Field(default="Quotebook")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="sqlite:///./invoicing.db",
        description="SQLAlchemy database URL"
    )

    # JWT Configuration
    jwt_secret_key: str = Field(default="development-secret-key-change-in-production", description="JWT secret key")
    jwt_algorithm: str = Field(default="HS256")
    jwt_access_token_expire_minutes: int = Field(default=60)

    # CORS
    cors_origins: str | List[str] = Field(default="http://localhost:3000,http://localhost:5173")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # Billing
    default_tax_rate: float = Field(default=0.10, ge=0, le=1)
    default_payment_terms_days: int = Field(default=30, description="Days until due for duplicated and converted invoices")
    invoice_number_prefix: str = Field(default="INV")
    invoice_number_max_attempts: int = Field(default=5, ge=1)

    # Overdue sweep
    overdue_sweep_enabled: bool = Field(default=True)
    overdue_sweep_interval_seconds: int = Field(default=3600, ge=1)

    # Notifications
    notification_queue_size: int = Field(default=1000)

    # Sentry (Optional)
    sentry_dsn: Optional[str] = Field(default=None)
    sentry_traces_sample_rate: float = Field(default=0.1)

    # Email Configuration
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_user: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    email_from_name: str = Field(default="Quotebook")
    email_from_address: str = Field(default="noreply@example.com")
    company_name: str = Field(default="Quotebook")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            if not v.strip():
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return list(DEFAULT_CORS_ORIGINS)
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_environment(self) -> None:
        """Validate that production settings are not left at their defaults."""
        if self.jwt_secret_key == "development-secret-key-change-in-production":
            raise ValueError("Missing required environment variables: JWT_SECRET_KEY")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()

    return settings


# Create a global settings instance
settings = get_settings()
