"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(default="Monster Future AI", description="Product name used in emails")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    debug: bool | None = Field(default=None, description="Debug mode (defaults based on environment)")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # Email
    email_backend: Literal["console", "smtp"] = Field(
        default="smtp", description="Email backend (console for dev, smtp for prod)"
    )
    email_user: str = Field(default="", description="Mail account login (EMAIL_USER)")
    email_pass: str = Field(default="", description="Mail account password (EMAIL_PASS)")
    email_from: str = Field(
        default='"Monster Future AI" <noreply@monstertrading.site>',
        description="From address for emails",
    )

    # SMTP transport
    smtp_host: str = Field(default="mail.privateemail.com", description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_use_tls: bool = Field(default=True, description="Upgrade the connection with STARTTLS")
    smtp_validate_certs: bool = Field(
        default=False, description="Validate the SMTP server certificate"
    )
    smtp_timeout: float = Field(default=10.0, gt=0, description="SMTP operation timeout in seconds")

    # Verification codes
    code_ttl_seconds: int = Field(default=600, gt=0, description="Verification code lifetime")
    code_purge_interval_seconds: float = Field(
        default=60.0, ge=0, description="Seconds between expired-code sweeps (0 disables)"
    )

    # Sentry
    sentry_dsn: str = Field(default="", description="Sentry DSN for error tracking")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.environment == "test"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def debug_enabled(self) -> bool:
        """Get debug mode, defaulting based on environment if not explicitly set."""
        if self.debug is not None:
            return self.debug
        return self.is_development

    @computed_field  # type: ignore[prop-decorator]
    @property
    def email_credentials_configured(self) -> bool:
        """Whether both mail account credentials are present."""
        return bool(self.email_user and self.email_pass)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
