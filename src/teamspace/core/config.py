"""Process configuration, read once from the environment and ``.env``.

Field names map to upper-case environment variables (``database_url`` is
``DATABASE_URL``). Only the database URL and the JWT secret have no default.
"""

from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_SECRET = "change-this-to-a-secure-random-string"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Teamspace"
    app_env: Literal["development", "testing", "production"] = "development"
    debug: bool = False
    enable_openapi: bool = True
    # Emails are personal data; off means log lines carry the user id only
    log_user_emails: bool = False

    database_url: str
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    database_ssl_mode: Literal["disable", "prefer", "require", "verify-ca", "verify-full"] = (
        "prefer"
    )
    database_statement_cache_size: int = Field(default=100, ge=0)
    database_busy_timeout_seconds: int = Field(default=30, ge=1)

    jwt_secret_key: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=30, ge=1)
    argon2_time_cost: int = Field(default=3, ge=1)
    argon2_memory_cost: int = Field(default=65536, ge=8)
    argon2_parallelism: int = Field(default=1, ge=1)

    # A business's effective limit is min(ceiling, its own max_*)
    global_admin_ceiling: int = Field(default=20, ge=0)
    global_member_ceiling: int = Field(default=1000, ge=0)
    default_max_admins: int = Field(default=20, ge=0)
    default_max_members: int = Field(default=1000, ge=0)

    invitation_expire_days: int = Field(default=7, ge=1)

    cors_origins: list[str] = ["http://localhost:3000"]
    metrics_api_key: str | None = None

    # Without a Resend key, outgoing mail is logged instead of sent
    resend_api_key: str | None = None
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = Field(default=10, ge=1)
    app_url: str = "http://localhost:3000"
    allowed_app_url_domains: list[str] = ["localhost", "127.0.0.1"]

    signup_rate_limit: str = "3/hour"
    login_rate_limit: str = "5/minute"

    @field_validator("jwt_secret_key")
    @classmethod
    def reject_placeholder_secret(cls, v: str) -> str:
        if v == PLACEHOLDER_SECRET:
            raise ValueError("JWT_SECRET_KEY is still the placeholder; use `openssl rand -hex 32`")
        return v

    @field_validator("cors_origins")
    @classmethod
    def reject_wildcard_origin(cls, v: list[str]) -> list[str]:
        # Browsers refuse credentialed requests to a wildcard origin
        if "*" in v:
            raise ValueError("CORS_ORIGINS cannot contain '*'; list the origins explicitly")
        return v

    @model_validator(mode="after")
    def check_app_url_domain(self) -> "Settings":
        """Invitation links are built from APP_URL, so its host must be allow-listed."""
        hostname = urlparse(self.app_url).hostname or ""
        if not any(
            hostname == domain or hostname.endswith(f".{domain}")
            for domain in self.allowed_app_url_domains
        ):
            raise ValueError(
                f"APP_URL host '{hostname}' is not in ALLOWED_APP_URL_DOMAINS "
                f"{self.allowed_app_url_domains}"
            )
        return self

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
