"""
AnyList Gateway - Application Configuration
===========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values come from (highest priority first): file-based secrets for the
       account credentials, init kwargs (the CLI), environment variables, `.env`.
Who:   Read by the app factory, the client dependency, middleware and the CLI.
When:  A default `settings` singleton is built at import; the CLI builds its own
       instance with command-line overrides and hands it to `create_app()`.

Secrets:
    Container deployments (Docker Compose / Home Assistant add-ons) mount the
    account credentials as files:

        <secrets_path>/anylist_email
        <secrets_path>/anylist_password

    When such a file exists and is readable its stripped content replaces the
    plain EMAIL / PASSWORD value. An unreadable file falls back silently to the
    plain value.
"""

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

EMAIL_SECRET_NAME = "anylist_email"
PASSWORD_SECRET_NAME = "anylist_password"


def read_secret(secrets_path: str, name: str) -> Optional[str]:
    """Return the stripped content of `<secrets_path>/<name>`, or None if unavailable."""
    path = Path(secrets_path) / name
    try:
        if path.is_file():
            return path.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.debug("Could not read secret %s: %s", path, e)
    return None


class Settings(BaseSettings):
    """
    Gateway settings loaded from environment variables.

    Attributes are grouped by concern.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Account ───────────────────────────────────────────────────────────
    email: Optional[str] = Field(default=None, description="Account email")
    password: Optional[str] = Field(default=None, description="Account password")
    credentials_file: Optional[str] = Field(
        default=None,
        description="Where the client library caches its auth tokens between logins",
    )
    secrets_path: str = Field(default="/run/secrets")

    # ── External client ───────────────────────────────────────────────────
    # Format: "package.module:callable"
    # The callable is invoked as factory(email=, password=, credentials_file=)
    # and must return a ListClient.
    client_factory: Optional[str] = Field(default=None)

    # ── Request handling ──────────────────────────────────────────────────
    # Plain string prefix match against the peer address, e.g. "192.168.1."
    ip_filter: Optional[str] = Field(default=None)
    default_list: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("ip_filter", "default_list", "credentials_file", "client_factory")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Add-on UIs write empty strings for unset options."""
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def apply_secret_files(self) -> "Settings":
        """File secrets win over every other source."""
        email = read_secret(self.secrets_path, EMAIL_SECRET_NAME)
        if email:
            self.email = email
        password = read_secret(self.secrets_path, PASSWORD_SECRET_NAME)
        if password:
            self.password = password
        return self

    def validate_required(self) -> None:
        """
        What:  Checks that the account credentials and client factory are set.
        When:  Called during app startup (lifespan) and by the CLI before serving.
        Raises: ValueError listing every missing setting.
        """
        errors: List[str] = []
        if not self.email:
            errors.append("EMAIL is not set (or /run/secrets/anylist_email is empty)")
        if not self.password:
            errors.append("PASSWORD is not set (or /run/secrets/anylist_password is empty)")
        if not self.client_factory:
            errors.append("CLIENT_FACTORY is not set (expected 'package.module:callable')")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.password)


settings = Settings()
