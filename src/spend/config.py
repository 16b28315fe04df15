"""Centralized configuration management for the Spend backend.

This module provides a Pydantic Settings-based configuration system that
consolidates provider credentials, server options and logging settings with
environment variable integration, type validation, and clear error handling.
"""

import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .models import ProviderName


class PlaidConfig(BaseModel):
    """Plaid API configuration settings."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., description="Plaid client ID")
    secret: str = Field(..., description="Plaid secret key")
    environment: Literal["sandbox", "development", "production"] = Field(
        default="sandbox", description="Plaid environment"
    )
    access_token: str | None = Field(
        default=None,
        description="Default access token used to auto-connect after a restart",
    )
    client_name: str = Field(
        default="Spend Finance Tracker", description="Name shown in Plaid Link"
    )
    country_codes: list[str] = Field(
        default_factory=lambda: ["US"], description="Plaid Link country codes"
    )
    days_lookback: int = Field(
        default=30,
        ge=1,
        le=730,
        description="Days of transactions to fetch",
    )
    batch_size: int = Field(
        default=100, ge=1, le=500, description="Transactions per page"
    )


class SimpleFINConfig(BaseModel):
    """SimpleFIN Bridge configuration settings."""

    model_config = ConfigDict(frozen=True)

    setup_token: str | None = Field(
        default=None, description="One-time setup token claimed on first connect"
    )
    access_url: str | None = Field(
        default=None,
        description="Permanent access URL with embedded Basic-Auth credentials",
    )
    days_lookback: int = Field(
        default=60,
        ge=1,
        le=730,
        description="Days of transactions to fetch",
    )

    @field_validator("access_url")
    @classmethod
    def validate_access_url(cls, v: str | None) -> str | None:
        """Require an http(s) URL when an access URL is configured."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not v.startswith(("https://", "http://")):
            raise ValueError("SimpleFIN access URL must start with http:// or https://")
        return v


class ServerConfig(BaseModel):
    """HTTP server settings."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=3001, ge=1, le=65535, description="Listening port")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )
    http_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout in seconds for every upstream provider request",
    )


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_to_file: bool = Field(default=False, description="Enable file logging")
    log_file_path: Path = Field(
        default=Path("logs/spend.log"), description="Path to log file"
    )
    max_file_size_mb: int = Field(
        default=50, ge=1, le=1000, description="Maximum log file size in MB"
    )
    backup_count: int = Field(
        default=5, ge=1, le=50, description="Number of log file backups to keep"
    )


class LegacyEnvSettingsSource(PydanticBaseSettingsSource):
    """Unprefixed variables used by earlier deployments.

    PLAID_CLIENT_ID, PLAID_SECRET, PLAID_ENV, PLAID_ACCESS_TOKEN,
    SIMPLEFIN_SETUP_TOKEN, SIMPLEFIN_ACCESS_URL and PORT are returned as
    partial nested sections. Sources are merged key by key, so a legacy PORT
    and SPEND_SERVER__HTTP_TIMEOUT both apply; where both name the same key
    the SPEND_ variable wins.
    """

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        # Values are assembled per section in __call__
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        # PlaidConfig requires both ids; blanks are reported by
        # validate_required_credentials instead of failing construction
        plaid: dict[str, Any] = {
            "client_id": os.getenv("PLAID_CLIENT_ID", ""),
            "secret": os.getenv("PLAID_SECRET", ""),
        }
        if os.getenv("PLAID_ENV") in ("sandbox", "development", "production"):
            plaid["environment"] = os.getenv("PLAID_ENV")
        if access_token := os.getenv("PLAID_ACCESS_TOKEN"):
            plaid["access_token"] = access_token

        values: dict[str, Any] = {"plaid": plaid}

        simplefin: dict[str, Any] = {}
        if setup_token := os.getenv("SIMPLEFIN_SETUP_TOKEN"):
            simplefin["setup_token"] = setup_token
        if access_url := os.getenv("SIMPLEFIN_ACCESS_URL"):
            simplefin["access_url"] = access_url
        if simplefin:
            values["simplefin"] = simplefin

        if port := os.getenv("PORT"):
            values["server"] = {"port": port}

        return values


class SpendSettings(BaseSettings):
    """Main application settings with environment variable integration.

    Environment variables are loaded with the SPEND_ prefix.
    For nested configs, use double underscores: SPEND_SERVER__PORT

    The unprefixed variables of earlier deployments are read by
    ``LegacyEnvSettingsSource`` at lower priority.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SPEND_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    provider: ProviderName = Field(
        default="plaid", description="Upstream aggregator to proxy"
    )
    plaid: PlaidConfig = Field(
        default_factory=lambda: PlaidConfig(
            client_id="", secret="", environment="sandbox"
        )
    )
    simplefin: SimpleFINConfig = Field(default_factory=SimpleFINConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    categories_file: Path | None = Field(
        default=None, description="YAML file overriding the built-in category rules"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            LegacyEnvSettingsSource(settings_cls),
            file_secret_settings,
        )

    def validate_required_credentials(self) -> None:
        """Validate that the selected provider has the credentials it needs."""
        errors: list[str] = []

        if self.provider == "plaid":
            if not self.plaid.client_id:
                errors.append("PLAID_CLIENT_ID is required")
            if not self.plaid.secret:
                errors.append("PLAID_SECRET is required")

        if errors:
            raise ValueError(f"Missing required configuration: {', '.join(errors)}")

    @property
    def environment_label(self) -> str:
        """Short description of the upstream environment for health output."""
        if self.provider == "plaid":
            return self.plaid.environment
        return "bridge"


# Global settings instance, lazy loaded
_settings: SpendSettings | None = None


def get_settings() -> SpendSettings:
    """Get the settings instance.

    Settings are loaded once from the environment and cached.

    Returns:
        SpendSettings: The configuration instance

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    global _settings

    if _settings is None:
        # Legacy unprefixed variables are read with os.getenv, so .env must be loaded first
        load_dotenv()
        try:
            settings = SpendSettings()
            settings.validate_required_credentials()
        except Exception as e:
            raise ValueError(f"Configuration error: {e}") from e
        _settings = settings

    return _settings


def reload_settings() -> SpendSettings:
    """Reload settings from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        SpendSettings: The reloaded configuration instance
    """
    clear_settings_cache()
    return get_settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next access reloads them."""
    global _settings
    _settings = None
