"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``SOLSIGNAL_``, nested via ``__``)
2. YAML config file (``SOLSIGNAL_CONFIG_PATH`` env var)
3. Defaults defined here

Secrets (Postmark key, Helius key, ingress auth header) default to empty and
are checked with :func:`require_secret` at invocation time, not at startup.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from solsignal.errors.alert_errors import ConfigurationError

logger = logging.getLogger(__name__)

# Production webhook that every alert address is appended to.
DEFAULT_HELIUS_WEBHOOK_ID = "57c97f58-8214-4c09-8257-32f3b331dfe5"


class DatabaseEngine(enum.StrEnum):
    """Supported database engines."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    log_level: str = "info"


class DatabaseConfig(BaseSettings):
    """Subscription store settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_DB__",
        case_sensitive=False,
    )

    engine: DatabaseEngine = Field(
        default=DatabaseEngine.SQLITE,
        description="Database backend: sqlite or postgresql",
    )
    dsn: str = Field(
        default="sqlite+aiosqlite:///./solsignal.db",
        description="Async database connection string",
    )
    max_idle_connections: int = 5
    max_open_connections: int = 10
    debug_sql: bool = False


class PostmarkConfig(BaseSettings):
    """Postmark templated email transport settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_POSTMARK__",
        case_sensitive=False,
    )

    api_key: str = ""
    base_url: str = "https://api.postmarkapp.com"
    from_address: str = "info@solsignal.xyz"
    message_stream: str = "alert-email-stream"
    template_alias: str = "solsignal-transaction-alert"


class HeliusConfig(BaseSettings):
    """Helius webhook registry settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_HELIUS__",
        case_sensitive=False,
    )

    api_key: str = ""
    base_url: str = "https://api.helius.xyz"
    webhook_id: str = DEFAULT_HELIUS_WEBHOOK_ID
    keep_shared_addresses: bool = Field(
        default=True,
        description="Skip registry removal while other alerts still watch the address",
    )


class IngressConfig(BaseSettings):
    """Webhook ingress settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_INGRESS__",
        case_sensitive=False,
    )

    auth_header: str = ""
    header_name: str = "Authorization"


class SiteConfig(BaseSettings):
    """Public site links embedded in alert emails."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_SITE__",
        case_sensitive=False,
    )

    app_url: str = "https://solsignal.xyz"
    support_email: str = "info@solsignal.xyz"


class DispatchConfig(BaseSettings):
    """Fan-out dispatch settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_DISPATCH__",
        case_sensitive=False,
    )

    max_concurrency: int = Field(default=10, ge=1)
    http_timeout: float = 10.0


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


def require_secret(value: str, name: str) -> str:
    """Return *value* or raise :class:`ConfigurationError` when it is empty.

    A missing secret is a deployment defect, so it is logged at CRITICAL.
    """
    if not value:
        logger.critical("Required secret %s is not configured", name)
        raise ConfigurationError(f"{name} not found")
    return value


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``SOLSIGNAL_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLSIGNAL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    postmark: PostmarkConfig = Field(default_factory=PostmarkConfig)
    helius: HeliusConfig = Field(default_factory=HeliusConfig)
    ingress: IngressConfig = Field(default_factory=IngressConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        for key, val in _load_yaml(config_path).items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
