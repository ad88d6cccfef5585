# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for authorizations, Catalyst, secrets, server
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the linker server.
Every value can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


PRODUCTION_ENVIRONMENT = "prd"

DEFAULT_AUTHORIZATIONS_URL = (
    "https://decentraland.github.io/linker-server-authorizations/authorizations.json"
)


class SecretsBackend(str, Enum):
    """Where the server wallet key is read from."""
    AWS = "aws"
    ENV = "env"


@dataclass(frozen=True)
class AuthorizationsDefaults:
    """
    Defaults for the authorizations registry.

    Controls where grants are fetched from and how often.
    """
    url: str = DEFAULT_AUTHORIZATIONS_URL
    update_interval_ms: int = 10 * 60 * 1000  # 10 minutes
    fetch_timeout_seconds: float = 30.0
    environment: str = "stg"

    @property
    def update_interval_seconds(self) -> float:
        return self.update_interval_ms / 1000.0

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION_ENVIRONMENT

    @classmethod
    def from_env(cls) -> "AuthorizationsDefaults":
        """Create from environment variables."""
        return cls(
            url=os.getenv("AUTHORIZATIONS_URL", DEFAULT_AUTHORIZATIONS_URL),
            update_interval_ms=int(os.getenv("AUTHORIZATIONS_UPDATE_INTERVAL_MS", 10 * 60 * 1000)),
            fetch_timeout_seconds=float(os.getenv("AUTHORIZATIONS_FETCH_TIMEOUT_SEC", 30)),
            environment=os.getenv("ENVIRONMENT", "stg"),
        )


@dataclass(frozen=True)
class CatalystDefaults:
    """
    Defaults for the downstream Catalyst content server.

    Uploads can be large, so the upload timeout is minutes, not seconds.
    """
    domain: str = "peer-testing.decentraland.org"
    upload_timeout_seconds: float = 600.0  # 10 min
    proxy_timeout_seconds: float = 30.0
    upload_origin: str = "dcl_linker"

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}"

    @classmethod
    def from_env(cls) -> "CatalystDefaults":
        """Create from environment variables."""
        return cls(
            domain=os.getenv("CATALYST_DOMAIN", "peer-testing.decentraland.org"),
            upload_timeout_seconds=float(os.getenv("CATALYST_UPLOAD_TIMEOUT_SEC", 600)),
            proxy_timeout_seconds=float(os.getenv("CATALYST_PROXY_TIMEOUT_SEC", 30)),
            upload_origin=os.getenv("UPLOAD_ORIGIN", "dcl_linker"),
        )


@dataclass(frozen=True)
class SecretsDefaults:
    """
    Defaults for the signing key secret.

    The secret is a JSON document holding the server wallet `private_key`.
    """
    backend: SecretsBackend = SecretsBackend.AWS
    signing_secret_id: str = "linker-server"
    aws_region: str = "us-east-1"
    aws_endpoint: Optional[str] = None  # LocalStack or other custom endpoint
    cache_ttl_seconds: int = 60 * 60  # 1 hour

    @classmethod
    def from_env(cls) -> "SecretsDefaults":
        """Create from environment variables."""
        return cls(
            backend=SecretsBackend(os.getenv("SECRETS_BACKEND", "aws").lower()),
            signing_secret_id=os.getenv("SIGNING_SECRET_ID", "linker-server"),
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
            aws_endpoint=os.getenv("AWS_ENDPOINT") or None,
            cache_ttl_seconds=int(os.getenv("SECRET_CACHE_TTL_SEC", 60 * 60)),
        )


@dataclass(frozen=True)
class ServerDefaults:
    """HTTP server and logging settings."""
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "ServerDefaults":
        """Create from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 3000)),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("LOG_FORMAT", "").lower() == "json",
        )


# ============================================================================
# GLOBAL CONFIG INSTANCE
# ============================================================================

@dataclass
class LinkerConfig:
    """Container for all configuration sections."""
    authorizations: AuthorizationsDefaults = field(default_factory=AuthorizationsDefaults)
    catalyst: CatalystDefaults = field(default_factory=CatalystDefaults)
    secrets: SecretsDefaults = field(default_factory=SecretsDefaults)
    server: ServerDefaults = field(default_factory=ServerDefaults)

    @classmethod
    def from_env(cls) -> "LinkerConfig":
        """Create all sections from environment variables."""
        return cls(
            authorizations=AuthorizationsDefaults.from_env(),
            catalyst=CatalystDefaults.from_env(),
            secrets=SecretsDefaults.from_env(),
            server=ServerDefaults.from_env(),
        )


_config: Optional[LinkerConfig] = None


def get_config() -> LinkerConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = LinkerConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset configuration (for testing)."""
    global _config
    _config = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PRODUCTION_ENVIRONMENT",
    "DEFAULT_AUTHORIZATIONS_URL",
    "SecretsBackend",
    "AuthorizationsDefaults",
    "CatalystDefaults",
    "SecretsDefaults",
    "ServerDefaults",
    "LinkerConfig",
    "get_config",
    "reset_config",
]
