# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the linker server.
"""

from core.config.defaults import (
    PRODUCTION_ENVIRONMENT,
    DEFAULT_AUTHORIZATIONS_URL,
    SecretsBackend,
    AuthorizationsDefaults,
    CatalystDefaults,
    SecretsDefaults,
    ServerDefaults,
    LinkerConfig,
    get_config,
    reset_config,
)

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
