# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - External collaborators
# PURPOSE: Secret store, grants source and Catalyst HTTP client
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the linker server.

Provides:
- SecretStore: server wallet key retrieval (AWS Secrets Manager)
- GrantsSource: raw authorization grants download
- CatalystClient: entity deployment and content proxy

Usage:
    from infrastructure import CatalystClient, GrantsSource, create_secret_store
"""

from infrastructure.secrets import (
    SecretError,
    SecretStore,
    AwsSecretStore,
    EnvSecretStore,
    create_secret_store,
)
from infrastructure.grants_source import GrantsSource, GrantsSourceError
from infrastructure.catalyst_client import (
    CatalystClient,
    CatalystRequestError,
    ProxiedResponse,
)

__all__ = [
    # Secrets
    "SecretError",
    "SecretStore",
    "AwsSecretStore",
    "EnvSecretStore",
    "create_secret_store",
    # Grants
    "GrantsSource",
    "GrantsSourceError",
    # Catalyst
    "CatalystClient",
    "CatalystRequestError",
    "ProxiedResponse",
]
