# ============================================================================
# SECRET STORE
# ============================================================================
# STATUS: Infrastructure - Signing key retrieval
# PURPOSE: Read the server wallet secret from AWS Secrets Manager with caching
# CREATED: 19 OCT 2026
# ============================================================================
"""
Secret Store

Retrieves secrets by id. The upload proxy reads one secret per upload
(the server wallet key), so results are cached per secret id.

Backends:
- AwsSecretStore: AWS Secrets Manager via boto3 (SECRETS_BACKEND=aws)
- EnvSecretStore: environment variables, local development only
  (SECRETS_BACKEND=env, LINKER_SECRET_<ID>=<value>)

Environment Variables:
---------------------
AWS_REGION=<region>              (default us-east-1)
AWS_ENDPOINT=<url>               optional, e.g. LocalStack
SECRET_CACHE_TTL_SEC=<seconds>   (default 3600)

Usage:
------
```python
from infrastructure.secrets import create_secret_store

store = create_secret_store(get_config().secrets)
secret = await store.get("linker-server")
```
"""

import asyncio
import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config as BotoConfig

from core.config import SecretsBackend, SecretsDefaults

logger = logging.getLogger(__name__)


class SecretError(Exception):
    """Secret missing, empty or unreachable."""


@dataclass
class CachedSecret:
    """A secret value with its expiry."""
    value: str
    expires_at: datetime

    def is_valid(self) -> bool:
        return datetime.now(timezone.utc) < self.expires_at


class SecretStore(ABC):
    """Read-only access to secrets by id."""

    @abstractmethod
    async def get(self, secret_id: str) -> str:
        """
        Get a secret value.

        Raises:
            SecretError: If the secret cannot be produced.
        """


class AwsSecretStore(SecretStore):
    """
    AWS Secrets Manager backend.

    boto3 is synchronous, so calls run in a worker thread to keep the
    event loop free while the secret is fetched.
    """

    def __init__(
        self,
        region: str,
        endpoint: Optional[str] = None,
        cache_ttl_seconds: int = 3600,
        client: Any = None,
    ):
        self._region = region
        self._cache_ttl = timedelta(seconds=cache_ttl_seconds)
        self._cache: Dict[str, CachedSecret] = {}

        if client is None:
            if endpoint:
                logger.info(f"Using custom endpoint for Secrets Manager: {endpoint}")
            client = boto3.client(
                "secretsmanager",
                region_name=region,
                endpoint_url=endpoint,
                config=BotoConfig(connect_timeout=10, read_timeout=30, retries={"max_attempts": 2}),
            )
        self._client = client

    async def get(self, secret_id: str) -> str:
        cached = self._cache.get(secret_id)
        if cached and cached.is_valid():
            logger.debug(f"Returning cached secret: {secret_id}")
            return cached.value

        logger.info(f"Fetching secret from AWS Secrets Manager: {secret_id} (region={self._region})")
        response = await asyncio.to_thread(self._client.get_secret_value, SecretId=secret_id)

        value = response.get("SecretString")
        if not value:
            raise SecretError("Secret string is empty")

        self._cache[secret_id] = CachedSecret(
            value=value,
            expires_at=datetime.now(timezone.utc) + self._cache_ttl,
        )
        logger.debug(f"Secret fetched and cached: {secret_id}")
        return value

    def invalidate(self, secret_id: Optional[str] = None) -> None:
        """Drop one cached secret, or all of them."""
        if secret_id is None:
            self._cache.clear()
        else:
            self._cache.pop(secret_id, None)


class EnvSecretStore(SecretStore):
    """Secrets from LINKER_SECRET_<ID> environment variables."""

    PREFIX = "LINKER_SECRET_"

    @classmethod
    def env_var_for(cls, secret_id: str) -> str:
        return cls.PREFIX + re.sub(r"[^A-Za-z0-9]", "_", secret_id).upper()

    async def get(self, secret_id: str) -> str:
        value = os.environ.get(self.env_var_for(secret_id))
        if not value:
            raise SecretError(f"Secret not found: {secret_id}")
        return value


def create_secret_store(config: SecretsDefaults) -> SecretStore:
    """Build the secret store selected by SECRETS_BACKEND."""
    if config.backend == SecretsBackend.ENV:
        logger.warning("Using environment secret store (local development only)")
        return EnvSecretStore()

    return AwsSecretStore(
        region=config.aws_region,
        endpoint=config.aws_endpoint,
        cache_ttl_seconds=config.cache_ttl_seconds,
    )


__all__ = [
    "SecretError",
    "SecretStore",
    "AwsSecretStore",
    "EnvSecretStore",
    "create_secret_store",
]
