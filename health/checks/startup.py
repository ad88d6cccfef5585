# ============================================================================
# STARTUP HEALTH CHECKS
# ============================================================================
# STATUS: Health - Process and configuration checks
# PURPOSE: Fail readiness early when required settings are missing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Health Checks

- process: always healthy while the process answers
- config: settings needed for uploads are present; no network calls
"""

import os
import platform
import sys
from typing import List

from core.config import LinkerConfig, SecretsBackend, get_config
from health.core import HealthCheckCategory, HealthCheckPlugin, HealthCheckResult
from health.registry import register_check
from infrastructure.secrets import EnvSecretStore


@register_check(timeout_seconds=1.0, required_for_ready=False)
class ProcessCheck(HealthCheckPlugin):

    name = "process"
    category = HealthCheckCategory.STARTUP

    async def check(self) -> HealthCheckResult:
        return HealthCheckResult.healthy(
            "Process running",
            python_version=platform.python_version(),
            platform=sys.platform,
            pid=os.getpid(),
        )


def config_problems(config: LinkerConfig) -> List[str]:
    """Human-readable list of missing or invalid settings."""
    problems: List[str] = []

    if not config.catalyst.domain:
        problems.append("CATALYST_DOMAIN is empty")
    if not config.authorizations.url:
        problems.append("AUTHORIZATIONS_URL is empty")
    if config.authorizations.update_interval_ms <= 0:
        problems.append("AUTHORIZATIONS_UPDATE_INTERVAL_MS must be positive")
    if not config.secrets.signing_secret_id:
        problems.append("SIGNING_SECRET_ID is empty")
    elif config.secrets.backend == SecretsBackend.ENV:
        env_var = EnvSecretStore.env_var_for(config.secrets.signing_secret_id)
        if not os.environ.get(env_var):
            problems.append(f"{env_var} is not set")

    return problems


@register_check(timeout_seconds=1.0)
class ConfigCheck(HealthCheckPlugin):

    name = "config"
    category = HealthCheckCategory.STARTUP

    async def check(self) -> HealthCheckResult:
        config = get_config()
        problems = config_problems(config)
        details = {
            "environment": config.authorizations.environment,
            "catalyst_domain": config.catalyst.domain,
            "secrets_backend": config.secrets.backend.value,
        }

        if problems:
            return HealthCheckResult.unhealthy(
                f"Invalid config: {'; '.join(problems)}", problems=problems, **details
            )
        return HealthCheckResult.healthy("Required config present", **details)


__all__ = ["ProcessCheck", "ConfigCheck", "config_problems"]
