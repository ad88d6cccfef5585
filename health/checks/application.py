# ============================================================================
# APPLICATION HEALTH CHECKS
# ============================================================================
# STATUS: Health - Application state checks
# PURPOSE: Authorizations snapshot and refresh job status
# CREATED: 19 OCT 2026
# ============================================================================
"""
Application Health Checks

- authorizations: unhealthy until the first refresh succeeds, degraded
  while the latest refresh has failed and a stale snapshot is served
- refresher: the periodic refresh job is running
"""

from health.core import HealthCheckCategory, HealthCheckPlugin, HealthCheckResult
from health.registry import register_check

# Set by main at startup
_registry = None
_refresh_job = None


def set_components(registry, refresh_job) -> None:
    global _registry, _refresh_job
    _registry = registry
    _refresh_job = refresh_job


@register_check(timeout_seconds=2.0)
class AuthorizationsCheck(HealthCheckPlugin):
    """No caller can be authorized before the first successful refresh."""

    name = "authorizations"
    category = HealthCheckCategory.APPLICATION

    async def check(self) -> HealthCheckResult:
        if _registry is None:
            return HealthCheckResult.unhealthy("Authorization registry not initialized")

        stats = _registry.stats()
        if not stats["ready"]:
            return HealthCheckResult.unhealthy("Authorizations not loaded yet", **stats)
        if stats["last_error"]:
            return HealthCheckResult.degraded(
                "Last refresh failed, serving previous authorizations", **stats
            )
        return HealthCheckResult.healthy(f"{stats['addresses']} authorized addresses", **stats)


@register_check(timeout_seconds=2.0, required_for_ready=False)
class RefresherCheck(HealthCheckPlugin):

    name = "refresher"
    category = HealthCheckCategory.APPLICATION

    async def check(self) -> HealthCheckResult:
        if _refresh_job is None:
            return HealthCheckResult.unhealthy("Refresh job not initialized")

        stats = _refresh_job.stats()
        if not stats["running"]:
            return HealthCheckResult.unhealthy("Refresh job not running", **stats)
        return HealthCheckResult.healthy(
            f"Refreshing every {stats['interval_seconds']}s", **stats
        )


__all__ = ["set_components", "AuthorizationsCheck", "RefresherCheck"]
