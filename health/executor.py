# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# STATUS: Health - Concurrent health check execution
# PURPOSE: Run checks with per-check timeouts and build a report
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Executor

Every check here reads in-process state, so a set of checks runs in one
gather. A check that raises or overruns its timeout is reported
unhealthy instead of failing the probe.
"""

import asyncio
import logging
import time
from typing import List, Optional

from health.core import HealthCheckPlugin, HealthCheckResult, HealthReport
from health.registry import HealthCheckRegistry, get_registry

logger = logging.getLogger(__name__)


class HealthCheckExecutor:

    def __init__(self, registry: Optional[HealthCheckRegistry] = None):
        self.registry = registry if registry is not None else get_registry()

    async def run_all(self) -> HealthReport:
        return await self.run(self.registry.all())

    async def run_required(self) -> HealthReport:
        return await self.run(self.registry.required())

    async def run_one(self, name: str) -> Optional[HealthCheckResult]:
        """Result of one check, or None if no check has that name."""
        check = self.registry.get(name)
        return None if check is None else await self._timed(check)

    async def run(self, checks: List[HealthCheckPlugin]) -> HealthReport:
        started = time.monotonic()
        results = await asyncio.gather(*(self._timed(check) for check in checks))
        return HealthReport(
            checks={check.name: result for check, result in zip(checks, results)},
            categories={check.name: check.category for check in checks},
            total_duration_ms=(time.monotonic() - started) * 1000,
        )

    @staticmethod
    async def _timed(check: HealthCheckPlugin) -> HealthCheckResult:
        started = time.monotonic()
        try:
            result = await asyncio.wait_for(check.check(), timeout=check.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(f"Health check {check.name} timed out after {check.timeout_seconds}s")
            result = HealthCheckResult.unhealthy(f"Timeout after {check.timeout_seconds}s")
        except Exception as e:
            logger.error(f"Health check {check.name} raised {type(e).__name__}: {e}")
            result = HealthCheckResult.from_exception(e)

        result.duration_ms = (time.monotonic() - started) * 1000
        return result


__all__ = ["HealthCheckExecutor"]
