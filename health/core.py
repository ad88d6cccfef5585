# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Health - Check interface and result types
# PURPOSE: Statuses, per-check results and the aggregated report
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Statuses, worst wins:
- healthy: serving normally
- degraded: serving, with a warning (e.g. stale authorizations)
- unhealthy: uploads cannot be served

Categories run in order: startup checks (process, config) first, then
application checks (authorizations snapshot, refresh job).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def http_code(self) -> int:
        """200 healthy, 206 degraded, 503 unhealthy."""
        return _HTTP_CODES[self]

    @classmethod
    def aggregate(cls, statuses: Iterable["HealthStatus"]) -> "HealthStatus":
        return max(statuses, key=lambda s: s.severity, default=cls.HEALTHY)


_SEVERITY = {HealthStatus.HEALTHY: 0, HealthStatus.DEGRADED: 1, HealthStatus.UNHEALTHY: 2}
_HTTP_CODES = {HealthStatus.HEALTHY: 200, HealthStatus.DEGRADED: 206, HealthStatus.UNHEALTHY: 503}


class HealthCheckCategory(str, Enum):
    STARTUP = "startup"
    APPLICATION = "application"

    @property
    def order(self) -> int:
        return list(HealthCheckCategory).index(self)


@dataclass
class HealthCheckResult:
    """Outcome of one check."""
    status: HealthStatus
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def healthy(cls, message: Optional[str] = None, **details) -> "HealthCheckResult":
        return cls(HealthStatus.HEALTHY, message, details)

    @classmethod
    def degraded(cls, message: str, **details) -> "HealthCheckResult":
        return cls(HealthStatus.DEGRADED, message, details)

    @classmethod
    def unhealthy(cls, message: str, **details) -> "HealthCheckResult":
        return cls(HealthStatus.UNHEALTHY, message, details)

    @classmethod
    def from_exception(cls, e: Exception) -> "HealthCheckResult":
        return cls.unhealthy(str(e) or type(e).__name__, exception_type=type(e).__name__)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.message:
            body["message"] = self.message
        if self.details:
            body["details"] = self.details
        return body


@dataclass
class HealthReport:
    """Results of a set of checks, keyed by check name."""
    checks: Mapping[str, HealthCheckResult]
    categories: Mapping[str, HealthCheckCategory]
    total_duration_ms: float
    checked_at: datetime = field(default_factory=_utc_now)

    @property
    def status(self) -> HealthStatus:
        return HealthStatus.aggregate(r.status for r in self.checks.values())

    def failing(self) -> Dict[str, HealthCheckResult]:
        return {
            name: result
            for name, result in self.checks.items()
            if result.status == HealthStatus.UNHEALTHY
        }

    def summary(self) -> Dict[str, Dict[str, int]]:
        """Status counts per category."""
        counts: Dict[str, Dict[str, int]] = {}
        for name, result in self.checks.items():
            bucket = counts.setdefault(
                self.categories[name].value, {s.value: 0 for s in HealthStatus}
            )
            bucket[result.status.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "checks": {name: result.to_dict() for name, result in self.checks.items()},
            "summary": self.summary(),
            "total_duration_ms": round(self.total_duration_ms, 2),
            "checked_at": self.checked_at.isoformat(),
        }


class HealthCheckPlugin(ABC):
    """
    A named health check.

    Attributes:
        name: Unique check name, also its /health/{name} path
        category: Ordering group
        timeout_seconds: A slower check is reported unhealthy
        required_for_ready: Whether an unhealthy result fails /readyz
    """

    name: str = "unnamed"
    category: HealthCheckCategory = HealthCheckCategory.APPLICATION
    timeout_seconds: float = 5.0
    required_for_ready: bool = True

    @abstractmethod
    async def check(self) -> HealthCheckResult:
        """Run the check."""

    @property
    def sort_key(self) -> Tuple[int, str]:
        return self.category.order, self.name


__all__ = [
    "HealthStatus",
    "HealthCheckCategory",
    "HealthCheckResult",
    "HealthReport",
    "HealthCheckPlugin",
]
