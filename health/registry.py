# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Health - Check registration
# PURPOSE: Hold check instances by name in category order
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Registry

Checks register themselves at import time with the decorator:

    @register_check(required_for_ready=False)
    class RefresherCheck(HealthCheckPlugin):
        name = "refresher"
        ...
"""

import logging
from typing import Dict, Iterator, List, Optional, Type

from health.core import HealthCheckPlugin

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """Check instances keyed by name."""

    def __init__(self):
        self._checks: Dict[str, HealthCheckPlugin] = {}

    def register(self, check: HealthCheckPlugin) -> None:
        if check.name in self._checks:
            logger.warning(f"Replacing health check {check.name}")
        self._checks[check.name] = check

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        return self._checks.get(name)

    def all(self) -> List[HealthCheckPlugin]:
        """Every check, startup category first, then by name."""
        return sorted(self._checks.values(), key=lambda c: c.sort_key)

    def required(self) -> List[HealthCheckPlugin]:
        """Checks that gate readiness."""
        return [c for c in self.all() if c.required_for_ready]

    def __iter__(self) -> Iterator[HealthCheckPlugin]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks


_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Process-wide registry used by the decorator and the router."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def register_check(
    timeout_seconds: Optional[float] = None,
    required_for_ready: Optional[bool] = None,
):
    """Class decorator: apply overrides and register one instance globally."""

    def decorator(cls: Type[HealthCheckPlugin]) -> Type[HealthCheckPlugin]:
        if timeout_seconds is not None:
            cls.timeout_seconds = timeout_seconds
        if required_for_ready is not None:
            cls.required_for_ready = required_for_ready
        get_registry().register(cls())
        return cls

    return decorator


__all__ = ["HealthCheckRegistry", "get_registry", "register_check"]
