# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Health - Health check plugin system
# PURPOSE: Kubernetes probes and health monitoring
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Module

Plugin-based health checks for the linker server:
- /livez, /health/live: process alive
- /readyz, /health/ready: ready to accept uploads
- /health/startup: initial authorizations loaded
- /health: all checks

Usage:
    from health import health_router
    import health.checks  # registers the checks

    app.include_router(health_router)
"""

from health.core import (
    HealthStatus,
    HealthCheckResult,
    HealthReport,
    HealthCheckPlugin,
    HealthCheckCategory,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    get_registry,
)
from health.executor import HealthCheckExecutor
from health.router import health_router

__all__ = [
    # Core types
    "HealthStatus",
    "HealthCheckResult",
    "HealthReport",
    "HealthCheckPlugin",
    "HealthCheckCategory",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "get_registry",
    # Executor
    "HealthCheckExecutor",
    # Router
    "health_router",
]
