# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# STATUS: Health - Health check implementations
# PURPOSE: Checks for linker server components
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugins

Startup checks, run first:
- process: Basic process health (always healthy if running)
- config: Required settings present

Application checks:
- authorizations: Snapshot loaded, last refresh status
- refresher: Periodic refresh job running

Import this module to register all checks:
    import health.checks
"""

from health.checks.startup import ProcessCheck, ConfigCheck
from health.checks.application import AuthorizationsCheck, RefresherCheck, set_components

__all__ = [
    "ProcessCheck",
    "ConfigCheck",
    "AuthorizationsCheck",
    "RefresherCheck",
    "set_components",
]
