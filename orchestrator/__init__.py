# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# STATUS: Orchestration - Background jobs
# PURPOSE: Periodic tasks driven inside the FastAPI application
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrator Module

Usage:
    from orchestrator import PeriodicJob

    job = PeriodicJob("authorizations-refresh", 600, registry.refresh)
    job.start()
"""

from .scheduler import PeriodicJob, run_periodically

__all__ = ["PeriodicJob", "run_periodically"]
