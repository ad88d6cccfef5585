# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Health - FastAPI probe endpoints
# PURPOSE: Liveness, readiness, startup and detailed health endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Router

    GET /livez, /health/live      process is responsive, runs no checks
    GET /readyz, /health/ready    required checks are not unhealthy
    GET /health/startup           first authorizations load has succeeded
    GET /health                   every check, with details
    GET /health/{check_name}      one check

Status codes follow HealthStatus.http_code: 200, 206 (degraded), 503.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from __version__ import BUILD_DATE, __version__
from health.core import HealthStatus
from health.executor import HealthCheckExecutor

health_router = APIRouter(tags=["Health"])

STARTUP_CHECK = "authorizations"


@health_router.get("/livez")
@health_router.get("/health/live")
async def liveness_probe():
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


@health_router.get("/readyz")
@health_router.get("/health/ready")
async def readiness_probe():
    """
    503 while a required check is unhealthy.

    Degraded counts as ready: stale authorizations still serve uploads.
    """
    report = await HealthCheckExecutor().run_required()
    failing = report.failing()

    if failing:
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "checks": {name: result.to_dict() for name, result in failing.items()},
            },
        )

    return {"status": "ready", "checks_passed": len(report.checks)}


@health_router.get("/health/startup")
async def startup_probe():
    result = await HealthCheckExecutor().run_one(STARTUP_CHECK)

    if result is None or result.status == HealthStatus.UNHEALTHY:
        return JSONResponse(
            status_code=503,
            content={"status": "starting", "check": result.to_dict() if result else None},
        )

    return {"status": "started"}


@health_router.get("/health")
async def full_health_check():
    report = await HealthCheckExecutor().run_all()

    body = report.to_dict()
    body["version"] = __version__
    body["build_date"] = BUILD_DATE
    return JSONResponse(status_code=report.status.http_code, content=body)


@health_router.get("/health/{check_name}")
async def single_health_check(check_name: str):
    result = await HealthCheckExecutor().run_one(check_name)

    if result is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Health check not found: {check_name}"},
        )

    return JSONResponse(status_code=result.status.http_code, content=result.to_dict())


__all__ = ["health_router"]
