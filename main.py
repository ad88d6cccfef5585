# ============================================================================
# LINKER SERVER - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire components, run the authorizations refresh, serve HTTP
# CREATED: 19 OCT 2026
# ============================================================================
"""
Linker Server Main Application

FastAPI application that:
1. Accepts signed entity uploads and forwards approved ones to the Catalyst
2. Refreshes the authorizations list in the background
3. Serves realm info, a content proxy, metrics and health probes

Usage:
    uvicorn main:app --host 0.0.0.0 --port 3000
    linker-server
"""

import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from __version__ import BUILD_DATE, CODENAME, __version__
from api.routes import router, set_services
from core.config import LinkerConfig, get_config
from core.logging import ComponentType, configure_logging, get_logger, log_context
from core.observability import MetricsCollector, get_metrics
from health import health_router, get_registry
from health.checks.application import set_components
from infrastructure import CatalystClient, GrantsSource, create_secret_store
from orchestrator import PeriodicJob
from services import AuthChainValidator, AuthorizationRegistry, EntityUploadService, UploadProxy

_server_config = get_config().server
configure_logging(level=_server_config.log_level, json_output=_server_config.json_logs)
logger = get_logger(__name__, ComponentType.API)

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass
class LinkerComponents:
    """Everything the application wires together at startup."""
    config: LinkerConfig
    metrics: MetricsCollector
    catalyst: CatalystClient
    registry: AuthorizationRegistry
    validator: AuthChainValidator
    proxy: UploadProxy
    entities_service: EntityUploadService
    refresh_job: PeriodicJob


def build_components(
    config: LinkerConfig,
    metrics: Optional[MetricsCollector] = None,
) -> LinkerComponents:
    """Construct the service graph from configuration."""
    metrics = metrics or get_metrics()

    catalyst = CatalystClient(
        base_url=config.catalyst.base_url,
        upload_timeout=config.catalyst.upload_timeout_seconds,
        proxy_timeout=config.catalyst.proxy_timeout_seconds,
    )
    registry = AuthorizationRegistry(
        source=GrantsSource(
            config.authorizations.url,
            timeout=config.authorizations.fetch_timeout_seconds,
        ),
        production=config.authorizations.is_production,
        metrics=metrics,
    )
    validator = AuthChainValidator()
    proxy = UploadProxy(
        secret_store=create_secret_store(config.secrets),
        catalyst=catalyst,
        signing_secret_id=config.secrets.signing_secret_id,
        upload_origin=config.catalyst.upload_origin,
        extend_timeout_seconds=int(config.catalyst.upload_timeout_seconds),
    )
    entities_service = EntityUploadService(validator, registry, proxy, metrics)
    refresh_job = PeriodicJob(
        "authorizations-refresh",
        config.authorizations.update_interval_seconds,
        registry.refresh,
    )

    return LinkerComponents(
        config=config,
        metrics=metrics,
        catalyst=catalyst,
        registry=registry,
        validator=validator,
        proxy=proxy,
        entities_service=entities_service,
        refresh_job=refresh_job,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Loads authorizations before serving, starts the refresh job,
    and stops it on shutdown.
    """
    config = get_config()
    logger.info(
        f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE}, "
        f"environment={config.authorizations.environment}, catalyst={config.catalyst.domain})"
    )

    components = build_components(config)
    app.state.components = components

    set_services(
        entities_service=components.entities_service,
        catalyst_client=components.catalyst,
        metrics=components.metrics,
    )

    if not await components.registry.refresh():
        logger.warning("Initial authorizations load failed; uploads will be rejected until a refresh succeeds")

    components.refresh_job.start()

    # Initialize health checks
    set_components(components.registry, components.refresh_job)
    import health.checks  # noqa: F401  Register all health check plugins
    logger.info(f"Health checks initialized ({len(get_registry())} checks registered)")

    yield

    logger.info(f"Shutting down {CODENAME}...")
    await components.refresh_job.stop()
    logger.info(f"{CODENAME} stopped")


# Create FastAPI app
app = FastAPI(
    title=CODENAME,
    description="Signed entity upload gateway for the Decentraland Catalyst",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Attach a correlation id to the request's logs and response."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]

    with log_context(correlation_id=request_id, operation=f"{request.method} {request.url.path}"):
        response = await call_next(request)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")

    response.headers[REQUEST_ID_HEADER] = request_id
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc) or type(exc).__name__},
    )


# Include health check routes (no prefix - /livez, /readyz, /health)
app.include_router(health_router)

# Include API routes
app.include_router(router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": CODENAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def run() -> None:
    """Console entry point."""
    import uvicorn

    server = get_config().server
    uvicorn.run("main:app", host=server.host, port=server.port, log_config=None)


if __name__ == "__main__":
    run()
