# ============================================================================
# API ROUTES
# ============================================================================
# STATUS: API - FastAPI route definitions
# PURPOSE: HTTP endpoints for entity uploads, content proxy and realm info
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Routes

- POST /content/entities            signed entity upload
- GET  /content/available-content   proxied to the Catalyst
- GET  /about                       realm description
- GET  /ping                        path echo
- GET  /metrics                     counter snapshot

Health endpoints live in the health module.
"""

import logging
from typing import Dict, Tuple

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.datastructures import UploadFile

from core.observability import MetricsCollector, get_metrics
from infrastructure.catalyst_client import CatalystClient
from services.entities_service import EntityUploadService
from .schemas import AboutResponse, ErrorResponse, MetricsResponse

logger = logging.getLogger(__name__)

router = APIRouter()

PING_METRIC = "linker_ping_counter"


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# These will be set by the main app at startup

_entities_service = None
_catalyst_client = None
_metrics = None


def set_services(
    entities_service: EntityUploadService,
    catalyst_client: CatalystClient,
    metrics: MetricsCollector = None,
):
    """Set service instances for dependency injection."""
    global _entities_service, _catalyst_client, _metrics
    _entities_service = entities_service
    _catalyst_client = catalyst_client
    _metrics = metrics


def get_entities_service() -> EntityUploadService:
    if _entities_service is None:
        raise HTTPException(500, "Services not initialized")
    return _entities_service


def get_catalyst_client() -> CatalystClient:
    if _catalyst_client is None:
        raise HTTPException(500, "Services not initialized")
    return _catalyst_client


def get_metrics_collector() -> MetricsCollector:
    return _metrics or get_metrics()


async def read_multipart(request: Request) -> Tuple[Dict[str, str], Dict[str, bytes]]:
    """
    Split a multipart form into plain fields and file contents.

    Files are keyed by their form field name. For repeated names the
    last value wins.
    """
    fields: Dict[str, str] = {}
    files: Dict[str, bytes] = {}

    form = await request.form()
    try:
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[name] = await value.read()
            else:
                fields[name] = value
    finally:
        await form.close()

    return fields, files


# ============================================================================
# CONTENT
# ============================================================================

@router.post(
    "/content/entities",
    tags=["Content"],
    responses={
        200: {"description": "Entity deployed; Catalyst response body"},
        400: {"model": ErrorResponse, "description": "Missing entityId or entity file"},
        403: {"model": ErrorResponse, "description": "Auth chain or authorization failure"},
        500: {"model": ErrorResponse, "description": "Upload to Catalyst failed"},
    },
)
async def upload_entity(request: Request):
    """
    Upload an entity on behalf of an authorized signer.

    Expects multipart/form-data with `entityId`, the auth chain as
    `authChain[i][type|payload|signature]` fields and the entity files.
    """
    service = get_entities_service()
    fields, files = await read_multipart(request)

    result = await service.handle(fields, files)
    if isinstance(result.body, str):
        # non-JSON Catalyst body, relayed as-is
        return PlainTextResponse(status_code=result.status_code, content=result.body)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get("/content/available-content", tags=["Content"])
async def available_content(request: Request):
    """
    Proxy GET /content/available-content to the Catalyst.

    Status, body and content-type / CORS headers are relayed as-is.
    """
    client = get_catalyst_client()

    try:
        proxied = await client.fetch_available_content(request.url.query)
    except Exception as e:
        logger.error(f"Error proxying available-content request: {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch available content from Catalyst"},
        )

    return Response(
        content=proxied.body,
        status_code=proxied.status_code,
        headers=proxied.headers,
    )


# ============================================================================
# REALM
# ============================================================================

@router.get("/about", response_model=AboutResponse, tags=["Realm"])
async def about(request: Request):
    """Realm description for Decentraland clients."""
    return AboutResponse.for_host(request.url.hostname or "")


@router.get("/ping", response_class=PlainTextResponse, tags=["Realm"])
async def ping(request: Request):
    """Echo the request path."""
    pathname = request.url.path
    get_metrics_collector().counter(PING_METRIC, tags={"pathname": pathname})
    return pathname


# ============================================================================
# METRICS
# ============================================================================

@router.get("/metrics", response_model=MetricsResponse, tags=["Observability"])
async def metrics():
    """Current counter values."""
    return MetricsResponse(counters=get_metrics_collector().snapshot())
