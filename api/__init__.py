# ============================================================================
# API MODULE
# ============================================================================
# STATUS: API - FastAPI routes
# PURPOSE: HTTP API for the linker server
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for the linker server.
"""

from .routes import router, set_services
from .schemas import AboutResponse, ErrorResponse, MetricsResponse

__all__ = [
    "router",
    "set_services",
    "AboutResponse",
    "ErrorResponse",
    "MetricsResponse",
]
