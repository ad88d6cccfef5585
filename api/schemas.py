# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: API - Response schemas
# PURPOSE: Pydantic models for linker server responses
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Schemas

Response models for the API. Field names follow the wire format used by
Decentraland clients (camelCase), so models are declared with aliases.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# ABOUT
# ============================================================================

class ServiceStatus(BaseModel):
    """Health and public URL of a realm service."""
    model_config = ConfigDict(populate_by_name=True)

    healthy: bool
    public_url: str = Field(..., alias="publicUrl")


class CommsStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    healthy: bool = True
    protocol: str = "v3"
    fixed_adapter: str = Field("offline:offline", alias="fixedAdapter")


class RealmConfigurations(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    network_id: int = Field(0, alias="networkId")
    global_scenes_urn: List[str] = Field(default_factory=list, alias="globalScenesUrn")
    scenes_urn: List[str] = Field(default_factory=list, alias="scenesUrn")
    realm_name: str = Field("LinkerServer", alias="realmName")


class AboutResponse(BaseModel):
    """Realm description served at GET /about."""
    model_config = ConfigDict(populate_by_name=True)

    accepting_users: bool = Field(True, alias="acceptingUsers")
    bff: ServiceStatus
    comms: CommsStatus = Field(default_factory=CommsStatus)
    configurations: RealmConfigurations = Field(default_factory=RealmConfigurations)
    content: ServiceStatus
    lambdas: ServiceStatus
    healthy: bool = True

    @classmethod
    def for_host(cls, host: str) -> "AboutResponse":
        """Build the realm description with URLs rooted at `host`."""
        return cls(
            bff=ServiceStatus(healthy=False, public_url=f"{host}/bff"),
            content=ServiceStatus(healthy=True, public_url=f"{host}/content"),
            lambdas=ServiceStatus(healthy=True, public_url=f"{host}/lambdas"),
        )


# ============================================================================
# ERRORS
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    message: str = ""


class MetricsResponse(BaseModel):
    """Counter snapshot grouped by metric name."""
    counters: Dict[str, List[Dict[str, Any]]]


__all__ = [
    "ServiceStatus",
    "CommsStatus",
    "RealmConfigurations",
    "AboutResponse",
    "ErrorResponse",
    "MetricsResponse",
]
