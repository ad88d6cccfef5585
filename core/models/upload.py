# ============================================================================
# UPLOAD OUTCOME MODELS
# ============================================================================
# STATUS: Core - Upload and request outcomes
# PURPOSE: Tagged results for Catalyst uploads and entity upload requests
# CREATED: 19 OCT 2026
# ============================================================================
"""
Upload Outcome Models

UploadOutcome is a tagged result with three shapes:

    success           -> response holds the Catalyst body, untouched
    structured error  -> status + error parsed from a Catalyst failure
    opaque error      -> error only (timeouts, secret failures, ...)

EntityUploadResponse is the status/body pair the HTTP layer renders
verbatim for POST /content/entities.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel


class UploadOutcome(BaseModel):
    """Result of forwarding an entity to the Catalyst."""
    success: bool
    response: Any = None
    status: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, response: Any) -> "UploadOutcome":
        return cls(success=True, response=response)

    @classmethod
    def structured_failure(cls, status: int, message: str) -> "UploadOutcome":
        return cls(success=False, status=status, error=message)

    @classmethod
    def opaque_failure(cls, message: str) -> "UploadOutcome":
        return cls(success=False, error=message)


@dataclass(frozen=True)
class EntityUploadResponse:
    """HTTP status code and JSON body for an entity upload request."""
    status_code: int
    body: Any

    @classmethod
    def ok(cls, body: Any) -> "EntityUploadResponse":
        return cls(200, body)

    @classmethod
    def forbidden(cls, message: str) -> "EntityUploadResponse":
        return cls(403, {"error": "Forbidden", "message": message})

    @classmethod
    def bad_request(cls, message: str) -> "EntityUploadResponse":
        return cls(400, {"error": "Bad request", "message": message})

    @classmethod
    def internal_error(cls, message: str) -> "EntityUploadResponse":
        return cls(500, {"error": "Internal server error", "message": message})


__all__ = [
    "UploadOutcome",
    "EntityUploadResponse",
]
