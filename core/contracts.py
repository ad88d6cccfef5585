# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums and result contracts
# PURPOSE: Define link kinds and the result values passed between components
# CREATED: 19 OCT 2026
# EXPORTS: AuthLinkType, UploadStatus, ValidationResult,
#          AuthorizationCheckResult, ParcelAccessResult
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the linker server.

Components hand their outcomes to each other as values, never as
exceptions crossing a component boundary:
- AuthChainValidator -> ValidationResult
- AuthorizationRegistry -> AuthorizationCheckResult / ParcelAccessResult
- UploadProxy -> UploadOutcome (core.models.upload)
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# ENUMS
# ============================================================================

class AuthLinkType(str, Enum):
    """
    Kinds of attestation that can appear in an auth chain.

    Values are the wire strings. Member names are accepted as aliases
    when parsing, so "ECDSA_PERSONAL_SIGNED_ENTITY" and
    "ECDSA_SIGNED_ENTITY" resolve to the same kind.
    """
    SIGNER = "SIGNER"
    ECDSA_PERSONAL_EPHEMERAL = "ECDSA_EPHEMERAL"
    ECDSA_PERSONAL_SIGNED_ENTITY = "ECDSA_SIGNED_ENTITY"
    ECDSA_EIP_1654_EPHEMERAL = "ECDSA_EIP_1654_EPHEMERAL"
    ECDSA_EIP_1654_SIGNED_ENTITY = "ECDSA_EIP_1654_SIGNED_ENTITY"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return cls.__members__.get(value)
        return None

    @classmethod
    def parse(cls, value: str) -> Optional["AuthLinkType"]:
        """Resolve a wire string, returning None for unknown kinds."""
        try:
            return cls(value)
        except ValueError:
            return None


class UploadStatus(str, Enum):
    """Terminal outcome of an entity upload request (metric tag)."""
    SUCCESS = "success"
    FORBIDDEN = "forbidden"
    INVALID_REQUEST = "invalid_request"
    ERROR = "error"


# ============================================================================
# RESULT CONTRACTS
# ============================================================================

class ValidationResult(BaseModel):
    """
    Outcome of validating an auth chain.

    signer_address is only meaningful when ok is True.
    """
    ok: bool
    signer_address: str = ""
    error: Optional[str] = None

    @classmethod
    def valid(cls, signer_address: str) -> "ValidationResult":
        return cls(ok=True, signer_address=signer_address)

    @classmethod
    def invalid(cls, error: str) -> "ValidationResult":
        return cls(ok=False, signer_address="", error=error)


class AuthorizationCheckResult(BaseModel):
    """Whether an address appears in the current authorizations snapshot."""
    authorized: bool
    parcels: Optional[List[str]] = None


class ParcelAccessResult(BaseModel):
    """Which of the requested parcels the signer may not publish to."""
    has_access: bool
    missing_parcels: List[str] = Field(default_factory=list)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "AuthLinkType",
    "UploadStatus",
    "ValidationResult",
    "AuthorizationCheckResult",
    "ParcelAccessResult",
]
