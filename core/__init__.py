# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models and errors
# CREATED: 19 OCT 2026
# ============================================================================

from core.contracts import (
    AuthLinkType,
    UploadStatus,
    ValidationResult,
    AuthorizationCheckResult,
    ParcelAccessResult,
)
from core.errors import (
    ForbiddenError,
    InvalidRequestError,
    UploadFailedError,
    CatalystHttpError,
)
from core.models import (
    AuthLink,
    AuthChain,
    AuthorizationGrant,
    UploadOutcome,
    EntityUploadResponse,
)

__all__ = [
    # Enums
    "AuthLinkType",
    "UploadStatus",
    # Results
    "ValidationResult",
    "AuthorizationCheckResult",
    "ParcelAccessResult",
    # Errors
    "ForbiddenError",
    "InvalidRequestError",
    "UploadFailedError",
    "CatalystHttpError",
    # Models
    "AuthLink",
    "AuthChain",
    "AuthorizationGrant",
    "UploadOutcome",
    "EntityUploadResponse",
]
