# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Business logic layer
# PURPOSE: Auth chain validation, authorizations, upload forwarding
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Domain logic for the linker server:
- AuthChainValidator: recovers the signer of an auth chain
- AuthorizationRegistry: address -> parcels snapshot with periodic refresh
- UploadProxy: re-signs and deploys entities to the Catalyst
- EntityUploadService: the POST /content/entities use case

Usage:
    from services import EntityUploadService

    service = EntityUploadService(validator, registry, proxy)
    response = await service.handle(fields, files)
"""

from .auth_chain_validator import AuthChainValidator
from .authorization_registry import AuthorizationRegistry, AuthorizationSnapshot, build_snapshot
from .upload_proxy import UploadProxy
from .entities_service import EntityUploadService

__all__ = [
    "AuthChainValidator",
    "AuthorizationRegistry",
    "AuthorizationSnapshot",
    "build_snapshot",
    "UploadProxy",
    "EntityUploadService",
]
