# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for linker server models
# CREATED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for auth chains, authorization grants and upload outcomes.
"""

from core.models.auth_chain import (
    AUTH_CHAIN_FIELD,
    AuthLink,
    AuthChain,
    parse_auth_chain_from_fields,
    parse_auth_chain_json,
    build_simple_auth_chain,
    auth_chain_to_form_fields,
    owner_address,
)
from core.models.grant import AuthorizationGrant, is_valid_plot
from core.models.upload import UploadOutcome, EntityUploadResponse

__all__ = [
    # Auth chain
    "AUTH_CHAIN_FIELD",
    "AuthLink",
    "AuthChain",
    "parse_auth_chain_from_fields",
    "parse_auth_chain_json",
    "build_simple_auth_chain",
    "auth_chain_to_form_fields",
    "owner_address",
    # Grants
    "AuthorizationGrant",
    "is_valid_plot",
    # Upload
    "UploadOutcome",
    "EntityUploadResponse",
]
