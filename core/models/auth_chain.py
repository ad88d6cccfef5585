# ============================================================================
# AUTH CHAIN MODEL
# ============================================================================
# STATUS: Core - Auth chain links and multipart form mapping
# PURPOSE: Parse/emit auth chains in the bracket-indexed form-field layout
# CREATED: 19 OCT 2026
# ============================================================================
"""
Auth Chain Model

An auth chain is an ordered list of links. Each link signs over the
authority established by the previous one, ending in the entity payload.

Multipart uploads carry the chain as one form field per link property:

    authChain[0][type]       SIGNER
    authChain[0][payload]    0x...
    authChain[0][signature]
    authChain[1][type]       ECDSA_EPHEMERAL
    ...

The same layout is used in both directions: parsing inbound requests and
building the server-signed chain forwarded to the Catalyst.
"""

import json
import re
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError

from core.contracts import AuthLinkType

AUTH_CHAIN_FIELD = "authChain"
AUTH_CHAIN_FIELD_RE = re.compile(r"^authChain\[(\d+)\]\[(\w+)\]$")


class AuthLink(BaseModel):
    """
    One attestation step.

    `type` keeps the raw wire string so unknown kinds survive parsing
    and are rejected by the validator instead of being dropped here.
    """
    type: str
    payload: str = ""
    signature: str = ""

    @property
    def link_type(self) -> Optional[AuthLinkType]:
        """Resolved link kind, or None when the type is not recognised."""
        return AuthLinkType.parse(self.type)


AuthChain = List[AuthLink]


def parse_auth_chain_from_fields(fields: Mapping[str, str]) -> Optional[AuthChain]:
    """
    Rebuild an auth chain from bracket-indexed form fields.

    Links are ordered by their numeric index, not by field order.
    Fields that are not part of the chain are ignored.

    Returns:
        The parsed chain, or None if no auth chain fields are present.
    """
    links: Dict[int, Dict[str, str]] = {}

    for key, value in fields.items():
        match = AUTH_CHAIN_FIELD_RE.match(key)
        if not match:
            continue
        index = int(match.group(1))
        links.setdefault(index, {})[match.group(2)] = value

    if not links:
        return None

    return [
        AuthLink(
            type=links[index].get("type", ""),
            payload=links[index].get("payload", ""),
            signature=links[index].get("signature", ""),
        )
        for index in sorted(links)
    ]


def parse_auth_chain_json(raw: str) -> AuthChain:
    """
    Parse an auth chain sent as a single JSON array field.

    Malformed input yields an empty chain, which never validates.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return []

    if not isinstance(data, list):
        return []

    try:
        return [AuthLink.model_validate(item) for item in data]
    except ValidationError:
        return []


def build_simple_auth_chain(
    final_payload: str,
    owner_address: str,
    signature: str,
) -> AuthChain:
    """
    Build a two-link chain: the owner signed the payload directly.

    Args:
        final_payload: Signed payload (the entity id)
        owner_address: Address of the signing wallet
        signature: Personal-sign signature over final_payload
    """
    return [
        AuthLink(type=AuthLinkType.SIGNER.value, payload=owner_address, signature=""),
        AuthLink(
            type=AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY.value,
            payload=final_payload,
            signature=signature,
        ),
    ]


def auth_chain_to_form_fields(
    chain: AuthChain,
    prefix: str = AUTH_CHAIN_FIELD,
) -> List[Tuple[str, str]]:
    """Flatten a chain into `prefix[i][prop]` form fields."""
    fields: List[Tuple[str, str]] = []
    for index, link in enumerate(chain):
        fields.append((f"{prefix}[{index}][type]", link.type))
        fields.append((f"{prefix}[{index}][payload]", link.payload))
        fields.append((f"{prefix}[{index}][signature]", link.signature))
    return fields


def owner_address(chain: AuthChain) -> Optional[str]:
    """Address asserted by the root SIGNER link, if the chain starts with one."""
    if chain and chain[0].link_type == AuthLinkType.SIGNER:
        return chain[0].payload
    return None


__all__ = [
    "AUTH_CHAIN_FIELD",
    "AuthLink",
    "AuthChain",
    "parse_auth_chain_from_fields",
    "parse_auth_chain_json",
    "build_simple_auth_chain",
    "auth_chain_to_form_fields",
    "owner_address",
]
