# ============================================================================
# UPLOAD PROXY
# ============================================================================
# STATUS: Service - Re-sign and forward approved entities
# PURPOSE: Sign entity ids with the server wallet and deploy to the Catalyst
# CREATED: 19 OCT 2026
# ============================================================================
"""
Upload Proxy

Forwards an already-authorized entity to the Catalyst under the server's
own identity:

    1. Read the server wallet secret ({"private_key": "0x..."})
    2. Personal-sign the entity id
    3. Build the two-link chain [SIGNER(server), SIGNED_ENTITY(entity id)]
    4. POST entityId + chain + every uploaded file to /content/entities

This component performs no authorization. Every failure comes back as an
UploadOutcome; nothing is raised to the caller.
"""

import json
import logging
from typing import Dict, Mapping, Tuple

from eth_account import Account
from eth_account.messages import encode_defunct

from core.errors import CatalystHttpError
from core.models.auth_chain import auth_chain_to_form_fields, build_simple_auth_chain
from core.models.upload import UploadOutcome
from infrastructure.catalyst_client import CatalystClient
from infrastructure.secrets import SecretError, SecretStore

logger = logging.getLogger(__name__)

UPLOAD_ORIGIN_HEADER = "x-upload-origin"
EXTEND_TIMEOUT_HEADER = "X-Extend-CF-Timeout"


def sign_entity_id(private_key: str, entity_id: str) -> Tuple[str, str]:
    """
    Personal-sign an entity id.

    Returns:
        (signer address, 0x-prefixed hex signature)
    """
    account = Account.from_key(private_key)
    signed = account.sign_message(encode_defunct(text=entity_id))
    return account.address, "0x" + bytes(signed.signature).hex()


def parse_private_key(secret: str) -> str:
    """Extract `private_key` from the JSON wallet secret."""
    try:
        data = json.loads(secret)
    except ValueError as e:
        raise SecretError("Signing secret is not valid JSON") from e

    private_key = data.get("private_key") if isinstance(data, dict) else None
    if not private_key:
        raise SecretError("Signing secret has no private_key")
    return private_key


class UploadProxy:
    """
    Signs and deploys entities on behalf of authorized callers.

    Args:
        secret_store: Source of the server wallet secret
        catalyst: Catalyst HTTP client
        signing_secret_id: Secret id holding the wallet key
        upload_origin: Value of the x-upload-origin header
        extend_timeout_seconds: Value of the X-Extend-CF-Timeout header
    """

    def __init__(
        self,
        secret_store: SecretStore,
        catalyst: CatalystClient,
        signing_secret_id: str,
        upload_origin: str = "dcl_linker",
        extend_timeout_seconds: int = 600,
    ):
        self._secret_store = secret_store
        self._catalyst = catalyst
        self._signing_secret_id = signing_secret_id
        self._headers = {
            UPLOAD_ORIGIN_HEADER: upload_origin,
            EXTEND_TIMEOUT_HEADER: str(extend_timeout_seconds),
        }

    async def upload(self, entity_id: str, files: Mapping[str, bytes]) -> UploadOutcome:
        """
        Sign and forward an entity.

        Args:
            entity_id: Entity id (also the key of the entity file)
            files: Every uploaded file by form field name

        Returns:
            UploadOutcome: success with the Catalyst body, a structured
            failure when the Catalyst error is recognised, otherwise an
            opaque failure with the raw message.
        """
        try:
            secret = await self._secret_store.get(self._signing_secret_id)
            address, signature = sign_entity_id(parse_private_key(secret), entity_id)

            chain = build_simple_auth_chain(entity_id, address, signature)
            fields = [("entityId", entity_id)] + auth_chain_to_form_fields(chain)

            logger.info(
                f"Deploying entity {entity_id} to {self._catalyst.entities_url} "
                f"as {address} ({len(files)} files)"
            )
            response = await self._catalyst.post_entity(fields, files, headers=dict(self._headers))

        except Exception as e:
            return self._failure(entity_id, e)

        logger.info(f"Entity {entity_id} deployed")
        return UploadOutcome.succeeded(response)

    def _failure(self, entity_id: str, error: Exception) -> UploadOutcome:
        structured = CatalystHttpError.from_unknown(error)
        if structured is not None:
            logger.warning(
                f"Catalyst rejected entity {entity_id}: "
                f"status={structured.status} message={structured.message}"
            )
            return UploadOutcome.structured_failure(structured.status, structured.message)

        message = str(error) or type(error).__name__
        logger.error(f"Upload of entity {entity_id} failed: {type(error).__name__}: {message}")
        return UploadOutcome.opaque_failure(message)

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)


__all__ = [
    "UPLOAD_ORIGIN_HEADER",
    "EXTEND_TIMEOUT_HEADER",
    "sign_entity_id",
    "parse_private_key",
    "UploadProxy",
]
