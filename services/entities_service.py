# ============================================================================
# ENTITY UPLOAD SERVICE
# ============================================================================
# STATUS: Service - Entity upload use case
# PURPOSE: Validate, authorize and forward POST /content/entities requests
# CREATED: 19 OCT 2026
# ============================================================================
"""
Entity Upload Service

Request flow, terminal at the first failing step:

    1. Parse the auth chain from the form        -> 403 No auth chain provided.
    2. Validate the chain                        -> 403 Invalid auth chain.
    3. Signer present in the authorizations      -> 403 Address not found.
    4. entityId field present                    -> 400 Missing entityId.
    5. File keyed by entityId present            -> 400 Missing entity file.
    6. Signer may publish to every pointer       -> 403 Missing access for N parcels
    7. Forward through the upload proxy          -> 500 <proxy error>
    8. 200 with the Catalyst body

Every outcome increments linker_entity_upload_counter{status}.
"""

import json
from typing import Any, List, Mapping, Optional

from core.contracts import UploadStatus
from core.errors import ForbiddenError, InvalidRequestError, UploadFailedError
from core.logging import ComponentType, get_logger, log_context
from core.models.auth_chain import (
    AUTH_CHAIN_FIELD,
    AuthChain,
    parse_auth_chain_from_fields,
    parse_auth_chain_json,
)
from core.models.upload import EntityUploadResponse
from core.observability import MetricsCollector, get_metrics
from services.auth_chain_validator import AuthChainValidator
from services.authorization_registry import AuthorizationRegistry
from services.upload_proxy import UploadProxy

logger = get_logger(__name__, ComponentType.SERVICE)

UPLOAD_METRIC = "linker_entity_upload_counter"
ENTITY_ID_FIELD = "entityId"


def extract_auth_chain(fields: Mapping[str, str]) -> Optional[AuthChain]:
    """Auth chain from bracket-indexed fields, or a single JSON `authChain` field."""
    chain = parse_auth_chain_from_fields(fields)
    if chain is None and fields.get(AUTH_CHAIN_FIELD):
        chain = parse_auth_chain_json(fields[AUTH_CHAIN_FIELD])
    return chain


def parse_entity_pointers(content: bytes) -> List[str]:
    """
    Read `pointers` from an entity file.

    Raises:
        InvalidRequestError: The file is not JSON or has no pointers list.
    """
    try:
        entity = json.loads(content)
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidRequestError("Invalid entity file.") from e

    pointers = entity.get("pointers") if isinstance(entity, dict) else None
    if not isinstance(pointers, list) or not all(isinstance(p, str) for p in pointers):
        raise InvalidRequestError("Invalid entity file.")
    return pointers


def missing_access_message(missing: List[str]) -> str:
    return f"Missing access for {len(missing)} parcels:\n" + "; ".join(missing)


class EntityUploadService:
    """
    Composes validator, registry and proxy for one upload request.

    Args:
        validator: Auth chain validator
        registry: Authorization registry
        proxy: Upload proxy
        metrics: Collector for the upload counter (global by default)
    """

    def __init__(
        self,
        validator: AuthChainValidator,
        registry: AuthorizationRegistry,
        proxy: UploadProxy,
        metrics: Optional[MetricsCollector] = None,
    ):
        self._validator = validator
        self._registry = registry
        self._proxy = proxy
        self._metrics = metrics or get_metrics()

    async def handle(
        self,
        fields: Mapping[str, str],
        files: Mapping[str, bytes],
    ) -> EntityUploadResponse:
        """
        Process one upload request.

        Args:
            fields: Plain form fields
            files: Uploaded files by form field name

        Returns:
            EntityUploadResponse to render as-is. Never raises.
        """
        try:
            body = await self._process(fields, files)
        except ForbiddenError as e:
            logger.info(f"Upload forbidden: {e}")
            return self._finish(UploadStatus.FORBIDDEN, EntityUploadResponse.forbidden(str(e)))
        except InvalidRequestError as e:
            logger.info(f"Invalid upload request: {e}")
            return self._finish(
                UploadStatus.INVALID_REQUEST, EntityUploadResponse.bad_request(str(e))
            )
        except UploadFailedError as e:
            return self._finish(UploadStatus.ERROR, EntityUploadResponse.internal_error(str(e)))
        except Exception as e:
            logger.exception(f"Unexpected error handling upload: {type(e).__name__}: {e}")
            return self._finish(
                UploadStatus.ERROR, EntityUploadResponse.internal_error(str(e) or type(e).__name__)
            )

        return self._finish(UploadStatus.SUCCESS, EntityUploadResponse.ok(body))

    async def _process(self, fields: Mapping[str, str], files: Mapping[str, bytes]) -> Any:
        chain = extract_auth_chain(fields)
        if chain is None:
            raise ForbiddenError("No auth chain provided.")

        result = self._validator.validate(chain)
        if not result.ok:
            logger.info(f"Auth chain rejected: {result.error}")
            raise ForbiddenError("Invalid auth chain.")

        signer = result.signer_address
        with log_context(signer_address=signer.lower()):
            if not self._registry.check_authorization(signer).authorized:
                raise ForbiddenError("Address not found.")

            entity_id = fields.get(ENTITY_ID_FIELD)
            if not entity_id:
                raise InvalidRequestError("Missing entityId.")

            with log_context(entity_id=entity_id):
                entity_file = files.get(entity_id)
                if entity_file is None:
                    raise InvalidRequestError("Missing entity file.")

                pointers = parse_entity_pointers(entity_file)
                access = self._registry.check_parcel_access(signer, pointers)
                if not access.has_access:
                    raise ForbiddenError(missing_access_message(access.missing_parcels))

                outcome = await self._proxy.upload(entity_id, files)
                if not outcome.success:
                    raise UploadFailedError(outcome.error or "Upload failed")

                logger.info(f"Entity {entity_id} uploaded for {signer} ({len(pointers)} pointers)")
                return outcome.response

    def _finish(self, status: UploadStatus, response: EntityUploadResponse) -> EntityUploadResponse:
        self._metrics.counter(UPLOAD_METRIC, tags={"status": status.value})
        return response


__all__ = [
    "UPLOAD_METRIC",
    "extract_auth_chain",
    "parse_entity_pointers",
    "missing_access_message",
    "EntityUploadService",
]
