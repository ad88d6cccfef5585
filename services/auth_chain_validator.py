# ============================================================================
# AUTH CHAIN VALIDATOR
# ============================================================================
# STATUS: Service - Signature verification
# PURPOSE: Prove which address authored an upload request
# CREATED: 19 OCT 2026
# ============================================================================
"""
Auth Chain Validator

Verifies an auth chain and recovers the signer address. Client-supplied
identity is never trusted: the SIGNER link only names an address, and
every following link must be signed by the authority established so far.

Chain walk (running authority starts empty):

    SIGNER                  authority = payload (root address)
    ECDSA_EPHEMERAL         signed by authority, not expired
                            authority = ephemeral address from payload
    ECDSA_SIGNED_ENTITY     signed by authority
                            authority = payload (entity id)
    ECDSA_EIP_1654_*        contract wallets need an on-chain provider,
                            which this service does not have -> invalid
    unknown kind            invalid

The chain is valid when every link passes and the final authority equals
the signed entity payload.

validate() never raises; every failure is a ValidationResult with ok=False.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from core.contracts import AuthLinkType, ValidationResult
from core.models.auth_chain import AuthChain, AuthLink, owner_address

logger = logging.getLogger(__name__)

NO_SIGNATURE = "No signature"
INVALID_SIGNATURE = "Invalid signature"

EPHEMERAL_PAYLOAD_RE = re.compile(
    r"^([^\n]*)\nEphemeral address: (0x[0-9a-fA-F]{40})\nExpiration: ([^\n]+?)\s*$"
)

# (message, signature) -> recovered address
RecoverFn = Callable[[str, str], str]

# (current authority, link, now) -> next authority, or None if the link fails
LinkValidator = Callable[[str, AuthLink, datetime], Optional[str]]


def recover_personal_signer(message: str, signature: str) -> str:
    """Recover the address that personal-signed `message` (EIP-191)."""
    return Account.recover_message(encode_defunct(text=message), signature=signature)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_expiration(raw: str) -> Optional[datetime]:
    try:
        value = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class AuthChainValidator:
    """
    Stateless auth chain validator.

    Args:
        recover: Signature recovery primitive (defaults to eth_account)
        clock: Source of "now" for ephemeral expiration checks
    """

    def __init__(
        self,
        recover: RecoverFn = recover_personal_signer,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._recover = recover
        self._clock = clock
        self._link_validators: Dict[AuthLinkType, LinkValidator] = {
            AuthLinkType.SIGNER: self._validate_signer,
            AuthLinkType.ECDSA_PERSONAL_EPHEMERAL: self._validate_personal_ephemeral,
            AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY: self._validate_personal_signed_entity,
            AuthLinkType.ECDSA_EIP_1654_EPHEMERAL: self._reject_contract_wallet,
            AuthLinkType.ECDSA_EIP_1654_SIGNED_ENTITY: self._reject_contract_wallet,
        }

    def validate(self, chain: Optional[AuthChain]) -> ValidationResult:
        """
        Validate a chain and recover its signer.

        Returns:
            ValidationResult with the root signer address when ok.
        """
        try:
            signed_entity = self._find_signed_entity(chain or [])
            if signed_entity is None or not signed_entity.signature:
                return ValidationResult.invalid(NO_SIGNATURE)

            if not self.verify_chain(chain, signed_entity.payload):
                return ValidationResult.invalid(INVALID_SIGNATURE)

            signer_address = owner_address(chain)
            if not signer_address:
                return ValidationResult.invalid(INVALID_SIGNATURE)

            return ValidationResult.valid(signer_address)

        except Exception as e:
            logger.warning(f"Auth chain validation error: {type(e).__name__}: {e}")
            return ValidationResult.invalid(INVALID_SIGNATURE)

    def verify_chain(self, chain: AuthChain, expected_final_authority: str) -> bool:
        """Walk every link and check the chain ends at the expected authority."""
        now = self._clock()
        authority = ""

        for index, link in enumerate(chain):
            link_type = link.link_type
            if link_type is None:
                logger.info(f"Unknown auth link type at index {index}: {link.type!r}")
                return False

            next_authority = self._link_validators[link_type](authority, link, now)
            if next_authority is None:
                logger.info(f"Auth link {index} ({link_type.value}) failed verification")
                return False
            authority = next_authority

        return authority == expected_final_authority

    @staticmethod
    def _find_signed_entity(chain: List[AuthLink]) -> Optional[AuthLink]:
        for link in chain:
            if link.link_type == AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY:
                return link
        return None

    # ------------------------------------------------------------------
    # LINK VALIDATORS
    # ------------------------------------------------------------------

    def _signed_by(self, authority: str, link: AuthLink) -> bool:
        if not authority or not link.signature:
            return False
        recovered = self._recover(link.payload, link.signature)
        return recovered.lower() == authority.lower()

    def _validate_signer(self, authority: str, link: AuthLink, now: datetime) -> Optional[str]:
        # Only the root link may name an address
        if authority or not link.payload:
            return None
        return link.payload

    def _validate_personal_ephemeral(
        self, authority: str, link: AuthLink, now: datetime
    ) -> Optional[str]:
        match = EPHEMERAL_PAYLOAD_RE.match(link.payload)
        if not match:
            return None

        expiration = _parse_expiration(match.group(3))
        if expiration is None or expiration <= now:
            return None

        if not self._signed_by(authority, link):
            return None

        return match.group(2)

    def _validate_personal_signed_entity(
        self, authority: str, link: AuthLink, now: datetime
    ) -> Optional[str]:
        if not self._signed_by(authority, link):
            return None
        return link.payload

    def _reject_contract_wallet(
        self, authority: str, link: AuthLink, now: datetime
    ) -> Optional[str]:
        return None


__all__ = [
    "NO_SIGNATURE",
    "INVALID_SIGNATURE",
    "RecoverFn",
    "recover_personal_signer",
    "AuthChainValidator",
]
