# ============================================================================
# AUTHORIZATION REGISTRY
# ============================================================================
# STATUS: Service - Address to parcel access control
# PURPOSE: Hold the refreshed authorizations snapshot and answer access queries
# CREATED: 19 OCT 2026
# ============================================================================
"""
Authorization Registry

Maps lowercased addresses to the parcels they may publish to.

The registry holds exactly one piece of shared mutable state: a reference
to an immutable AuthorizationSnapshot. refresh() builds a complete new
snapshot off to the side and publishes it with a single attribute
assignment, so concurrent readers see either the old or the new snapshot
and never wait on a refresh.

A failed refresh keeps the previous snapshot. Stale authorizations are
preferred over an empty table that locks every caller out.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from core.contracts import AuthorizationCheckResult, ParcelAccessResult
from core.logging import ComponentType, get_logger
from core.models.grant import AuthorizationGrant
from core.observability import MetricsCollector, get_metrics
from infrastructure.grants_source import GrantsSource

logger = get_logger(__name__, ComponentType.REGISTRY)

REFRESH_METRIC = "linker_authorizations_refresh_counter"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# SNAPSHOT
# ============================================================================

@dataclass(frozen=True)
class AuthorizationSnapshot:
    """Immutable address -> parcels table."""
    parcels_by_address: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    built_at: Optional[datetime] = None
    grants_total: int = 0
    grants_active: int = 0
    grants_skipped: int = 0

    def get(self, address: str) -> Optional[Tuple[str, ...]]:
        return self.parcels_by_address.get(address.lower())

    @property
    def address_count(self) -> int:
        return len(self.parcels_by_address)


EMPTY_SNAPSHOT = AuthorizationSnapshot()


def build_snapshot(
    raw_grants: Iterable[Any],
    now: datetime,
    production: bool,
) -> AuthorizationSnapshot:
    """
    Flatten active grants into a new snapshot.

    Invalid records are skipped with a warning; invalid plots are dropped
    silently. The same plot granted twice to an address is kept twice,
    which is harmless for membership checks.

    Args:
        raw_grants: Raw grant records as fetched
        now: Evaluation time for start/end windows
        production: Whether dev-only grants must be excluded
    """
    table: Dict[str, List[str]] = {}
    total = active = skipped = 0

    for index, raw in enumerate(raw_grants):
        total += 1
        try:
            grant = AuthorizationGrant.model_validate(raw)
        except ValidationError as e:
            skipped += 1
            logger.warning(f"Skipping malformed grant #{index}: {e.error_count()} validation error(s)")
            continue

        if not grant.is_active(now, production):
            continue

        active += 1
        plots = grant.valid_plots()
        for address in grant.addresses:
            table.setdefault(address.lower(), []).extend(plots)

    return AuthorizationSnapshot(
        parcels_by_address=MappingProxyType(
            {address: tuple(plots) for address, plots in table.items()}
        ),
        built_at=now,
        grants_total=total,
        grants_active=active,
        grants_skipped=skipped,
    )


# ============================================================================
# REGISTRY
# ============================================================================

class AuthorizationRegistry:
    """
    Periodically refreshed authorizations.

    Args:
        source: Where raw grants are fetched from
        production: True when running in the production environment
        metrics: Collector for refresh counters (global by default)
        clock: Source of "now" for grant activation windows
    """

    def __init__(
        self,
        source: GrantsSource,
        production: bool = False,
        metrics: Optional[MetricsCollector] = None,
        clock=_utc_now,
    ):
        self._source = source
        self._production = production
        self._metrics = metrics or get_metrics()
        self._clock = clock

        self._snapshot: AuthorizationSnapshot = EMPTY_SNAPSHOT
        self._ready = False
        self._last_refresh_at: Optional[datetime] = None
        self._last_success_at: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._refresh_count = 0
        self._failure_count = 0

    @property
    def snapshot(self) -> AuthorizationSnapshot:
        return self._snapshot

    @property
    def is_ready(self) -> bool:
        """True once a refresh has succeeded."""
        return self._ready

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    # ------------------------------------------------------------------
    # REFRESH
    # ------------------------------------------------------------------

    async def refresh(self) -> bool:
        """
        Fetch grants and publish a new snapshot.

        Never raises for fetch or parse failures: they are logged, counted
        and the previous snapshot stays in place.

        Returns:
            True if a new snapshot was published.
        """
        now = self._clock()
        self._last_refresh_at = now
        self._refresh_count += 1

        try:
            raw_grants = await self._source.fetch()
            snapshot = build_snapshot(raw_grants, now, self._production)
        except Exception as e:
            self._failure_count += 1
            self._last_error = f"{type(e).__name__}: {e}"
            self._metrics.counter(REFRESH_METRIC, tags={"result": "failure"})
            logger.error(
                f"Authorizations refresh failed, keeping previous snapshot "
                f"({self._snapshot.address_count} addresses): {self._last_error}"
            )
            return False

        self._snapshot = snapshot
        self._ready = True
        self._last_success_at = now
        self._last_error = None
        self._metrics.counter(REFRESH_METRIC, tags={"result": "success"})
        logger.info(
            f"Authorizations refreshed: {snapshot.address_count} addresses from "
            f"{snapshot.grants_active}/{snapshot.grants_total} active grants "
            f"({snapshot.grants_skipped} skipped)"
        )
        return True

    # ------------------------------------------------------------------
    # QUERIES
    # ------------------------------------------------------------------

    def check_authorization(self, address: str) -> AuthorizationCheckResult:
        """Look up an address (case-insensitive)."""
        parcels = self._snapshot.get(address)
        if parcels is None:
            return AuthorizationCheckResult(authorized=False)
        return AuthorizationCheckResult(authorized=True, parcels=list(parcels))

    def check_parcel_access(self, address: str, pointers: List[str]) -> ParcelAccessResult:
        """
        Find the requested pointers the address may not publish to.

        missing_parcels keeps the order of `pointers`.
        """
        granted = set(self._snapshot.get(address) or ())
        missing = [pointer for pointer in pointers if pointer not in granted]
        return ParcelAccessResult(has_access=not missing, missing_parcels=missing)

    def stats(self) -> Dict[str, Any]:
        """Refresh state for health checks."""
        snapshot = self._snapshot
        return {
            "ready": self._ready,
            "addresses": snapshot.address_count,
            "grants_total": snapshot.grants_total,
            "grants_active": snapshot.grants_active,
            "grants_skipped": snapshot.grants_skipped,
            "built_at": snapshot.built_at.isoformat() if snapshot.built_at else None,
            "last_refresh_at": self._last_refresh_at.isoformat() if self._last_refresh_at else None,
            "last_success_at": self._last_success_at.isoformat() if self._last_success_at else None,
            "last_error": self._last_error,
            "refresh_count": self._refresh_count,
            "failure_count": self._failure_count,
            "source_url": self._source.url,
        }


__all__ = [
    "AuthorizationSnapshot",
    "EMPTY_SNAPSHOT",
    "build_snapshot",
    "AuthorizationRegistry",
]
