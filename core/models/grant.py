# ============================================================================
# AUTHORIZATION GRANT MODEL
# ============================================================================
# STATUS: Core - Raw authorization grant record
# PURPOSE: Validate fetched grants and decide whether they are active
# CREATED: 19 OCT 2026
# ============================================================================
"""
Authorization Grant Model

A grant authorizes one or more addresses to publish to one or more
parcels, optionally bounded by a time window and restricted to
non-production environments.

Fetched records look like:

    {
        "name": "Some team",
        "desc": "Scene deployments",
        "startDate": "2026-01-01T00:00:00Z",
        "endDate": "2026-12-31T23:59:59Z",
        "onlyDev": false,
        "addresses": ["0xAbC..."],
        "plots": ["10,-4", "11,-4"]
    }

Unknown keys are ignored. A record missing `addresses` or `plots`
fails validation and is skipped by the registry.
"""

import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PLOT_COORDINATE_LIMIT = 200

_COORDINATE_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def is_valid_plot(plot: str) -> bool:
    """
    Check a plot coordinate string.

    A plot is valid iff it splits on "," into exactly two integers,
    each within [-200, 200].
    """
    parts = plot.split(",")
    if len(parts) != 2:
        return False

    for part in parts:
        if not _COORDINATE_RE.match(part):
            return False
        try:
            coordinate = int(part)
        except ValueError:
            # digit strings past the int conversion limit
            return False
        if abs(coordinate) > PLOT_COORDINATE_LIMIT:
            return False

    return True


class AuthorizationGrant(BaseModel):
    """One raw grant record from the authorizations source."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    addresses: List[str]
    plots: List[str]
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    only_dev: bool = Field(default=False, alias="onlyDev")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _blank_date_is_unset(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("only_dev", mode="before")
    @classmethod
    def _null_only_dev(cls, value: Any) -> Any:
        return False if value is None else value

    def is_active(self, now: datetime, production: bool) -> bool:
        """
        Activation rule, evaluated at snapshot build time.

        Args:
            now: Evaluation time (timezone-aware)
            production: Whether the running environment is production

        Returns:
            False if the grant has not started, has ended, or is
            dev-only while running in production.
        """
        if self.start_date is not None and self.start_date > now:
            return False
        if self.end_date is not None and self.end_date < now:
            return False
        if self.only_dev and production:
            return False
        return True

    def valid_plots(self) -> List[str]:
        """Plots that pass coordinate validation, in grant order."""
        return [plot for plot in self.plots if is_valid_plot(plot)]


__all__ = [
    "PLOT_COORDINATE_LIMIT",
    "is_valid_plot",
    "AuthorizationGrant",
]
