# ============================================================================
# AUTHORIZATION REGISTRY TESTS
# ============================================================================
# STATUS: Tests - Authorizations snapshot and queries
# PURPOSE: Verify grant activation, plot validation, queries and refresh
# CREATED: 19 OCT 2026
# ============================================================================
"""
Authorization Registry Tests

Run with:
    pytest tests/test_authorization_registry.py -v
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from core.models.grant import AuthorizationGrant, is_valid_plot
from core.observability import MetricsCollector
from infrastructure.grants_source import GrantsSource, GrantsSourceError
from services.authorization_registry import (
    EMPTY_SNAPSHOT,
    AuthorizationRegistry,
    build_snapshot,
)


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

ALICE = "0xAAAAaaaaAAAAaaaaAAAAaaaaAAAAaaaaAAAAaaaa"
BOB = "0xBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBb"


# ============================================================================
# HELPERS
# ============================================================================

def _grant(addresses, plots, **extra):
    return {"name": "test", "addresses": addresses, "plots": plots, **extra}


def _make_source(*payloads):
    """Source whose fetch() returns (or raises) each payload in turn."""
    source = MagicMock()
    source.url = "https://grants.test/authorizations.json"
    source.fetch = AsyncMock(side_effect=list(payloads))
    return source


def _make_registry(*payloads, production=False):
    metrics = MetricsCollector()
    registry = AuthorizationRegistry(
        _make_source(*payloads),
        production=production,
        metrics=metrics,
        clock=lambda: NOW,
    )
    return registry, metrics


# ============================================================================
# PLOT VALIDATION
# ============================================================================

class TestPlotValidation:

    @pytest.mark.parametrize("plot", ["0,0", "-200,200", "200,-200", "15,-7"])
    def test_valid(self, plot):
        assert is_valid_plot(plot)

    @pytest.mark.parametrize(
        "plot",
        ["201,0", "0,-201", "0", "1,2,3", "a,b", "1.5,2", "", ",", "9" * 5000 + ",0"],
    )
    def test_invalid(self, plot):
        assert not is_valid_plot(plot)


# ============================================================================
# GRANT ACTIVATION
# ============================================================================

class TestGrantActivation:

    def test_open_window_is_active(self):
        grant = AuthorizationGrant.model_validate(_grant([ALICE], ["0,0"]))
        assert grant.is_active(NOW, production=True)

    def test_future_start_is_inactive(self):
        grant = AuthorizationGrant.model_validate(
            _grant([ALICE], ["0,0"], startDate="2026-10-20T00:00:00Z")
        )
        assert not grant.is_active(NOW, production=False)

    def test_past_end_is_inactive(self):
        grant = AuthorizationGrant.model_validate(
            _grant([ALICE], ["0,0"], endDate="2026-10-18T00:00:00Z")
        )
        assert not grant.is_active(NOW, production=False)

    def test_inside_window_is_active(self):
        grant = AuthorizationGrant.model_validate(
            _grant(
                [ALICE],
                ["0,0"],
                startDate="2026-10-01T00:00:00Z",
                endDate="2026-11-01T00:00:00Z",
            )
        )
        assert grant.is_active(NOW, production=False)

    def test_naive_dates_are_utc(self):
        grant = AuthorizationGrant.model_validate(
            _grant([ALICE], ["0,0"], startDate="2026-10-19T12:30:00")
        )
        assert grant.start_date.tzinfo is not None
        assert not grant.is_active(NOW, production=False)

    def test_only_dev_depends_on_environment(self):
        grant = AuthorizationGrant.model_validate(_grant([ALICE], ["0,0"], onlyDev=True))
        assert not grant.is_active(NOW, production=True)
        assert grant.is_active(NOW, production=False)

    def test_blank_and_null_optionals(self):
        grant = AuthorizationGrant.model_validate(
            _grant([ALICE], ["0,0"], startDate="", endDate=None, onlyDev=None)
        )
        assert grant.start_date is None
        assert grant.only_dev is False


# ============================================================================
# SNAPSHOT BUILD
# ============================================================================

class TestBuildSnapshot:

    def test_addresses_are_lowercased(self):
        snapshot = build_snapshot([_grant([ALICE], ["1,1"])], NOW, production=False)
        assert snapshot.parcels_by_address == {ALICE.lower(): ("1,1",)}

    def test_invalid_plots_dropped(self):
        snapshot = build_snapshot(
            [_grant([ALICE], ["1,1", "300,0", "bad", "-200,-200"])],
            NOW,
            production=False,
        )
        assert snapshot.get(ALICE) == ("1,1", "-200,-200")

    def test_oversized_coordinate_dropped(self):
        snapshot = build_snapshot(
            [_grant([ALICE], ["0,0", "9" * 5000 + ",0"])], NOW, production=False
        )
        assert snapshot.get(ALICE) == ("0,0",)

    def test_inactive_grants_contribute_nothing(self):
        grants = [
            _grant([ALICE], ["1,1"], startDate="2027-01-01T00:00:00Z"),
            _grant([BOB], ["2,2"], endDate="2020-01-01T00:00:00Z"),
        ]
        snapshot = build_snapshot(grants, NOW, production=False)

        assert snapshot.address_count == 0
        assert snapshot.grants_total == 2
        assert snapshot.grants_active == 0

    def test_only_dev_grant_by_environment(self):
        grants = [_grant([ALICE], ["1,1"], onlyDev=True)]

        assert build_snapshot(grants, NOW, production=True).get(ALICE) is None
        assert build_snapshot(grants, NOW, production=False).get(ALICE) == ("1,1",)

    def test_malformed_grants_skipped(self):
        grants = [
            {"addresses": [ALICE]},
            "not a grant",
            _grant([BOB], ["3,3"]),
            _grant([ALICE], ["1,1"], startDate="not a date"),
        ]
        snapshot = build_snapshot(grants, NOW, production=False)

        assert snapshot.get(BOB) == ("3,3",)
        assert snapshot.get(ALICE) is None
        assert snapshot.grants_skipped == 3

    def test_plots_accumulate_across_grants(self):
        grants = [
            _grant([ALICE, BOB], ["1,1"]),
            _grant([ALICE.upper().replace("0X", "0x")], ["1,1", "2,2"]),
        ]
        snapshot = build_snapshot(grants, NOW, production=False)

        assert snapshot.get(ALICE) == ("1,1", "1,1", "2,2")
        assert snapshot.get(BOB) == ("1,1",)

    def test_snapshot_table_is_read_only(self):
        snapshot = build_snapshot([_grant([ALICE], ["1,1"])], NOW, production=False)
        with pytest.raises(TypeError):
            snapshot.parcels_by_address["0xnew"] = ()


# ============================================================================
# QUERIES
# ============================================================================

class TestQueries:

    def _loaded_registry(self, grants):
        registry, _ = _make_registry(grants)
        assert asyncio.run(registry.refresh()) is True
        return registry

    def test_check_authorization_case_insensitive(self):
        registry = self._loaded_registry([_grant([ALICE], ["0,0", "1,1"])])

        for address in (ALICE, ALICE.lower(), "0x" + ALICE[2:].upper()):
            result = registry.check_authorization(address)
            assert result.authorized is True
            assert result.parcels == ["0,0", "1,1"]

    def test_unknown_address_not_authorized(self):
        registry = self._loaded_registry([_grant([ALICE], ["0,0"])])

        result = registry.check_authorization(BOB)

        assert result.authorized is False
        assert result.parcels is None

    def test_authorized_with_zero_parcels(self):
        registry = self._loaded_registry([_grant([ALICE], ["999,999"])])

        result = registry.check_authorization(ALICE)
        assert result.authorized is True
        assert result.parcels == []

        access = registry.check_parcel_access(ALICE, ["0,0"])
        assert access.has_access is False
        assert access.missing_parcels == ["0,0"]

    def test_parcel_access_keeps_pointer_order(self):
        registry = self._loaded_registry([_grant([ALICE], ["0,0", "2,2"])])

        access = registry.check_parcel_access(ALICE.lower(), ["5,5", "0,0", "1,1", "2,2", "-3,4"])

        assert access.has_access is False
        assert access.missing_parcels == ["5,5", "1,1", "-3,4"]

    def test_full_access(self):
        registry = self._loaded_registry([_grant([ALICE], ["0,0", "2,2"])])

        access = registry.check_parcel_access(ALICE, ["2,2", "0,0"])

        assert access.has_access is True
        assert access.missing_parcels == []

    def test_unknown_signer_misses_everything(self):
        registry = self._loaded_registry([_grant([ALICE], ["0,0"])])

        access = registry.check_parcel_access(BOB, ["0,0", "1,1"])

        assert access.missing_parcels == ["0,0", "1,1"]

    def test_empty_pointers_have_access(self):
        registry = self._loaded_registry([_grant([ALICE], ["0,0"])])
        assert registry.check_parcel_access(BOB, []).has_access is True


# ============================================================================
# REFRESH
# ============================================================================

class TestRefresh:

    def test_starts_empty_and_not_ready(self):
        registry, _ = _make_registry()

        assert registry.is_ready is False
        assert registry.snapshot is EMPTY_SNAPSHOT
        assert registry.check_authorization(ALICE).authorized is False

    def test_successful_refresh_publishes_new_snapshot(self):
        registry, metrics = _make_registry([_grant([ALICE], ["0,0"])])

        assert asyncio.run(registry.refresh()) is True

        assert registry.is_ready is True
        assert registry.check_authorization(ALICE).authorized is True
        assert metrics.get_counter(
            "linker_authorizations_refresh_counter", {"result": "success"}
        ) == 1

    def test_oversized_plot_does_not_fail_refresh(self):
        registry, _ = _make_registry([_grant([ALICE], ["0,0", "9" * 5000 + ",0"])])

        assert asyncio.run(registry.refresh()) is True

        assert registry.check_authorization(ALICE).authorized is True

    def test_failed_refresh_keeps_previous_snapshot(self):
        registry, metrics = _make_registry(
            [_grant([ALICE], ["0,0"])],
            httpx.ConnectError("connection refused"),
        )
        asyncio.run(registry.refresh())
        before = registry.snapshot

        assert asyncio.run(registry.refresh()) is False

        assert registry.snapshot is before
        assert registry.check_authorization(ALICE).authorized is True
        assert registry.check_parcel_access(ALICE, ["0,0"]).has_access is True
        assert "ConnectError" in registry.last_error
        assert metrics.get_counter(
            "linker_authorizations_refresh_counter", {"result": "failure"}
        ) == 1

    def test_failed_initial_refresh_stays_not_ready(self):
        registry, _ = _make_registry(GrantsSourceError("not a list"))

        assert asyncio.run(registry.refresh()) is False
        assert registry.is_ready is False
        assert registry.stats()["failure_count"] == 1

    def test_refresh_replaces_rather_than_mutates(self):
        registry, _ = _make_registry(
            [_grant([ALICE], ["0,0"])],
            [_grant([BOB], ["1,1"])],
        )
        asyncio.run(registry.refresh())
        first = registry.snapshot

        asyncio.run(registry.refresh())

        assert registry.snapshot is not first
        assert first.get(ALICE) == ("0,0",)
        assert registry.check_authorization(ALICE).authorized is False
        assert registry.check_authorization(BOB).authorized is True

    def test_recovered_refresh_clears_last_error(self):
        registry, _ = _make_registry(
            httpx.ReadTimeout("timeout"),
            [_grant([ALICE], ["0,0"])],
        )
        asyncio.run(registry.refresh())
        asyncio.run(registry.refresh())

        stats = registry.stats()
        assert stats["last_error"] is None
        assert stats["ready"] is True
        assert stats["addresses"] == 1
        assert stats["refresh_count"] == 2


# ============================================================================
# GRANTS SOURCE
# ============================================================================

class TestGrantsSource:

    def _source(self, handler):
        return GrantsSource("https://grants.test/a.json", transport=httpx.MockTransport(handler))

    def test_fetch_returns_list(self):
        source = self._source(lambda request: httpx.Response(200, json=[_grant([ALICE], ["0,0"])]))
        assert asyncio.run(source.fetch())[0]["addresses"] == [ALICE]

    def test_non_list_payload_raises(self):
        source = self._source(lambda request: httpx.Response(200, json={"grants": []}))
        with pytest.raises(GrantsSourceError):
            asyncio.run(source.fetch())

    def test_non_json_payload_raises(self):
        source = self._source(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(GrantsSourceError):
            asyncio.run(source.fetch())

    def test_http_error_raises(self):
        source = self._source(lambda request: httpx.Response(503, text="down"))
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(source.fetch())
