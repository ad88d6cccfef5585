# ============================================================================
# APPLICATION WIRING TESTS
# ============================================================================
# STATUS: Tests - FastAPI app, lifespan and component graph
# PURPOSE: Verify the app starts, refreshes authorizations and serves routes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Application Wiring Tests

The secret store uses the environment backend and the authorizations
refresh is replaced with an AsyncMock, so no network is touched.

Run with:
    pytest tests/test_main.py -v
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from core.config import LinkerConfig, reset_config
from core.observability import MetricsCollector
from infrastructure.secrets import EnvSecretStore


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("SECRETS_BACKEND", "env")
    monkeypatch.setenv("ENVIRONMENT", "stg")
    monkeypatch.setenv("CATALYST_DOMAIN", "peer.test")
    monkeypatch.setenv("AUTHORIZATIONS_UPDATE_INTERVAL_MS", "600000")
    monkeypatch.setenv("ENABLE_METRICS", "false")
    reset_config()
    yield monkeypatch
    reset_config()


@pytest.fixture
def client(env):
    import main

    with patch(
        "services.authorization_registry.AuthorizationRegistry.refresh",
        new=AsyncMock(return_value=True),
    ) as refresh:
        with TestClient(main.app) as test_client:
            yield test_client, refresh


# ============================================================================
# COMPONENT GRAPH
# ============================================================================

class TestBuildComponents:

    def test_builds_from_config(self, env):
        from main import build_components

        components = build_components(LinkerConfig.from_env(), metrics=MetricsCollector())

        assert components.catalyst.base_url == "https://peer.test"
        assert components.refresh_job.interval_seconds == 600
        assert components.refresh_job.is_running is False
        assert components.registry.is_ready is False
        assert isinstance(components.proxy._secret_store, EnvSecretStore)
        assert components.proxy.headers["x-upload-origin"] == "dcl_linker"


# ============================================================================
# LIFESPAN AND ROUTES
# ============================================================================

class TestApplication:

    def test_initial_refresh_and_job_started(self, client):
        test_client, refresh = client

        refresh.assert_awaited_once()
        assert test_client.app.state.components.refresh_job.is_running is True

    def test_liveness(self, client):
        test_client, _ = client

        for path in ("/livez", "/health/live"):
            resp = test_client.get(path)
            assert resp.status_code == 200
            assert resp.json()["status"] == "alive"

    def test_about(self, client):
        test_client, _ = client

        resp = test_client.get("/about")

        assert resp.status_code == 200
        assert resp.json()["configurations"]["realmName"] == "LinkerServer"

    def test_request_id_echoed(self, client):
        test_client, _ = client

        resp = test_client.get("/ping", headers={"X-Request-ID": "req-42"})

        assert resp.text == "/ping"
        assert resp.headers["X-Request-ID"] == "req-42"

    def test_request_id_generated(self, client):
        test_client, _ = client

        resp = test_client.get("/")

        assert resp.status_code == 200
        assert resp.json()["status"] == "running"
        assert len(resp.headers["X-Request-ID"]) == 16

    def test_upload_without_chain_is_forbidden(self, client):
        test_client, _ = client

        resp = test_client.post(
            "/content/entities",
            data={"entityId": "E1"},
            files={"E1": ("E1", b'{"pointers":["0,0"]}')},
        )

        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden", "message": "No auth chain provided."}
