# ============================================================================
# UPLOAD PROXY TESTS
# ============================================================================
# STATUS: Tests - Re-signing and forwarding to the Catalyst
# PURPOSE: Verify outbound request shape and failure translation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Upload Proxy Tests

The Catalyst is replaced with an httpx.MockTransport; the secret store
with an AsyncMock. Signing uses a real eth_account key.

Run with:
    pytest tests/test_upload_proxy.py -v
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from eth_account import Account

from core.models.auth_chain import build_simple_auth_chain
from infrastructure.catalyst_client import CatalystClient
from infrastructure.secrets import SecretError
from services.auth_chain_validator import AuthChainValidator
from services.upload_proxy import UploadProxy, parse_private_key, sign_entity_id


SERVER_KEY = "0x" + "44" * 32
SERVER = Account.from_key(SERVER_KEY)
ENTITY_ID = "bafkreientity"
FILES = {ENTITY_ID: b'{"pointers":["0,0"]}', "model.glb": b"\x00\x01binary"}


# ============================================================================
# HELPERS
# ============================================================================

def _make_secret_store(secret=None, error=None):
    store = MagicMock()
    if error is not None:
        store.get = AsyncMock(side_effect=error)
    else:
        store.get = AsyncMock(return_value=secret or json.dumps({"private_key": SERVER_KEY}))
    return store


def _make_proxy(handler, secret_store=None):
    """UploadProxy over a mock Catalyst; returns (proxy, captured requests)."""
    captured = []

    def recording_handler(request: httpx.Request):
        request.read()
        captured.append(request)
        return handler(request)

    catalyst = CatalystClient("https://peer.test", transport=httpx.MockTransport(recording_handler))
    proxy = UploadProxy(
        secret_store=secret_store or _make_secret_store(),
        catalyst=catalyst,
        signing_secret_id="linker-server",
        upload_origin="dcl_linker",
    )
    return proxy, captured


# ============================================================================
# SIGNING
# ============================================================================

class TestSigning:

    def test_signature_validates_as_simple_chain(self):
        address, signature = sign_entity_id(SERVER_KEY, ENTITY_ID)

        result = AuthChainValidator().validate(
            build_simple_auth_chain(ENTITY_ID, address, signature)
        )

        assert address == SERVER.address
        assert signature.startswith("0x")
        assert result.ok is True
        assert result.signer_address == SERVER.address

    def test_parse_private_key(self):
        assert parse_private_key(json.dumps({"private_key": "0xabc"})) == "0xabc"

    @pytest.mark.parametrize("secret", ["not json", "[]", "{}", '{"private_key": ""}'])
    def test_parse_private_key_rejects(self, secret):
        with pytest.raises(SecretError):
            parse_private_key(secret)


# ============================================================================
# SUCCESS
# ============================================================================

class TestUploadSuccess:

    def test_returns_catalyst_body(self):
        proxy, _ = _make_proxy(lambda request: httpx.Response(200, json={"creationTimestamp": 1}))

        outcome = asyncio.run(proxy.upload(ENTITY_ID, FILES))

        assert outcome.success is True
        assert outcome.response == {"creationTimestamp": 1}

    def test_outbound_request_shape(self):
        proxy, captured = _make_proxy(lambda request: httpx.Response(200, json={}))
        _, expected_signature = sign_entity_id(SERVER_KEY, ENTITY_ID)

        asyncio.run(proxy.upload(ENTITY_ID, FILES))

        request = captured[0]
        body = request.content
        assert request.method == "POST"
        assert str(request.url) == "https://peer.test/content/entities"
        assert request.headers["x-upload-origin"] == "dcl_linker"
        assert request.headers["x-extend-cf-timeout"] == "600"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="entityId"' in body
        assert ENTITY_ID.encode() in body
        assert b'name="authChain[0][type]"' in body
        assert SERVER.address.encode() in body
        assert expected_signature.encode() in body
        assert b'name="model.glb"' in body
        assert b"\x00\x01binary" in body

    def test_reads_configured_secret(self):
        store = _make_secret_store()
        proxy, _ = _make_proxy(lambda request: httpx.Response(200, json={}), secret_store=store)

        asyncio.run(proxy.upload(ENTITY_ID, FILES))

        store.get.assert_awaited_once_with("linker-server")

    def test_non_json_success_body_passed_as_text(self):
        proxy, _ = _make_proxy(lambda request: httpx.Response(200, text="ok"))
        assert asyncio.run(proxy.upload(ENTITY_ID, FILES)).response == "ok"


# ============================================================================
# FAILURES
# ============================================================================

class TestUploadFailure:

    def test_structured_catalyst_error(self):
        proxy, _ = _make_proxy(
            lambda request: httpx.Response(400, json={"errors": ["bad", "worse"]})
        )

        outcome = asyncio.run(proxy.upload(ENTITY_ID, FILES))

        assert outcome.success is False
        assert outcome.status == 400
        assert outcome.error == "bad; worse"

    def test_text_catalyst_error(self):
        proxy, _ = _make_proxy(lambda request: httpx.Response(503, text="Service Unavailable"))

        outcome = asyncio.run(proxy.upload(ENTITY_ID, FILES))

        assert outcome.status == 503
        assert outcome.error == "Service Unavailable"

    def test_timeout_is_opaque_failure(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        proxy, _ = _make_proxy(handler)

        outcome = asyncio.run(proxy.upload(ENTITY_ID, FILES))

        assert outcome.success is False
        assert outcome.status is None
        assert outcome.error == "timed out"

    def test_secret_failure_is_opaque_failure(self):
        store = _make_secret_store(error=SecretError("Secret not found: linker-server"))
        proxy, captured = _make_proxy(lambda request: httpx.Response(200), secret_store=store)

        outcome = asyncio.run(proxy.upload(ENTITY_ID, FILES))

        assert outcome.success is False
        assert outcome.error == "Secret not found: linker-server"
        assert captured == []

    def test_secret_without_private_key(self):
        store = _make_secret_store(secret=json.dumps({"address": "0x"}))
        proxy, _ = _make_proxy(lambda request: httpx.Response(200), secret_store=store)

        outcome = asyncio.run(proxy.upload(ENTITY_ID, FILES))

        assert outcome.error == "Signing secret has no private_key"
