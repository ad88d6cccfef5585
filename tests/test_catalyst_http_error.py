# ============================================================================
# CATALYST HTTP ERROR TESTS
# ============================================================================
# STATUS: Tests - Downstream error translation
# PURPOSE: Verify "Failed to fetch" message parsing and status fallbacks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Catalyst HTTP Error Tests

Run with:
    pytest tests/test_catalyst_http_error.py -v
"""

import json

from core.errors import CatalystHttpError
from infrastructure.catalyst_client import CatalystRequestError


def _fetch_message(status, body, url="https://peer.test/content/entities"):
    return f"Failed to fetch {url}. Got status {status}. Response was '{body}'"


# ============================================================================
# FROM MESSAGE
# ============================================================================

class TestFromMessage:

    def test_errors_list_joined(self):
        error = CatalystHttpError.from_message(
            "Failed to fetch https://x. Got status 400. Response was '{\"errors\":[\"bad\",\"worse\"]}'"
        )

        assert error.status == 400
        assert error.message == "bad; worse"
        assert error.raw_response == '{"errors":["bad","worse"]}'

    def test_message_field_used_when_no_errors(self):
        body = json.dumps({"errors": [], "message": "Entity too large"})
        error = CatalystHttpError.from_message(_fetch_message(413, body))

        assert error.status == 413
        assert error.message == "Entity too large"

    def test_plain_text_body(self):
        error = CatalystHttpError.from_message(_fetch_message(502, "Bad Gateway"))

        assert error.status == 502
        assert error.message == "Bad Gateway"
        assert error.raw_response == "Bad Gateway"

    def test_json_without_known_keys_falls_back_to_raw(self):
        body = json.dumps({"detail": "nope"})
        error = CatalystHttpError.from_message(_fetch_message(500, body))
        assert error.message == body

    def test_multiline_body(self):
        error = CatalystHttpError.from_message(_fetch_message(500, "line one\nline 'two'"))
        assert error.message == "line one\nline 'two'"

    def test_unrelated_message_returns_none(self):
        assert CatalystHttpError.from_message("Connection reset by peer") is None
        assert CatalystHttpError.from_message(_fetch_message(40, "x")) is None
        assert CatalystHttpError.from_message(_fetch_message(400, "")) is None


# ============================================================================
# FROM UNKNOWN
# ============================================================================

class _StatusError(Exception):
    def __init__(self, message, status):
        super().__init__(message)
        self.status = status


class TestFromUnknown:

    def test_falsy_input(self):
        assert CatalystHttpError.from_unknown(None) is None
        assert CatalystHttpError.from_unknown("") is None

    def test_string_input(self):
        error = CatalystHttpError.from_unknown(_fetch_message(404, '{"errors":["missing"]}'))
        assert (error.status, error.message) == (404, "missing")

    def test_client_error_message_is_recognised(self):
        raised = CatalystRequestError("https://peer.test/content/entities", 400, '{"errors":["bad"]}')

        error = CatalystHttpError.from_unknown(raised)

        assert error.status == 400
        assert error.message == "bad"

    def test_explicit_status_attribute(self):
        error = CatalystHttpError.from_unknown(_StatusError("Service unavailable", 503))

        assert error.status == 503
        assert error.message == "Service unavailable"
        assert error.raw_response is None

    def test_non_integer_status_ignored(self):
        assert CatalystHttpError.from_unknown(_StatusError("x", "503")) is None
        assert CatalystHttpError.from_unknown(_StatusError("x", True)) is None

    def test_opaque_error(self):
        assert CatalystHttpError.from_unknown(RuntimeError("boom")) is None
