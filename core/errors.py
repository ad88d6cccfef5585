# ============================================================================
# ERRORS
# ============================================================================
# STATUS: Core - Request errors and Catalyst error translation
# PURPOSE: Typed failures for entity uploads
# CREATED: 19 OCT 2026
# ============================================================================
"""
Errors

ForbiddenError / InvalidRequestError are raised and caught inside the
entity upload service only; their messages are safe to show the caller.

CatalystHttpError turns the downstream client's error text

    Failed to fetch <url>. Got status <code>. Response was '<body>'

into a status code and a friendly message.
"""

import json
import re
from typing import Any, Optional


class ForbiddenError(Exception):
    """Caller identity or authorization failed (HTTP 403)."""


class InvalidRequestError(Exception):
    """Caller input is missing or malformed (HTTP 400)."""


class UploadFailedError(Exception):
    """The upload proxy reported a failure (HTTP 500)."""


class CatalystHttpError(Exception):
    """HTTP failure returned by a Catalyst endpoint."""

    FETCH_ERROR_RE = re.compile(
        r"^Failed to fetch\s+\S+\. Got status\s+(\d{3})\. Response was '([\s\S]+)'$"
    )

    def __init__(self, status: int, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.raw_response = raw_response

    def __repr__(self) -> str:
        return f"CatalystHttpError(status={self.status}, message={self.message!r})"

    @classmethod
    def from_message(cls, message: str) -> Optional["CatalystHttpError"]:
        """
        Parse a known "Failed to fetch ..." message.

        Returns:
            CatalystHttpError, or None if the message does not match.
        """
        match = cls.FETCH_ERROR_RE.match(message)
        if not match:
            return None

        try:
            status = int(match.group(1))
        except ValueError:
            status = 500

        raw = match.group(2)
        return cls(status, cls._friendly_message(raw), raw)

    @classmethod
    def from_unknown(cls, error: Any) -> Optional["CatalystHttpError"]:
        """
        Convert an arbitrary error when its status can be determined.

        Tries the message pattern first, then an explicit integer
        `status` attribute. Returns None when neither applies; the
        caller treats the error as opaque.
        """
        if not error:
            return None

        message = error if isinstance(error, str) else str(error)
        parsed = cls.from_message(message)
        if parsed:
            return parsed

        status = getattr(error, "status", None)
        if isinstance(status, int) and not isinstance(status, bool) and status:
            return cls(status, message)

        return None

    @staticmethod
    def _friendly_message(raw: str) -> str:
        """Best-effort user-facing message from a JSON or text body."""
        try:
            parsed = json.loads(raw)
        except ValueError:
            return raw

        if isinstance(parsed, dict):
            errors = parsed.get("errors")
            if isinstance(errors, list) and errors:
                return "; ".join(str(e) for e in errors)
            message = parsed.get("message")
            if isinstance(message, str) and message:
                return message

        return raw


__all__ = [
    "ForbiddenError",
    "InvalidRequestError",
    "UploadFailedError",
    "CatalystHttpError",
]
