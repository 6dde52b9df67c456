"""
Error types raised by the notification SDK.
"""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for all SDK errors."""


class ValidationError(NotificationError, ValueError):
    """A required input is missing or malformed."""


class ConfigurationError(ValidationError):
    """Credentials for the selected environment are missing."""


class MalformedSignatureError(NotificationError):
    """The signature header is not base64-encoded JSON with kid and signature."""

    def __init__(self, header: str, reason: str | None = None):
        message = f"Parsing failed for signature header {header}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.header = header


class UpstreamError(NotificationError):
    """The identity or key service failed or returned a non-success status."""

    def __init__(
        self,
        message: str,
        key_id: str | None = None,
        status_code: int | None = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.key_id = key_id
        self.status_code = status_code
        self.url = url


class VerificationError(NotificationError):
    """The cryptographic check itself could not be performed."""
