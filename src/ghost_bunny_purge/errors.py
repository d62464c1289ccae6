"""Relay error types."""
from __future__ import annotations


class PurgeRelayError(Exception):
    """Base class for all relay errors."""


class ConfigurationError(PurgeRelayError):
    """A required configuration value is missing or invalid."""


class AuthenticationError(PurgeRelayError):
    """The request carried neither a valid signature nor the bypass token."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message)


class SignatureFormatError(PurgeRelayError):
    """The signature header could not be parsed."""


class UpstreamPurgeError(PurgeRelayError):
    """The pull zone purge call returned a non-success status."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"Failed to purge cache. Status: {status}")


class UpstreamListError(PurgeRelayError):
    """Listing perma-cache folders failed or returned an unusable payload."""

    def __init__(self, status: int | None = None, reason: str | None = None):
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"Failed to list Perma-Cache folders. Status: {status}"
        else:
            message = f"Failed to list Perma-Cache folders: {reason}"
        super().__init__(message)


class UpstreamDeleteFailure(PurgeRelayError):
    """A single folder delete failed. Recorded in the tally, never raised past cleanup."""

    def __init__(self, object_name: str, status: int | None = None, reason: str | None = None):
        self.object_name = object_name
        self.status = status
        self.reason = reason
        detail = f"Status: {status}" if status is not None else reason
        super().__init__(f"Failed to delete folder: {object_name}. {detail}")
