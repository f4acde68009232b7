"""
Error taxonomy for the journal bridge.

Every error raised on purpose inside the service derives from
JournalBridgeError so the API layer can turn it into an error envelope.
"""
from typing import Optional


class JournalBridgeError(Exception):
    """Base class for all service errors."""


class ConfigurationError(JournalBridgeError):
    """A required token or identifier is missing from the configuration."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{key} is not defined")


class UpstreamAPIError(JournalBridgeError):
    """An upstream service answered with a non-success status."""

    def __init__(self, service: str, status_code: int, reason: Optional[str] = None):
        self.service = service
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(f"{service} API error: {status_code} {self.reason}".rstrip())


class UnexpectedShapeError(JournalBridgeError):
    """An upstream record is absent or not of the expected kind."""
