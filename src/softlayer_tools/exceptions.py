"""
Exception classes for the SoftLayer tools.

All exceptions inherit from SoftLayerToolsError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class SoftLayerToolsError(Exception):
    """Base exception for all SoftLayer tools errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(SoftLayerToolsError):
    """Raised when configuration is missing or invalid."""

    pass


class LocalSourceError(SoftLayerToolsError):
    """Raised when the local zone directory is unreadable or implausibly small."""

    pass


class NetworkError(SoftLayerToolsError):
    """Raised when a request fails at the transport level (connect, TLS, timeout)."""

    pass


class ApiError(SoftLayerToolsError):
    """Raised when the provider answers with a non-success HTTP status."""

    @property
    def status_code(self) -> Optional[int]:
        return self.details.get("status_code")


class ProtocolError(SoftLayerToolsError):
    """Raised when a response body is not the JSON shape we expect."""

    pass


class SafetyGateError(SoftLayerToolsError):
    """Raised when a purge would delete too much of the remote inventory."""

    pass


class HostNotFoundError(SoftLayerToolsError):
    """Raised when a hostname or id cannot be resolved to a server."""

    pass
