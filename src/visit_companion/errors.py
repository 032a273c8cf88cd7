from __future__ import annotations


class VisitCompanionError(Exception):
    """Base class for errors raised by visit_companion."""


class ConfigurationError(VisitCompanionError):
    """Raised when the configuration cannot produce a working backend."""


class ProxyError(VisitCompanionError):
    """Raised when the serverless proxy answers with a non-success status."""

    def __init__(
        self, status_code: int, error_code: str | None, message: str
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        label = f"HTTP {status_code}"
        if error_code:
            label = f"{label} {error_code}"
        super().__init__(f"{label}: {message}")


class ResponseParseError(VisitCompanionError):
    """Raised when model output does not contain the expected JSON payload."""
