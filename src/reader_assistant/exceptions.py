"""Error taxonomy shared by the adapters, the orchestrator and the API layer.

Every error carries the HTTP status the API layer should answer with; the
exception handler in ``main.py`` renders them as ``{"error": message}``.
"""

from __future__ import annotations


class ReaderAssistantError(Exception):
    """Base exception for gateway errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ReaderAssistantError):
    """Raised when a request is missing required fields or carries invalid values."""

    status_code = 400


class ConfigurationError(ReaderAssistantError):
    """Raised when a provider credential is not configured."""


class UpstreamProviderError(ReaderAssistantError):
    """Raised when an upstream API answers with a non-2xx status."""

    def __init__(self, service: str, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.service = service
        self.upstream_status = upstream_status


class MalformedUpstreamResponse(UpstreamProviderError):
    """Raised when a 2xx upstream body does not have the expected shape."""


class TransportError(ReaderAssistantError):
    """Raised on network failures and timeouts talking to an upstream API."""

    def __init__(self, service: str, message: str):
        super().__init__(message)
        self.service = service


class QueryCancelledError(ReaderAssistantError):
    """Raised when the caller cancels a query before it completes."""

    status_code = 499

    def __init__(self, message: str = "Request cancelled"):
        super().__init__(message)
