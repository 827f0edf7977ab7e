"""Domain errors and failure typing."""

from __future__ import annotations

UNEXPECTED_ERROR_CODE = "UNEXPECTED_ERROR"


class CollectorError(Exception):
    """Base class for collection failures. Every subclass is fatal to a run."""

    error_code = "COLLECTOR_ERROR"


class ConfigError(CollectorError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class FetchError(CollectorError):
    """Raised when a fetch does not yield a successful response."""

    error_code = "FETCH_ERROR"


class NetworkError(FetchError):
    """No response was received from the endpoint."""

    error_code = "NETWORK_ERROR"

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class HttpStatusError(FetchError):
    """A response arrived with a non-success status code."""

    error_code = "HTTP_STATUS_ERROR"

    def __init__(self, status: int, body: str = "", *, url: str | None = None) -> None:
        target = f" from {url}" if url else ""
        super().__init__(f"Server responded with HTTP status {status}{target}")
        self.status = status
        self.body = body


class ClientError(HttpStatusError):
    error_code = "CLIENT_ERROR"


class ServerError(HttpStatusError):
    error_code = "SERVER_ERROR"


class DecodeError(CollectorError):
    """Raised when a response body cannot be mapped onto a record."""

    error_code = "DECODE_ERROR"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Cannot decode record: {reason}")
        self.reason = reason


class PersistenceError(CollectorError):
    """Raised when a record cannot be written to the store."""

    error_code = "PERSISTENCE_ERROR"

    def __init__(self, message: str, *, key: str, conflict: bool = False) -> None:
        super().__init__(message)
        self.key = key
        self.conflict = conflict


def error_code_for(exc: BaseException) -> str:
    """Stable code for logs and summaries; non-collector exceptions share one code."""
    return getattr(exc, "error_code", UNEXPECTED_ERROR_CODE)
