"""
Classified errors for every non-success outcome of a network request.

Status conventions: 0 = transport failure (DNS, refused connection, bad
payload), 408 = timeout, anything else is the HTTP status.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

NETWORK_ERROR_STATUS = 0
TIMEOUT_STATUS = 408
RATE_LIMITED_STATUS = 429


class ErrorKind(str, Enum):
    NETWORK = "network"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_FAULT = "server_fault"
    CLIENT_REJECTION = "client_rejection"


def classify_status(status: int) -> ErrorKind:
    if status == NETWORK_ERROR_STATUS:
        return ErrorKind.NETWORK
    if status == TIMEOUT_STATUS:
        return ErrorKind.TIMEOUT
    if status == RATE_LIMITED_STATUS:
        return ErrorKind.RATE_LIMITED
    if status >= 500:
        return ErrorKind.SERVER_FAULT
    return ErrorKind.CLIENT_REJECTION


class ApiError(RuntimeError):
    """Raised by ApiClient for network failures, timeouts and non-2xx responses."""

    def __init__(self, status: int, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.detail = detail

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"

    @property
    def kind(self) -> ErrorKind:
        return classify_status(self.status)

    @property
    def is_network_error(self) -> bool:
        return self.status == NETWORK_ERROR_STATUS

    @property
    def is_timeout(self) -> bool:
        return self.status == TIMEOUT_STATUS

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500

    @property
    def is_retryable(self) -> bool:
        return self.kind is not ErrorKind.CLIENT_REJECTION


class BatchAbortedError(RuntimeError):
    """A fail-fast batch stopped at its first failing job."""

    def __init__(self, index: int, error: Exception, partial: Any = None) -> None:
        super().__init__(f"Batch aborted: request {index} failed: {error}")
        self.index = index
        self.error = error
        self.partial = partial
