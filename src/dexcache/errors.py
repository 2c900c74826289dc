"""Error types raised across the data-access layer.

Every failure that originates from the remote catalog is surfaced as a
``CatalogError`` carrying a machine-readable ``ErrorCode`` and a
``recoverable`` flag. Recoverable errors are the ones the fetcher retries
(server errors, network errors, timeouts); the rest are surfaced on the
first attempt.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    TRANSIENT = "TRANSIENT"
    TIMEOUT = "TIMEOUT"
    REQUEST_FAILED = "REQUEST_FAILED"
    INVALID_RESPONSE = "INVALID_RESPONSE"


_RECOVERABLE = frozenset({ErrorCode.TRANSIENT, ErrorCode.TIMEOUT})


class CatalogError(Exception):
    """Failure reading from the remote catalog."""

    def __init__(self, code: ErrorCode, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.url = url

    @property
    def recoverable(self) -> bool:
        return self.code in _RECOVERABLE

    def __repr__(self) -> str:
        return f"CatalogError(code={self.code.value!r}, message={self.message!r})"
