"""
Exceptions raised by the bgmtv client.

Every error derives from BangumiError so callers can catch the whole family
in one place. Nothing in the library retries; the caller owns that policy.
"""

from typing import Any


class BangumiError(Exception):
    """Base exception for client errors."""

    pass


class ConfigError(BangumiError):
    """Raised when the client configuration is invalid or incomplete."""

    pass


class TransportError(BangumiError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, message: str, method: str | None = None, url: str | None = None):
        super().__init__(message)
        self.method = method
        self.url = url


class ApiError(BangumiError):
    """
    Raised when the service answers with a non-success status.

    Attributes:
        status: HTTP status code
        message: Service-provided description, or the HTTP reason phrase
        title: Short error title from the service body, if any
        details: Extra error context from the service body, if any
    """

    def __init__(
        self,
        status: int,
        message: str,
        title: str | None = None,
        details: Any = None,
        method: str | None = None,
        url: str | None = None,
    ):
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message
        self.title = title
        self.details = details
        self.method = method
        self.url = url

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500


class DecodeError(BangumiError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []
