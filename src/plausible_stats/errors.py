"""
Exceptions raised by the Plausible Stats client.

Network faults (connection refused, DNS, TLS, timeouts) are not wrapped:
they surface as the ``httpx.TransportError`` subclass httpx raised, since
no HTTP status exists for them.
"""
from typing import Any


class PlausibleClientError(Exception):
    """Base class for errors raised by this package."""
    pass


class ConfigError(PlausibleClientError, ValueError):
    """Raised when client configuration is invalid."""
    pass


class PlausibleApiError(PlausibleClientError):
    """The Stats API answered with a non-success HTTP status.

    Usage:
        try:
            await client.query(params)
        except PlausibleApiError as e:
            print(f"API Error ({e.status_code}): {e.message}")
            if e.is_rate_limited:
                ...
    """

    def __init__(self, message: str, status_code: int, response: Any = None):
        """
        Args:
            message: Human-readable error message from the API
            status_code: HTTP status code of the response
            response: Raw parsed response body
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"

    def __repr__(self) -> str:
        return (
            f"PlausibleApiError(message={self.message!r}, "
            f"status_code={self.status_code!r})"
        )
