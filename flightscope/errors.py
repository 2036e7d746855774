from __future__ import annotations


class FlightScopeError(RuntimeError):
    """Base class for errors raised while talking to the flight-shopping API."""


class ValidationError(FlightScopeError, ValueError):
    """Caller input rejected before any network call."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class AuthenticationError(FlightScopeError):
    """Token exchange failed or the upstream kept answering 401."""


class InvalidSearchError(FlightScopeError):
    """Upstream rejected the search parameters (HTTP 400)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class SearchFailedError(FlightScopeError):
    """Any other upstream or network failure."""


__all__ = [
    "FlightScopeError",
    "ValidationError",
    "AuthenticationError",
    "InvalidSearchError",
    "SearchFailedError",
]
