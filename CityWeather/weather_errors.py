"""Weather lookup errors - one tagged type per failure cause."""
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Closed set of failure categories a lookup can end in."""
    UNKNOWN = "unknown"
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    UPSTREAM_HTTP = "upstream_http"
    NETWORK_UNAVAILABLE = "network_unavailable"
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"


class WeatherError(Exception):
    """Base exception for every failure of a weather lookup."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, city: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.city = city


class ValidationError(WeatherError):
    """Raised when the city name is empty after trimming."""
    kind = ErrorKind.VALIDATION


class RateLimitedError(WeatherError):
    """Raised when a lookup is attempted before the request delay has elapsed."""
    kind = ErrorKind.RATE_LIMITED


class UpstreamHttpError(WeatherError):
    """Raised when the weather API answers with a non-success status."""
    kind = ErrorKind.UPSTREAM_HTTP

    def __init__(self, status: int, message: str, city: Optional[str] = None):
        super().__init__(message, city=city)
        self.status = status


class UpstreamNotFoundError(UpstreamHttpError):
    """Raised when the weather API does not know the requested city (HTTP 404)."""
    kind = ErrorKind.NOT_FOUND


class NetworkError(WeatherError):
    """Raised when the request fails at the transport level."""
    kind = ErrorKind.NETWORK


class NetworkUnavailableError(NetworkError):
    """Raised when the weather API cannot be reached at all."""
    kind = ErrorKind.NETWORK_UNAVAILABLE


class MalformedResponseError(WeatherError):
    """Raised when a response body is not JSON or lacks the expected fields."""
    kind = ErrorKind.MALFORMED_RESPONSE
