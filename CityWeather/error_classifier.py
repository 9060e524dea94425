"""Maps lookup failures to the message shown to the user."""
from typing import Optional

from weather_errors import ErrorKind, WeatherError


GENERIC_FAILURE = "Failed to get weather data"

_MESSAGES = {
    ErrorKind.UNKNOWN: GENERIC_FAILURE,
    ErrorKind.NETWORK_UNAVAILABLE: "Internet connection required",
    ErrorKind.NETWORK: "Network error. Check your connection.",
    ErrorKind.RATE_LIMITED: "Please wait before searching again",
    ErrorKind.UPSTREAM_HTTP: GENERIC_FAILURE,
    ErrorKind.MALFORMED_RESPONSE: GENERIC_FAILURE,
}


def classify(error: BaseException, city: Optional[str] = None) -> str:
    """
    Get the user-facing message for a failed lookup.

    Args:
        error: The exception that ended the lookup
        city: City being searched, used in "not found" messages

    Returns:
        Message for the error banner
    """
    if not isinstance(error, WeatherError):
        return GENERIC_FAILURE

    if error.kind is ErrorKind.NOT_FOUND:
        return f'"{city or error.city}" not found. Try another location.'
    if error.kind is ErrorKind.VALIDATION:
        return error.message
    return _MESSAGES.get(error.kind, GENERIC_FAILURE)
