"""Weather service - orchestrates a city lookup with caching and rate limiting."""
import logging
import time
from datetime import tzinfo
from typing import Any, Callable, Dict, Optional

from display import DisplaySurface
from error_classifier import classify
from layout import build_weather_view
from rate_limiter import RateLimiter
from weather_cache import WeatherCache
from weather_data import WeatherView
from weather_errors import MalformedResponseError, RateLimitedError, ValidationError, WeatherError
from weather_provider import WeatherProviderBase


def validate_payloads(current: Dict[str, Any], forecast: Dict[str, Any]) -> None:
    """
    Check that both responses carry the fields the renderer relies on.

    Raises:
        MalformedResponseError: If either payload is missing expected fields
    """
    if not current.get("main") or not current.get("weather"):
        raise MalformedResponseError("Invalid data received from weather service")
    if "list" not in forecast or not isinstance(forecast["list"], list):
        raise MalformedResponseError("Invalid data received from weather service")


class WeatherService:
    """
    Service that turns a typed city name into rendered weather.

    Fresh results are served from the cache without touching the network.
    Otherwise a global rate limit gates the fetch; every failure ends in a
    classified message on the display, never in an exception.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        display: DisplaySurface,
        cache: Optional[WeatherCache] = None,
        rate_limiter: Optional[RateLimiter] = None,
        clock: Callable[[], float] = time.monotonic,
        tz: Optional[tzinfo] = None
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to fetch from
            display: Surface to render results and errors to
            cache: Result cache (default: 5 minute TTL)
            rate_limiter: Request spacing gate (default: 1 second)
            clock: Monotonic time source in seconds
            tz: Timezone for forecast time labels (None uses local time)
        """
        self.provider = provider
        self.display = display
        self.cache = cache if cache is not None else WeatherCache()
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self.clock = clock
        self.tz = tz

    def request_weather(self, raw_input: str) -> None:
        """
        Look up weather for a city and show the result or an error.

        Args:
            raw_input: City name as typed by the user
        """
        city = (raw_input or "").strip()
        if not city:
            self._report(ValidationError("Please enter a city name"), city)
            return

        now = self.clock()
        entry = self.cache.get(city, now)
        if entry is not None:
            logging.info(f"Serving '{city}' from cache")
            self.display.render(self._build_view(entry.current, entry.forecast))
            return

        if not self.rate_limiter.ready(now):
            self._report(RateLimitedError("Please wait before searching again", city=city), city)
            return
        self.rate_limiter.record(now)

        self.display.set_loading(True)
        self.display.clear()
        try:
            current, forecast = self.provider.fetch(city)
            validate_payloads(current, forecast)
            view = self._build_view(current, forecast)
            self.cache.put(city, current, forecast, self.clock())
            logging.info(f"Weather for '{city}' fetched and cached")
            self.display.render(view)
        except WeatherError as e:
            if e.city is None:
                e.city = city
            self._report(e, city)
        except Exception as e:
            logging.exception(f"Unexpected error while fetching weather for '{city}': {e}")
            self.display.show_error(classify(e, city))
        finally:
            self.display.set_loading(False)

    def _build_view(self, current: Dict[str, Any], forecast: Dict[str, Any]) -> WeatherView:
        try:
            return build_weather_view(current, forecast, self.tz)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Failed to read weather data: {e}")

    def _report(self, error: WeatherError, city: str) -> None:
        message = classify(error, city)
        if isinstance(error, (ValidationError, RateLimitedError)):
            logging.warning(f"Lookup rejected: {error}")
        else:
            logging.error(f"Weather Error ({error.kind.value}) for '{city}': {error}")
        self.display.show_error(message)
