"""OpenWeather Current Weather + 5 day/3 hour Forecast API provider implementation."""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional, Tuple

import requests

from weather_provider import WeatherProviderBase, CurrentConditions, Forecast
from weather_errors import (
    MalformedResponseError,
    NetworkError,
    NetworkUnavailableError,
    UpstreamHttpError,
    UpstreamNotFoundError,
)


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the free OpenWeather 2.5 endpoints.

    Current conditions: https://openweathermap.org/current
    Forecast: https://openweathermap.org/forecast5

    Both endpoints are queried by city name and in parallel. Temperatures are
    requested in the API's default unit (Kelvin) and converted for display.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        forecast_count: int = 5,
        timeout: Optional[float] = None
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            base_url: API root, without trailing slash
            forecast_count: Number of 3-hour forecast items to request
            timeout: HTTP request timeout in seconds (None waits indefinitely)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.forecast_count = forecast_count
        self.timeout = timeout

    def fetch(self, city: str) -> Tuple[CurrentConditions, Forecast]:
        """
        Fetch current conditions and forecast for city concurrently.

        Both requests always run to completion. If either fails, the first
        failure (current conditions before forecast) is raised.

        Raises:
            WeatherError: If either request fails
        """
        current_params = {"q": city, "appid": self.api_key}
        forecast_params = {"q": city, "appid": self.api_key, "cnt": self.forecast_count}

        logging.info(f"Fetching current conditions and forecast for '{city}'")
        with ThreadPoolExecutor(max_workers=2) as pool:
            current_future = pool.submit(self._get, f"{self.base_url}/weather", current_params)
            forecast_future = pool.submit(self._get, f"{self.base_url}/forecast", forecast_params)
            current = current_future.result()
            forecast = forecast_future.result()

        logging.debug(f"Current conditions keys: {list(current.keys())}")
        logging.debug(f"Forecast keys: {list(forecast.keys())}")
        return current, forecast

    def _get(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Issue one GET request and run its response through the handler."""
        try:
            logging.info(f"Making OpenWeather API request: {url}")
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            logging.error(f"Could not reach {url}: {e}")
            raise NetworkUnavailableError(f"Network unavailable: {e}")
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise NetworkError(f"Network error: {e}")

        logging.info(f"API response status: {response.status_code}")
        return self._handle_response(response)

    def _handle_response(self, response: requests.Response) -> Dict[str, Any]:
        """
        Decode a response body, raising a typed error for non-success responses.

        Raises:
            UpstreamNotFoundError: HTTP 404
            UpstreamHttpError: Any other non-success status
            MalformedResponseError: Success status with an undecodable body
        """
        if not response.ok:
            message = self._error_message(response)
            logging.error(f"API request failed with status {response.status_code}: {message}")
            if response.status_code == 404:
                raise UpstreamNotFoundError(response.status_code, message)
            raise UpstreamHttpError(response.status_code, message)

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Failed to parse API response: {e}")
            raise MalformedResponseError(f"Failed to parse response: {e}")

        if not isinstance(data, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Message from the structured error body, or a generic one from the status."""
        try:
            error_data = response.json()
        except ValueError:
            logging.debug(f"Non-JSON error response body: {response.text[:200]}")
            error_data = {}

        if isinstance(error_data, dict) and error_data.get("message"):
            return str(error_data["message"])
        return f"HTTP error! status: {response.status_code}"
