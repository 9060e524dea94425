"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple


CurrentConditions = Dict[str, Any]
Forecast = Dict[str, Any]


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def fetch(self, city: str) -> Tuple[CurrentConditions, Forecast]:
        """
        Fetch current conditions and the short-term forecast for a city.

        Args:
            city: Normalized city name

        Returns:
            Tuple of (current conditions, forecast) as decoded JSON objects

        Raises:
            WeatherError: If either request fails; there is no partial result
        """
        pass
