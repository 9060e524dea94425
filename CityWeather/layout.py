"""Layout logic for weather display - pure functions for testability."""
import math
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional

from weather_data import HourlyEntry, WeatherView


KELVIN_OFFSET = 273.15
HOURLY_LIMIT = 5
ICON_URL = "https://openweathermap.org/img/wn/{icon}{suffix}.png"


def kelvin_to_celsius(kelvin: float) -> int:
    """
    Convert an API temperature (Kelvin) to whole degrees Celsius.

    Halves round up, so -0.5 becomes 0 and 20.5 becomes 21.

    Args:
        kelvin: Temperature in Kelvin

    Returns:
        Rounded temperature in Celsius
    """
    return int(math.floor(kelvin - KELVIN_OFFSET + 0.5))


def format_temperature(celsius: int) -> str:
    return f"{celsius}°C"


def icon_url(icon: str, large: bool = False) -> str:
    return ICON_URL.format(icon=icon, suffix="@2x" if large else "")


def format_hour(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """Format a UNIX timestamp as local wall-clock time (HH:MM)."""
    if tz is None:
        return datetime.fromtimestamp(timestamp).strftime("%H:%M")
    return datetime.fromtimestamp(timestamp, tz).strftime("%H:%M")


def build_hourly_forecast(
    forecast: Dict[str, Any],
    tz: Optional[tzinfo] = None,
    limit: int = HOURLY_LIMIT
) -> List[HourlyEntry]:
    """
    Build the hourly strip from a forecast response.

    Only the first `limit` items are used, in the order the API returned them.

    Args:
        forecast: Forecast API response (must contain "list")
        tz: Timezone for the time labels (None uses the local timezone)
        limit: Maximum number of entries

    Returns:
        List of HourlyEntry, at most `limit` long
    """
    entries = []
    for item in forecast["list"][:limit]:
        condition = (item.get("weather") or [{}])[0]
        entries.append(HourlyEntry(
            time_label=format_hour(item["dt"], tz),
            icon_url=icon_url(condition.get("icon", "")),
            description=condition.get("description", ""),
            temperature_c=kelvin_to_celsius(item["main"]["temp"]),
        ))
    return entries


def build_weather_view(
    current: Dict[str, Any],
    forecast: Dict[str, Any],
    tz: Optional[tzinfo] = None
) -> WeatherView:
    """
    Map validated API responses to the display model.

    Args:
        current: Current conditions response (must contain "main" and "weather")
        forecast: Forecast response (must contain "list")
        tz: Timezone for forecast time labels

    Returns:
        WeatherView ready for a display surface
    """
    main = current["main"]
    condition = current["weather"][0]
    country = current.get("sys", {}).get("country")
    name = current.get("name", "")
    location = f"{name}, {country}" if country else name

    return WeatherView(
        location=location,
        description=condition.get("description", ""),
        temperature_c=kelvin_to_celsius(main["temp"]),
        humidity=int(main.get("humidity", 0)),
        wind_speed=float(current.get("wind", {}).get("speed", 0.0)),
        feels_like_c=kelvin_to_celsius(main.get("feels_like", main["temp"])),
        icon_url=icon_url(condition.get("icon", ""), large=True),
        icon_alt=condition.get("description", ""),
        hourly=build_hourly_forecast(forecast, tz),
    )
