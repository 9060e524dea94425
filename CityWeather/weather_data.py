"""Display model - what the renderer produces for the display surface."""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class HourlyEntry:
    """One forecast slot in the hourly strip."""
    time_label: str  # local time, e.g. "15:00"
    icon_url: str
    description: str  # e.g. "light rain"
    temperature_c: int


@dataclass(frozen=True)
class WeatherView:
    """Everything shown for one lookup, independent of how it is drawn."""
    location: str  # e.g. "London, GB"
    description: str
    temperature_c: int
    humidity: int  # percentage
    wind_speed: float  # m/s
    feels_like_c: int
    icon_url: str
    icon_alt: str
    hourly: List[HourlyEntry] = field(default_factory=list)
