"""Display surface abstraction - the regions a lookup writes its results to."""
import logging
import sys
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, TextIO

from layout import format_temperature
from weather_data import WeatherView


DEFAULT_ERROR_DURATION = 5.0  # seconds the error banner stays up


class DisplaySurface(ABC):
    """Abstract display interface, written to but never read from by the lookup logic."""

    @abstractmethod
    def render(self, view: WeatherView) -> None:
        """
        Show a lookup result.

        Args:
            view: Display model built from validated API responses
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all weather output and hide the error banner."""
        pass

    @abstractmethod
    def set_loading(self, loading: bool) -> None:
        """Show or hide the loading indicator."""
        pass

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Show a transient error banner."""
        pass


class RegionDisplay(DisplaySurface):
    """
    Display that keeps every region's content in memory.

    Useful on its own for tests and as the base of the console display.
    The error banner is dismissed automatically after `error_duration`
    seconds; a newer error replaces the pending dismissal of an older one.
    """

    REGIONS = ("temperature", "weather_info", "icon", "extra_info", "hourly")

    def __init__(
        self,
        error_duration: float = DEFAULT_ERROR_DURATION,
        timer_factory: Callable[[float, Callable[[], None]], threading.Timer] = threading.Timer
    ):
        """
        Initialize region display.

        Args:
            error_duration: Seconds before the error banner is dismissed
            timer_factory: Builds the dismissal timer (threading.Timer signature)
        """
        self.error_duration = error_duration
        self._timer_factory = timer_factory
        self._timer = None
        self._lock = threading.Lock()

        self.regions: Dict[str, str] = {name: "" for name in self.REGIONS}
        self.hourly: List[str] = []
        self.loading = False
        self.error: Optional[str] = None

    def render(self, view: WeatherView) -> None:
        self.regions["temperature"] = format_temperature(view.temperature_c)
        self.regions["weather_info"] = f"{view.location}\n{view.description}"
        self.regions["icon"] = view.icon_url
        self.regions["extra_info"] = "\n".join([
            f"Humidity: {view.humidity}%",
            f"Wind: {view.wind_speed} m/s",
            f"Feels like: {format_temperature(view.feels_like_c)}",
        ])
        self.hourly = [
            f"{entry.time_label}  {format_temperature(entry.temperature_c)}  {entry.description}"
            for entry in view.hourly
        ]
        self.regions["hourly"] = "\n".join(self.hourly)

    def clear(self) -> None:
        for name in self.REGIONS:
            self.regions[name] = ""
        self.hourly = []
        self.dismiss_error()

    def set_loading(self, loading: bool) -> None:
        self.loading = loading

    def show_error(self, message: str) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self.error = message
            timer = self._timer_factory(self.error_duration, lambda: self._expire(timer))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _expire(self, timer) -> None:
        # A timer already firing when it was replaced must not hide the newer error.
        with self._lock:
            if timer is not self._timer:
                return
            self._timer = None
            self.error = None

    def dismiss_error(self) -> None:
        """Hide the error banner and cancel any pending dismissal."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self.error = None


class ConsoleDisplay(RegionDisplay):
    """Region display that also prints each update to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, **kwargs):
        super().__init__(**kwargs)
        self.stream = stream or sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def render(self, view: WeatherView) -> None:
        super().render(view)
        lines = [
            "",
            f"  {self.regions['temperature']}  {view.location}",
            f"  {view.description}",
            *(f"  {line}" for line in self.regions["extra_info"].splitlines()),
        ]
        if self.hourly:
            lines.append("  Next hours:")
            lines.extend(f"    {line}" for line in self.hourly)
        lines.append("")
        self._write("\n".join(lines))

    def set_loading(self, loading: bool) -> None:
        super().set_loading(loading)
        if loading:
            self._write("Loading...")

    def show_error(self, message: str) -> None:
        super().show_error(message)
        logging.debug(f"Error banner shown for {self.error_duration}s: {message}")
        self._write(f"! {message}")
