"""Tests for weather service."""
import pytest
from datetime import timezone
from weather_service import WeatherService, validate_payloads
from weather_provider import WeatherProviderBase
from weather_cache import WeatherCache
from rate_limiter import RateLimiter
from display import RegionDisplay
from weather_errors import MalformedResponseError, NetworkUnavailableError, UpstreamNotFoundError


class MockProvider(WeatherProviderBase):
    """Mock weather provider for testing."""

    def __init__(self, current=None, forecast=None, raise_error=None):
        self.current = current
        self.forecast = forecast
        self.raise_error = raise_error
        self.call_count = 0
        self.cities = []

    def fetch(self, city):
        self.call_count += 1
        self.cities.append(city)
        if self.raise_error:
            raise self.raise_error
        return self.current, self.forecast


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeTimer:
    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.cancelled = False

    def start(self):
        pass

    def cancel(self):
        self.cancelled = True


class RecordingDisplay(RegionDisplay):
    """Region display that also records the order of calls."""

    def __init__(self):
        super().__init__(timer_factory=FakeTimer)
        self.events = []
        self.errors = []
        self.views = []

    def render(self, view):
        self.events.append("render")
        self.views.append(view)
        super().render(view)

    def clear(self):
        self.events.append("clear")
        super().clear()

    def set_loading(self, loading):
        self.events.append(f"loading:{loading}")
        super().set_loading(loading)

    def show_error(self, message):
        self.events.append("error")
        self.errors.append(message)
        super().show_error(message)


def make_current(temp=300.15):
    return {
        "name": "London",
        "sys": {"country": "GB"},
        "main": {"temp": temp, "feels_like": 299.15, "humidity": 70},
        "weather": [{"description": "clear sky", "icon": "01d"}],
        "wind": {"speed": 4.1},
    }


def make_forecast(count=5):
    return {
        "list": [
            {
                "dt": 1700000000 + i * 10800,
                "main": {"temp": 280.15 + i},
                "weather": [{"description": "few clouds", "icon": "02d"}],
            }
            for i in range(count)
        ]
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def provider():
    return MockProvider(current=make_current(), forecast=make_forecast())


@pytest.fixture
def service(provider, display, clock):
    return WeatherService(
        provider,
        display,
        cache=WeatherCache(ttl_seconds=300),
        rate_limiter=RateLimiter(min_interval=1.0),
        clock=clock,
        tz=timezone.utc,
    )


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
def test_empty_input_rejected_without_fetch(service, provider, display, raw):
    """Test that blank input shows a validation error and makes no request."""
    service.request_weather(raw)

    assert provider.call_count == 0
    assert display.errors == ["Please enter a city name"]
    assert "loading:True" not in display.events
    assert service.rate_limiter.last_attempt is None


def test_successful_lookup_renders_and_caches(service, provider, display, clock):
    """Test the full fetch path."""
    service.request_weather("  London  ")

    assert provider.cities == ["London"]
    assert display.events == ["loading:True", "clear", "render", "loading:False"]
    assert display.regions["temperature"] == "27°C"
    assert display.error is None
    entry = service.cache.get("London", clock())
    assert entry is not None
    assert entry.fetched_at == clock()


def test_cache_hit_makes_no_request(service, provider, display, clock):
    """Test that a fresh cache entry is rendered without touching the network."""
    service.request_weather("London")
    clock.advance(0.1)  # well inside the rate-limit window
    display.events.clear()

    service.request_weather("London")

    assert provider.call_count == 1
    assert display.events == ["render"]
    assert display.errors == []


def test_cache_hit_does_not_touch_rate_limit(service, clock):
    service.request_weather("London")
    first_attempt = service.rate_limiter.last_attempt
    clock.advance(30)

    service.request_weather("London")

    assert service.rate_limiter.last_attempt == first_attempt


def test_expired_cache_refetches_and_overwrites(service, provider, clock):
    """Test that an entry older than the TTL triggers a new fetch."""
    service.request_weather("London")
    clock.advance(300)
    provider.current = make_current(temp=290.15)

    service.request_weather("London")

    assert provider.call_count == 2
    entry = service.cache.get("London", clock())
    assert entry.fetched_at == clock()
    assert entry.current["main"]["temp"] == 290.15


def test_second_request_within_delay_rate_limited(service, provider, display, clock):
    """Test that two uncached lookups inside the request delay are throttled."""
    service.request_weather("London")
    clock.advance(0.5)

    service.request_weather("Paris")

    assert provider.cities == ["London"]
    assert display.errors == ["Please wait before searching again"]
    assert "Paris" not in service.cache


def test_rejected_request_leaves_display_untouched(service, display, clock):
    service.request_weather("London")
    clock.advance(0.5)
    display.events.clear()

    service.request_weather("Paris")

    assert display.events == ["error"]
    assert display.regions["temperature"] == "27°C"


def test_request_after_delay_allowed(service, provider, clock):
    service.request_weather("London")
    clock.advance(1.0)

    service.request_weather("Paris")

    assert provider.cities == ["London", "Paris"]


def test_rate_limit_recorded_even_when_fetch_fails(service, provider, display, clock):
    """Test that a failed attempt still counts against the request delay."""
    provider.raise_error = NetworkUnavailableError("down")
    service.request_weather("London")
    clock.advance(0.5)
    provider.raise_error = None

    service.request_weather("London")

    assert provider.call_count == 1
    assert display.errors[-1] == "Please wait before searching again"


def test_missing_main_is_malformed_and_not_cached(service, provider, display, clock):
    """Test that a current-conditions payload without 'main' is rejected."""
    current = make_current()
    del current["main"]
    provider.current = current

    service.request_weather("London")

    assert display.errors == ["Failed to get weather data"]
    assert "London" not in service.cache
    assert display.events[-1] == "loading:False"


def test_missing_forecast_list_is_malformed(service, provider, display):
    provider.forecast = {"cod": "200"}

    service.request_weather("London")

    assert display.errors == ["Failed to get weather data"]
    assert "London" not in service.cache


def test_unreadable_forecast_item_is_malformed(service, provider, display):
    """Test that payloads the renderer cannot read are never cached."""
    provider.forecast = {"list": [{"dt": 1700000000}]}

    service.request_weather("London")

    assert display.errors == ["Failed to get weather data"]
    assert "London" not in service.cache


def test_not_found_names_the_city(service, provider, display):
    """Test that an upstream 404 is shown as an unknown city."""
    provider.raise_error = UpstreamNotFoundError(404, "city not found")

    service.request_weather("Atlantis")

    assert display.errors == ['"Atlantis" not found. Try another location.']
    assert provider.raise_error.city == "Atlantis"


def test_loading_cleared_on_failure(service, provider, display):
    provider.raise_error = NetworkUnavailableError("down")

    service.request_weather("London")

    assert display.events == ["loading:True", "clear", "error", "loading:False"]
    assert display.loading is False
    assert display.errors == ["Internet connection required"]


def test_unexpected_error_is_contained(service, provider, display):
    """Test that a non-weather exception still ends in a message, not a crash."""
    provider.raise_error = RuntimeError("boom")

    service.request_weather("London")

    assert display.errors == ["Failed to get weather data"]
    assert display.loading is False


def test_fetch_clears_previous_output(service, provider, display, clock):
    service.request_weather("London")
    clock.advance(2)
    provider.raise_error = UpstreamNotFoundError(404, "city not found")

    service.request_weather("Atlantis")

    assert display.regions["temperature"] == ""
    assert display.hourly == []


def test_forecast_truncated_to_five(service, provider, display):
    """Test that only the first five forecast items are shown, in order."""
    provider.forecast = make_forecast(count=8)

    service.request_weather("London")

    view = display.views[-1]
    assert len(view.hourly) == 5
    assert [entry.temperature_c for entry in view.hourly] == [7, 8, 9, 10, 11]


def test_validate_payloads_accepts_minimal_shape():
    validate_payloads({"main": {"temp": 280.0}, "weather": [{}]}, {"list": []})


@pytest.mark.parametrize("current,forecast", [
    ({"weather": [{}]}, {"list": []}),
    ({"main": {"temp": 280.0}}, {"list": []}),
    ({"main": {"temp": 280.0}, "weather": [{}]}, {}),
    ({"main": {"temp": 280.0}, "weather": [{}]}, {"list": "nope"}),
])
def test_validate_payloads_rejects_missing_fields(current, forecast):
    with pytest.raises(MalformedResponseError):
        validate_payloads(current, forecast)


@pytest.mark.parametrize("current_patch,forecast", [
    ({}, {"list": ["bad"]}),
    ({"sys": None}, make_forecast()),
])
def test_non_object_fields_are_malformed(service, provider, display, caplog, current_patch, forecast):
    """Test that fields of the wrong type are reported as malformed data."""
    current = make_current()
    current.update(current_patch)
    provider.current = current
    provider.forecast = forecast

    service.request_weather("London")

    assert display.errors == ["Failed to get weather data"]
    assert "London" not in service.cache
    assert "malformed_response" in caplog.text
    assert "Unexpected error" not in caplog.text
