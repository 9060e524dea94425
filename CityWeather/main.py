"""Terminal weather lookup - type a city, get current conditions and the next hours."""
import argparse
import logging
import os
import signal
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional

from dotenv import load_dotenv

from display import ConsoleDisplay, DEFAULT_ERROR_DURATION
from openweather_provider import OpenWeatherProvider
from rate_limiter import RateLimiter, DEFAULT_REQUEST_DELAY
from weather_cache import WeatherCache, DEFAULT_TTL_SECONDS
from weather_service import WeatherService

PROMPT = "City: "
QUIT_WORDS = {"quit", "exit"}


@dataclass
class WeatherConfig:
    api_key: str
    base_url: str = OpenWeatherProvider.BASE_URL


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("City weather lookup")
    parser.add_argument("cities", nargs="*", help="Cities to look up; prompts interactively if none")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--cache-ttl", type=float, default=DEFAULT_TTL_SECONDS)
    parser.add_argument("--request-delay", type=float, default=DEFAULT_REQUEST_DELAY,
                        help="Minimum seconds between API requests")
    parser.add_argument("--forecast-count", type=int, default=5)
    parser.add_argument("--error-duration", type=float, default=DEFAULT_ERROR_DURATION,
                        help="Seconds an error message stays visible")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def load_config() -> WeatherConfig:
    load_dotenv()
    api_key = os.getenv("OPENWEATHER_API_KEY")
    base_url = os.getenv("OPENWEATHER_BASE_URL", OpenWeatherProvider.BASE_URL)

    if not api_key:
        raise SystemExit("Missing OPENWEATHER_API_KEY in environment")

    logging.info("Configuration loaded: base_url=%s", base_url)
    return WeatherConfig(api_key=api_key, base_url=base_url)


def build_weather_service(config: WeatherConfig, args: argparse.Namespace) -> WeatherService:
    provider = OpenWeatherProvider(
        api_key=config.api_key,
        base_url=config.base_url,
        forecast_count=args.forecast_count,
        timeout=args.timeout,
    )
    service = WeatherService(
        provider=provider,
        display=ConsoleDisplay(error_duration=args.error_duration),
        cache=WeatherCache(ttl_seconds=args.cache_ttl),
        rate_limiter=RateLimiter(min_interval=args.request_delay),
    )
    logging.info("Weather service ready (cache ttl=%ss, request delay=%ss)", args.cache_ttl, args.request_delay)
    return service


def read_cities(stream=None) -> Iterable[str]:
    """Yield one city per line until EOF or a quit word."""
    stream = stream or sys.stdin
    interactive = stream.isatty()
    while True:
        if interactive:
            sys.stdout.write(PROMPT)
            sys.stdout.flush()
        line = stream.readline()
        if not line:
            return
        if line.strip().lower() in QUIT_WORDS:
            return
        yield line


def run(service: WeatherService, cities: Iterable[str]) -> None:
    for city in cities:
        service.request_weather(city)


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config()
    service = build_weather_service(config, args)

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        run(service, args.cities or read_cities())
    except KeyboardInterrupt:
        logging.info("Stopping weather lookup")


if __name__ == "__main__":
    main()
