"""Main entry point for the outdoor weather bridge daemon."""

import argparse
import asyncio
import logging
import signal
import sys
from typing import NoReturn

import httpx

from . import __version__
from .clients import GatewayClient, OpenWeatherMapClient
from .config import Settings, get_settings, validate_settings
from .errors import ConfigurationError
from .location import LocationSpecifier, location_from_config
from .mapper import SensorMapper
from .monitor import StalenessMonitor
from .retry import RetryPolicy
from .scheduler import PollScheduler

logger = logging.getLogger(__name__)

EXIT_CONFIGURATION_ERROR = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    # Reduce noise from httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def handle_shutdown(signum: int, shutdown_event: asyncio.Event) -> None:
    """Handle shutdown signals gracefully."""
    sig_name = signal.Signals(signum).name
    logger.info("Received %s, initiating shutdown...", sig_name)
    shutdown_event.set()


def build_scheduler(
    settings: Settings,
    location: LocationSpecifier,
    retry_policy: RetryPolicy,
    http_client: httpx.AsyncClient,
    shutdown_event: asyncio.Event,
) -> PollScheduler:
    """Wire clients, mapper and monitor into a scheduler sharing one HTTP client."""
    timeout = settings.http_timeout_seconds
    return PollScheduler(
        weather_client=OpenWeatherMapClient(settings.weather, timeout=timeout, http_client=http_client),
        gateway_client=GatewayClient(settings.gateway, timeout=timeout, http_client=http_client),
        mapper=SensorMapper(settings.publishing),
        location=location,
        interval_seconds=settings.interval_seconds,
        retry_policy=retry_policy,
        monitor=StalenessMonitor(settings.stale_threshold_minutes),
        shutdown_event=shutdown_event,
    )


async def run_bridge(
    settings: Settings,
    location: LocationSpecifier,
    retry_policy: RetryPolicy,
    run_once: bool = False,
) -> None:
    """Run the poll loop until a shutdown signal arrives.

    Args:
        settings: Validated application settings.
        location: Location to poll.
        retry_policy: Retry policy for fetch and publish.
        run_once: If True, run a single cycle and exit.
    """
    shutdown_event = asyncio.Event()

    # Set up signal handlers
    loop = asyncio.get_running_loop()
    signals = (signal.SIGTERM, signal.SIGINT)
    for sig in signals:
        loop.add_signal_handler(sig, lambda s=sig: handle_shutdown(s, shutdown_event))

    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            headers={"User-Agent": f"outdoor-bridge/{__version__}"},
        ) as http_client:
            scheduler = build_scheduler(settings, location, retry_policy, http_client, shutdown_event)
            await scheduler.run(once=run_once)
    finally:
        for sig in signals:
            loop.remove_signal_handler(sig)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Publishes current weather from OpenWeatherMap to an IoT gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Poll continuously using environment configuration
  outdoor-bridge

  # Poll every 15 minutes
  outdoor-bridge --interval 900

  # Run one cycle and exit (useful for testing or cron)
  outdoor-bridge --once

Environment Variables:
  OWM_API_KEY             OpenWeatherMap API key (required)
  OWM_CITY_ID             OpenWeatherMap city ID (or OWM_CITY, OWM_ZIP_CODE,
                          OWM_LATITUDE/OWM_LONGITUDE)
  GATEWAY_URL             IoT gateway publish endpoint (required)
  GATEWAY_TOKEN           Bearer token for the gateway
  BRIDGE_INTERVAL_SECONDS Polling interval (default: 600)
  PUBLISH_DEVICE_NAME     Device name used in sensor IDs (default: outdoor)
  RETRY_MAX_ATTEMPTS      Attempts per fetch/publish (default: 3)
        """,
    )

    parser.add_argument(
        "--interval",
        type=float,
        help="Polling interval in seconds (overrides BRIDGE_INTERVAL_SECONDS)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: BRIDGE_LOG_LEVEL or INFO)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def load_configuration(
    args: argparse.Namespace,
) -> tuple[Settings, LocationSpecifier, RetryPolicy]:
    """Load and validate everything needed before the first cycle.

    Raises:
        ConfigurationError: If any setting is invalid.
    """
    settings = get_settings()
    if args.interval is not None:
        settings = settings.model_copy(update={"interval_seconds": args.interval})
    validate_settings(settings)
    location = location_from_config(settings.weather)
    retry_policy = RetryPolicy.from_config(settings.retry)
    return settings, location, retry_policy


def main() -> NoReturn:
    """Main entry point."""
    args = parse_args()

    setup_logging(args.log_level or "INFO")

    try:
        settings, location, retry_policy = load_configuration(args)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(EXIT_CONFIGURATION_ERROR)

    if args.log_level is None:
        setup_logging(settings.log_level)

    logger.info("Outdoor bridge starting")
    logger.info("Publishing to gateway: %s", settings.gateway.url)

    try:
        asyncio.run(run_bridge(settings, location, retry_policy, run_once=args.once))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    logger.info("Shutdown complete")
    sys.exit(0)


if __name__ == "__main__":
    main()
