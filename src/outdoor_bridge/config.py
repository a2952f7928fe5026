"""Configuration settings loaded from environment variables."""

import math

import httpx
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .errors import ConfigurationError
from .schemas import PressureUnit, TemperatureUnit


class WeatherConfig(BaseSettings):
    """OpenWeatherMap source configuration.

    Exactly one location form must be set: city_id, city (with optional
    country), zip_code (with optional country), or latitude and longitude.
    """

    api_key: str = ""
    base_url: str = "https://api.openweathermap.org/data/2.5"
    city_id: str = ""
    city: str = ""
    country: str = ""
    zip_code: str = ""
    latitude: float | None = None
    longitude: float | None = None

    model_config = {"env_prefix": "OWM_"}


class GatewayConfig(BaseSettings):
    """IoT gateway publish endpoint configuration."""

    url: str = ""
    token: str = ""  # Sent as a bearer token when set

    model_config = {"env_prefix": "GATEWAY_"}


class PublishingConfig(BaseSettings):
    """Sensor naming and units for published readings."""

    device_name: str = "outdoor"
    topic_prefix: str = ""
    channel_thermometer: str = "0:0"
    channel_hygrometer: str = "0:0"
    channel_barometer: str = "0:0"
    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
    pressure_unit: PressureUnit = PressureUnit.HPA

    model_config = {"env_prefix": "PUBLISH_"}


class RetryConfig(BaseSettings):
    """Retry policy parameters shared by both HTTP clients."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay_seconds: float = 30.0

    model_config = {"env_prefix": "RETRY_"}


class Settings(BaseSettings):
    """Application settings combining all configs."""

    log_level: str = "INFO"
    interval_seconds: float = 600  # OpenWeatherMap updates at most every 10 minutes
    http_timeout_seconds: float = 10.0
    stale_threshold_minutes: float = 60
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    publishing: PublishingConfig = Field(default_factory=PublishingConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    model_config = {"env_prefix": "BRIDGE_"}


def get_settings() -> Settings:
    """Load settings from environment.

    Raises:
        ConfigurationError: If a variable cannot be parsed.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _check_http_url(name: str, value: str) -> None:
    """Reject URLs that could never be reached."""
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"{name} is not a valid URL: {value!r}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"{name} must be an absolute http(s) URL: {value!r}")


def validate_settings(settings: Settings) -> Settings:
    """Check settings that must hold before the first poll cycle.

    Args:
        settings: Loaded settings.

    Returns:
        The same settings object, for chaining.

    Raises:
        ConfigurationError: On the first problem found.
    """
    for name in ("interval_seconds", "http_timeout_seconds", "stale_threshold_minutes"):
        if not math.isfinite(getattr(settings, name)):
            raise ConfigurationError(f"{name} must be a finite number")
    if settings.interval_seconds <= 0:
        raise ConfigurationError("interval_seconds must be positive")
    if settings.http_timeout_seconds <= 0:
        raise ConfigurationError("http_timeout_seconds must be positive")
    if settings.http_timeout_seconds >= settings.interval_seconds:
        raise ConfigurationError(
            f"http_timeout_seconds ({settings.http_timeout_seconds}) must be shorter "
            f"than interval_seconds ({settings.interval_seconds})"
        )
    if settings.stale_threshold_minutes <= 0:
        raise ConfigurationError("stale_threshold_minutes must be positive")

    if not settings.weather.api_key.strip():
        raise ConfigurationError("OWM_API_KEY is required")
    _check_http_url("OWM_BASE_URL", settings.weather.base_url)

    if not settings.gateway.url.strip():
        raise ConfigurationError("GATEWAY_URL is required")
    _check_http_url("GATEWAY_URL", settings.gateway.url)

    if not settings.publishing.device_name.strip():
        raise ConfigurationError("PUBLISH_DEVICE_NAME must not be empty")

    return settings
