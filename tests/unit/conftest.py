"""Unit test fixtures - mocks and sample data."""

from datetime import datetime, timezone

import pytest

from outdoor_bridge.config import GatewayConfig, PublishingConfig, WeatherConfig
from outdoor_bridge.location import CityId
from outdoor_bridge.schemas import Observation

OWM_BASE_URL = "https://owm.test/data/2.5"


@pytest.fixture
def observed_at() -> datetime:
    """Observation timestamp used across tests."""
    return datetime(2024, 1, 15, 11, 50, tzinfo=timezone.utc)


@pytest.fixture
def sample_owm_response(observed_at: datetime) -> dict:
    """Trimmed OpenWeatherMap current weather response (units=metric)."""
    return {
        "coord": {"lon": 14.42, "lat": 50.09},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "base": "stations",
        "main": {
            "temp": 15.2,
            "feels_like": 14.6,
            "temp_min": 13.9,
            "temp_max": 16.1,
            "pressure": 1013,
            "humidity": 80,
        },
        "visibility": 10000,
        "wind": {"speed": 3.6, "deg": 240},
        "clouds": {"all": 0},
        "dt": int(observed_at.timestamp()),
        "sys": {"country": "CZ", "sunrise": 1705301112, "sunset": 1705332488},
        "id": 3067696,
        "name": "Prague",
        "cod": 200,
    }


@pytest.fixture
def sample_observation(observed_at: datetime) -> Observation:
    """Valid observation matching sample_owm_response."""
    return Observation(
        temperature_celsius=15.2,
        humidity_percent=80.0,
        pressure_hpa=1013.0,
        observed_at=observed_at,
        source_location="city:3067696",
    )


@pytest.fixture
def location(sample_city_id: str) -> CityId:
    return CityId(sample_city_id)


@pytest.fixture
def weather_config(sample_api_key: str) -> WeatherConfig:
    """Weather configuration for testing."""
    return WeatherConfig(api_key=sample_api_key, base_url=OWM_BASE_URL)


@pytest.fixture
def gateway_config(gateway_url: str) -> GatewayConfig:
    """Gateway configuration for testing."""
    return GatewayConfig(url=gateway_url, token="secret-token")


@pytest.fixture
def publishing_config() -> PublishingConfig:
    """Publishing configuration with default naming."""
    return PublishingConfig(device_name="outdoor")
