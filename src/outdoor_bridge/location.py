"""Location specifiers for OpenWeatherMap current weather queries."""

import math
from dataclasses import dataclass

from .config import WeatherConfig
from .errors import ConfigurationError


@dataclass(frozen=True)
class CityId:
    """OpenWeatherMap numeric city ID (recommended by the provider)."""

    city_id: str

    def query_params(self) -> dict[str, str]:
        return {"id": self.city_id}

    def __str__(self) -> str:
        return f"city:{self.city_id}"


@dataclass(frozen=True)
class CityName:
    """City name with optional ISO 3166 country code."""

    city: str
    country: str = ""

    def query_params(self) -> dict[str, str]:
        if self.country:
            return {"q": f"{self.city},{self.country}"}
        return {"q": self.city}

    def __str__(self) -> str:
        return ",".join(p for p in (self.city, self.country) if p)


@dataclass(frozen=True)
class ZipCode:
    """Postal code with optional ISO 3166 country code."""

    zip_code: str
    country: str = ""

    def query_params(self) -> dict[str, str]:
        if self.country:
            return {"zip": f"{self.zip_code},{self.country}"}
        return {"zip": self.zip_code}

    def __str__(self) -> str:
        return "zip:" + ",".join(p for p in (self.zip_code, self.country) if p)


@dataclass(frozen=True)
class Coordinates:
    """Geographic coordinates in decimal degrees."""

    latitude: float
    longitude: float

    def query_params(self) -> dict[str, str]:
        return {"lat": str(self.latitude), "lon": str(self.longitude)}

    def __str__(self) -> str:
        return f"{self.latitude:.4f},{self.longitude:.4f}"


LocationSpecifier = CityId | CityName | ZipCode | Coordinates


def location_from_config(config: WeatherConfig) -> LocationSpecifier:
    """Build the single configured location.

    Args:
        config: Weather source configuration.

    Returns:
        The location to poll.

    Raises:
        ConfigurationError: If no location or more than one is configured,
            or if coordinates are out of range.
    """
    candidates: list[LocationSpecifier] = []

    if config.city_id.strip():
        city_id = config.city_id.strip()
        if not city_id.isdigit():
            raise ConfigurationError(f"OWM_CITY_ID must be numeric: {city_id!r}")
        candidates.append(CityId(city_id))

    if config.city.strip():
        candidates.append(CityName(config.city.strip(), config.country.strip()))

    if config.zip_code.strip():
        candidates.append(ZipCode(config.zip_code.strip(), config.country.strip()))

    if config.latitude is not None or config.longitude is not None:
        if config.latitude is None or config.longitude is None:
            raise ConfigurationError("OWM_LATITUDE and OWM_LONGITUDE must be set together")
        lat, lon = config.latitude, config.longitude
        if not (math.isfinite(lat) and -90.0 <= lat <= 90.0):
            raise ConfigurationError(f"OWM_LATITUDE out of range: {lat}")
        if not (math.isfinite(lon) and -180.0 <= lon <= 180.0):
            raise ConfigurationError(f"OWM_LONGITUDE out of range: {lon}")
        candidates.append(Coordinates(lat, lon))

    if not candidates:
        raise ConfigurationError(
            "No location configured: set OWM_CITY_ID, OWM_CITY, OWM_ZIP_CODE "
            "or OWM_LATITUDE/OWM_LONGITUDE"
        )
    if len(candidates) > 1:
        raise ConfigurationError(
            "Exactly one location must be configured, got: "
            + ", ".join(str(c) for c in candidates)
        )
    return candidates[0]
