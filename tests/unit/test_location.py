"""Tests for location specifiers."""

import pytest

from outdoor_bridge.config import WeatherConfig
from outdoor_bridge.errors import ConfigurationError
from outdoor_bridge.location import (
    CityId,
    CityName,
    Coordinates,
    ZipCode,
    location_from_config,
)


class TestQueryParams:
    def test_city_id(self):
        assert CityId("3067696").query_params() == {"id": "3067696"}

    def test_city_name(self):
        assert CityName("Prague").query_params() == {"q": "Prague"}
        assert CityName("Prague", "CZ").query_params() == {"q": "Prague,CZ"}

    def test_zip_code(self):
        assert ZipCode("94040").query_params() == {"zip": "94040"}
        assert ZipCode("94040", "us").query_params() == {"zip": "94040,us"}

    def test_coordinates(self):
        assert Coordinates(50.09, 14.42).query_params() == {"lat": "50.09", "lon": "14.42"}

    def test_str(self):
        assert str(CityId("1")) == "city:1"
        assert str(CityName("Prague", "CZ")) == "Prague,CZ"
        assert str(ZipCode("94040", "us")) == "zip:94040,us"


class TestLocationFromConfig:
    def test_city_id(self):
        assert location_from_config(WeatherConfig(city_id=" 3067696 ")) == CityId("3067696")

    def test_city_name(self):
        location = location_from_config(WeatherConfig(city="Prague", country="CZ"))
        assert location == CityName("Prague", "CZ")

    def test_zip_code(self):
        location = location_from_config(WeatherConfig(zip_code="94040", country="us"))
        assert location == ZipCode("94040", "us")

    def test_coordinates(self):
        location = location_from_config(WeatherConfig(latitude=50.09, longitude=14.42))
        assert location == Coordinates(50.09, 14.42)

    def test_none_configured(self):
        with pytest.raises(ConfigurationError, match="No location"):
            location_from_config(WeatherConfig())

    def test_ambiguous(self):
        with pytest.raises(ConfigurationError, match="Exactly one"):
            location_from_config(WeatherConfig(city_id="1", city="Prague"))

    def test_non_numeric_city_id(self):
        with pytest.raises(ConfigurationError):
            location_from_config(WeatherConfig(city_id="prague"))

    def test_half_coordinates(self):
        with pytest.raises(ConfigurationError):
            location_from_config(WeatherConfig(latitude=50.0))

    @pytest.mark.parametrize("lat,lon", [(91.0, 0.0), (0.0, -181.0)])
    def test_out_of_range(self, lat: float, lon: float):
        with pytest.raises(ConfigurationError):
            location_from_config(WeatherConfig(latitude=lat, longitude=lon))
