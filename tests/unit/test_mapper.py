"""Tests for observation to sensor reading mapping."""

from datetime import datetime, timezone

import pytest

from outdoor_bridge.config import PublishingConfig
from outdoor_bridge.mapper import SensorMapper
from outdoor_bridge.schemas import Observation, PressureUnit, TemperatureUnit, Unit


@pytest.fixture
def mapper(publishing_config: PublishingConfig) -> SensorMapper:
    return SensorMapper(publishing_config)


class TestSensorMapper:
    def test_default_mapping(self, mapper: SensorMapper, sample_observation: Observation):
        """Test the fixed reading set, order, units and timestamps."""
        readings = mapper.map(sample_observation)

        assert [r.sensor_id for r in readings] == [
            "node/outdoor/thermometer/0:0/temperature",
            "node/outdoor/hygrometer/0:0/relative-humidity",
            "node/outdoor/barometer/0:0/pressure",
        ]
        assert [r.value for r in readings] == [15.2, 80.0, 1013.0]
        assert [r.unit for r in readings] == [Unit.CELSIUS, Unit.PERCENT, Unit.HPA]
        assert all(r.timestamp == sample_observation.observed_at for r in readings)

    def test_deterministic(self, mapper: SensorMapper, sample_observation: Observation):
        first = mapper.map(sample_observation)
        second = mapper.map(sample_observation)
        assert first == second

    def test_topic_prefix_and_channels(self, sample_observation: Observation):
        config = PublishingConfig(
            device_name="garden",
            topic_prefix="home/",
            channel_thermometer="0:1",
            channel_hygrometer="0:2",
            channel_barometer="0:3",
        )
        readings = SensorMapper(config).map(sample_observation)

        assert [r.sensor_id for r in readings] == [
            "home/node/garden/thermometer/0:1/temperature",
            "home/node/garden/hygrometer/0:2/relative-humidity",
            "home/node/garden/barometer/0:3/pressure",
        ]

    def test_fahrenheit(self, sample_observation: Observation):
        config = PublishingConfig(temperature_unit=TemperatureUnit.FAHRENHEIT)
        temperature = SensorMapper(config).map(sample_observation)[0]

        assert temperature.unit is Unit.FAHRENHEIT
        assert temperature.value == pytest.approx(59.36)

    def test_kelvin(self, sample_observation: Observation):
        config = PublishingConfig(temperature_unit=TemperatureUnit.KELVIN)
        temperature = SensorMapper(config).map(sample_observation)[0]

        assert temperature.unit is Unit.KELVIN
        assert temperature.value == pytest.approx(288.35)

    def test_pascal(self, sample_observation: Observation):
        config = PublishingConfig(pressure_unit=PressureUnit.PA)
        pressure = SensorMapper(config).map(sample_observation)[2]

        assert pressure.unit is Unit.PA
        assert pressure.value == pytest.approx(101_300.0)

    def test_rounding(self, mapper: SensorMapper, observed_at: datetime):
        obs = Observation(
            temperature_celsius=15.23456,
            humidity_percent=55.149,
            pressure_hpa=1001.129,
            observed_at=observed_at,
            source_location="city:1",
        )
        readings = mapper.map(obs)

        assert [r.value for r in readings] == [15.23, 55.1, 1001.13]

    @pytest.mark.parametrize(
        "temperature,humidity,pressure",
        [
            (-89.2, 0.0, 870.0),
            (56.7, 100.0, 1084.8),
            (-150.0, 0.0, 1e-6),
            (150.0, 100.0, 2000.0),
        ],
    )
    @pytest.mark.parametrize("temperature_unit", list(TemperatureUnit))
    @pytest.mark.parametrize("pressure_unit", list(PressureUnit))
    def test_total_for_valid_observations(
        self,
        temperature: float,
        humidity: float,
        pressure: float,
        temperature_unit: TemperatureUnit,
        pressure_unit: PressureUnit,
    ):
        """Test every accepted observation maps in every unit combination."""
        config = PublishingConfig(temperature_unit=temperature_unit, pressure_unit=pressure_unit)
        obs = Observation(
            temperature_celsius=temperature,
            humidity_percent=humidity,
            pressure_hpa=pressure,
            observed_at=datetime(2024, 7, 1, tzinfo=timezone.utc),
            source_location="city:1",
        )
        readings = SensorMapper(config).map(obs)

        assert len(readings) == 3
        assert [r.unit for r in readings] == [temperature_unit.unit, Unit.PERCENT, pressure_unit.unit]
