"""Translate weather observations into gateway sensor readings."""

import math

from .config import PublishingConfig
from .schemas import Observation, SensorReading, Unit


class SensorMapper:
    """Maps one Observation to a fixed, ordered set of SensorReadings.

    Sensor IDs follow the Hardwario node topic layout, e.g.
    ``node/outdoor/thermometer/0:0/temperature``. The order is always
    temperature, humidity, pressure.
    """

    def __init__(self, config: PublishingConfig | None = None) -> None:
        self.config = config or PublishingConfig()

    def _sensor_id(self, kind: str, channel: str, quantity: str) -> str:
        return f"{self.config.topic_prefix}node/{self.config.device_name}/{kind}/{channel}/{quantity}"

    @property
    def temperature_id(self) -> str:
        return self._sensor_id("thermometer", self.config.channel_thermometer, "temperature")

    @property
    def humidity_id(self) -> str:
        return self._sensor_id("hygrometer", self.config.channel_hygrometer, "relative-humidity")

    @property
    def pressure_id(self) -> str:
        return self._sensor_id("barometer", self.config.channel_barometer, "pressure")

    def map(self, observation: Observation) -> list[SensorReading]:
        """Build the readings for one observation."""
        assert math.isfinite(observation.temperature_celsius), "temperature must be finite"
        assert 0.0 <= observation.humidity_percent <= 100.0, "humidity must be within [0, 100]"
        assert math.isfinite(observation.pressure_hpa), "pressure must be finite"

        temperature_unit = self.config.temperature_unit
        pressure_unit = self.config.pressure_unit
        timestamp = observation.observed_at

        return [
            SensorReading(
                sensor_id=self.temperature_id,
                value=round(temperature_unit.convert(observation.temperature_celsius), 2),
                unit=temperature_unit.unit,
                timestamp=timestamp,
            ),
            SensorReading(
                sensor_id=self.humidity_id,
                value=round(observation.humidity_percent, 1),
                unit=Unit.PERCENT,
                timestamp=timestamp,
            ),
            SensorReading(
                sensor_id=self.pressure_id,
                value=round(pressure_unit.convert(observation.pressure_hpa), 2),
                unit=pressure_unit.unit,
                timestamp=timestamp,
            ),
        ]
