"""Outdoor bridge schemas.

Pydantic models for weather observations and published sensor readings.
"""

from .enums import PressureUnit, TemperatureUnit, Unit
from .observation import Observation
from .reading import SensorReading

__all__ = [
    "Observation",
    "PressureUnit",
    "SensorReading",
    "TemperatureUnit",
    "Unit",
]
