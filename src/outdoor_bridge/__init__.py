"""Outdoor Bridge - republish current weather as IoT sensor readings.

This package polls the OpenWeatherMap current weather API for one location
and publishes temperature, humidity and pressure readings to an IoT gateway:

- OpenWeatherMapClient: fetches and validates the current observation
- SensorMapper: converts an observation into gateway sensor readings
- GatewayClient: posts the readings as one batch
- PollScheduler: runs the cycle on a fixed interval with retries

Usage:
    from outdoor_bridge.scheduler import PollScheduler
    from outdoor_bridge.schemas import Observation, SensorReading
"""

__version__ = "0.1.0"

from .config import Settings, get_settings
from .errors import BridgeError, ConfigurationError, PermanentError, TransientError
from .schemas import Observation, SensorReading, Unit

__all__ = [
    "BridgeError",
    "ConfigurationError",
    "Observation",
    "PermanentError",
    "SensorReading",
    "Settings",
    "TransientError",
    "Unit",
    "get_settings",
]
