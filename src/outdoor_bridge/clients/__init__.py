"""HTTP clients for the weather source and the IoT gateway."""

from .gateway import GatewayClient
from .openweathermap import OpenWeatherMapClient

__all__ = [
    "GatewayClient",
    "OpenWeatherMapClient",
]
