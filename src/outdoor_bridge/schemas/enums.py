"""Enums for observation and sensor reading schemas."""

from enum import Enum


class Unit(str, Enum):
    """Unit of a published sensor reading value."""

    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    KELVIN = "kelvin"
    PERCENT = "percent"
    HPA = "hpa"
    PA = "pa"


class TemperatureUnit(str, Enum):
    """Temperature unit expected by the gateway."""

    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    KELVIN = "kelvin"

    def convert(self, celsius: float) -> float:
        """Convert a Celsius temperature into this unit."""
        if self is TemperatureUnit.FAHRENHEIT:
            return celsius * 9.0 / 5.0 + 32.0
        if self is TemperatureUnit.KELVIN:
            return celsius + 273.15
        return celsius

    @property
    def unit(self) -> Unit:
        return Unit(self.value)


class PressureUnit(str, Enum):
    """Pressure unit expected by the gateway."""

    HPA = "hpa"
    PA = "pa"

    def convert(self, hpa: float) -> float:
        """Convert a hectopascal pressure into this unit."""
        if self is PressureUnit.PA:
            return hpa * 100.0
        return hpa

    @property
    def unit(self) -> Unit:
        return Unit(self.value)
