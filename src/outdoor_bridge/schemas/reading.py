"""Sensor reading schema published to the IoT gateway."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field

from .enums import Unit


class SensorReading(BaseModel):
    """One scalar value in the gateway's sensor model."""

    model_config = {"frozen": True}

    sensor_id: Annotated[str, Field(min_length=1)]
    value: Annotated[float, Field(allow_inf_nan=False)]
    unit: Unit
    timestamp: datetime

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the gateway publish body."""
        return self.model_dump(mode="json")
