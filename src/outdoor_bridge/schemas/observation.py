"""Observation schema for the current weather snapshot."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, Field, field_validator


class Observation(BaseModel):
    """Normalized current-conditions snapshot for one location.

    Built by the weather client from a provider response. Construction either
    succeeds with every field populated or raises ValidationError.
    """

    model_config = {"frozen": True}

    # Bounds keep every published unit conversion finite
    temperature_celsius: Annotated[float, Field(ge=-150.0, le=150.0, allow_inf_nan=False)]
    humidity_percent: Annotated[float, Field(allow_inf_nan=False)]
    pressure_hpa: Annotated[float, Field(gt=0.0, le=2000.0, allow_inf_nan=False)]
    observed_at: datetime
    source_location: Annotated[str, Field(min_length=1)]

    @field_validator("humidity_percent")
    @classmethod
    def clamp_humidity(cls, v: float) -> float:
        """Clamp relative humidity into [0, 100]."""
        return min(max(v, 0.0), 100.0)

    @field_validator("observed_at")
    @classmethod
    def validate_utc_timezone(cls, v: datetime) -> datetime:
        """Ensure observed_at is timezone-aware and normalized to UTC."""
        if v.tzinfo is None:
            raise ValueError("datetime must have a timezone")
        return v.astimezone(timezone.utc)
