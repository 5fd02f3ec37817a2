"""Engine-wide numeric settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EPSILON = 1e-12
EARTH_RADIUS = 6371e3


class EngineConfig(BaseModel):
    """Tolerances and constants shared by both algorithm families."""

    model_config = ConfigDict(frozen=True)

    epsilon: float = Field(
        default=DEFAULT_EPSILON,
        gt=0,
        description="Absolute tolerance for equality, collinearity and length checks",
    )
    earth_radius: float = Field(
        default=EARTH_RADIUS,
        gt=0,
        description="Sphere radius in meters used for WGS84 distances and areas",
    )
