"""API request and response schemas."""

from pydantic import BaseModel

from ..state.models import LevelAvailability


class ParkRequest(BaseModel):
    """Request body for parking a vehicle."""

    identifier: str
    category: str  # Bike, Car or Truck


class AvailabilityResponse(BaseModel):
    """Free slots per level."""

    levels: list[LevelAvailability]


class FullResponse(BaseModel):
    """Whether the garage has any free slot left."""

    is_full: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    garage_ready: bool
    uptime_seconds: float
