"""State management module."""

from .models import (
    GarageSnapshot,
    LevelAvailability,
    Location,
    OperationResult,
    Outcome,
    UnknownCategoryError,
    Vehicle,
    VehicleCategory,
)
from .level import Level, Slot
from .garage import Garage

__all__ = [
    "Garage",
    "GarageSnapshot",
    "Level",
    "LevelAvailability",
    "Location",
    "OperationResult",
    "Outcome",
    "Slot",
    "UnknownCategoryError",
    "Vehicle",
    "VehicleCategory",
]
