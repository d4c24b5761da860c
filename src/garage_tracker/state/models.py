"""Data models for vehicles, locations and garage state."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class UnknownCategoryError(ValueError):
    """Raised when a vehicle type string does not name a known category."""


class VehicleCategory(str, Enum):
    """Kind of vehicle; determines how many contiguous slots it needs."""

    BIKE = "Bike"  # compact
    CAR = "Car"  # standard
    TRUCK = "Truck"  # large

    @property
    def slots_needed(self) -> int:
        return 2 if self is VehicleCategory.TRUCK else 1

    @classmethod
    def parse(cls, text: str, allow_fallback: bool = False) -> "VehicleCategory":
        """
        Convert a user-supplied type name into a category.

        Matching is exact and case-sensitive.

        Args:
            text: Type name such as "Car"
            allow_fallback: Map anything unrecognized to TRUCK instead of failing

        Returns:
            The matching VehicleCategory

        Raises:
            UnknownCategoryError: If text is unrecognized and fallback is off
        """
        for category in cls:
            if category.value == text:
                return category

        if allow_fallback:
            return cls.TRUCK

        expected = ", ".join(c.value for c in cls)
        raise UnknownCategoryError(
            f"Unknown vehicle type '{text}'. Expected one of: {expected}."
        )


class Vehicle(BaseModel):
    """A vehicle to be parked. Read-only after creation."""

    model_config = ConfigDict(frozen=True)

    identifier: str  # e.g. license plate
    category: VehicleCategory

    @field_validator("identifier")
    @classmethod
    def check_identifier(cls, v: str) -> str:
        if not v or v.strip() != v:
            raise ValueError("identifier must be non-empty and free of surrounding whitespace")
        return v

    def slots_needed(self) -> int:
        return self.category.slots_needed


class Location(BaseModel):
    """Where a parked vehicle sits: one level, one or more slot indices."""

    level: int
    slots: list[int]


class Outcome(str, Enum):
    """Result kind of a garage operation."""

    PARKED = "parked"
    UNPARKED = "unparked"
    FOUND = "found"
    ALREADY_PARKED = "already_parked"
    NO_SPACE = "no_space"
    NOT_FOUND = "not_found"
    INCONSISTENT_RELEASE = "inconsistent_release"


class OperationResult(BaseModel):
    """Outcome of park, unpark or locate, with a human-readable status."""

    success: bool
    outcome: Outcome
    message: str
    identifier: str
    category: Optional[VehicleCategory] = None
    level: Optional[int] = None
    slots: list[int] = []


class LevelAvailability(BaseModel):
    """Free-space summary for one level."""

    level: int
    total_slots: int
    free_slots: int


class GarageSnapshot(BaseModel):
    """Overall garage state."""

    levels: list[LevelAvailability]
    total_slots: int
    free_slots: int
    parked_vehicles: int
    is_full: bool
