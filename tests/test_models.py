import pytest
from pydantic import ValidationError

from garage_tracker.state import UnknownCategoryError, Vehicle, VehicleCategory


@pytest.mark.parametrize(
    "category, expected",
    [(VehicleCategory.BIKE, 1), (VehicleCategory.CAR, 1), (VehicleCategory.TRUCK, 2)],
)
def test_slots_needed(category, expected):
    assert category.slots_needed == expected
    assert Vehicle(identifier="V1", category=category).slots_needed() == expected


def test_parse_known_names():
    assert VehicleCategory.parse("Bike") is VehicleCategory.BIKE
    assert VehicleCategory.parse("Car") is VehicleCategory.CAR
    assert VehicleCategory.parse("Truck") is VehicleCategory.TRUCK


def test_parse_is_case_sensitive_and_rejects_unknown():
    with pytest.raises(UnknownCategoryError) as excinfo:
        VehicleCategory.parse("car")
    assert "Bike, Car, Truck" in str(excinfo.value)

    with pytest.raises(ValueError):
        VehicleCategory.parse("Boat")


def test_parse_fallback_maps_unknown_to_truck():
    assert VehicleCategory.parse("Boat", allow_fallback=True) is VehicleCategory.TRUCK
    assert VehicleCategory.parse("Bike", allow_fallback=True) is VehicleCategory.BIKE


def test_vehicle_is_frozen():
    vehicle = Vehicle(identifier="ABC123", category=VehicleCategory.CAR)
    with pytest.raises(ValidationError):
        vehicle.identifier = "XYZ"


@pytest.mark.parametrize("identifier", ["", " A1", "A1 "])
def test_vehicle_rejects_bad_identifier(identifier):
    with pytest.raises(ValidationError):
        Vehicle(identifier=identifier, category=VehicleCategory.CAR)
