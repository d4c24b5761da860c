import pytest

from garage_tracker.state import Garage, Vehicle, VehicleCategory


@pytest.fixture
def make_vehicle():
    def _make(identifier: str, category: str = "Car") -> Vehicle:
        return Vehicle(identifier=identifier, category=VehicleCategory(category))

    return _make


@pytest.fixture
def small_garage() -> Garage:
    return Garage(levels=2, slots_per_level=4)


@pytest.fixture
def check_invariants():
    """Assert the location index and slot occupancy agree with each other."""

    def _check(garage: Garage) -> None:
        parked = garage.parked_vehicles()

        seen_slots = set()
        for vid, location in parked.items():
            found = garage.locate(vid)
            assert found.success
            assert len(location.slots) == found.category.slots_needed
            if len(location.slots) == 2:
                assert location.slots[1] == location.slots[0] + 1

            level = garage.levels[location.level]
            for idx in location.slots:
                assert level.slots[idx].occupant_id == vid
                assert (location.level, idx) not in seen_slots
                seen_slots.add((location.level, idx))

        for level in garage.levels:
            for slot in level.slots:
                if slot.is_occupied:
                    assert (level.index, slot.slot_index) in seen_slots

        total = sum(len(level) for level in garage.levels)
        used = sum(len(loc.slots) for loc in parked.values())
        assert sum(a.free_slots for a in garage.availability()) == total - used

    return _check
