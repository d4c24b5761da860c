import threading

import pytest

from garage_tracker.metrics import get_metrics
from garage_tracker.state import Garage, Outcome, UnknownCategoryError


def test_rejects_negative_dimensions():
    with pytest.raises(ValueError):
        Garage(levels=-1, slots_per_level=2)
    with pytest.raises(ValueError):
        Garage(levels=1, slots_per_level=-2)


def test_single_level_truck_scenario(make_vehicle, check_invariants):
    garage = Garage(levels=1, slots_per_level=2)

    result = garage.park(make_vehicle("A1", "Car"))
    assert result.success
    assert (result.level, result.slots) == (0, [0])
    check_invariants(garage)

    result = garage.park(make_vehicle("B1", "Truck"))
    assert not result.success
    assert result.outcome == Outcome.NO_SPACE
    check_invariants(garage)

    assert garage.unpark("A1").success
    check_invariants(garage)

    result = garage.park(make_vehicle("B1", "Truck"))
    assert result.success
    assert (result.level, result.slots) == (0, [0, 1])
    assert garage.is_full()
    check_invariants(garage)


def test_falls_through_to_next_level(make_vehicle, check_invariants):
    garage = Garage(levels=2, slots_per_level=1)

    x = garage.park(make_vehicle("X", "Bike"))
    y = garage.park(make_vehicle("Y", "Bike"))
    z = garage.park(make_vehicle("Z", "Bike"))

    assert (x.level, x.slots) == (0, [0])
    assert (y.level, y.slots) == (1, [0])
    assert z.outcome == Outcome.NO_SPACE
    assert z.message == "No suitable space found for vehicle 'Z'."
    check_invariants(garage)


def test_truck_skips_level_without_adjacent_pair(make_vehicle, check_invariants):
    garage = Garage(levels=2, slots_per_level=3)
    garage.park(make_vehicle("C0", "Car"))
    garage.park(make_vehicle("C1", "Car"))
    garage.park(make_vehicle("C2", "Car"))
    garage.unpark("C1")
    # level 0: X . X

    result = garage.park(make_vehicle("T1", "Truck"))
    assert (result.level, result.slots) == (1, [0, 1])
    assert garage.availability()[1].free_slots == 1
    check_invariants(garage)


def test_duplicate_park_leaves_state_unchanged(small_garage, make_vehicle, check_invariants):
    assert small_garage.park(make_vehicle("A1", "Car")).success
    before = small_garage.snapshot()

    result = small_garage.park(make_vehicle("A1", "Truck"))
    assert not result.success
    assert result.outcome == Outcome.ALREADY_PARKED
    assert result.message == "Vehicle 'A1' is already parked."
    assert small_garage.snapshot() == before
    assert small_garage.locate("A1").category.value == "Car"
    check_invariants(small_garage)


def test_unpark_unknown_leaves_state_unchanged(small_garage, make_vehicle):
    small_garage.park(make_vehicle("A1"))
    before = small_garage.snapshot()

    result = small_garage.unpark("NOPE")
    assert result.outcome == Outcome.NOT_FOUND
    assert result.message == "Vehicle 'NOPE' not found in the garage."
    assert small_garage.snapshot() == before


def test_locate_reports_category_and_slots(small_garage, make_vehicle):
    small_garage.park(make_vehicle("A1", "Bike"))
    small_garage.park(make_vehicle("T1", "Truck"))

    result = small_garage.locate("T1")
    assert result.success
    assert result.outcome == Outcome.FOUND
    assert result.message == "Vehicle 'T1' (Truck) is on Level 0 occupying slot(s): 1 2"

    assert small_garage.unpark("T1").success
    assert small_garage.locate("T1").outcome == Outcome.NOT_FOUND


def test_availability_tracks_slots_needed(small_garage, make_vehicle, check_invariants):
    small_garage.park(make_vehicle("T1", "Truck"))
    small_garage.park(make_vehicle("C1", "Car"))
    small_garage.park(make_vehicle("T2", "Truck"))

    levels = small_garage.availability()
    assert [a.free_slots for a in levels] == [1, 2]
    assert [a.level for a in levels] == [0, 1]
    assert small_garage.snapshot().free_slots == 8 - 5
    assert not small_garage.is_full()
    check_invariants(small_garage)


def test_empty_garage_is_full():
    assert Garage(levels=0, slots_per_level=5).is_full()
    assert Garage(levels=3, slots_per_level=0).is_full()


def test_inconsistent_release_keeps_records(small_garage, make_vehicle):
    small_garage.park(make_vehicle("A1"))
    # Break the slot behind the garage's back
    small_garage.levels[0].slots[0].vacate()

    result = small_garage.unpark("A1")
    assert not result.success
    assert result.outcome == Outcome.INCONSISTENT_RELEASE
    assert "A1" in small_garage.parked_vehicles()
    assert small_garage.locate("A1").success


def test_park_by_name_respects_fallback_policy():
    strict = Garage(levels=1, slots_per_level=2)
    with pytest.raises(UnknownCategoryError):
        strict.park_by_name("B1", "Boat")
    assert strict.parked_vehicles() == {}

    lenient = Garage(levels=1, slots_per_level=2, allow_category_fallback=True)
    result = lenient.park_by_name("B1", "Boat")
    assert result.success
    assert result.slots == [0, 1]


def test_park_unpark_cycle_keeps_invariants(make_vehicle, check_invariants):
    garage = Garage(levels=2, slots_per_level=5)
    kinds = ["Bike", "Truck", "Car", "Truck", "Truck", "Car", "Bike", "Truck"]

    for i, kind in enumerate(kinds):
        garage.park(make_vehicle(f"V{i}", kind))
        check_invariants(garage)

    for i in (1, 2, 6):
        assert garage.unpark(f"V{i}").success
        check_invariants(garage)

    for i, kind in enumerate(["Truck", "Car", "Truck"]):
        garage.park(make_vehicle(f"W{i}", kind))
        check_invariants(garage)


def test_concurrent_parking_never_double_books(make_vehicle, check_invariants):
    garage = Garage(levels=2, slots_per_level=25)
    results = []
    results_lock = threading.Lock()

    def worker(worker_id: int) -> None:
        for n in range(10):
            kind = "Truck" if n % 3 == 0 else "Car"
            result = garage.park(make_vehicle(f"T{worker_id}-{n}", kind))
            with results_lock:
                results.append(result)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 80
    assert any(r.outcome == Outcome.NO_SPACE for r in results)
    assert len(garage.parked_vehicles()) == sum(1 for r in results if r.success)
    check_invariants(garage)


def test_concurrent_duplicate_parks_single_winner(make_vehicle):
    garage = Garage(levels=1, slots_per_level=10)
    results = []
    barrier = threading.Barrier(6)

    def worker() -> None:
        barrier.wait()
        results.append(garage.park(make_vehicle("SAME")))

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r.success) == 1
    assert sum(1 for r in results if r.outcome == Outcome.ALREADY_PARKED) == 5
    assert garage.availability()[0].free_slots == 9


def test_operations_are_counted_in_metrics(small_garage, make_vehicle):
    small_garage.park(make_vehicle("M1"))
    small_garage.locate("M1")

    output = get_metrics().decode()
    assert 'garage_operations_total{operation="park",outcome="parked"}' in output
    assert "garage_level_slots_free" in output
    assert "garage_parked_vehicles" in output


def test_new_garage_drops_stale_level_metrics():
    Garage(levels=3, slots_per_level=4)
    assert 'garage_level_slots_total{level="2"}' in get_metrics().decode()

    Garage(levels=1, slots_per_level=4)
    output = get_metrics().decode()
    assert 'garage_level_slots_total{level="0"}' in output
    assert 'level="1"' not in output
    assert 'level="2"' not in output
