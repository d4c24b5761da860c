"""Garage: owns every level and the index of parked vehicles."""

import logging
import threading

from ..metrics import (
    clear_level_slots,
    record_operation,
    update_level_slots,
    update_parked_vehicles,
)
from .level import Level
from .models import (
    GarageSnapshot,
    LevelAvailability,
    Location,
    OperationResult,
    Outcome,
    Vehicle,
    VehicleCategory,
)

logger = logging.getLogger(__name__)


def _format_slots(slots: list[int]) -> str:
    return " ".join(str(s) for s in slots)


class Garage:
    """
    Multi-level parking garage.

    Keeps two indexes keyed by vehicle identifier: where the vehicle sits,
    and the vehicle record itself. An identifier is in one iff it is in the
    other, and iff its slots are marked occupied with that identifier.

    A single lock is held for the whole of every public operation, so no
    two operations ever interleave.
    """

    def __init__(
        self,
        levels: int,
        slots_per_level: int,
        allow_category_fallback: bool = False,
    ):
        """
        Initialize the garage.

        Args:
            levels: Number of levels
            slots_per_level: Number of slots on each level
            allow_category_fallback: Treat unknown type names as Truck in
                park_by_name instead of rejecting them

        Raises:
            ValueError: If either dimension is negative
        """
        if levels < 0 or slots_per_level < 0:
            raise ValueError(
                f"Garage dimensions must be non-negative, got {levels}x{slots_per_level}"
            )

        self.slots_per_level = slots_per_level
        self.allow_category_fallback = allow_category_fallback
        self.levels: list[Level] = [Level(i, slots_per_level) for i in range(levels)]

        self._locations: dict[str, Location] = {}
        self._catalog: dict[str, Vehicle] = {}
        self._lock = threading.Lock()

        clear_level_slots()
        self._refresh_metrics()
        logger.info(f"Initialized Garage with {levels} level(s) of {slots_per_level} slot(s)")

    def park(self, vehicle: Vehicle) -> OperationResult:
        """
        Park a vehicle on the lowest level that has room for it.

        Args:
            vehicle: Vehicle to park

        Returns:
            OperationResult with the chosen level and slots on success
        """
        with self._lock:
            result = self._park(vehicle)
            record_operation("park", result.outcome.value)
            return result

    def park_by_name(self, identifier: str, category_text: str) -> OperationResult:
        """
        Park a vehicle described by raw identifier and type strings.

        Raises:
            UnknownCategoryError: If the type is unknown and fallback is off
            ValueError: If the identifier is empty
        """
        category = VehicleCategory.parse(
            category_text, allow_fallback=self.allow_category_fallback
        )
        return self.park(Vehicle(identifier=identifier, category=category))

    def _park(self, vehicle: Vehicle) -> OperationResult:
        vid = vehicle.identifier

        if vid in self._locations:
            logger.debug(f"Rejected park of '{vid}': already parked")
            return OperationResult(
                success=False,
                outcome=Outcome.ALREADY_PARKED,
                message=f"Vehicle '{vid}' is already parked.",
                identifier=vid,
                category=vehicle.category,
            )

        for level in self.levels:
            slot_indices = level.find_available_slots(vehicle)
            if slot_indices and level.assign(vehicle, slot_indices):
                self._locations[vid] = Location(level=level.index, slots=slot_indices)
                self._catalog[vid] = vehicle
                self._refresh_metrics()

                logger.info(
                    f"Parked '{vid}' ({vehicle.category.value}) on level {level.index} "
                    f"slot(s) {slot_indices}"
                )
                return OperationResult(
                    success=True,
                    outcome=Outcome.PARKED,
                    message=(
                        f"Successfully parked '{vid}' on Level {level.index} "
                        f"in slot(s): {_format_slots(slot_indices)}"
                    ),
                    identifier=vid,
                    category=vehicle.category,
                    level=level.index,
                    slots=slot_indices,
                )

        logger.info(f"No space for '{vid}' ({vehicle.category.value})")
        return OperationResult(
            success=False,
            outcome=Outcome.NO_SPACE,
            message=f"No suitable space found for vehicle '{vid}'.",
            identifier=vid,
            category=vehicle.category,
        )

    def unpark(self, identifier: str) -> OperationResult:
        """
        Remove a parked vehicle and free its slots.

        Args:
            identifier: Identifier the vehicle was parked under

        Returns:
            OperationResult; NOT_FOUND if the identifier is not parked
        """
        with self._lock:
            result = self._unpark(identifier)
            record_operation("unpark", result.outcome.value)
            return result

    def _unpark(self, identifier: str) -> OperationResult:
        location = self._locations.get(identifier)
        if location is None:
            return OperationResult(
                success=False,
                outcome=Outcome.NOT_FOUND,
                message=f"Vehicle '{identifier}' not found in the garage.",
                identifier=identifier,
            )

        vehicle = self._catalog[identifier]

        if not self.levels[location.level].release(identifier):
            logger.error(
                f"Location index says '{identifier}' is on level {location.level} "
                f"slot(s) {location.slots}, but no slot there holds it"
            )
            return OperationResult(
                success=False,
                outcome=Outcome.INCONSISTENT_RELEASE,
                message=f"Could not release vehicle '{identifier}': garage state is inconsistent.",
                identifier=identifier,
                category=vehicle.category,
                level=location.level,
                slots=location.slots,
            )

        del self._locations[identifier]
        del self._catalog[identifier]
        self._refresh_metrics()

        logger.info(f"Unparked '{identifier}' from level {location.level}")
        return OperationResult(
            success=True,
            outcome=Outcome.UNPARKED,
            message=f"Vehicle '{identifier}' has been removed from Level {location.level}.",
            identifier=identifier,
            category=vehicle.category,
            level=location.level,
            slots=location.slots,
        )

    def availability(self) -> list[LevelAvailability]:
        """Free slot count for each level, in level order."""
        with self._lock:
            return self._availability()

    def _availability(self) -> list[LevelAvailability]:
        return [
            LevelAvailability(
                level=level.index,
                total_slots=len(level),
                free_slots=level.free_count(),
            )
            for level in self.levels
        ]

    def is_full(self) -> bool:
        """True if no level has a free slot."""
        with self._lock:
            return all(level.free_count() == 0 for level in self.levels)

    def locate(self, identifier: str) -> OperationResult:
        """Report the category, level and slots of a parked vehicle."""
        with self._lock:
            location = self._locations.get(identifier)
            if location is None:
                result = OperationResult(
                    success=False,
                    outcome=Outcome.NOT_FOUND,
                    message=f"Vehicle '{identifier}' not found in the garage.",
                    identifier=identifier,
                )
            else:
                category = self._catalog[identifier].category
                result = OperationResult(
                    success=True,
                    outcome=Outcome.FOUND,
                    message=(
                        f"Vehicle '{identifier}' ({category.value}) is on Level "
                        f"{location.level} occupying slot(s): {_format_slots(location.slots)}"
                    ),
                    identifier=identifier,
                    category=category,
                    level=location.level,
                    slots=list(location.slots),
                )
            record_operation("locate", result.outcome.value)
            return result

    def snapshot(self) -> GarageSnapshot:
        """Get a consistent view of the whole garage."""
        with self._lock:
            levels = self._availability()
            free = sum(lvl.free_slots for lvl in levels)
            return GarageSnapshot(
                levels=levels,
                total_slots=sum(lvl.total_slots for lvl in levels),
                free_slots=free,
                parked_vehicles=len(self._locations),
                is_full=all(lvl.free_slots == 0 for lvl in levels),
            )

    def parked_vehicles(self) -> dict[str, Location]:
        """Copy of the location index."""
        with self._lock:
            return {vid: loc.model_copy(deep=True) for vid, loc in self._locations.items()}

    def _refresh_metrics(self) -> None:
        for level in self.levels:
            update_level_slots(level.index, len(level), level.free_count())
        update_parked_vehicles(len(self._locations))
