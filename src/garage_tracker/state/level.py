"""Slots and levels: the occupancy cells of the garage."""

from dataclasses import dataclass
from typing import Optional

from .models import Vehicle


@dataclass
class Slot:
    """A single parking slot, identified by (level, index)."""

    level_index: int
    slot_index: int
    occupant_id: Optional[str] = None

    @property
    def is_occupied(self) -> bool:
        return self.occupant_id is not None

    def occupy(self, identifier: str) -> bool:
        """Mark the slot as taken by identifier. False if already taken."""
        if self.is_occupied:
            return False
        self.occupant_id = identifier
        return True

    def vacate(self) -> bool:
        """Free the slot. False if it was already free."""
        if not self.is_occupied:
            return False
        self.occupant_id = None
        return True


class Level:
    """
    One floor of the garage: a fixed, ordered row of slots.

    Level does no locking of its own. Every mutating call must be made
    while the owning Garage holds its lock.
    """

    def __init__(self, index: int, total_slots: int):
        self.index = index
        self.slots: list[Slot] = [Slot(index, i) for i in range(total_slots)]

    def __len__(self) -> int:
        return len(self.slots)

    def find_available_slots(self, vehicle: Vehicle) -> list[int]:
        """
        Find the slot indices a vehicle would occupy on this level.

        Single-slot vehicles get the first free slot. Larger vehicles get the
        first run of adjacent free slots, scanning from the lowest index.
        A run never spans two levels.

        Args:
            vehicle: Vehicle to place

        Returns:
            Slot indices in increasing order, or an empty list if none fit
        """
        needed = vehicle.slots_needed()

        for start in range(len(self.slots) - needed + 1):
            window = self.slots[start:start + needed]
            if not any(s.is_occupied for s in window):
                return [s.slot_index for s in window]

        return []

    def assign(self, vehicle: Vehicle, slot_indices: list[int]) -> bool:
        """
        Occupy the given slots with vehicle.

        All targets are checked before any is touched, so a conflict leaves
        the level unchanged.

        Returns:
            True if every slot was occupied, False if any was unavailable
        """
        if not slot_indices:
            return False

        for idx in slot_indices:
            if idx < 0 or idx >= len(self.slots) or self.slots[idx].is_occupied:
                return False

        for idx in slot_indices:
            self.slots[idx].occupy(vehicle.identifier)
        return True

    def release(self, identifier: str) -> bool:
        """Vacate every slot held by identifier. True if any was vacated."""
        removed = False
        for slot in self.slots:
            if slot.occupant_id == identifier:
                slot.vacate()
                removed = True
        return removed

    def free_count(self) -> int:
        return sum(1 for s in self.slots if not s.is_occupied)

    def occupied_by(self, identifier: str) -> list[int]:
        """Indices of the slots currently held by identifier."""
        return [s.slot_index for s in self.slots if s.occupant_id == identifier]
