"""Abstract base classes for slot and booking persistence.

The slot manager and booking service only talk to these interfaces.
Any backend (in-memory, MongoDB, SQL) implements them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from rideconnect.models import Booking, BookingCreate, BookingStatus, TimeSlot, TimeSlotDraft


class DuplicateSlotError(Exception):
    """A slot with the same date, start and end time already exists."""

    def __init__(self, date: str, start_time: str, end_time: str) -> None:
        super().__init__(f"Time slot {start_time}-{end_time} already exists on {date}")
        self.date = date
        self.start_time = start_time
        self.end_time = end_time


class SlotStore(ABC):
    """Persistence for time slots.

    Implementations must reject a second slot with the same
    ``(date, start_time, end_time)`` by raising DuplicateSlotError.
    """

    @abstractmethod
    async def find_by_date(self, date: str) -> list[TimeSlot]:
        """Return all slots on ``date`` ordered by start time."""

    @abstractmethod
    async def insert(self, draft: TimeSlotDraft) -> TimeSlot:
        """Store a slot and return it with its assigned id."""

    @abstractmethod
    async def get(self, slot_id: str) -> TimeSlot | None:
        """Return one slot by id."""

    @abstractmethod
    async def update(self, slot_id: str, changes: dict[str, Any]) -> TimeSlot | None:
        """Merge ``changes`` into a slot. Returns None if the id is unknown."""

    @abstractmethod
    async def delete(self, slot_id: str) -> bool:
        """Remove a slot. Returns True if it existed."""


class BookingStore(ABC):
    """Persistence for bookings."""

    @abstractmethod
    async def create(self, data: BookingCreate) -> Booking:
        """Store a new pending booking."""

    @abstractmethod
    async def get(self, booking_id: str) -> Booking | None:
        """Return one booking by id."""

    @abstractmethod
    async def list(self) -> list[Booking]:
        """Return all bookings, oldest first."""

    @abstractmethod
    async def list_by_date(self, date: str) -> list[Booking]:
        """Return bookings for one ride date."""

    @abstractmethod
    async def update_status(
        self,
        booking_id: str,
        status: BookingStatus,
        payment_intent_id: str | None = None,
    ) -> Booking | None:
        """Set a booking's status. Returns None if the id is unknown."""
