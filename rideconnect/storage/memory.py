"""In-memory stores for development and tests."""

from __future__ import annotations

import uuid
from typing import Any

from rideconnect.models import Booking, BookingCreate, BookingStatus, TimeSlot, TimeSlotDraft
from rideconnect.models.slot import to_minutes

from .base import BookingStore, DuplicateSlotError, SlotStore


class InMemorySlotStore(SlotStore):
    """Dict-backed slot store with a unique (date, start, end) constraint."""

    def __init__(self) -> None:
        self._slots: dict[str, TimeSlot] = {}

    async def find_by_date(self, date: str) -> list[TimeSlot]:
        slots = [s.model_copy() for s in self._slots.values() if s.date == date]
        slots.sort(key=lambda s: (to_minutes(s.start_time), to_minutes(s.end_time)))
        return slots

    async def insert(self, draft: TimeSlotDraft) -> TimeSlot:
        self._check_unique(draft.date, draft.start_time, draft.end_time)
        slot = TimeSlot(id=uuid.uuid4().hex, **draft.model_dump())
        self._slots[slot.id] = slot
        return slot.model_copy()

    async def get(self, slot_id: str) -> TimeSlot | None:
        slot = self._slots.get(slot_id)
        return slot.model_copy() if slot else None

    async def update(self, slot_id: str, changes: dict[str, Any]) -> TimeSlot | None:
        slot = self._slots.get(slot_id)
        if slot is None:
            return None
        updated = slot.model_copy(update=changes)
        if (updated.date, updated.start_time, updated.end_time) != (
            slot.date, slot.start_time, slot.end_time
        ):
            self._check_unique(updated.date, updated.start_time, updated.end_time)
        self._slots[slot_id] = updated
        return updated.model_copy()

    async def delete(self, slot_id: str) -> bool:
        return self._slots.pop(slot_id, None) is not None

    def _check_unique(self, date: str, start_time: str, end_time: str) -> None:
        for s in self._slots.values():
            if (s.date, s.start_time, s.end_time) == (date, start_time, end_time):
                raise DuplicateSlotError(date, start_time, end_time)


class InMemoryBookingStore(BookingStore):
    """Dict-backed booking store, insertion ordered."""

    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}

    async def create(self, data: BookingCreate) -> Booking:
        payload = data.model_dump()
        payload["estimated_price"] = f"{data.estimated_price:.2f}"
        booking = Booking(id=uuid.uuid4().hex, **payload)
        self._bookings[booking.id] = booking
        return booking.model_copy()

    async def get(self, booking_id: str) -> Booking | None:
        booking = self._bookings.get(booking_id)
        return booking.model_copy() if booking else None

    async def list(self) -> list[Booking]:
        return [b.model_copy() for b in self._bookings.values()]

    async def list_by_date(self, date: str) -> list[Booking]:
        return [b.model_copy() for b in self._bookings.values() if b.date == date]

    async def update_status(
        self,
        booking_id: str,
        status: BookingStatus,
        payment_intent_id: str | None = None,
    ) -> Booking | None:
        booking = self._bookings.get(booking_id)
        if booking is None:
            return None
        changes: dict[str, Any] = {"status": status}
        if payment_intent_id is not None:
            changes["payment_intent_id"] = payment_intent_id
        booking = booking.model_copy(update=changes)
        self._bookings[booking_id] = booking
        return booking.model_copy()
