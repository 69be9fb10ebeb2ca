"""Bookable time slot generation and availability tracking.

A day's slots are created lazily the first time the date is queried:
fixed-length windows from the business opening hour up to (excluding)
the closing hour, all available. Dates in the past never get slots.
Booking a ride flips its slot to unavailable; administrators can add,
edit and remove individual slots.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date as date_type
from datetime import datetime
from typing import Any, Callable
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from rideconnect.models import SlotKey, TimeSlot, TimeSlotDraft
from rideconnect.models.slot import format_time, normalize_time
from rideconnect.storage import DuplicateSlotError, SlotStore

from .validation import SlotValidationError, parse_date, validate_time_slot

log = logging.getLogger("rideconnect.slots")

START_HOUR = 15  # 3 PM
END_HOUR = 23  # 11 PM
INTERVAL_MINUTES = 15

UPDATABLE_FIELDS = {"date", "start_time", "end_time", "is_available"}


def generate_default_slots(
    date: str,
    start_hour: int = START_HOUR,
    end_hour: int = END_HOUR,
    interval_minutes: int = INTERVAL_MINUTES,
) -> list[TimeSlotDraft]:
    """Build a full day of available slots in chronological order."""
    slots: list[TimeSlotDraft] = []
    for hour in range(start_hour, end_hour):
        for minute in range(0, 60, interval_minutes):
            end_hour_, end_minute = divmod(hour * 60 + minute + interval_minutes, 60)
            slots.append(
                TimeSlotDraft(
                    date=date,
                    start_time=format_time(hour, minute),
                    end_time=format_time(end_hour_, end_minute),
                    is_available=True,
                )
            )
    return slots


def should_generate_slots(requested: date_type, today: date_type) -> bool:
    """Only today and future dates get default slots."""
    return requested >= today


class SlotAvailabilityManager:
    """Creates and tracks bookable slots on top of a SlotStore."""

    def __init__(
        self,
        store: SlotStore,
        start_hour: int = START_HOUR,
        end_hour: int = END_HOUR,
        interval_minutes: int = INTERVAL_MINUTES,
        timezone: str = "America/Los_Angeles",
        today: Callable[[], date_type] | None = None,
    ) -> None:
        self._store = store
        self._start_hour = start_hour
        self._end_hour = end_hour
        self._interval_minutes = interval_minutes
        self._tz = ZoneInfo(timezone)
        self._today = today or self._local_today
        self._locks: dict[str, asyncio.Lock] = {}

    def _local_today(self) -> date_type:
        return datetime.now(tz=self._tz).date()

    # ------------------------------------------------------------------
    # Booking-facing operations
    # ------------------------------------------------------------------

    async def ensure_slots_for_date(self, date: str) -> list[TimeSlot]:
        """Return the day's slots, generating the defaults on first access.

        Raises:
            ValueError: ``date`` is not ``YYYY-MM-DD``.
        """
        requested = parse_date(date)

        slots = await self._store.find_by_date(date)
        if slots:
            return slots

        if not should_generate_slots(requested, self._today()):
            return []

        lock = self._locks.setdefault(date, asyncio.Lock())
        try:
            async with lock:
                # Another request may have generated them while we waited.
                slots = await self._store.find_by_date(date)
                if slots:
                    return slots

                drafts = generate_default_slots(
                    date, self._start_hour, self._end_hour, self._interval_minutes
                )
                for draft in drafts:
                    try:
                        await self._store.insert(draft)
                    except DuplicateSlotError:
                        log.debug("Slot %s on %s already exists", draft.key, date)
                log.info("Generated %d default slots for %s", len(drafts), date)

                return await self._store.find_by_date(date)
        finally:
            # Generated days are served from the store without taking a lock.
            if self._locks.get(date) is lock and not lock.locked():
                del self._locks[date]

    async def list_available(self, date: str) -> list[TimeSlot]:
        """Return only the open slots for ``date``, in order."""
        return [s for s in await self.ensure_slots_for_date(date) if s.is_available]

    async def mark_booked(self, date: str, key: SlotKey | str) -> TimeSlot | None:
        """Mark the slot matching ``key`` as taken.

        A missing slot or malformed key is logged and ignored so that a
        stale slot never blocks a booking.
        """
        if isinstance(key, str):
            try:
                key = SlotKey.parse(key)
            except ValueError:
                log.warning("Cannot mark malformed slot key %r on %s", key, date)
                return None

        for slot in await self._store.find_by_date(date):
            if slot.key == key:
                updated = await self._store.update(slot.id, {"is_available": False})
                log.info("Slot %s on %s marked as booked", key, date)
                return updated

        log.warning("No slot %s on %s to mark as booked", key, date)
        return None

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------

    async def create_slot(
        self,
        date: str,
        start_time: str,
        end_time: str,
        is_available: bool = True,
    ) -> TimeSlot:
        """Insert one slot.

        Raises:
            SlotValidationError: invalid date or times.
            DuplicateSlotError: the same window already exists on that date.
        """
        draft = {"date": date, "start_time": start_time, "end_time": end_time}
        error = validate_time_slot(draft)
        if error:
            raise SlotValidationError(error)
        draft["start_time"] = normalize_time(start_time)
        draft["end_time"] = normalize_time(end_time)
        return await self._store.insert(TimeSlotDraft(**draft, is_available=is_available))

    async def update_slot(self, slot_id: str, changes: dict[str, Any]) -> TimeSlot | None:
        """Merge ``changes`` into a slot. Returns None for an unknown id."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise SlotValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        current = await self._store.get(slot_id)
        if current is None:
            return None

        merged = current.model_dump()
        merged.update(changes)
        error = validate_time_slot(merged)
        if error:
            raise SlotValidationError(error)
        try:
            validated = TimeSlotDraft.model_validate(merged)
        except ValidationError as e:
            raise SlotValidationError(f"Invalid slot fields: {e.error_count()} error(s)") from e
        validated.start_time = normalize_time(validated.start_time)
        validated.end_time = normalize_time(validated.end_time)

        return await self._store.update(
            slot_id, {name: getattr(validated, name) for name in changes}
        )

    async def delete_slot(self, slot_id: str) -> bool:
        deleted = await self._store.delete(slot_id)
        if deleted:
            log.info("Slot %s deleted", slot_id)
        return deleted
