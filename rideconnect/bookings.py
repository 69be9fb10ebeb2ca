"""Booking lifecycle on top of the booking store and slot manager."""

from __future__ import annotations

import logging
from datetime import date as date_type
from typing import Optional

from rideconnect.models import Booking, BookingCreate, BookingStatus
from rideconnect.slots import SlotAvailabilityManager
from rideconnect.storage import BookingStore

log = logging.getLogger("rideconnect.bookings")


def redact_pii(value: str) -> str:
    """Mask PII for logging, showing only the first 3 and last 2 chars."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


class BookingService:
    """Creates bookings and keeps slot availability in step with them."""

    def __init__(self, bookings: BookingStore, slots: SlotAvailabilityManager) -> None:
        self._bookings = bookings
        self._slots = slots

    async def create(self, data: BookingCreate) -> Booking:
        booking = await self._bookings.create(data)
        log.info(
            "Booking %s created for %s on %s %s",
            booking.id,
            redact_pii(booking.customer_email),
            booking.date,
            booking.time_slot,
        )
        return booking

    async def get(self, booking_id: str) -> Optional[Booking]:
        return await self._bookings.get(booking_id)

    async def list(self) -> list[Booking]:
        return await self._bookings.list()

    async def list_by_date(self, date: str) -> list[Booking]:
        return await self._bookings.list_by_date(date)

    async def update_status(
        self,
        booking_id: str,
        status: BookingStatus,
        payment_intent_id: Optional[str] = None,
    ) -> Optional[Booking]:
        """Change a booking's status.

        Moving a booking into ``confirmed`` takes its slot off the
        available list.
        """
        previous = await self._bookings.get(booking_id)
        if previous is None:
            return None

        booking = await self._bookings.update_status(booking_id, status, payment_intent_id)
        log.info("Booking %s: %s -> %s", booking_id, previous.status.value, status.value)

        if status == BookingStatus.CONFIRMED and previous.status != BookingStatus.CONFIRMED:
            await self._slots.mark_booked(booking.date, booking.time_slot)

        return booking

    async def dashboard_stats(self, today: date_type) -> dict:
        """Summary counters for the admin dashboard."""
        all_bookings = await self._bookings.list()
        today_str = today.isoformat()
        month_prefix = today_str[:7]

        confirmed_today = [
            b for b in all_bookings
            if b.date == today_str and b.status == BookingStatus.CONFIRMED
        ]
        return {
            "today_rides": len(confirmed_today),
            "today_revenue": round(sum(float(b.estimated_price) for b in confirmed_today), 2),
            "pending_bookings": sum(
                1 for b in all_bookings if b.status == BookingStatus.PENDING
            ),
            "monthly_rides": sum(
                1 for b in all_bookings
                if b.date.startswith(month_prefix) and b.status == BookingStatus.CONFIRMED
            ),
        }
