"""Data models for bookings and time slots."""

from .booking import Booking, BookingCreate, BookingStatus, BookingStatusUpdate
from .slot import SlotKey, TimeSlot, TimeSlotDraft

__all__ = [
    "Booking",
    "BookingCreate",
    "BookingStatus",
    "BookingStatusUpdate",
    "SlotKey",
    "TimeSlot",
    "TimeSlotDraft",
]
