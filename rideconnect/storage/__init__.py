"""Slot and booking storage abstractions and implementations."""

from .base import BookingStore, DuplicateSlotError, SlotStore
from .memory import InMemoryBookingStore, InMemorySlotStore

__all__ = [
    "BookingStore",
    "DuplicateSlotError",
    "InMemoryBookingStore",
    "InMemorySlotStore",
    "SlotStore",
]
