"""Pydantic models for booking requests and stored bookings."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .slot import SlotKey, to_minutes


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"


class BookingCreate(BaseModel):
    """Data collected by the booking form."""

    customer_name: str = Field(min_length=2, max_length=50)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(default=None, pattern=r"^[\d\s\-\(\)\+]+$")
    pickup_location: str = Field(min_length=1)
    dropoff_location: str = Field(min_length=1)
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    time_slot: str  # HH:MM-HH:MM
    passenger_count: int = Field(default=1, ge=1, le=6)
    is_airport_route: bool = False
    notes: Optional[str] = Field(default=None, max_length=500)
    estimated_price: float = Field(ge=0)

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        datetime.strptime(value, "%Y-%m-%d")
        return value

    @field_validator("time_slot")
    @classmethod
    def _check_time_slot(cls, value: str) -> str:
        key = SlotKey.parse(value)
        if to_minutes(key.end_time) <= to_minutes(key.start_time):
            raise ValueError("End time must be after start time")
        return str(key)

    @field_validator("customer_name", "pickup_location", "dropoff_location")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Booking(BaseModel):
    """A stored booking."""

    id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    pickup_location: str
    dropoff_location: str
    date: str  # YYYY-MM-DD
    time_slot: str  # HH:MM-HH:MM
    passenger_count: int = 1
    is_airport_route: bool = False
    notes: Optional[str] = None
    estimated_price: str  # two decimals, e.g. "42.50"
    status: BookingStatus = BookingStatus.PENDING
    payment_intent_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    payment_intent_id: Optional[str] = None
