"""Validation for admin-supplied time slot data."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from rideconnect.models.slot import TIME_PATTERN, to_minutes


class SlotValidationError(ValueError):
    """Raised by the slot manager when admin input fails validation."""


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` into a date. Raises ValueError."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def validate_time_slot(data: dict[str, Any]) -> str | None:
    """Return an error message for invalid slot data, or None if valid."""
    if not data.get("date"):
        return "Date is required"
    if not data.get("start_time"):
        return "Start time is required"
    if not data.get("end_time"):
        return "End time is required"

    try:
        parse_date(data["date"])
    except (TypeError, ValueError):
        return "Invalid date format"

    if not TIME_PATTERN.match(str(data["start_time"])):
        return "Invalid start time format"
    if not TIME_PATTERN.match(str(data["end_time"])):
        return "Invalid end time format"

    if to_minutes(data["end_time"]) <= to_minutes(data["start_time"]):
        return "End time must be after start time"

    return None
