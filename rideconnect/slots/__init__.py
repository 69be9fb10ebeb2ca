"""Time slot generation, availability and admin management."""

from .manager import (
    END_HOUR,
    INTERVAL_MINUTES,
    START_HOUR,
    SlotAvailabilityManager,
    generate_default_slots,
    should_generate_slots,
)
from .validation import SlotValidationError, parse_date, validate_time_slot

__all__ = [
    "END_HOUR",
    "INTERVAL_MINUTES",
    "START_HOUR",
    "SlotAvailabilityManager",
    "SlotValidationError",
    "generate_default_slots",
    "parse_date",
    "should_generate_slots",
    "validate_time_slot",
]
