"""Time slot models and the ``HH:MM-HH:MM`` slot key value type."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def to_minutes(hhmm: str) -> int:
    """Minutes since midnight for an ``HH:MM`` string."""
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def normalize_time(hhmm: str) -> str:
    """Zero-pad a valid ``H:MM`` or ``HH:MM`` string to ``HH:MM``."""
    return format_time(*divmod(to_minutes(hhmm), 60))


@dataclass(frozen=True)
class SlotKey:
    """Identifies a slot within a day by its start and end times."""

    start_time: str
    end_time: str

    @classmethod
    def parse(cls, value: str) -> "SlotKey":
        """Parse ``"HH:MM-HH:MM"``.

        Raises:
            ValueError: if the string is not two valid times joined by ``-``.
        """
        parts = value.strip().split("-")
        if len(parts) != 2 or not all(TIME_PATTERN.match(p) for p in parts):
            raise ValueError(f"Invalid time slot key: {value!r}")
        return cls(
            start_time=normalize_time(parts[0]), end_time=normalize_time(parts[1])
        )

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"


class TimeSlotDraft(BaseModel):
    """A slot that has not been stored yet."""

    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    is_available: bool = True

    @property
    def key(self) -> SlotKey:
        return SlotKey(self.start_time, self.end_time)


class TimeSlot(TimeSlotDraft):
    """A stored slot with its surrogate id."""

    id: str
