"""Pydantic models for fare quotes and the tagged quote result."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel

RateType = Literal["standard", "airport"]


class FareBreakdown(BaseModel):
    base_fare: float = 0.0
    time_charge: float = 0.0
    passenger_fee: float = 0.0
    airport_surcharge: float = 0.0

    @property
    def subtotal(self) -> float:
        return self.base_fare + self.time_charge + self.passenger_fee + self.airport_surcharge


class FareQuote(BaseModel):
    """A priced ride between two addresses."""

    total_price: float
    duration_hours: float
    distance_miles: float
    is_airport_route: bool
    rate_type: RateType
    passenger_count: int = 1
    breakdown: FareBreakdown


class PricingError(BaseModel):
    """Returned instead of a quote when pricing fails outright.

    Always carries a usable price so the booking flow can continue.
    """

    message: str
    fallback_price: float


@dataclass
class Ok:
    """A quote computed from live provider data."""

    quote: FareQuote
    status: Literal["ok"] = "ok"


@dataclass
class Degraded:
    """A quote where at least one provider fell back to a local estimate."""

    quote: FareQuote
    reasons: list[str] = field(default_factory=list)
    status: Literal["degraded"] = "degraded"


@dataclass
class Failed:
    error: PricingError
    status: Literal["failed"] = "failed"


QuoteResult = Ok | Degraded | Failed
