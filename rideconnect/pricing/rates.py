"""Rate tiers and the pure fare formula."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .models import FareBreakdown

MIN_PASSENGERS = 1
MAX_PASSENGERS = 6
FALLBACK_BUFFER = 10.0

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class RateConfig:
    hourly_rate: float
    minimum_fare: float


@dataclass(frozen=True)
class PricingPolicy:
    """Everything the fare formula needs, in dollars."""

    standard: RateConfig = RateConfig(hourly_rate=60.0, minimum_fare=16.0)
    airport: RateConfig = RateConfig(hourly_rate=80.0, minimum_fare=30.0)
    per_passenger_rate: float = 5.0
    base_fare: float = 0.0

    @classmethod
    def from_settings(cls, settings) -> "PricingPolicy":
        return cls(
            standard=RateConfig(
                hourly_rate=settings.standard_hourly_rate,
                minimum_fare=settings.standard_minimum_fare,
            ),
            airport=RateConfig(
                hourly_rate=settings.airport_hourly_rate,
                minimum_fare=settings.airport_minimum_fare,
            ),
            per_passenger_rate=settings.per_passenger_rate,
            base_fare=settings.base_fare,
        )

    def rates_for(self, is_airport_route: bool) -> RateConfig:
        return self.airport if is_airport_route else self.standard

    def fallback_price(self, is_airport_route: bool) -> float:
        """Flat price used when the whole pricing pipeline fails."""
        return round_cents(self.rates_for(is_airport_route).minimum_fare + FALLBACK_BUFFER)


DEFAULT_POLICY = PricingPolicy()


def round_cents(amount: float) -> float:
    """Round half-up to two decimal places."""
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def price(
    duration_hours: float,
    is_airport_route: bool,
    passenger_count: int = 1,
    policy: PricingPolicy = DEFAULT_POLICY,
) -> tuple[float, FareBreakdown]:
    """Compute the total fare and its breakdown.

    The total is the sum of the breakdown components, raised to the
    tier's minimum fare when the sum falls short, then rounded to cents.

    Raises:
        ValueError: negative or non-finite duration, or passenger count outside 1..6.
    """
    if not math.isfinite(duration_hours) or duration_hours < 0:
        raise ValueError(
            f"duration_hours must be a finite non-negative number, got {duration_hours}"
        )
    if not MIN_PASSENGERS <= passenger_count <= MAX_PASSENGERS:
        raise ValueError(
            f"passenger_count must be between {MIN_PASSENGERS} and "
            f"{MAX_PASSENGERS}, got {passenger_count}"
        )

    rates = policy.rates_for(is_airport_route)
    breakdown = FareBreakdown(
        base_fare=policy.base_fare,
        time_charge=duration_hours * rates.hourly_rate,
        passenger_fee=max(0, passenger_count - 1) * policy.per_passenger_rate,
        airport_surcharge=0.0,
    )
    total = max(breakdown.subtotal, rates.minimum_fare)
    return round_cents(total), breakdown
