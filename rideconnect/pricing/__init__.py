"""Fare estimation: pricing formula, quote models, and the estimator."""

from .estimator import FareEstimator
from .models import (
    Degraded,
    Failed,
    FareBreakdown,
    FareQuote,
    Ok,
    PricingError,
    QuoteResult,
)
from .rates import DEFAULT_POLICY, PricingPolicy, RateConfig, price

__all__ = [
    "DEFAULT_POLICY",
    "Degraded",
    "Failed",
    "FareBreakdown",
    "FareEstimator",
    "FareQuote",
    "Ok",
    "PricingError",
    "PricingPolicy",
    "QuoteResult",
    "RateConfig",
    "price",
]
