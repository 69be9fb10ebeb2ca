"""Tests for the fare formula and FareEstimator."""

import asyncio
import math
from unittest.mock import AsyncMock

import httpx
import pytest

from rideconnect.geo import Coordinate, Geocoder, RouteEstimate, Router
from rideconnect.geo.locationiq import LocationIQGeocoder
from rideconnect.pricing import (
    DEFAULT_POLICY,
    Degraded,
    Failed,
    FareEstimator,
    Ok,
    PricingPolicy,
    RateConfig,
    price,
)
from rideconnect.pricing.rates import round_cents


# ── price() ─────────────────────────────────────────────────────────


class TestPrice:
    def test_standard_half_hour(self):
        total, breakdown = price(0.5, False)
        assert total == 30.0
        assert breakdown.time_charge == 30.0
        assert breakdown.passenger_fee == 0.0

    def test_airport_rate(self):
        total, _ = price(0.5, True)
        assert total == 40.0

    def test_minimum_fare_standard(self):
        total, _ = price(0.0, False)
        assert total == 16.0

    def test_minimum_fare_airport(self):
        total, _ = price(0.1, True)
        assert total == 30.0

    def test_extra_passengers_charged(self):
        total, breakdown = price(0.5, True, passenger_count=3)
        assert breakdown.passenger_fee == 10.0
        assert total == 50.0

    def test_first_passenger_free(self):
        _, breakdown = price(1.0, False, passenger_count=1)
        assert breakdown.passenger_fee == 0.0

    def test_breakdown_sums_to_total_above_minimum(self):
        total, breakdown = price(1.25, False, passenger_count=4)
        assert breakdown.subtotal == pytest.approx(total)

    def test_base_fare_from_policy(self):
        policy = PricingPolicy(base_fare=10.0)
        total, breakdown = price(0.5, False, policy=policy)
        assert breakdown.base_fare == 10.0
        assert total == 40.0

    def test_rounds_half_up(self):
        policy = PricingPolicy(
            standard=RateConfig(hourly_rate=60.0, minimum_fare=0.0),
            base_fare=20.005,
        )
        total, _ = price(0.0, False, policy=policy)
        assert total == 20.01

    def test_round_cents_avoids_bankers_rounding(self):
        assert round_cents(2.675) == 2.68
        assert round_cents(0.125) == 0.13

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            price(-0.1, False)

    @pytest.mark.parametrize("hours", [float("nan"), float("inf")])
    def test_non_finite_duration_rejected(self, hours):
        with pytest.raises(ValueError):
            price(hours, False)

    @pytest.mark.parametrize("count", [0, 7])
    def test_passenger_count_out_of_range(self, count):
        with pytest.raises(ValueError):
            price(1.0, False, passenger_count=count)

    def test_never_below_minimum(self):
        for passengers in range(1, 7):
            for tenth in range(0, 40):
                hours = tenth / 10
                assert price(hours, False, passengers)[0] >= 16.0
                assert price(hours, True, passengers)[0] >= 30.0

    def test_monotonic_in_duration(self):
        for airport in (False, True):
            totals = [price(m / 60, airport, 2)[0] for m in range(0, 180, 3)]
            assert totals == sorted(totals)

    def test_monotonic_in_passengers(self):
        for hours in (0.0, 0.2, 0.75, 2.0):
            totals = [price(hours, False, p)[0] for p in range(1, 7)]
            assert totals == sorted(totals)

    def test_fallback_price(self):
        assert DEFAULT_POLICY.fallback_price(False) == 26.0
        assert DEFAULT_POLICY.fallback_price(True) == 40.0


# ── FareEstimator ───────────────────────────────────────────────────


STRIP = Coordinate(lon=-115.1725, lat=36.1147)
AIRPORT = Coordinate(lon=-115.1522, lat=36.0840)


def _geocoder(*results):
    geocoder = AsyncMock(spec=Geocoder)
    geocoder.resolve.side_effect = list(results)
    return geocoder


def _router(result):
    router = AsyncMock(spec=Router)
    router.route.return_value = result
    return router


class TestFareEstimatorLive:
    async def test_ok_with_both_providers(self):
        estimator = FareEstimator(
            geocoder=_geocoder(STRIP, AIRPORT),
            router=_router(RouteEstimate(duration_seconds=1800, distance_meters=16093.4)),
        )
        result = await estimator.quote("Las Vegas Strip", "Harry Reid Airport", False)

        assert isinstance(result, Ok)
        assert result.status == "ok"
        assert result.quote.total_price == 30.0
        assert result.quote.duration_hours == pytest.approx(0.5)
        assert result.quote.distance_miles == pytest.approx(10.0, abs=0.01)
        assert result.quote.rate_type == "standard"

    async def test_router_receives_geocoded_points(self):
        router = _router(RouteEstimate(duration_seconds=600, distance_meters=5000))
        estimator = FareEstimator(geocoder=_geocoder(STRIP, AIRPORT), router=router)
        await estimator.quote("a", "b", False)
        router.route.assert_awaited_once_with(STRIP, AIRPORT)

    async def test_airport_flag_sets_rate_type(self):
        estimator = FareEstimator(
            geocoder=_geocoder(STRIP, AIRPORT),
            router=_router(RouteEstimate(duration_seconds=3600, distance_meters=30000)),
        )
        result = await estimator.quote("x", "y", True)
        assert result.quote.rate_type == "airport"
        assert result.quote.is_airport_route is True
        assert result.quote.total_price == 80.0

    async def test_passenger_count_flows_into_price(self):
        estimator = FareEstimator(
            geocoder=_geocoder(STRIP, AIRPORT),
            router=_router(RouteEstimate(duration_seconds=3600, distance_meters=30000)),
        )
        result = await estimator.quote("x", "y", False, passenger_count=4)
        assert result.quote.breakdown.passenger_fee == 15.0
        assert result.quote.total_price == 75.0

    async def test_geocoding_runs_concurrently(self):
        both_started = asyncio.Event()
        started = []

        class SlowGeocoder(Geocoder):
            async def resolve(self, address):
                started.append(address)
                if len(started) == 2:
                    both_started.set()
                await asyncio.wait_for(both_started.wait(), timeout=1)
                return STRIP

        estimator = FareEstimator(
            geocoder=SlowGeocoder(),
            router=_router(RouteEstimate(duration_seconds=0, distance_meters=0)),
        )
        result = await estimator.quote("a", "b", False)
        assert isinstance(result, Ok)
        assert sorted(started) == ["a", "b"]


class TestFareEstimatorFallbacks:
    async def test_no_providers_unknown_addresses_minimum_fare(self):
        estimator = FareEstimator()
        result = await estimator.quote("123 Main St", "456 Oak Ave", False)

        assert isinstance(result, Degraded)
        assert result.quote.total_price == 16.0
        assert result.quote.distance_miles == pytest.approx(0.0)
        assert "router not configured" in result.reasons

    async def test_no_providers_airport_rate(self):
        estimator = FareEstimator()
        result = await estimator.quote("Harry Reid Airport", "Bellagio", True)
        assert isinstance(result, Degraded)
        assert result.quote.rate_type == "airport"
        assert result.quote.total_price >= 30.0
        assert result.quote.distance_miles > 0

    async def test_geocoder_none_falls_back_to_landmarks(self):
        router = _router(RouteEstimate(duration_seconds=900, distance_meters=8000))
        estimator = FareEstimator(geocoder=_geocoder(None, None), router=router)
        result = await estimator.quote("Venetian", "Luxor", False)

        assert isinstance(result, Degraded)
        origin, destination = router.route.await_args.args
        assert origin == Coordinate(lon=-115.1710, lat=36.1212)
        assert destination == Coordinate(lon=-115.1761, lat=36.0955)

    async def test_geocoder_exception_is_degraded(self):
        geocoder = AsyncMock(spec=Geocoder)
        geocoder.resolve.side_effect = RuntimeError("provider down")
        estimator = FareEstimator(
            geocoder=geocoder,
            router=_router(RouteEstimate(duration_seconds=1800, distance_meters=1000)),
        )
        result = await estimator.quote("a", "b", False)
        assert isinstance(result, Degraded)
        assert any("provider down" in r for r in result.reasons)
        assert result.quote.total_price == 30.0

    async def test_router_none_uses_estimate(self):
        estimator = FareEstimator(geocoder=_geocoder(STRIP, AIRPORT), router=_router(None))
        result = await estimator.quote("a", "b", False)
        assert isinstance(result, Degraded)
        assert result.reasons == ["no route from router"]
        assert result.quote.distance_miles > 0

    async def test_router_exception_uses_estimate(self):
        router = AsyncMock(spec=Router)
        router.route.side_effect = TimeoutError("slow")
        estimator = FareEstimator(geocoder=_geocoder(STRIP, AIRPORT), router=router)
        result = await estimator.quote("a", "b", True)
        assert isinstance(result, Degraded)
        assert result.quote.total_price >= 30.0

    async def test_router_called_once_no_retry(self):
        router = _router(None)
        estimator = FareEstimator(geocoder=_geocoder(STRIP, AIRPORT), router=router)
        await estimator.quote("a", "b", False)
        assert router.route.await_count == 1


class TestFareEstimatorFailures:
    async def test_blank_address_fails_with_fallback_price(self):
        result = await FareEstimator().quote("   ", "Bellagio", False)
        assert isinstance(result, Failed)
        assert result.status == "failed"
        assert result.error.fallback_price == 26.0

    async def test_non_finite_coordinates_return_fallback(self):
        bad = Coordinate(lon=-115.1, lat=float("nan"))
        estimator = FareEstimator(geocoder=_geocoder(bad, STRIP))
        result = await estimator.quote("a", "b", False)
        assert isinstance(result, Failed)
        assert result.error.fallback_price == 26.0

    async def test_nan_from_locationiq_uses_landmarks(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json=[{"lat": "NaN", "lon": "-115.1"}])
        )
        estimator = FareEstimator(geocoder=LocationIQGeocoder("k", transport=transport))
        result = await estimator.quote("Bellagio", "Luxor", False)
        assert isinstance(result, Degraded)
        assert "address not found by geocoder" in result.reasons
        assert math.isfinite(result.quote.total_price)
        assert result.quote.total_price >= 16.0

    async def test_unexpected_error_returns_fallback(self):
        result = await FareEstimator().quote("a", "b", True, passenger_count=7)
        assert isinstance(result, Failed)
        assert result.error.fallback_price == 40.0
        assert "unavailable" in result.error.message
