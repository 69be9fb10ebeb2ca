"""FastAPI application: HTTP endpoints for ride booking.

Endpoints:

  GET    /health                         Health check
  GET    /api/auth/user                  Admin key check for the dashboard
  GET    /api/timeslots/{date}           All slots for a date (generated on first use)
  GET    /api/timeslots/{date}/available Open slots for a date
  POST   /api/timeslots                  Create a slot (admin)
  PATCH  /api/timeslots/{id}             Edit a slot (admin)
  DELETE /api/timeslots/{id}             Remove a slot (admin)
  POST   /api/quote                      Fare estimate for a pickup/drop-off pair
  POST   /api/bookings                   Create a booking
  GET    /api/bookings/{id}              One booking (checkout page)
  GET    /api/bookings                   All bookings (admin)
  GET    /api/bookings/date/{date}       Bookings for a date
  PATCH  /api/bookings/{id}/status       Change booking status (admin)
  GET    /api/dashboard/stats            Dashboard counters (admin)

Collaborators (estimator, slot manager, booking service) are built once
in create_app and kept on ``app.state``; tests pass their own.
"""

from __future__ import annotations

# Load .env into os.environ before settings are read by anything else.
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

# Configure root logger early so all app loggers have a handler and are
# visible when run via `uvicorn rideconnect.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from rideconnect.auth import is_valid_admin_key, require_admin_key
from rideconnect.bookings import BookingService
from rideconnect.config import settings
from rideconnect.geo import build_geocoder, build_router
from rideconnect.models import Booking, BookingCreate, BookingStatusUpdate, TimeSlot
from rideconnect.pricing import Degraded, Failed, FareEstimator, PricingPolicy
from rideconnect.slots import SlotAvailabilityManager, SlotValidationError, parse_date
from rideconnect.storage import DuplicateSlotError, InMemoryBookingStore, InMemorySlotStore

log = logging.getLogger("rideconnect.app")

_START_TIME = time.time()


class QuoteRequest(BaseModel):
    pickup_location: str
    dropoff_location: str
    is_airport_route: bool = False
    passenger_count: int = Field(default=1, ge=1, le=6)


class TimeSlotCreate(BaseModel):
    # Plain strings: format problems are reported by validate_time_slot.
    date: str = ""
    start_time: str = ""
    end_time: str = ""
    is_available: bool = True


def create_app(
    estimator: Optional[FareEstimator] = None,
    slots: Optional[SlotAvailabilityManager] = None,
    bookings: Optional[BookingService] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    for warning in settings.validate_startup():
        log.warning(warning)

    if estimator is None:
        estimator = FareEstimator(
            geocoder=build_geocoder(settings.locationiq_api_key, settings.http_timeout_seconds),
            router=build_router(settings.openroute_api_key, settings.http_timeout_seconds),
            policy=PricingPolicy.from_settings(settings),
        )
    if slots is None:
        slots = SlotAvailabilityManager(
            InMemorySlotStore(),
            start_hour=settings.slot_start_hour,
            end_hour=settings.slot_end_hour,
            interval_minutes=settings.slot_interval_minutes,
            timezone=settings.business_timezone,
        )
    if bookings is None:
        bookings = BookingService(InMemoryBookingStore(), slots)

    app = FastAPI(
        title="RideConnect",
        description="Ride booking with fare estimates and time-slot scheduling",
        version="0.1.0",
    )
    app.state.estimator = estimator
    app.state.slots = slots
    app.state.bookings = bookings

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check, confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    @app.get("/api/auth/user")
    async def auth_user(request: Request) -> JSONResponse:
        """Tell the admin dashboard whether its stored key is valid."""
        candidate = request.headers.get("x-admin-key") or request.query_params.get("adminKey")
        if not is_valid_admin_key(candidate):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        return JSONResponse({"is_admin": True, "id": "admin"})

    # ── Time slots ─────────────────────────────────────────────

    @app.get("/api/timeslots/{date}", response_model=list[TimeSlot])
    async def get_time_slots(date: str) -> list[TimeSlot]:
        _check_date(date)
        return await slots.ensure_slots_for_date(date)

    @app.get("/api/timeslots/{date}/available", response_model=list[TimeSlot])
    async def get_available_time_slots(date: str) -> list[TimeSlot]:
        _check_date(date)
        return await slots.list_available(date)

    @app.post(
        "/api/timeslots",
        response_model=TimeSlot,
        dependencies=[Depends(require_admin_key)],
    )
    async def create_time_slot(body: TimeSlotCreate) -> TimeSlot:
        try:
            return await slots.create_slot(
                body.date, body.start_time, body.end_time, body.is_available
            )
        except SlotValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DuplicateSlotError as e:
            raise HTTPException(status_code=409, detail=str(e))

    @app.patch(
        "/api/timeslots/{slot_id}",
        response_model=TimeSlot,
        dependencies=[Depends(require_admin_key)],
    )
    async def update_time_slot(slot_id: str, body: dict[str, Any]) -> TimeSlot:
        try:
            slot = await slots.update_slot(slot_id, body)
        except SlotValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DuplicateSlotError as e:
            raise HTTPException(status_code=409, detail=str(e))
        if slot is None:
            raise HTTPException(status_code=404, detail="Time slot not found")
        return slot

    @app.delete("/api/timeslots/{slot_id}", dependencies=[Depends(require_admin_key)])
    async def delete_time_slot(slot_id: str) -> JSONResponse:
        if not await slots.delete_slot(slot_id):
            raise HTTPException(status_code=404, detail="Time slot not found")
        return JSONResponse({"message": "Time slot deleted successfully"})

    # ── Pricing ────────────────────────────────────────────────

    @app.post("/api/quote")
    async def quote(body: QuoteRequest) -> JSONResponse:
        """Estimate a fare. Always answers with a usable price."""
        result = await estimator.quote(
            body.pickup_location,
            body.dropoff_location,
            body.is_airport_route,
            body.passenger_count,
        )
        payload: dict[str, Any] = {"status": result.status}
        if isinstance(result, Failed):
            payload["error"] = result.error.model_dump()
        else:
            payload["quote"] = result.quote.model_dump()
        if isinstance(result, Degraded):
            payload["reasons"] = result.reasons
        return JSONResponse(payload)

    # ── Bookings ───────────────────────────────────────────────

    @app.post("/api/bookings", response_model=Booking)
    async def create_booking(body: BookingCreate) -> Booking:
        return await bookings.create(body)

    @app.get(
        "/api/bookings",
        response_model=list[Booking],
        dependencies=[Depends(require_admin_key)],
    )
    async def list_bookings() -> list[Booking]:
        return await bookings.list()

    @app.get("/api/bookings/date/{date}", response_model=list[Booking])
    async def list_bookings_by_date(date: str) -> list[Booking]:
        _check_date(date)
        return await bookings.list_by_date(date)

    @app.get("/api/bookings/{booking_id}", response_model=Booking)
    async def get_booking(booking_id: str) -> Booking:
        booking = await bookings.get(booking_id)
        if booking is None:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    @app.patch(
        "/api/bookings/{booking_id}/status",
        response_model=Booking,
        dependencies=[Depends(require_admin_key)],
    )
    async def update_booking_status(booking_id: str, body: BookingStatusUpdate) -> Booking:
        booking = await bookings.update_status(
            booking_id, body.status, body.payment_intent_id
        )
        if booking is None:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    @app.get("/api/dashboard/stats", dependencies=[Depends(require_admin_key)])
    async def dashboard_stats() -> JSONResponse:
        today = datetime.now(tz=ZoneInfo(settings.business_timezone)).date()
        return JSONResponse(await bookings.dashboard_stats(today))

    return app


# ── Helper functions ──────────────────────────────────────────────

def _check_date(value: str) -> None:
    """Reject path dates that are not YYYY-MM-DD."""
    try:
        parse_date(value)
    except ValueError:
        raise HTTPException(
            status_code=400, detail=f"Invalid date {value!r}, expected YYYY-MM-DD"
        )


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "rideconnect.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )
