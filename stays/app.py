"""FastAPI application: HTTP endpoints for quoting and booking stays.

Endpoints:

  GET    /health                                   Health check
  POST   /api/quotes                               Live price preview (no storage)
  POST   /api/bookings                             Create a booking
  GET    /api/bookings/{booking_id}                Booking detail (host, guest, admin)
  POST   /api/bookings/{booking_id}/status         Confirm / reject / cancel / complete
  POST   /api/bookings/{booking_id}/payment        Payment status (admin token)
  GET    /api/guests/{guest_id}/bookings           A guest's bookings
  GET    /api/hosts/{host_id}/bookings             A host's bookings, filtered and sorted
  GET    /api/hosts/{host_id}/stats                Host dashboard counters
  GET    /api/properties/{property_id}/calendar    Availability and blocked dates
  POST   /api/properties/{property_id}/availability
  DELETE /api/properties/{property_id}/availability?start_date=..&end_date=..
  POST   /api/properties/{property_id}/blocked-dates
  DELETE /api/properties/{property_id}/blocked-dates?start_date=..&end_date=..

Errors from the engine come back as ``{"error": code, "message": text}``.
"""

from __future__ import annotations

# Load .env into os.environ early so settings and any SDKs see it.
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from datetime import date
from decimal import Decimal
from typing import Optional

# Configure root logger early so all app loggers have a handler and are
# visible when run via `uvicorn stays.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from stays.auth import optional_actor, require_actor, require_admin_token
from stays.config import settings
from stays.engine.reporting import BookingFilter
from stays.errors import (
    BookingError,
    InvalidPricingInput,
    InvalidStatusTransition,
    InvalidStayRange,
    NotFound,
    OverlappingRange,
    PermissionDenied,
    StayLengthOutOfBounds,
    StayUnavailable,
)
from stays.models import Actor, AvailabilityWindow, BlockedRange, BookingRequest, Property
from stays.models.base import describe_errors
from stays.notifications import HttpEmailNotifier, LogNotifier, Notifier
from stays.repositories import InMemoryRepository
from stays.service import BookingService

log = logging.getLogger("stays.app")

_START_TIME = time.time()

ERROR_STATUS: dict[type[BookingError], int] = {
    InvalidStayRange: 422,
    StayLengthOutOfBounds: 422,
    InvalidPricingInput: 422,
    StayUnavailable: 409,
    InvalidStatusTransition: 409,
    OverlappingRange: 409,
    NotFound: 404,
    PermissionDenied: 403,
}


# ── Request bodies ────────────────────────────────────────────────


class QuoteBody(BaseModel):
    property_id: str
    check_in: date
    check_out: date
    guest_count: int = 1


class StatusBody(BaseModel):
    status: str
    reason: Optional[str] = Field(default=None, max_length=500)


class PaymentBody(BaseModel):
    status: str
    amount: Optional[Decimal] = None
    payment_id: Optional[str] = None


class RangeBody(BaseModel):
    start_date: date
    end_date: date
    reason: Optional[str] = None


def _calendar_payload(prop: Property) -> dict:
    return {
        "property_id": prop.id,
        "title": prop.title,
        "availability": [w.model_dump(mode="json") for w in prop.availability],
        "blocked_dates": [b.model_dump(mode="json") for b in prop.blocked_dates],
    }


def create_app(service: BookingService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Stays Booking Engine",
        description="Availability, pricing and booking for vacation rentals",
        version="0.1.0",
    )
    svc = service or _create_service()

    # ── Error mapping ─────────────────────────────────────────

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
        status_code = ERROR_STATUS.get(type(exc), 400)
        log.info("%s %s -> %d %s", request.method, request.url.path, status_code, exc.code)
        return JSONResponse(exc.to_dict(), status_code=status_code)

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check: confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Quotes and bookings ────────────────────────────────────

    @app.post("/api/quotes")
    async def create_quote(body: QuoteBody) -> JSONResponse:
        """Price a stay for the booking form; nothing is stored."""
        quote = await svc.quote(
            body.property_id, body.check_in, body.check_out, body.guest_count
        )
        return JSONResponse(quote.model_dump(mode="json"))

    @app.post("/api/bookings", status_code=201)
    async def create_booking(
        body: BookingRequest,
        actor: Actor | None = Depends(optional_actor),
    ) -> JSONResponse:
        record = await svc.create_booking(body, actor)
        return JSONResponse(record.model_dump(mode="json"), status_code=201)

    @app.get("/api/bookings/{booking_id}")
    async def get_booking(booking_id: str, actor: Actor = Depends(require_actor)):
        record = await svc.get_booking(booking_id, actor)
        return JSONResponse(record.model_dump(mode="json"))

    @app.post("/api/bookings/{booking_id}/status")
    async def update_status(
        booking_id: str,
        body: StatusBody,
        actor: Actor = Depends(require_actor),
    ) -> JSONResponse:
        record = await svc.change_status(booking_id, body.status, actor, reason=body.reason)
        return JSONResponse(record.model_dump(mode="json"))

    @app.post(
        "/api/bookings/{booking_id}/payment",
        dependencies=[Depends(require_admin_token)],
    )
    async def update_payment(booking_id: str, body: PaymentBody) -> JSONResponse:
        record = await svc.change_payment_status(
            booking_id, body.status, amount=body.amount, payment_id=body.payment_id
        )
        return JSONResponse(record.model_dump(mode="json"))

    @app.get("/api/guests/{guest_id}/bookings")
    async def guest_bookings(guest_id: str, actor: Actor = Depends(require_actor)):
        records = await svc.guest_bookings(guest_id, actor)
        return JSONResponse({
            "bookings": [r.model_dump(mode="json") for r in records],
            "count": len(records),
        })

    # ── Host dashboard ─────────────────────────────────────────

    @app.get("/api/hosts/{host_id}/bookings")
    async def host_bookings(
        host_id: str,
        status: str = "all",
        sort_by: str = "check_in",
        search: Optional[str] = None,
        timeframe: str = "upcoming",
        actor: Actor = Depends(require_actor),
    ) -> JSONResponse:
        try:
            filters = BookingFilter(
                status=status, sort_by=sort_by, search=search, timeframe=timeframe
            )
        except ValidationError as exc:
            return JSONResponse(
                {"error": "invalid_filter", "message": describe_errors(exc)},
                status_code=422,
            )
        records = await svc.host_bookings(host_id, actor, filters)
        return JSONResponse({
            "bookings": [r.model_dump(mode="json") for r in records],
            "total_count": len(records),
        })

    @app.get("/api/hosts/{host_id}/stats")
    async def host_stats(host_id: str, actor: Actor = Depends(require_actor)):
        stats = await svc.host_stats(host_id, actor)
        return JSONResponse(stats.model_dump(mode="json"))

    # ── Host calendar ──────────────────────────────────────────

    @app.get("/api/properties/{property_id}/calendar")
    async def get_calendar(property_id: str, actor: Actor = Depends(require_actor)):
        prop = await svc.calendar(property_id, actor)
        return JSONResponse(_calendar_payload(prop))

    @app.post("/api/properties/{property_id}/availability")
    async def add_availability(
        property_id: str, body: RangeBody, actor: Actor = Depends(require_actor)
    ) -> JSONResponse:
        window = AvailabilityWindow.build(body.start_date, body.end_date)
        prop = await svc.add_availability(property_id, window, actor)
        return JSONResponse(_calendar_payload(prop))

    @app.delete("/api/properties/{property_id}/availability")
    async def remove_availability(
        property_id: str,
        start_date: date,
        end_date: date,
        actor: Actor = Depends(require_actor),
    ) -> JSONResponse:
        prop = await svc.remove_availability(property_id, start_date, end_date, actor)
        return JSONResponse(_calendar_payload(prop))

    @app.post("/api/properties/{property_id}/blocked-dates")
    async def add_blocked_dates(
        property_id: str, body: RangeBody, actor: Actor = Depends(require_actor)
    ) -> JSONResponse:
        block = BlockedRange.build(body.start_date, body.end_date, reason=body.reason)
        prop = await svc.add_blocked_range(property_id, block, actor)
        return JSONResponse(_calendar_payload(prop))

    @app.delete("/api/properties/{property_id}/blocked-dates")
    async def remove_blocked_dates(
        property_id: str,
        start_date: date,
        end_date: date,
        actor: Actor = Depends(require_actor),
    ) -> JSONResponse:
        prop = await svc.remove_blocked_range(property_id, start_date, end_date, actor)
        return JSONResponse(_calendar_payload(prop))

    return app


# ── Helper functions ──────────────────────────────────────────────

def _create_notifier() -> Notifier:
    if settings.email_api_url:
        return HttpEmailNotifier(
            api_url=settings.email_api_url,
            api_key=settings.email_api_key,
            sender=settings.email_from,
        )
    return LogNotifier()


def _create_service() -> BookingService:
    """Build a BookingService from settings.

    Uses the in-memory repository, seeded from ``STAYS_DATA_FILE`` when set.
    """
    for warning in settings.validate_startup():
        log.warning(warning)

    if settings.data_file:
        repository = InMemoryRepository.from_json(settings.data_file)
    else:
        repository = InMemoryRepository()

    return BookingService(
        repository,
        _create_notifier(),
        unrestricted_when_empty=settings.unrestricted_when_empty,
        currency=settings.currency,
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
        "stays.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )
