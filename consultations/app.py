"""FastAPI application — HTTP endpoints for booking virtual consultations.

Endpoints:

  GET  /events                   All events on the business calendar
  POST /check-availability       Is a startTime/endTime window free?
  POST /upload-photos            Store up to 5 photos, return their URLs
  POST /create-checkout-session  Book the consultation, return a Stripe session id
  GET  /health                   Health check

The checkout flow:
  1. Website uploads photos to /upload-photos and keeps the URLs
  2. Website checks the slot with /check-availability
  3. Website posts the booking form (with photoUrls) to /create-checkout-session
  4. We put the event on the calendar, create the Checkout session and
     email the client, then return the session id for the redirect

Adapter failures are logged and answered with a generic message; the
underlying error never reaches the caller.
"""

from __future__ import annotations

# Load .env into os.environ before settings are read.
from dotenv import load_dotenv
load_dotenv()

import json
import logging
import time
from dataclasses import dataclass
from typing import Optional

# Configure root logger early so all app loggers have a handler and are
# visible when run via `uvicorn consultations.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from consultations.booking import ConsultationBooking
from consultations.calendar_providers.base import CalendarProvider
from consultations.calendar_providers.graph import GraphCalendarProvider
from consultations.config import Settings, settings as default_settings
from consultations.models.booking import AvailabilityRequest, BookingRequest
from consultations.payments.stripe_checkout import StripeCheckout
from consultations.storage.azure_blob import AzureBlobPhotoStore

log = logging.getLogger("consultations.app")

_START_TIME = time.time()

MAX_PHOTOS = 5
MAX_PHOTO_BYTES = 10 * 1024 * 1024

GRAPH_NOT_CONFIGURED = "Microsoft Graph not configured"
STORAGE_NOT_CONFIGURED = "Azure Blob Storage not configured"
UPLOAD_FAILED = "Failed to upload photos"


@dataclass
class Adapters:
    """Process-wide service clients. ``None`` means not configured."""

    calendar: Optional[CalendarProvider] = None
    photo_store: Optional[AzureBlobPhotoStore] = None
    payments: Optional[StripeCheckout] = None


def build_adapters(cfg: Settings) -> Adapters:
    """Create the adapter clients that have credentials in ``cfg``."""
    adapters = Adapters()

    if cfg.graph_configured:
        adapters.calendar = GraphCalendarProvider(
            tenant_id=cfg.tenant_id,
            client_id=cfg.client_id,
            client_secret=cfg.client_secret,
            mailbox=cfg.graph_mailbox,
        )

    if cfg.storage_configured:
        try:
            adapters.photo_store = AzureBlobPhotoStore(
                cfg.azure_storage_connection_string,
                container_name=cfg.azure_storage_container,
            )
        except Exception as e:
            log.warning("Azure Blob Storage not configured: %s", e)

    if cfg.payments_configured:
        adapters.payments = StripeCheckout(
            secret_key=cfg.stripe_secret_key,
            success_url=cfg.checkout_success_url,
            cancel_url=cfg.checkout_cancel_url,
            currency=cfg.checkout_currency,
            product_description=f"Consultation with {cfg.business_name}",
        )

    return adapters


async def _json_body(request: Request) -> dict:
    """Request body as a dict; anything that is not a JSON object reads as empty."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(
    cfg: Optional[Settings] = None,
    adapters: Optional[Adapters] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if cfg is None:
        cfg = default_settings
    if adapters is None:
        adapters = build_adapters(cfg)

    for warning in cfg.validate_startup():
        log.warning(warning)

    app = FastAPI(
        title="Consultation Booking",
        description="Calendar, photo upload and checkout backend for virtual consultations",
        version="0.1.0",
    )
    app.state.adapters = adapters
    app.state.booking = ConsultationBooking(
        calendar=adapters.calendar,
        payments=adapters.payments,
        business_name=cfg.business_name,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Uptime plus which adapters were configured at startup."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({
            "status": "ok",
            "uptime": uptime,
            "adapters": {
                "calendar": adapters.calendar is not None,
                "storage": adapters.photo_store is not None,
                "payments": adapters.payments is not None,
            },
        })

    # ── Calendar ───────────────────────────────────────────────

    @app.get("/events")
    async def list_events() -> JSONResponse:
        if adapters.calendar is None:
            return _error(GRAPH_NOT_CONFIGURED, 503)
        try:
            events = await adapters.calendar.list_events()
        except Exception as e:
            log.error("Error fetching events: %s", e, exc_info=True)
            return _error("Failed to fetch events", 500)
        return JSONResponse(events)

    @app.post("/check-availability")
    async def check_availability(request: Request) -> JSONResponse:
        """Reject the window if any calendar event overlaps it."""
        window = AvailabilityRequest.model_validate(await _json_body(request))
        if not window.is_complete():
            return _error("Missing startTime or endTime", 400)

        if adapters.calendar is None:
            return _error(GRAPH_NOT_CONFIGURED, 503)
        try:
            available = await adapters.calendar.is_slot_available(
                window.start_time, window.end_time
            )
        except Exception as e:
            log.error("Error checking availability: %s", e, exc_info=True)
            return _error("Failed to check availability", 500)

        if not available:
            return _error("Time slot is booked", 400)
        return JSONResponse({"available": True})

    # ── Photos ─────────────────────────────────────────────────

    @app.post("/upload-photos")
    async def upload_photos(
        photos: Optional[list[UploadFile]] = File(default=None),
    ) -> JSONResponse:
        """Store the ``photos`` files in request order and return their URLs."""
        if adapters.photo_store is None:
            return _error(STORAGE_NOT_CONFIGURED, 503)

        photos = photos or []
        if len(photos) > MAX_PHOTOS:
            log.error("Photo upload error: %d files sent, limit is %d", len(photos), MAX_PHOTOS)
            return _error(UPLOAD_FAILED, 500)

        files: list[tuple[str, bytes]] = []
        for photo in photos:
            contents = await photo.read()
            if len(contents) > MAX_PHOTO_BYTES:
                log.error(
                    "Photo upload error: %s is %d bytes, limit is %d",
                    photo.filename, len(contents), MAX_PHOTO_BYTES,
                )
                return _error(UPLOAD_FAILED, 500)
            files.append((photo.filename or "", contents))

        try:
            urls = await adapters.photo_store.upload_photos(files)
        except Exception as e:
            log.error("Photo upload error: %s", e, exc_info=True)
            return _error(UPLOAD_FAILED, 500)
        return JSONResponse(urls)

    # ── Checkout ───────────────────────────────────────────────

    @app.post("/create-checkout-session")
    async def create_checkout_session(request: Request) -> JSONResponse:
        booking = BookingRequest.model_validate(await _json_body(request))
        missing = booking.missing_fields()
        if missing:
            log.info("Booking request missing %s", ", ".join(missing))
            return _error("Missing required fields", 400)

        try:
            session_id = await app.state.booking.book(booking)
        except Exception as e:
            log.error("Checkout session error: %s", e, exc_info=True)
            return _error("Failed to create checkout session", 500)
        return JSONResponse({"id": session_id})

    return app


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "consultations.app:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_config=log_config,
    )
