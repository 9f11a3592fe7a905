"""Consultation booking flow.

``ConsultationBooking.book`` runs the checkout chain for one request:

  1. create the consultation event on the business calendar
  2. create the Stripe Checkout session
  3. email the client a confirmation

Steps 1 and 3 are skipped when no calendar provider is configured. Each
step waits for the previous one; a failure at any step propagates and
earlier side effects (an event already on the calendar) are not undone.

Client-supplied text is interpolated into the HTML bodies as-is.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from consultations.calendar_providers.base import (
    CalendarEvent,
    CalendarProvider,
    MailMessage,
)
from consultations.models.booking import BookingRequest, display, is_blank
from consultations.payments.stripe_checkout import PaymentsNotConfigured, StripeCheckout

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Consultation Booking Confirmation"


def format_start_time(value: Any) -> str:
    """Render a start time as e.g. ``March 15, 2026 2:00 PM``.

    ISO 8601 strings keep the wall-clock time written in them. Numbers are
    epoch milliseconds and are shown in UTC. Anything else that does not
    parse is returned as text.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return display(value)
    else:
        text = display(value)
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return text
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{dt:%B} {dt.day}, {dt.year} {hour}:{dt:%M} {meridiem}"


def _or_none(value: Any) -> str:
    return "None" if is_blank(value) else display(value)


def _photo_list(urls: list) -> str:
    return "<br>".join(display(u) for u in urls) or "None"


def event_body(booking: BookingRequest) -> str:
    return (
        f"Client: {display(booking.name)}<br>"
        f"Email: {display(booking.email)}<br>"
        f"Phone: {_or_none(booking.phone)}<br>"
        f"Notes: {_or_none(booking.notes)}<br>"
        f"Photos: {_photo_list(booking.photo_urls)}"
    )


def confirmation_body(booking: BookingRequest, business_name: str) -> str:
    return (
        f"Dear {display(booking.name)},<br>"
        f"Your {booking.duration_text}-minute consultation is confirmed for "
        f"{format_start_time(booking.start_time)} ({display(booking.timezone)}).<br>"
        f"Notes: {_or_none(booking.notes)}<br>"
        f"Photos: {_photo_list(booking.photo_urls)}<br>"
        f"Thank you for choosing {business_name}!"
    )


class ConsultationBooking:
    """Books a consultation across calendar, payments and mail."""

    def __init__(
        self,
        calendar: Optional[CalendarProvider],
        payments: Optional[StripeCheckout],
        business_name: str = "Proper Tree Care",
    ) -> None:
        self._calendar = calendar
        self._payments = payments
        self._business_name = business_name

    def build_event(self, booking: BookingRequest) -> CalendarEvent:
        return CalendarEvent(
            subject=f"Consultation with {display(booking.name)}",
            html_body=event_body(booking),
            start=booking.start_time,
            end=booking.end_time,
            timezone=booking.timezone,
            attendee_email=booking.email,
            attendee_name=booking.name,
        )

    def build_confirmation(self, booking: BookingRequest) -> MailMessage:
        return MailMessage(
            subject=CONFIRMATION_SUBJECT,
            html_body=confirmation_body(booking, self._business_name),
            recipient=booking.email,
        )

    async def book(self, booking: BookingRequest) -> str:
        """Run the booking chain and return the checkout session id.

        Raises:
            PaymentsNotConfigured: no Stripe key was configured.
            Exception: whatever the calendar, Stripe or mail call raised.
        """
        if self._calendar is not None:
            await self._calendar.create_event(self.build_event(booking))

        if self._payments is None:
            raise PaymentsNotConfigured("Stripe is not configured")
        session_id = await self._payments.create_session(booking)

        if self._calendar is not None:
            await self._calendar.send_mail(self.build_confirmation(booking))

        logger.info("Booked consultation, checkout session %s", session_id)
        return session_id
