"""Stripe Checkout payment adapter.

Creates a hosted Checkout session for a single consultation and hands
the session id back to the website, which redirects the customer to it.
"""

from __future__ import annotations

import logging
from typing import Any

import stripe

from consultations.executor import run_in_executor
from consultations.models.booking import BookingRequest, display

logger = logging.getLogger(__name__)


class PaymentsNotConfigured(Exception):
    """No Stripe secret key was configured at startup."""


class StripeCheckout:
    """Builds one-line-item Checkout sessions for consultations."""

    def __init__(
        self,
        secret_key: str,
        success_url: str,
        cancel_url: str,
        currency: str = "usd",
        product_name: str = "Virtual Arborist Consultation",
        product_description: str = "Consultation with Proper Tree Care",
    ) -> None:
        if not secret_key:
            raise PaymentsNotConfigured("A Stripe secret key is required.")
        self._secret_key = secret_key
        self._success_url = success_url
        self._cancel_url = cancel_url
        self._currency = currency
        self._product_name = product_name
        self._product_description = product_description

    def session_params(self, booking: BookingRequest) -> dict[str, Any]:
        """Checkout session parameters for ``booking``."""
        metadata = {
            "name": booking.name,
            "email": booking.email,
            "phone": booking.phone,
            "startTime": booking.start_time,
            "notes": booking.notes,
        }
        return {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self._currency,
                        "product_data": {
                            "name": f"{self._product_name} ({booking.duration_text} minutes)",
                            "description": self._product_description,
                            # Stripe metadata values are strings; nulls are rejected
                            "metadata": {
                                k: display(v) for k, v in metadata.items() if v is not None
                            },
                        },
                        "unit_amount": booking.unit_amount,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": self._success_url,
            "cancel_url": self._cancel_url,
            "customer_email": booking.email,
        }

    async def create_session(self, booking: BookingRequest) -> str:
        """Create the Checkout session and return its id."""
        session = await run_in_executor(
            stripe.checkout.Session.create,
            api_key=self._secret_key,
            **self.session_params(booking),
        )
        logger.info("Created checkout session %s", session.id)
        return session.id
