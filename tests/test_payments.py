"""Tests for the Stripe Checkout adapter."""

from unittest.mock import MagicMock, patch

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from consultations.models.booking import BookingRequest
from consultations.payments.stripe_checkout import PaymentsNotConfigured, StripeCheckout


@pytest.fixture
def checkout():
    return StripeCheckout(
        secret_key="sk_test_123",
        success_url="https://propertreecare.com/success.html",
        cancel_url="https://propertreecare.com/consultation.html",
    )


class TestStripeCheckout:
    def test_requires_secret_key(self):
        with pytest.raises(PaymentsNotConfigured):
            StripeCheckout(secret_key="", success_url="s", cancel_url="c")

    def test_session_params(self, checkout, booking_payload):
        params = checkout.session_params(BookingRequest.model_validate(booking_payload))

        assert params["mode"] == "payment"
        assert params["payment_method_types"] == ["card"]
        assert params["customer_email"] == "jane@example.com"
        assert params["success_url"] == "https://propertreecare.com/success.html"
        assert params["cancel_url"] == "https://propertreecare.com/consultation.html"

        (item,) = params["line_items"]
        assert item["quantity"] == 1
        price_data = item["price_data"]
        assert price_data["currency"] == "usd"
        assert price_data["unit_amount"] == 4500
        product = price_data["product_data"]
        assert product["name"] == "Virtual Arborist Consultation (30 minutes)"
        assert product["description"] == "Consultation with Proper Tree Care"
        assert product["metadata"] == {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "startTime": "2026-03-15T14:00:00",
            "notes": "Oak tree leaning toward the house",
        }

    def test_string_price_is_truncated_to_integer(self, checkout, booking_payload):
        booking_payload["price"] = "7500"
        params = checkout.session_params(BookingRequest.model_validate(booking_payload))
        assert params["line_items"][0]["price_data"]["unit_amount"] == 7500

    def test_absent_metadata_is_dropped(self, checkout, booking_payload):
        booking_payload.pop("phone")
        booking_payload.pop("notes")
        params = checkout.session_params(BookingRequest.model_validate(booking_payload))
        metadata = params["line_items"][0]["price_data"]["product_data"]["metadata"]
        assert set(metadata) == {"name", "email", "startTime"}

    async def test_create_session_returns_id(self, checkout, booking_payload):
        with patch("stripe.checkout.Session.create") as create:
            create.return_value = MagicMock(id="cs_test_abc")
            session_id = await checkout.create_session(
                BookingRequest.model_validate(booking_payload)
            )

        assert session_id == "cs_test_abc"
        kwargs = create.call_args.kwargs
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 4500

    async def test_create_session_propagates_stripe_errors(self, checkout, booking_payload):
        with patch("stripe.checkout.Session.create", side_effect=RuntimeError("card_declined")):
            with pytest.raises(RuntimeError):
                await checkout.create_session(BookingRequest.model_validate(booking_payload))

    def test_metadata_values_are_strings(self, checkout, booking_payload):
        booking_payload["phone"] = 5550100
        params = checkout.session_params(BookingRequest.model_validate(booking_payload))
        metadata = params["line_items"][0]["price_data"]["product_data"]["metadata"]
        assert metadata["phone"] == "5550100"
