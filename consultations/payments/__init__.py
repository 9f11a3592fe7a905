"""Payment session providers."""

from .stripe_checkout import PaymentsNotConfigured, StripeCheckout

__all__ = ["PaymentsNotConfigured", "StripeCheckout"]
