"""Data models for the booking API."""

from .booking import AvailabilityRequest, BookingRequest, parse_minor_units

__all__ = ["AvailabilityRequest", "BookingRequest", "parse_minor_units"]
