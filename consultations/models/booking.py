"""Pydantic models for booking requests.

Fields are accepted as whatever JSON value the website sent. Only
presence is checked; nothing is converted except the price, which is
read as an integer amount when the payment session is built.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fields a checkout request must carry (by wire name).
REQUIRED_BOOKING_FIELDS = (
    "name",
    "email",
    "duration",
    "price",
    "startTime",
    "endTime",
    "timezone",
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_blank(value: Any) -> bool:
    """True for the values a browser form treats as not filled in.

    ``None``, ``False``, ``""``, ``0`` and NaN are blank. Empty lists and
    objects count as present.
    """
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


def display(value: Any) -> str:
    """Text for ``value`` in customer-facing HTML and product names."""
    # JSON numbers like 60.0 read as "60"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_minor_units(value) -> Optional[int]:
    """Read an integer amount the way the website's ``parseInt`` did.

    Leading whitespace is skipped and the longest run of digits (with an
    optional sign) is taken, so ``"4500"``, ``4500.0`` and ``"4500 cents"``
    all give ``4500``. Anything without leading digits gives ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


class AvailabilityRequest(BaseModel):
    """Time window the website wants to book."""

    model_config = ConfigDict(populate_by_name=True)

    start_time: Any = Field(default=None, alias="startTime")
    end_time: Any = Field(default=None, alias="endTime")

    def is_complete(self) -> bool:
        return not (is_blank(self.start_time) or is_blank(self.end_time))


class BookingRequest(BaseModel):
    """Consultation details submitted from the booking form.

    Values are passed through to the calendar, payment and email bodies
    as the client sent them.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Any = None
    email: Any = None
    phone: Any = None
    duration: Any = None  # minutes
    price: Any = None  # minor currency units
    start_time: Any = Field(default=None, alias="startTime")
    end_time: Any = Field(default=None, alias="endTime")
    timezone: Any = None
    notes: Any = None
    photo_urls: list[Any] = Field(default_factory=list, alias="photoUrls")

    @field_validator("photo_urls", mode="before")
    @classmethod
    def _as_url_list(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            return [value]
        return value

    def missing_fields(self) -> list[str]:
        """Return wire names of required fields that are absent or blank."""
        values = self.model_dump(by_alias=True)
        return [f for f in REQUIRED_BOOKING_FIELDS if is_blank(values.get(f))]

    @property
    def unit_amount(self) -> Optional[int]:
        return parse_minor_units(self.price)

    @property
    def duration_text(self) -> str:
        return display(self.duration)
