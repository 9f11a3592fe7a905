"""Abstract base class for calendar/mail providers.

Defines the interface for reading the booking calendar, creating
consultation events and sending confirmation mail from one mailbox.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class CalendarEvent:
    """A consultation event to be created.

    ``start``, ``end`` and ``timezone`` are passed to the provider exactly
    as the client sent them, normally ISO 8601 strings and an IANA name.
    """

    subject: str
    html_body: str
    start: Any
    end: Any
    timezone: Any
    attendee_email: Any
    attendee_name: Any = ""


@dataclass
class MailMessage:
    """An HTML email to a single recipient."""

    subject: str
    html_body: str
    recipient: str


class CalendarProvider(ABC):
    """Abstract calendar and mail backend.

    Subclasses implement the raw provider calls; availability and
    send-after-create sequencing are built on top of them here.
    """

    @abstractmethod
    async def list_events(self) -> list[dict]:
        """Return every event on the mailbox calendar."""

    @abstractmethod
    async def get_events_in_window(self, start: str, end: str) -> list[dict]:
        """Return events that intersect the ``[start, end)`` window.

        Boundary handling is whatever the provider's own window query does.
        """

    @abstractmethod
    async def create_event(self, event: CalendarEvent) -> dict:
        """Create a calendar event and return the provider's record of it."""

    @abstractmethod
    async def create_message(self, message: MailMessage) -> dict:
        """Create a draft message. The result carries the draft ``id``."""

    @abstractmethod
    async def send_message(self, message_id: str) -> None:
        """Send a previously created draft."""

    async def is_slot_available(self, start: str, end: str) -> bool:
        """A slot is free only if no event overlaps it at all."""
        events = await self.get_events_in_window(start, end)
        return len(events) == 0

    async def send_mail(self, message: MailMessage) -> str:
        """Create ``message`` as a draft, then send that draft.

        Returns:
            The id of the sent draft.
        """
        draft = await self.create_message(message)
        message_id = draft["id"]
        await self.send_message(message_id)
        return message_id
