"""Shared fakes for the booking tests."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from consultations.calendar_providers.base import (
    CalendarEvent,
    CalendarProvider,
    MailMessage,
)


class FakeCalendar(CalendarProvider):
    """In-memory CalendarProvider that records every call."""

    def __init__(self, events=None, window_events=None):
        self.events = list(events or [])
        self.window_events = list(window_events or [])
        self.windows: list[tuple[str, str]] = []
        self.created_events: list[CalendarEvent] = []
        self.drafts: list[MailMessage] = []
        self.sent: list[str] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, op):
        if op in self.fail_on:
            raise RuntimeError(f"graph exploded during {op}: secret-detail")

    async def list_events(self):
        self._maybe_fail("list_events")
        return self.events

    async def get_events_in_window(self, start, end):
        self._maybe_fail("get_events_in_window")
        self.windows.append((start, end))
        return self.window_events

    async def create_event(self, event):
        self._maybe_fail("create_event")
        self.created_events.append(event)
        return {"id": f"evt_{len(self.created_events)}"}

    async def create_message(self, message):
        self._maybe_fail("create_message")
        self.drafts.append(message)
        return {"id": f"msg_{len(self.drafts)}"}

    async def send_message(self, message_id):
        self._maybe_fail("send_message")
        self.sent.append(message_id)

    @property
    def call_count(self) -> int:
        return len(self.windows) + len(self.created_events) + len(self.drafts) + len(self.sent)


@pytest.fixture
def fake_calendar():
    return FakeCalendar()


@pytest.fixture
def booking_payload():
    """A well-formed checkout request body."""
    return {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-0100",
        "duration": 30,
        "price": 4500,
        "startTime": "2026-03-15T14:00:00",
        "endTime": "2026-03-15T14:30:00",
        "timezone": "America/Chicago",
        "notes": "Oak tree leaning toward the house",
        "photoUrls": ["https://x/a.jpg"],
    }
