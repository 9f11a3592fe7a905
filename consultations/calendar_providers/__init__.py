"""Calendar/mail provider abstractions and implementations."""

from .base import CalendarEvent, CalendarProvider, MailMessage

__all__ = ["CalendarProvider", "CalendarEvent", "MailMessage"]
