"""Microsoft Graph calendar/mail provider.

Authenticates with the OAuth 2.0 client-credentials grant against the
Microsoft identity platform and acts on a single mailbox
(``GRAPH_MAILBOX``). A fresh token is requested for every Graph call;
nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .base import CalendarEvent, CalendarProvider, MailMessage

logger = logging.getLogger(__name__)

TOKEN_URL = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
GRAPH_API = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"


class GraphAuthError(Exception):
    """The token endpoint refused the client credentials."""


class GraphRequestError(Exception):
    """A Graph API call returned a non-success status."""

    def __init__(self, method: str, path: str, status_code: int, body: str) -> None:
        super().__init__(f"{method} {path} failed with {status_code}: {body}")
        self.status_code = status_code


class GraphCalendarProvider(CalendarProvider):
    """CalendarProvider backed by Microsoft Graph v1.0."""

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        mailbox: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not (tenant_id and client_id and client_secret):
            raise ValueError(
                "Graph tenant id, client id and client secret must all be provided."
            )
        self._tenant_id = tenant_id
        self._client_id = client_id
        self._client_secret = client_secret
        self._mailbox = mailbox
        self._transport = transport

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        # No local timeout: calls wait for Graph's own answer or error.
        return httpx.AsyncClient(transport=self._transport, timeout=None)

    async def get_access_token(self) -> str:
        """Exchange the app credentials for a bearer token.

        Raises:
            GraphAuthError: the token endpoint returned an error status or
                a body without ``access_token``.
        """
        url = TOKEN_URL.format(tenant_id=self._tenant_id)
        async with self._client() as client:
            try:
                response = await client.post(
                    url,
                    data={
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "scope": GRAPH_SCOPE,
                        "grant_type": "client_credentials",
                    },
                )
            except httpx.HTTPError as exc:
                logger.error("Graph auth error: %s", exc)
                raise GraphAuthError(f"Token request failed: {exc}") from exc

        if response.is_error:
            logger.error("Graph auth error: %s %s", response.status_code, response.text)
            raise GraphAuthError(f"Token request failed: {response.reason_phrase}")

        token = response.json().get("access_token")
        if not token:
            logger.error("Graph auth error: no access_token in token response")
            raise GraphAuthError("Token response did not include an access token")
        return token

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        token = await self.get_access_token()
        async with self._client() as client:
            response = await client.request(
                method,
                f"{GRAPH_API}/users/{self._mailbox}{path}",
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )

        if response.is_error:
            raise GraphRequestError(method, path, response.status_code, response.text)
        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # CalendarProvider interface
    # ------------------------------------------------------------------

    async def list_events(self) -> list[dict]:
        data = await self._request("GET", "/calendar/events")
        return (data or {}).get("value") or []

    async def get_events_in_window(self, start: str, end: str) -> list[dict]:
        """Query the mailbox calendar view for ``[start, end)``."""
        data = await self._request(
            "GET",
            "/calendarview",
            params={"startDateTime": start, "endDateTime": end},
        )
        return data["value"]

    async def create_event(self, event: CalendarEvent) -> dict:
        body = {
            "subject": event.subject,
            "body": {"contentType": "HTML", "content": event.html_body},
            "start": {"dateTime": event.start, "timeZone": event.timezone},
            "end": {"dateTime": event.end, "timeZone": event.timezone},
            "attendees": [
                {
                    "emailAddress": {
                        "address": event.attendee_email,
                        "name": event.attendee_name,
                    }
                }
            ],
        }
        result = await self._request("POST", "/calendar/events", json=body)
        logger.info("Created event %s for %s", result.get("id"), self._mailbox)
        return result

    async def create_message(self, message: MailMessage) -> dict:
        body = {
            "subject": message.subject,
            "body": {"contentType": "HTML", "content": message.html_body},
            "toRecipients": [{"emailAddress": {"address": message.recipient}}],
        }
        return await self._request("POST", "/messages", json=body)

    async def send_message(self, message_id: str) -> None:
        await self._request("POST", f"/messages/{message_id}/send")
        logger.info("Sent message %s from %s", message_id, self._mailbox)
