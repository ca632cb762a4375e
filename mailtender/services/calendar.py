"""
Google Calendar client for listing, creating and deleting events.
"""

from datetime import date, datetime, timedelta
from typing import Any

from googleapiclient.discovery import build

from mailtender.config import Settings, settings as default_settings
from mailtender.core.logging import get_logger

log = get_logger(__name__)


def _event_time(value: date | datetime) -> dict[str, str]:
    """Calendar API start/end object; dates make all-day events."""
    if isinstance(value, datetime):
        return {"dateTime": value.isoformat()}
    return {"date": value.isoformat()}


def _rfc3339(value: date | datetime) -> str:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.isoformat() + "Z"
    return value.isoformat()


class CalendarClient:
    """Client for one Google calendar."""

    def __init__(
        self,
        service=None,
        credentials=None,
        calendar_id: str | None = None,
        settings: Settings | None = None,
        logger=None,
    ):
        settings = settings or default_settings
        if service is None:
            service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        self.service = service
        self.calendar_id = calendar_id or settings.calendar_id
        self.log = logger or log

    def list_events(
        self,
        time_min: date | datetime,
        time_max: date | datetime,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List events that overlap a time range.

        Args:
            time_min: Range start (inclusive)
            time_max: Range end (exclusive)
            query: Optional free-text filter

        Returns:
            Event resources ordered by start time
        """
        params: dict[str, Any] = {
            "calendarId": self.calendar_id,
            "timeMin": _rfc3339(time_min),
            "timeMax": _rfc3339(time_max),
            "singleEvents": True,
            "orderBy": "startTime",
        }
        if query:
            params["q"] = query

        events: list[dict[str, Any]] = []
        while True:
            response = self.service.events().list(**params).execute()
            events.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token
        self.log.debug("calendar_events_listed", count=len(events), query=query)
        return events

    def insert_event(
        self,
        summary: str,
        start: date | datetime,
        end: date | datetime | None = None,
        description: str = "",
    ) -> str:
        """Create an event and return its id. All-day when given dates."""
        if end is None:
            end = start + timedelta(days=1) if not isinstance(start, datetime) else start + timedelta(hours=1)
        event_body = {
            "summary": summary,
            "description": description,
            "start": _event_time(start),
            "end": _event_time(end),
        }
        created = self.service.events().insert(calendarId=self.calendar_id, body=event_body).execute()
        event_id = created.get("id")
        self.log.info("calendar_event_created", event_id=event_id, summary=summary)
        return event_id

    def delete_event(self, event_id: str) -> None:
        self.service.events().delete(calendarId=self.calendar_id, eventId=event_id).execute()
        self.log.info("calendar_event_deleted", event_id=event_id)
