"""Create meal events in Google Calendar."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from ..record import CalendarEvent
from .models import SaveResult, describe_error

logger = logging.getLogger(__name__)


class CalendarEventCreator:
    """Inserts one event per recorded meal."""

    def __init__(
        self,
        credentials,
        calendar_id: str = "primary",
        time_zone: str = "Asia/Seoul",
        duration_minutes: int = 30,
    ) -> None:
        self._credentials = credentials
        self._calendar_id = calendar_id
        self._time_zone = time_zone
        self._duration = timedelta(minutes=duration_minutes)
        self._service = None

    def _get_service(self):
        if self._service is None:
            from googleapiclient.discovery import build

            self._service = build(
                "calendar", "v3", credentials=self._credentials, cache_discovery=False
            )
        return self._service

    def build_body(
        self,
        event: CalendarEvent,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict:
        """Event resource for ``event``; starts now and lasts 30 minutes by default."""
        start = start or datetime.now(ZoneInfo(self._time_zone))
        end = end or start + self._duration
        return {
            "summary": event.title,
            "description": event.description,
            "start": {"dateTime": start.isoformat(), "timeZone": self._time_zone},
            "end": {"dateTime": end.isoformat(), "timeZone": self._time_zone},
            "reminders": {
                "useDefault": False,
                "overrides": [{"method": "popup", "minutes": 0}],
            },
        }

    def create(
        self,
        event: CalendarEvent,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> SaveResult:
        """Insert ``event``. Errors are logged and returned as a failed SaveResult."""
        try:
            body = self.build_body(event, start, end)
            created = (
                self._get_service()
                .events()
                .insert(calendarId=self._calendar_id, body=body)
                .execute()
            )
        except Exception as e:
            logger.exception("Google Calendar insert failed")
            return SaveResult(False, describe_error(e, "Google Calendar"))

        logger.info("Created calendar event %s", created.get("id"))
        return SaveResult(
            True,
            "Google Calendar에 식사 이벤트가 생성되었습니다.",
            created.get("htmlLink"),
        )
