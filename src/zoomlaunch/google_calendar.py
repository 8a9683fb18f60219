from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, cast

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .meeting import MatchedEvent, select_upcoming
from .models import CalendarEvent
from .timing import SOON_WINDOW, now_utc

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]

# Most calendars are mostly non-Zoom events; over-fetch so `count` matches are likely.
FETCH_MULTIPLIER = 10

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarConfig:
    token_path: Path
    calendar_id: str = "primary"


class EventSource(Protocol):
    def list_upcoming(self, count: int, *, now: datetime | None = None) -> list[CalendarEvent]: ...


class GoogleCalendarClient:
    def __init__(self, cfg: CalendarConfig) -> None:
        self._cfg = cfg

    def _load_credentials(self) -> Credentials:
        if not self._cfg.token_path.exists():
            raise RuntimeError(f"Google token not found at {self._cfg.token_path}")
        creds = cast(
            Credentials,
            Credentials.from_authorized_user_file(str(self._cfg.token_path), SCOPES),
        )
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
            self._cfg.token_path.write_text(creds.to_json())
        return creds

    def list_upcoming(self, count: int, *, now: datetime | None = None) -> list[CalendarEvent]:
        """List single (expanded) events starting no earlier than five minutes ago."""
        creds = self._load_credentials()
        service = build("calendar", "v3", credentials=creds, cache_discovery=False)

        time_min = (now_utc(now) - SOON_WINDOW).replace(microsecond=0)
        resp: dict[str, Any] = (
            service.events()
            .list(
                calendarId=self._cfg.calendar_id,
                showDeleted=False,
                singleEvents=True,
                timeMin=time_min.isoformat(),
                maxResults=count * FETCH_MULTIPLIER,
                orderBy="startTime",
            )
            .execute()
        )
        items = resp.get("items") or []
        logger.debug(
            "Listed calendar events",
            extra={
                "event": "calendar_listed",
                "calendar_id": self._cfg.calendar_id,
                "candidate_count": len(items),
            },
        )
        return [CalendarEvent.model_validate(item) for item in items]


def next_meetings(
    source: EventSource, count: int, *, now: datetime | None = None
) -> list[MatchedEvent]:
    return select_upcoming(source.list_upcoming(count, now=now), count)
