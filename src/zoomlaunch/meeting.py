from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import urlsplit

from .call import extract_call
from .models import CalendarEvent
from .timing import MissingStartTimeError, meeting_start_time, now_utc

logger = logging.getLogger(__name__)

VIDEO_ENTRY_POINT_TYPE = "video"
PROVIDER_MARKER = "zoom"


class NoUpcomingMeetingsError(RuntimeError):
    pass


@dataclass(frozen=True)
class MatchedEvent:
    event: CalendarEvent
    join_url: str


def conference_video_entry_point(event: CalendarEvent) -> str:
    """Return the URI of the first Zoom video entry point, or "" if there is none."""
    if event.conference_data is None:
        return ""
    for entry_point in event.conference_data.entry_points:
        if (
            entry_point.entry_point_type == VIDEO_ENTRY_POINT_TYPE
            and PROVIDER_MARKER in entry_point.uri
        ):
            return entry_point.uri
    return ""


def meeting_url_from_event(event: CalendarEvent) -> str | None:
    """Return the URL to join the event's Zoom call, or None if it is not a Zoom meeting.

    The conference-data video entry point is searched first, then the location,
    then the description.
    """
    text = event.location + " " + event.description
    entry_point = conference_video_entry_point(event)
    if entry_point:
        text = entry_point + " " + text

    call = extract_call(text)
    logger.debug(
        "Searched event for a Zoom link",
        extra={
            "event": "join_url_lookup",
            "event_id": event.id,
            "join_url_found": call is not None,
        },
    )
    if call is None:
        return None

    join_url = call.join_target()
    try:
        parts = urlsplit(join_url)
    except ValueError:
        logger.warning(
            "Join URL did not parse",
            extra={"event": "join_url_invalid", "event_id": event.id},
        )
        return None
    if not parts.scheme:
        return None
    return join_url


def select_upcoming(events: Sequence[CalendarEvent], limit: int) -> list[MatchedEvent]:
    """Keep the first ``limit`` events that are Zoom meetings, in input order.

    Returns an empty list when ``events`` is empty and raises
    NoUpcomingMeetingsError when there were events but none had a Zoom link.
    A ``limit`` below 1 keeps every match.
    """
    if not events:
        return []

    matches: list[MatchedEvent] = []
    for event in events:
        join_url = meeting_url_from_event(event)
        if join_url is None:
            continue
        matches.append(MatchedEvent(event=event, join_url=join_url))
        if limit > 0 and len(matches) == limit:
            break

    logger.info(
        "Selected upcoming meetings",
        extra={
            "event": "meetings_selected",
            "candidate_count": len(events),
            "match_count": len(matches),
        },
    )
    if not matches:
        raise NoUpcomingMeetingsError("no zoom events upcoming")
    return matches


def next_event_by_start_time(
    events: Iterable[CalendarEvent], *, now: datetime | None = None
) -> CalendarEvent | None:
    """Return the event whose start is closest to ``now``, in the past or future.

    Useful with overlapping or back-to-back meetings: one starting in five
    minutes beats one that started half an hour ago.
    """
    events = list(events)
    if not events:
        return None
    if len(events) == 1:
        return events[0]

    current = now_utc(now)
    closest: CalendarEvent | None = None
    closest_distance: float | None = None
    for event in events:
        try:
            start = meeting_start_time(event)
        except MissingStartTimeError:
            continue
        distance = abs((current - start).total_seconds())
        if closest_distance is None or distance < closest_distance:
            closest = event
            closest_distance = distance
    return closest if closest is not None else events[0]


def meeting_summary(event: CalendarEvent | None) -> str:
    if event is None:
        return ""

    if event.summary:
        out = f'Your next meeting is "{event.summary}"'
    else:
        out = "You have a meeting coming up"

    if event.organizer is not None and event.organizer.display_name:
        out += f", organized by {event.organizer.display_name}."
    elif event.creator is not None and event.creator.display_name:
        out += f", created by {event.creator.display_name}."
    else:
        out += "."
    return out
