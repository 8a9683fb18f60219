from __future__ import annotations

from datetime import datetime, timedelta, timezone

import humanize
from dateutil import parser as date_parser

from .models import CalendarEvent

SOON_WINDOW = timedelta(minutes=5)


class MissingStartTimeError(ValueError):
    pass


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def now_utc(now: datetime | None) -> datetime:
    return _as_utc(now) if now is not None else datetime.now(tz=timezone.utc)


def meeting_start_time(event: CalendarEvent | None) -> datetime:
    """Return the event's start as an aware UTC datetime.

    All-day events only carry ``start.date`` and are treated as having no
    start time.
    """
    if event is None or event.start is None or not event.start.date_time:
        raise MissingStartTimeError("event does not have a start datetime")
    value = event.start.date_time
    try:
        dt = date_parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        raise MissingStartTimeError(f"unparseable start datetime: {value!r}") from e
    return _as_utc(dt)


def is_meeting_soon(event: CalendarEvent | None, *, now: datetime | None = None) -> bool:
    """True when ``now`` is strictly within five minutes of the event start, either side."""
    try:
        start = meeting_start_time(event)
    except MissingStartTimeError:
        return False
    until_start = start - now_utc(now)
    return -SOON_WINDOW < until_start < SOON_WINDOW


def humanize_delta(then: datetime, now: datetime) -> str:
    return humanize.naturaltime(_as_utc(then), when=_as_utc(now))


def humanized_start_time(event: CalendarEvent | None, *, now: datetime | None = None) -> str:
    """Relative start phrase, or the reason the event has no usable start time."""
    try:
        start = meeting_start_time(event)
    except MissingStartTimeError as e:
        return str(e)
    return humanize_delta(start, now_utc(now))
