from __future__ import annotations

import argparse
import logging
import webbrowser
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from dateutil import parser as date_parser
from pydantic import ValidationError

from .auth_google import import_client_secrets, run_auth_flow
from .config import Settings
from .google_calendar import CalendarConfig, GoogleCalendarClient, next_meetings
from .logging import configure_logging
from .meeting import MatchedEvent, NoUpcomingMeetingsError, meeting_summary
from .timing import (
    MissingStartTimeError,
    humanized_start_time,
    is_meeting_soon,
    meeting_start_time,
    now_utc,
)

logger = logging.getLogger(__name__)

RULE = "_" * 53

SETUP_INSTRUCTIONS = """\
In order to use zoomlaunch, you need to create an OAuth app and authorize it to access your calendar.
You can do it in four, not-so-easy steps:

1. Create a new project
	1. Go to https://console.developers.google.com
	2. Switch to your work account if need be (top right)
	3. Create a new project from the dropdown, top left next to your domain
2. Grant the project Calendar API access
	1. Click "Enable API"
	2. Type "Calendar" in the search box
	3. Click "Calendar API"
	4. Click "Enable"
3. Grab your credentials
	1. Click "Credentials" on the left side
	2. Create a new OAuth credential of type "Desktop app"
	3. Download the credential JSON
4. Run 'zoomlaunch --import ~/Downloads/client_secrets.json' and authorize the app when prompted.
"""


def render_meeting(match: MatchedEvent, *, now: datetime | None = None) -> str:
    event = match.event
    lines = [meeting_summary(event)]
    try:
        start = meeting_start_time(event)
    except MissingStartTimeError:
        lines.append("This meeting does not have a start time...?")
        return "\n".join(lines)

    verb = "started" if start < now_utc(now) else "starts"
    lines.append(f"It {verb} {humanized_start_time(event, now=now)}.")
    lines.append(f"Calendar event URL: {event.html_link}")
    lines.append("")
    lines.append(f"Zoom URL: {match.join_url}")
    return "\n".join(lines)


def _parse_args(argv: Sequence[str] | None, settings: Settings) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Print your next Zoom meetings from Google Calendar and open the one starting now."
    )
    p.add_argument(
        "--count", type=int, default=settings.count, help="Number of calendar events to print."
    )
    p.add_argument(
        "--import",
        dest="import_path",
        default=None,
        help="Full path to your downloaded Google OAuth2 client secret JSON file.",
    )
    p.add_argument(
        "--no-open", action="store_true", help="Print meetings without launching Zoom."
    )
    p.add_argument("--now", default=None, help=argparse.SUPPRESS)
    args = p.parse_args(argv)
    if args.count < 1:
        p.error("--count must be at least 1")
    args.now_dt = None
    if args.now:
        try:
            args.now_dt = date_parser.isoparse(args.now)
        except (ValueError, OverflowError):
            p.error(f"--now must be an ISO-8601 timestamp, got {args.now!r}")
    return args


def main(argv: Sequence[str] | None = None) -> int:
    try:
        settings = Settings()
    except ValidationError as e:
        print(f"invalid configuration: {e}")
        return 1
    configure_logging(settings.log_level)
    args = _parse_args(argv, settings)
    now = args.now_dt

    if args.import_path:
        print(f"Importing credentials from {args.import_path!r}...")
        try:
            import_client_secrets(Path(args.import_path), settings.client_secrets_path)
        except (OSError, ValueError) as e:
            print(f"error importing credentials: {e}")

    if not settings.client_secrets_path.exists():
        print(SETUP_INSTRUCTIONS, end="")
        return 1

    if not settings.token_path.exists():
        try:
            run_auth_flow(
                client_secret_json=settings.client_secrets_path,
                token_path=settings.token_path,
                port=settings.oauth_port,
            )
        except Exception as e:
            logger.exception(
                "OAuth flow failed",
                extra={
                    "event": "auth_failed",
                    "extra": {"config_dir": str(settings.resolved_config_dir)},
                },
            )
            print(f"error authorizing: {e}")
            return 1
        print("Stored credentials.")

    calendar = GoogleCalendarClient(
        CalendarConfig(token_path=settings.token_path, calendar_id=settings.calendar_id)
    )
    try:
        meetings = next_meetings(calendar, args.count, now=now)
    except NoUpcomingMeetingsError as e:
        print(f"error fetching next meetings: {e}")
        return 1
    except Exception as e:
        logger.exception(
            "Calendar listing failed",
            extra={
                "event": "calendar_list_failed",
                "calendar_id": settings.calendar_id,
                "extra": {"count": args.count},
            },
        )
        print(f"error fetching next meetings: {e}")
        return 1

    if not meetings:
        print("No upcoming events found.")
        return 0

    for match in meetings:
        print(render_meeting(match, now=now))
        if args.count > 1:
            print(RULE)

    first = meetings[0]
    if is_meeting_soon(first.event, now=now):
        print(f"Opening {first.join_url}...")
        if not args.no_open:
            webbrowser.open(first.join_url)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
