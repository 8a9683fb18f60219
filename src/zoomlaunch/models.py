from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _CalendarResource(BaseModel):
    # Google Calendar v3 resources are camelCase and carry many fields we never read.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EntryPoint(_CalendarResource):
    entry_point_type: str = Field(default="", alias="entryPointType")
    uri: str = ""
    label: str | None = None


class ConferenceData(_CalendarResource):
    entry_points: list[EntryPoint] = Field(default_factory=list, alias="entryPoints")


class EventDateTime(_CalendarResource):
    date_time: str | None = Field(default=None, alias="dateTime")
    date: str | None = None
    time_zone: str | None = Field(default=None, alias="timeZone")


class Person(_CalendarResource):
    email: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class CalendarEvent(_CalendarResource):
    id: str | None = None
    summary: str = ""
    description: str = ""
    location: str = ""
    html_link: str = Field(default="", alias="htmlLink")
    start: EventDateTime | None = None
    creator: Person | None = None
    organizer: Person | None = None
    conference_data: ConferenceData | None = Field(default=None, alias="conferenceData")
