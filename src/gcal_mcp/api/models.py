"""
Google Calendar API v3 resource shapes.

Passive data-transfer shapes mirroring the remote resources. The client never
validates or transforms them; they only document what flows through as JSON.
"""

from typing import Any, TypedDict


class ReminderOverride(TypedDict):
    method: str
    minutes: int


class CalendarListItem(TypedDict, total=False):
    kind: str
    etag: str
    id: str
    summary: str
    description: str
    timeZone: str
    colorId: str
    backgroundColor: str
    foregroundColor: str
    selected: bool
    accessRole: str
    defaultReminders: list[ReminderOverride]
    primary: bool


class CalendarList(TypedDict, total=False):
    kind: str
    etag: str
    nextPageToken: str
    items: list[CalendarListItem]


class Calendar(TypedDict, total=False):
    kind: str
    etag: str
    id: str
    summary: str
    description: str
    timeZone: str


class EventDateTime(TypedDict, total=False):
    date: str  # all-day events, YYYY-MM-DD
    dateTime: str  # RFC3339
    timeZone: str


class EventPerson(TypedDict, total=False):
    id: str
    email: str
    displayName: str
    self: bool


class EventAttendee(TypedDict, total=False):
    id: str
    email: str
    displayName: str
    organizer: bool
    self: bool
    resource: bool
    optional: bool
    responseStatus: str  # needsAction, declined, tentative, accepted
    comment: str
    additionalGuests: int


class EventReminders(TypedDict, total=False):
    useDefault: bool
    overrides: list[ReminderOverride]


class Event(TypedDict, total=False):
    kind: str
    etag: str
    id: str
    status: str
    htmlLink: str
    created: str
    updated: str
    summary: str
    description: str
    location: str
    colorId: str
    creator: EventPerson
    organizer: EventPerson
    start: EventDateTime
    end: EventDateTime
    endTimeUnspecified: bool
    recurrence: list[str]
    recurringEventId: str
    originalStartTime: EventDateTime
    transparency: str
    visibility: str
    iCalUID: str
    sequence: int
    attendees: list[EventAttendee]
    attendeesOmitted: bool
    extendedProperties: dict[str, dict[str, str]]
    hangoutLink: str
    conferenceData: Any
    gadget: Any
    anyoneCanAddSelf: bool
    guestsCanInviteOthers: bool
    guestsCanModify: bool
    guestsCanSeeOtherGuests: bool
    privateCopy: bool
    locked: bool
    reminders: EventReminders
    source: dict[str, str]
    attachments: list[dict[str, str]]
    eventType: str


class EventList(TypedDict, total=False):
    kind: str
    etag: str
    summary: str
    updated: str
    timeZone: str
    accessRole: str
    defaultReminders: list[ReminderOverride]
    nextPageToken: str
    items: list[Event]


class FreeBusyItem(TypedDict):
    id: str


class FreeBusyRequest(TypedDict, total=False):
    timeMin: str
    timeMax: str
    timeZone: str
    groupExpansionMax: int
    calendarExpansionMax: int
    items: list[FreeBusyItem]


class TimePeriod(TypedDict):
    start: str
    end: str


class FreeBusyError(TypedDict):
    domain: str
    reason: str


class FreeBusyCalendar(TypedDict, total=False):
    errors: list[FreeBusyError]
    busy: list[TimePeriod]


class FreeBusyResponse(TypedDict, total=False):
    kind: str
    timeMin: str
    timeMax: str
    calendars: dict[str, FreeBusyCalendar]


class ColorDefinition(TypedDict):
    background: str
    foreground: str


class ColorsResponse(TypedDict, total=False):
    kind: str
    updated: str
    calendar: dict[str, ColorDefinition]
    event: dict[str, ColorDefinition]
