"""
Input models for calendar tools.

Field names are snake_case in Python and camelCase on the wire, matching the
Calendar API resource fields.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


OrderBy = Literal["startTime", "updated"]
Transparency = Literal["opaque", "transparent"]
Visibility = Literal["default", "public", "private", "confidential"]


class CalendarModel(BaseModel):
    """Base for models serialized into API request bodies."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict[str, Any]:
        """Dump with API field names, leaving out unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class EventDateTime(CalendarModel):
    date_time: Optional[str] = Field(
        default=None,
        description="RFC3339 timestamp (e.g., '2024-01-01T10:00:00Z' or '2024-01-01T10:00:00+09:00')",
    )
    date: Optional[str] = Field(
        default=None, description="Date for all-day events (YYYY-MM-DD format)"
    )
    time_zone: Optional[str] = Field(
        default=None, description="Time zone (e.g., 'Asia/Tokyo', 'America/New_York')"
    )


class Attendee(CalendarModel):
    email: str = Field(description="Email address of the attendee")
    display_name: Optional[str] = Field(default=None, description="Display name of the attendee")
    optional: Optional[bool] = Field(default=None, description="Whether attendance is optional")
    response_status: Optional[str] = Field(
        default=None,
        description="Response status: 'needsAction', 'declined', 'tentative', 'accepted'",
    )


class ReminderOverride(CalendarModel):
    method: Literal["email", "popup"] = Field(description="Reminder method")
    minutes: int = Field(ge=0, description="Minutes before event to send reminder")


class Reminders(CalendarModel):
    use_default: Optional[bool] = Field(default=None, description="Whether to use default reminders")
    overrides: Optional[list[ReminderOverride]] = Field(
        default=None, description="Custom reminder overrides"
    )


class FreeBusyItem(CalendarModel):
    id: str = Field(description="Calendar identifier to check")


class EventPatch(CalendarModel):
    """
    Event fields a caller asked to set.

    Only fields that were given end up in to_api(); everything else is left
    to whatever the target event already has.
    """

    summary: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start: Optional[EventDateTime] = None
    end: Optional[EventDateTime] = None
    attendees: Optional[list[Attendee]] = None
    reminders: Optional[Reminders] = None
    color_id: Optional[str] = None
    transparency: Optional[Transparency] = None
    visibility: Optional[Visibility] = None


def merge_event(current: dict[str, Any], patch: EventPatch) -> dict[str, Any]:
    """
    Overlay patch fields onto an existing event resource.

    Top-level fields are replaced wholesale: a new start replaces the old
    start object entirely, so a date never lingers next to a dateTime.
    """
    merged = dict(current)
    merged.update(patch.to_api())
    return merged
