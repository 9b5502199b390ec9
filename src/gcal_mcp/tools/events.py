"""
Event tools: list, get, create, update, delete, quick add.
"""

from typing import Annotated, Optional

from pydantic import Field

from gcal_mcp.api.client import get_client
from gcal_mcp.tools.calendars import CalendarId, PageToken
from gcal_mcp.tools.result import ToolResponse, tool_response
from gcal_mcp.tools.schemas import (
    Attendee,
    EventDateTime,
    EventPatch,
    OrderBy,
    Reminders,
    Transparency,
    Visibility,
    merge_event,
)


EventId = Annotated[str, Field(description="Event identifier")]

Summary = Annotated[Optional[str], Field(description="Title of the event")]
Description = Annotated[Optional[str], Field(description="Description of the event")]
Location = Annotated[Optional[str], Field(description="Location of the event")]
Attendees = Annotated[Optional[list[Attendee]], Field(description="List of attendees")]
ReminderSettings = Annotated[Optional[Reminders], Field(description="Reminder settings")]
ColorId = Annotated[
    Optional[str], Field(description="Color ID (use gcal_list_colors to see available colors)")
]
TransparencyArg = Annotated[
    Optional[Transparency], Field(description="Whether event blocks time on calendar")
]
VisibilityArg = Annotated[Optional[Visibility], Field(description="Visibility of the event")]


@tool_response
async def list_events(
    calendar_id: CalendarId,
    time_min: Annotated[
        Optional[str],
        Field(description="Lower bound (inclusive) for event end time, RFC3339 (e.g., '2024-01-01T00:00:00Z')"),
    ] = None,
    time_max: Annotated[
        Optional[str],
        Field(description="Upper bound (exclusive) for event start time, RFC3339"),
    ] = None,
    q: Annotated[Optional[str], Field(description="Free text search query to filter events")] = None,
    max_results: Annotated[
        Optional[int],
        Field(ge=1, le=2500, description="Maximum number of events to return (default: 250)"),
    ] = None,
    page_token: PageToken = None,
    single_events: Annotated[
        Optional[bool],
        Field(description="Whether to expand recurring events into instances (default: false)"),
    ] = None,
    order_by: Annotated[
        Optional[OrderBy],
        Field(description="Order of events ('startTime' requires single_events=true)"),
    ] = None,
) -> dict:
    """
    List events in a calendar.

    Returns one page of events; pass nextPageToken as page_token for more.
    Filters that are not given fall back to Google's defaults.
    """
    return await get_client().list_events(
        calendar_id,
        time_min=time_min,
        time_max=time_max,
        q=q,
        max_results=max_results,
        page_token=page_token,
        single_events=single_events,
        order_by=order_by,
    )


@tool_response
async def get_event(calendar_id: CalendarId, event_id: EventId) -> dict:
    """Get full details of a specific event."""
    return await get_client().get_event(calendar_id, event_id)


@tool_response
async def create_event(
    calendar_id: CalendarId,
    summary: Annotated[str, Field(description="Title of the event")],
    start: Annotated[EventDateTime, Field(description="Start time of the event")],
    end: Annotated[EventDateTime, Field(description="End time of the event")],
    description: Description = None,
    location: Location = None,
    attendees: Attendees = None,
    reminders: ReminderSettings = None,
    color_id: ColorId = None,
    transparency: TransparencyArg = None,
    visibility: VisibilityArg = None,
) -> dict:
    """
    Create a new event.

    Use start/end dateTime for timed events or date (YYYY-MM-DD) for
    all-day events. The response carries the server-assigned id and htmlLink.
    """
    event = EventPatch(
        summary=summary,
        description=description,
        location=location,
        start=start,
        end=end,
        attendees=attendees,
        reminders=reminders,
        color_id=color_id,
        transparency=transparency,
        visibility=visibility,
    )
    return await get_client().create_event(calendar_id, event.to_api())


@tool_response
async def update_event(
    calendar_id: CalendarId,
    event_id: Annotated[str, Field(description="Event identifier to update")],
    summary: Summary = None,
    description: Description = None,
    location: Location = None,
    start: Annotated[Optional[EventDateTime], Field(description="Start time of the event")] = None,
    end: Annotated[Optional[EventDateTime], Field(description="End time of the event")] = None,
    attendees: Attendees = None,
    reminders: ReminderSettings = None,
    color_id: ColorId = None,
    transparency: TransparencyArg = None,
    visibility: VisibilityArg = None,
) -> dict:
    """
    Update an existing event.

    Only provided fields change; the rest of the event is kept as is.
    Attendees and reminders, when given, replace the existing lists.
    """
    patch = EventPatch(
        summary=summary,
        description=description,
        location=location,
        start=start,
        end=end,
        attendees=attendees,
        reminders=reminders,
        color_id=color_id,
        transparency=transparency,
        visibility=visibility,
    )

    client = get_client()
    # The API replaces the whole event on update, so carry over current fields
    current = await client.get_event(calendar_id, event_id)
    return await client.update_event(calendar_id, event_id, merge_event(current, patch))


@tool_response
async def delete_event(
    calendar_id: CalendarId,
    event_id: Annotated[str, Field(description="Event identifier to delete")],
) -> ToolResponse:
    """Delete an event."""
    await get_client().delete_event(calendar_id, event_id)
    return ToolResponse(text=f"Event {event_id} deleted successfully from calendar {calendar_id}")


@tool_response
async def quick_add_event(
    calendar_id: CalendarId,
    text: Annotated[
        str,
        Field(description="Natural language description (e.g., 'Lunch with John tomorrow at 12pm')"),
    ],
) -> dict:
    """Quick add event from natural language; Google parses the text."""
    return await get_client().quick_add_event(calendar_id, text)
