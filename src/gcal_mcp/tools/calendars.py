"""
Calendar tools: list_calendars, get_calendar, list_colors.
"""

from typing import Annotated, Optional

from pydantic import Field

from gcal_mcp.api.client import get_client
from gcal_mcp.tools.result import tool_response


CalendarId = Annotated[
    str, Field(description="Calendar identifier (use 'primary' for the primary calendar)")
]
PageToken = Annotated[
    Optional[str],
    Field(description="Token for pagination to retrieve next page of results"),
]


@tool_response
async def list_calendars(page_token: PageToken = None) -> dict:
    """
    List all calendars in the user's calendar list.

    Returns one page: items with id, summary, primary, accessRole,
    backgroundColor, timeZone. Pass nextPageToken as page_token for more.
    The primary calendar can always be addressed as 'primary'.
    """
    return await get_client().list_calendars(page_token)


@tool_response
async def get_calendar(calendar_id: CalendarId) -> dict:
    """Get details of a specific calendar (summary, description, timeZone)."""
    return await get_client().get_calendar(calendar_id)


@tool_response
async def list_colors() -> dict:
    """
    List available colors for calendars and events.

    Use an event color ID (e.g., '1', '11') as color_id when creating or
    updating events.
    """
    return await get_client().list_colors()
