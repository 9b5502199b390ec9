"""
get_free_busy tool.

Check free/busy availability across calendars.
"""

from typing import Annotated, Optional

from pydantic import Field

from gcal_mcp.api.client import get_client
from gcal_mcp.tools.result import tool_response
from gcal_mcp.tools.schemas import FreeBusyItem


@tool_response
async def get_free_busy(
    time_min: Annotated[
        str, Field(description="Start of the interval (RFC3339 timestamp, e.g., '2024-01-01T00:00:00Z')")
    ],
    time_max: Annotated[str, Field(description="End of the interval (RFC3339 timestamp)")],
    items: Annotated[
        list[FreeBusyItem], Field(description="List of calendars to query for busy times")
    ],
    time_zone: Annotated[
        Optional[str],
        Field(description="Time zone for the query (e.g., 'Asia/Tokyo', 'America/New_York')"),
    ] = None,
) -> dict:
    """
    Get free/busy information for calendars.

    Returns, per calendar ID, the busy {start, end} blocks and any errors
    accessing that calendar. Only busy times are listed; gaps are free.
    """
    query = {
        "timeMin": time_min,
        "timeMax": time_max,
        "items": [item.to_api() for item in items],
    }
    if time_zone is not None:
        query["timeZone"] = time_zone

    return await get_client().get_free_busy(query)
