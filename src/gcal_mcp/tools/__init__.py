"""
MCP tools: one coroutine per Calendar operation, each returning a ToolResponse.
"""

from gcal_mcp.tools.calendars import list_calendars, get_calendar, list_colors
from gcal_mcp.tools.events import (
    list_events,
    get_event,
    create_event,
    update_event,
    delete_event,
    quick_add_event,
)
from gcal_mcp.tools.freebusy import get_free_busy

# Protocol tool name -> tool coroutine
TOOLS = {
    "gcal_list_calendars": list_calendars,
    "gcal_get_calendar": get_calendar,
    "gcal_list_events": list_events,
    "gcal_get_event": get_event,
    "gcal_create_event": create_event,
    "gcal_update_event": update_event,
    "gcal_delete_event": delete_event,
    "gcal_quick_add_event": quick_add_event,
    "gcal_get_free_busy": get_free_busy,
    "gcal_list_colors": list_colors,
}

__all__ = [
    "TOOLS",
    "list_calendars",
    "get_calendar",
    "list_colors",
    "list_events",
    "get_event",
    "create_event",
    "update_event",
    "delete_event",
    "quick_add_event",
    "get_free_busy",
]
