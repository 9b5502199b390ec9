"""
Google Calendar API layer: HTTP client and resource shapes.
"""

from gcal_mcp.api.client import (
    CalendarAPIError,
    ConfigurationError,
    GoogleCalendarClient,
    RateLimitError,
    RequestError,
    get_client,
    reset_client,
)

__all__ = [
    "CalendarAPIError",
    "ConfigurationError",
    "GoogleCalendarClient",
    "RateLimitError",
    "RequestError",
    "get_client",
    "reset_client",
]
