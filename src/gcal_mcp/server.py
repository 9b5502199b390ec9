"""
GCal MCP Server.

FastMCP server exposing Google Calendar tools.
Supports both stdio (local) and HTTP (cloud) transport modes.

Tools (10 total):
- gcal_list_calendars, gcal_get_calendar, gcal_list_colors
- gcal_list_events, gcal_get_event, gcal_create_event, gcal_update_event,
  gcal_delete_event, gcal_quick_add_event
- gcal_get_free_busy
"""

import inspect
import logging
from functools import wraps
from typing import Callable

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from gcal_mcp.tools import TOOLS


logger = logging.getLogger(__name__)


# Create server
mcp = FastMCP(
    name="google-calendar",
    instructions="""Google Calendar integration using a pre-authorized access token.

CALENDARS:
- gcal_list_calendars: discover calendar IDs; 'primary' always works
- gcal_get_calendar: calendar details and time zone
- gcal_list_colors: color IDs for color_id

EVENTS:
- gcal_list_events: events in a range (time_min/time_max RFC3339), paged via page_token
- gcal_get_event, gcal_create_event, gcal_update_event, gcal_delete_event
- gcal_quick_add_event: let Google parse 'Lunch with John tomorrow at 12pm'

AVAILABILITY:
- gcal_get_free_busy: busy blocks for a list of calendars

TIME FORMAT: start/end dateTime '2024-12-15T10:00:00Z' (timed) or date '2024-12-15' (all-day)"""
)


def as_mcp_tool(tool: Callable) -> Callable:
    """
    Adapt a ToolResponse-returning tool to FastMCP.

    Success text is returned as-is; an error response is raised as ToolError,
    which FastMCP sends back as an isError result carrying the same text.
    """

    @wraps(tool)
    async def mcp_tool(**kwargs) -> str:
        response = await tool(**kwargs)
        if response.is_error:
            raise ToolError(response.text)
        return response.text

    # Keep the tool's parameters for schema generation, but declare str output.
    # Keyword-only, since mcp_tool accepts nothing positional.
    signature = inspect.signature(tool)
    mcp_tool.__signature__ = signature.replace(
        parameters=[
            param.replace(kind=inspect.Parameter.KEYWORD_ONLY)
            for param in signature.parameters.values()
        ],
        return_annotation=str,
    )
    mcp_tool.__annotations__ = {**tool.__annotations__, "return": str}
    return mcp_tool


for _name, _tool in TOOLS.items():
    mcp.tool(name=_name)(as_mcp_tool(_tool))


def create_http_app():
    """
    Create FastAPI app for HTTP transport mode.

    Includes:
    - API key authentication middleware (when GCAL_MCP_API_KEY is set)
    - Health check endpoint
    - MCP endpoints under /mcp/calendar
    """
    from fastapi import FastAPI, Request
    from fastapi.responses import JSONResponse

    from gcal_mcp import __version__
    from gcal_mcp.settings import settings

    # Get MCP app first to access its lifespan
    mcp_app = mcp.http_app()

    app = FastAPI(
        title="Google Calendar MCP",
        description="MCP server for Google Calendar integration",
        version=__version__,
        lifespan=mcp_app.lifespan  # Required for FastMCP session management
    )

    @app.middleware("http")
    async def check_auth(request: Request, call_next):
        # Skip for health check and when no key is configured
        if request.url.path == "/health" or not settings.api_key:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key")

        auth_header = request.headers.get("Authorization", "")
        if not api_key and auth_header.startswith("Bearer "):
            api_key = auth_header[7:]

        if api_key == settings.api_key:
            return await call_next(request)

        return JSONResponse(
            {"error": "Unauthorized", "message": "Invalid or missing API key"},
            status_code=401
        )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "transport": "http", "service": "gcal-mcp"}

    # Mount MCP app under /mcp/calendar
    app.mount("/mcp/calendar", mcp_app)

    return app


def serve():
    """
    Run MCP server with configured transport.

    The API client is built before serving so a missing access token
    fails at startup instead of on the first tool call.
    """
    from gcal_mcp.api.client import get_client
    from gcal_mcp.settings import settings

    get_client()

    if settings.is_http_mode():
        import uvicorn

        logger.info(f"Serving HTTP on {settings.http_host}:{settings.http_port}")
        app = create_http_app()
        uvicorn.run(
            app,
            host=settings.http_host,
            port=settings.http_port,
            log_level=settings.log_level.lower()
        )
    else:
        logger.info("Serving stdio")
        mcp.run()


if __name__ == "__main__":
    serve()
